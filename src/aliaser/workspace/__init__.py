from .discovery import IgnoreLayer, is_ignored, iter_source_files, load_ignore_layer

__all__ = ["IgnoreLayer", "is_ignored", "iter_source_files", "load_ignore_layer"]
