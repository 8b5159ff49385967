from .runner import RunSummary, ShortenRunner

__all__ = ["RunSummary", "ShortenRunner"]
