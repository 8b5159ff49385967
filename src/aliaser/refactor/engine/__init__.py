from .edits import Edit, EditResult, apply_edits
from .editor import PackageShadow, SourceEditor
from .references import (
    AmbiguousRename,
    ReferenceRewriter,
    RenameMap,
    StableMap,
    build_stable_map,
)
from .specifier import PackageLookup, SpecifierResolver

__all__ = [
    "Edit",
    "EditResult",
    "apply_edits",
    "PackageShadow",
    "SourceEditor",
    "AmbiguousRename",
    "ReferenceRewriter",
    "RenameMap",
    "StableMap",
    "build_stable_map",
    "PackageLookup",
    "SpecifierResolver",
]
