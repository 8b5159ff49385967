import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Tuple

if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib

from aliaser.errors import ConfigParseError
from .resolver import DEFAULT_CONFIG_FILES

SETTINGS_FILE = "aliaser.toml"

SOURCE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")

DEFAULT_IGNORE_DIRS = (
    "node_modules",
    ".git",
    "dist",
    "build",
    "out",
    ".next",
    ".turbo",
    "coverage",
)

TIE_BREAKS = ("lexicographic", "declaration")


@dataclass(frozen=True)
class ToolSettings:
    config_files: Tuple[str, ...] = DEFAULT_CONFIG_FILES
    extensions: Tuple[str, ...] = SOURCE_EXTENSIONS
    ignore_dirs: Tuple[str, ...] = DEFAULT_IGNORE_DIRS
    update_refs: bool = False
    tie_break: str = "lexicographic"
    extra: Dict[str, Any] = field(default_factory=dict)

    def with_overrides(self, **overrides: Any) -> "ToolSettings":
        """Returns a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


def _string_tuple(path: Path, key: str, value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigParseError(path, f"'{key}' must be a list of strings")
    return tuple(value)


def load_settings(project_root: Path) -> ToolSettings:
    settings_path = project_root / SETTINGS_FILE
    if not settings_path.is_file():
        return ToolSettings()

    try:
        with open(settings_path, "rb") as f:
            data: Dict[str, Any] = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(settings_path, e) from e

    kwargs: Dict[str, Any] = {}
    for key in ("config_files", "extensions", "ignore_dirs"):
        if key in data:
            kwargs[key] = _string_tuple(settings_path, key, data.pop(key))

    if "extensions" in kwargs:
        kwargs["extensions"] = tuple(
            ext if ext.startswith(".") else f".{ext}" for ext in kwargs["extensions"]
        )

    if "update_refs" in data:
        update_refs = data.pop("update_refs")
        if not isinstance(update_refs, bool):
            raise ConfigParseError(settings_path, "'update_refs' must be a boolean")
        kwargs["update_refs"] = update_refs

    if "tie_break" in data:
        tie_break = data.pop("tie_break")
        if tie_break not in TIE_BREAKS:
            raise ConfigParseError(
                settings_path, f"'tie_break' must be one of {', '.join(TIE_BREAKS)}"
            )
        kwargs["tie_break"] = tie_break

    # Unknown keys are kept so newer settings files still load
    return ToolSettings(extra=data, **kwargs)

