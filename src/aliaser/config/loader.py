import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import json5

from aliaser.errors import ConfigParseError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TsConfig:
    """The parts of a tsconfig.json that alias resolution depends on."""

    path: Path
    base_url: Optional[Path] = None
    paths: Dict[str, Any] = field(default_factory=dict)


def _read_json5(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8-sig") as f:
            data = json5.load(f)
    except OSError as e:
        raise ConfigParseError(path, e) from e
    except ValueError as e:
        # json5 reports syntax errors as ValueError
        raise ConfigParseError(path, e) from e

    if not isinstance(data, dict):
        raise ConfigParseError(path, "top-level value is not an object")
    return data


def _find_node_module_config(specifier: str, start_dir: Path) -> Optional[Path]:
    for directory in [start_dir] + list(start_dir.parents):
        candidate = directory / "node_modules" / specifier
        if candidate.is_file():
            return candidate
        if candidate.with_name(candidate.name + ".json").is_file():
            return candidate.with_name(candidate.name + ".json")
        if (candidate / "tsconfig.json").is_file():
            return candidate / "tsconfig.json"
    return None


def _resolve_extends(specifier: str, config_path: Path) -> Path:
    config_dir = config_path.parent
    if specifier.startswith(".") or Path(specifier).is_absolute():
        candidate = Path(os.path.normpath(config_dir / specifier))
        if candidate.is_file():
            return candidate
        if candidate.suffix != ".json":
            with_json = candidate.with_name(candidate.name + ".json")
            if with_json.is_file():
                return with_json
        raise ConfigParseError(
            config_path, f"extended configuration '{specifier}' was not found"
        )

    found = _find_node_module_config(specifier, config_dir)
    if found is None:
        raise ConfigParseError(
            config_path, f"extended configuration '{specifier}' was not found"
        )
    return Path(os.path.abspath(found))


def _load_options(
    config_path: Path, chain: Tuple[Path, ...]
) -> Tuple[Optional[Path], Optional[Dict[str, Any]]]:
    if config_path in chain:
        cycle = " -> ".join(str(p) for p in chain + (config_path,))
        raise ConfigParseError(config_path, f"circular 'extends': {cycle}")
    chain = chain + (config_path,)

    data = _read_json5(config_path)

    base_url: Optional[Path] = None
    paths: Optional[Dict[str, Any]] = None

    extends = data.get("extends")
    if isinstance(extends, str):
        parents: List[str] = [extends]
    elif isinstance(extends, list):
        parents = [item for item in extends if isinstance(item, str)]
    else:
        parents = []

    # Later entries of an 'extends' list override earlier ones
    for parent_spec in parents:
        parent_path = _resolve_extends(parent_spec, config_path)
        log.debug(f"{config_path} extends {parent_path}")
        parent_base_url, parent_paths = _load_options(parent_path, chain)
        if parent_base_url is not None:
            base_url = parent_base_url
        if parent_paths is not None:
            paths = parent_paths

    options = data.get("compilerOptions") or {}
    if not isinstance(options, dict):
        raise ConfigParseError(config_path, "'compilerOptions' is not an object")

    declared_base_url = options.get("baseUrl")
    if isinstance(declared_base_url, str):
        # baseUrl is relative to the file that declares it
        base_url = Path(os.path.normpath(config_path.parent / declared_base_url))

    declared_paths = options.get("paths")
    if isinstance(declared_paths, dict):
        paths = declared_paths

    return base_url, paths


def load_tsconfig(config_path: Path) -> TsConfig:
    config_path = Path(os.path.abspath(config_path))
    base_url, paths = _load_options(config_path, ())
    return TsConfig(path=config_path, base_url=base_url, paths=paths or {})
