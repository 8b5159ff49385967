import logging
import os
from pathlib import Path
from typing import Dict, Optional, Sequence

from .matchers import AliasConfig, AliasMatcherBuilder

log = logging.getLogger(__name__)

DEFAULT_CONFIG_FILES = ("tsconfig.json", "jsconfig.json")


class ConfigResolver:
    """
    Finds the alias configuration governing a directory.

    The nearest ancestor directory holding a configuration file wins, even if
    that configuration declares no `paths`. The walk stops at the project
    root. Results are cached for the lifetime of the resolver, which is one
    scan of the project.
    """

    def __init__(
        self,
        project_root: Path,
        builder: Optional[AliasMatcherBuilder] = None,
        config_files: Sequence[str] = DEFAULT_CONFIG_FILES,
    ):
        self.project_root = Path(os.path.abspath(project_root))
        self.builder = builder or AliasMatcherBuilder(self.project_root)
        self.config_files = tuple(config_files)
        self._nearest: Dict[Path, Optional[Path]] = {}
        self._configs: Dict[Path, Optional[AliasConfig]] = {}

    def find_config_file(self, directory: Path) -> Optional[Path]:
        current = Path(os.path.abspath(directory))
        visited = []
        found: Optional[Path] = None

        while True:
            if current in self._nearest:
                found = self._nearest[current]
                break
            visited.append(current)
            found = self._config_file_in(current)
            if found is not None:
                break
            if current == self.project_root or current.parent == current:
                break
            current = current.parent

        for directory in visited:
            self._nearest[directory] = found
        return found

    def _config_file_in(self, directory: Path) -> Optional[Path]:
        for name in self.config_files:
            candidate = directory / name
            if candidate.is_file():
                return candidate
        return None

    def resolve(self, file_directory: Path) -> Optional[AliasConfig]:
        config_path = self.find_config_file(file_directory)
        if config_path is None:
            return None

        if config_path not in self._configs:
            log.debug(f"Building alias matchers from {config_path}")
            self._configs[config_path] = self.builder.build(config_path)
        return self._configs[config_path]
