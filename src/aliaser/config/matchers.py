import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from .loader import load_tsconfig

log = logging.getLogger(__name__)

WILDCARD = "*"


@dataclass(frozen=True)
class PathPattern:
    prefix: str
    suffix: str = ""
    has_wildcard: bool = False


def parse_pattern(pattern: str) -> Optional[PathPattern]:
    """
    Splits a `paths` pattern around its wildcard.

    Returns None for patterns with more than one wildcard, which are not
    supported.
    """
    count = pattern.count(WILDCARD)
    if count == 0:
        return PathPattern(prefix=pattern)
    if count > 1:
        return None
    prefix, suffix = pattern.split(WILDCARD)
    return PathPattern(prefix=prefix, suffix=suffix, has_wildcard=True)


@dataclass(frozen=True)
class AliasMatcher:
    alias_prefix: str
    alias_suffix: str
    has_wildcard: bool
    target_prefix_abs: str
    target_suffix: str
    # Position of the (alias, target) pair in the configuration
    order: int = 0

    def render(self, captured: str = "") -> str:
        if self.has_wildcard:
            return f"{self.alias_prefix}{captured}{self.alias_suffix}"
        return f"{self.alias_prefix}{self.alias_suffix}"


@dataclass(frozen=True)
class AliasConfig:
    config_path: Path
    base_directory: Path
    matchers: Tuple[AliasMatcher, ...]


def resolve_target_prefix(base_directory: Path, prefix: str) -> str:
    resolved = os.path.normpath(os.path.join(str(base_directory), prefix))
    # A directory-shaped prefix only matches whole path segments
    if (prefix == "" or prefix.endswith("/")) and not resolved.endswith(os.sep):
        resolved += os.sep
    return resolved


class AliasMatcherBuilder:
    def __init__(self, project_root: Path):
        self.project_root = Path(os.path.abspath(project_root))

    def build(self, config_file: Path) -> Optional[AliasConfig]:
        tsconfig = load_tsconfig(config_file)
        if not tsconfig.paths:
            return None

        base_directory = tsconfig.base_url or self.project_root
        matchers: List[AliasMatcher] = []

        for alias_pattern, target_patterns in tsconfig.paths.items():
            if not isinstance(target_patterns, list):
                log.debug(f"{tsconfig.path}: targets of '{alias_pattern}' are not a list")
                continue
            alias = parse_pattern(alias_pattern)
            if alias is None:
                log.debug(f"{tsconfig.path}: skipping multi-wildcard alias '{alias_pattern}'")
                continue

            for target_pattern in target_patterns:
                if not isinstance(target_pattern, str):
                    continue
                target = parse_pattern(target_pattern)
                if target is None:
                    log.debug(
                        f"{tsconfig.path}: skipping multi-wildcard target '{target_pattern}'"
                    )
                    continue
                if target.has_wildcard != alias.has_wildcard:
                    # No way to reconstruct the alias from a physical path
                    log.debug(
                        f"{tsconfig.path}: skipping '{alias_pattern}' -> '{target_pattern}'"
                        " (wildcard on one side only)"
                    )
                    continue

                matchers.append(
                    AliasMatcher(
                        alias_prefix=alias.prefix,
                        alias_suffix=alias.suffix,
                        has_wildcard=alias.has_wildcard,
                        target_prefix_abs=resolve_target_prefix(
                            base_directory, target.prefix
                        ),
                        target_suffix=target.suffix,
                        order=len(matchers),
                    )
                )

        return AliasConfig(
            config_path=tsconfig.path,
            base_directory=base_directory,
            matchers=tuple(matchers),
        )
