import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from aliaser.config.matchers import AliasMatcher
from aliaser.config.settings import SOURCE_EXTENSIONS

log = logging.getLogger(__name__)

# (alias, declaration order of the matcher that produced it)
Candidate = Tuple[str, int]


@lru_cache(maxsize=None)
def _extension_pattern(extensions: Tuple[str, ...]) -> "re.Pattern[str]":
    # Longest first so ".tsx" is not read as ".ts" followed by "x"
    alternatives = sorted(set(extensions), key=len, reverse=True)
    if not alternatives:
        return re.compile(r"(?!)")
    return re.compile("(?:" + "|".join(re.escape(e) for e in alternatives) + ")$")


def is_relative(specifier: str) -> bool:
    return specifier.startswith(".")


def has_source_extension(
    specifier: str, extensions: Sequence[str] = SOURCE_EXTENSIONS
) -> bool:
    return _extension_pattern(tuple(extensions)).search(specifier) is not None


def strip_source_extension(
    specifier: str, extensions: Sequence[str] = SOURCE_EXTENSIONS
) -> str:
    return _extension_pattern(tuple(extensions)).sub("", specifier)


def package_name(specifier: str) -> Optional[str]:
    """
    The installable package a bare specifier would refer to:
    `lodash/fp` -> `lodash`, `@scope/pkg/x` -> `@scope/pkg`.
    """
    if not specifier:
        return None
    parts = specifier.split("/")
    if specifier.startswith("@"):
        if len(parts) < 2 or not parts[1]:
            return None
        return f"{parts[0]}/{parts[1]}"
    return parts[0] or None


def _posix(path: str) -> str:
    return path.replace(os.sep, "/")


def is_within(root: Union[str, Path], target: Union[str, Path]) -> bool:
    try:
        rel = os.path.relpath(target, root)
    except ValueError:
        # Different drives on Windows
        return False
    if rel == os.curdir:
        return True
    return rel != os.pardir and not rel.startswith(os.pardir + os.sep)


def resolve_existing_module(
    target: str, extensions: Sequence[str] = SOURCE_EXTENSIONS
) -> Optional[str]:
    """Finds the file a module path refers to, the way a bundler would."""
    if os.path.isfile(target):
        return target
    if has_source_extension(target, extensions):
        return None

    for ext in extensions:
        candidate = target + ext
        if os.path.isfile(candidate):
            return candidate

    for ext in extensions:
        candidate = os.path.join(target, f"index{ext}")
        if os.path.isfile(candidate):
            return candidate

    return None


class PackageLookup:
    """
    Answers whether a package is installed in a `node_modules` directory
    reachable from a given directory, without leaving the project root.
    """

    def __init__(self, project_root: Path):
        self.project_root = Path(os.path.abspath(project_root))
        self._cache: Dict[Tuple[Path, str], bool] = {}

    def is_installed(self, package: str, start_dir: Union[str, Path]) -> bool:
        start = Path(os.path.abspath(start_dir))
        key = (start, package)
        if key in self._cache:
            return self._cache[key]

        segments = package.split("/")
        found = False
        current = start
        while True:
            if current.joinpath("node_modules", *segments).exists():
                found = True
                break
            if current == self.project_root or current.parent == current:
                break
            current = current.parent

        self._cache[key] = found
        return found


class SpecifierResolver:
    def __init__(
        self,
        tie_break: str = "lexicographic",
        extensions: Sequence[str] = SOURCE_EXTENSIONS,
    ):
        self.tie_break = tie_break
        self.extensions = tuple(extensions)

    def pick(self, candidates: List[Candidate]) -> Optional[str]:
        """Shortest alias wins; ties go to the configured tie-break."""
        if not candidates:
            return None
        if self.tie_break == "declaration":
            best = min(candidates, key=lambda c: (len(c[0]), c[1], c[0]))
        else:
            best = min(candidates, key=lambda c: (len(c[0]), c[0]))
        return best[0]

    def has_source_extension(self, specifier: str) -> bool:
        return has_source_extension(specifier, self.extensions)

    def _finish(self, alias: str, keep_extension: bool) -> str:
        if keep_extension:
            return alias
        return strip_source_extension(alias, self.extensions)

    def resolve_for_target(
        self,
        target_abs: Union[str, Path],
        matchers: Sequence[AliasMatcher],
        keep_extension: bool,
    ) -> Optional[str]:
        target = _posix(str(target_abs))
        candidates: List[Candidate] = []

        for m in matchers:
            physical = _posix(m.target_prefix_abs)

            if m.has_wildcard:
                if not target.startswith(physical):
                    continue
                remainder = target[len(physical) :]
                if m.target_suffix:
                    if not remainder.endswith(m.target_suffix):
                        continue
                    remainder = remainder[: -len(m.target_suffix)]
                alias = m.render(remainder.lstrip("/"))
            else:
                if not self._same_module(target, physical):
                    continue
                alias = m.render()

            candidates.append((self._finish(alias, keep_extension), m.order))

        return self.pick(candidates)

    def _same_module(self, target: str, physical: str) -> bool:
        physical = physical.rstrip("/") or "/"
        if target == physical:
            return True
        return strip_source_extension(
            target, self.extensions
        ) == strip_source_extension(physical, self.extensions)

    def resolve_for_bare_specifier(
        self,
        specifier: str,
        matchers: Sequence[AliasMatcher],
        base_directory: Union[str, Path],
        project_root: Union[str, Path],
        keep_extension: bool,
    ) -> Optional[str]:
        if not specifier or os.path.isabs(specifier):
            return None

        candidates: List[Candidate] = []

        for m in matchers:
            if m.has_wildcard:
                captured = specifier
                if m.target_suffix and captured.endswith(m.target_suffix):
                    captured = captured[: -len(m.target_suffix)]
                implied = os.path.normpath(
                    os.path.join(m.target_prefix_abs, captured + m.target_suffix)
                )
                resolved = resolve_existing_module(implied, self.extensions)
                if resolved is None or not is_within(project_root, resolved):
                    continue
                alias = m.render(captured)
            else:
                physical = os.path.normpath(m.target_prefix_abs + m.target_suffix)
                resolved = resolve_existing_module(physical, self.extensions)
                if resolved is None or not is_within(project_root, resolved):
                    continue
                if _posix(os.path.relpath(physical, base_directory)) != specifier:
                    continue
                alias = m.render()

            candidates.append((self._finish(alias, keep_extension), m.order))

        return self.pick(candidates)
