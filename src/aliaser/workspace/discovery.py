import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

import pathspec

from aliaser.config.settings import DEFAULT_IGNORE_DIRS, SOURCE_EXTENSIONS

log = logging.getLogger(__name__)

GITIGNORE = ".gitignore"


@dataclass(frozen=True)
class IgnoreLayer:
    base_dir: Path
    spec: pathspec.PathSpec


def load_ignore_layer(directory: Path) -> Optional[IgnoreLayer]:
    ignore_path = directory / GITIGNORE
    if not ignore_path.is_file():
        return None
    with ignore_path.open("r", encoding="utf-8") as f:
        spec = pathspec.GitIgnoreSpec.from_lines(f)
    return IgnoreLayer(base_dir=directory, spec=spec)


def is_ignored(path: Path, is_dir: bool, layers: Iterable[IgnoreLayer]) -> bool:
    """
    Evaluates every applicable .gitignore from the root down. A deeper file
    with a matching rule overrides the verdict of the ones above it, so a
    nested `!pattern` can re-include what a parent ignored.
    """
    ignored = False
    for layer in layers:
        try:
            rel = path.relative_to(layer.base_dir).as_posix()
        except ValueError:
            continue
        if is_dir:
            rel += "/"
        result = layer.spec.check_file(rel)
        if result.include is True:
            ignored = True
        elif result.include is False:
            ignored = False
    return ignored


def iter_source_files(
    root: Path,
    extensions: Sequence[str] = SOURCE_EXTENSIONS,
    ignore_dirs: Sequence[str] = DEFAULT_IGNORE_DIRS,
) -> Iterator[Path]:
    """Lazily yields the absolute paths of source files under root."""
    root = Path(os.path.abspath(root))
    yield from _walk(root, [], frozenset(extensions), frozenset(ignore_dirs))


def _walk(
    directory: Path,
    layers: List[IgnoreLayer],
    extensions: frozenset,
    ignore_dirs: frozenset,
) -> Iterator[Path]:
    layer = load_ignore_layer(directory)
    if layer is not None:
        layers = layers + [layer]

    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda e: e.name)

    for entry in entries:
        if entry.name in ignore_dirs:
            continue
        full_path = Path(entry.path)
        is_dir = entry.is_dir(follow_symlinks=False)
        if is_ignored(full_path, is_dir, layers):
            log.debug(f"Ignoring {full_path}")
            continue

        if is_dir:
            yield from _walk(full_path, layers, extensions, ignore_dirs)
        elif entry.is_file(follow_symlinks=False):
            if os.path.splitext(entry.name)[1] in extensions:
                yield full_path
