import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple, Union

from aliaser.common import L, bus
from aliaser.config.matchers import AliasConfig
from .edits import Edit, EditResult, apply_edits
from .specifier import (
    PackageLookup,
    SpecifierResolver,
    is_relative,
    package_name,
)
from .syntax import as_plain_literal, iter_specifier_nodes, parse

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageShadow:
    """A bare-specifier rewrite suppressed because a real package has that name."""

    path: Path
    specifier: str
    package: str


class SourceEditor:
    def __init__(
        self,
        project_root: Path,
        resolver: Optional[SpecifierResolver] = None,
        packages: Optional[PackageLookup] = None,
    ):
        self.project_root = Path(os.path.abspath(project_root))
        self.resolver = resolver or SpecifierResolver()
        self.packages = packages or PackageLookup(self.project_root)
        self.shadowed: List[PackageShadow] = []
        self._warned: Set[Tuple[Path, str]] = set()

    def rewrite(
        self,
        text: str,
        file_path: Union[str, Path],
        alias_config: Optional[AliasConfig],
    ) -> EditResult:
        if alias_config is None or not alias_config.matchers:
            return EditResult(changed=False, text=text)

        file_path = Path(file_path)
        file_dir = os.path.dirname(os.path.abspath(file_path))
        source = text.encode("utf-8")
        tree = parse(source, file_path)
        if tree.root_node.has_error:
            log.debug(f"{file_path} has syntax errors; rewriting what parsed")

        edits: Dict[int, Edit] = {}
        rename_pairs: List[Tuple[str, str]] = []

        for node in iter_specifier_nodes(tree.root_node):
            literal = as_plain_literal(node)
            if literal is None or literal.start in edits:
                continue

            alias = self._alias_for(literal.text, file_path, file_dir, alias_config)
            if alias is None:
                continue

            bus.debug(L.debug.log.rewrite, path=file_path, old=literal.text, new=alias)
            edits[literal.start] = Edit(literal.start, literal.end, alias)
            rename_pairs.append((literal.text, alias))

        if not edits:
            return EditResult(changed=False, text=text)

        new_source = apply_edits(source, edits.values())
        return EditResult(
            changed=True, text=new_source.decode("utf-8"), rename_pairs=rename_pairs
        )

    def _alias_for(
        self,
        specifier: str,
        file_path: Path,
        file_dir: str,
        config: AliasConfig,
    ) -> Optional[str]:
        keep_extension = self.resolver.has_source_extension(specifier)

        if is_relative(specifier):
            target = os.path.normpath(os.path.join(file_dir, specifier))
            alias = self.resolver.resolve_for_target(
                target, config.matchers, keep_extension
            )
            # Aliasing only ever shortens
            if alias is not None and len(alias) < len(specifier):
                return alias
            return None

        alias = self.resolver.resolve_for_bare_specifier(
            specifier,
            config.matchers,
            config.base_directory,
            self.project_root,
            keep_extension,
        )
        if alias is None or alias == specifier:
            return None

        package = package_name(specifier)
        if package and self.packages.is_installed(package, file_dir):
            self._warn_shadow(file_path, specifier, package)
            return None
        return alias

    def _warn_shadow(self, file_path: Path, specifier: str, package: str) -> None:
        key = (file_path, specifier)
        if key in self._warned:
            return
        self._warned.add(key)
        self.shadowed.append(PackageShadow(file_path, specifier, package))
        bus.warning(
            L.shorten.warning.package_shadow,
            specifier=specifier,
            path=file_path,
            package=package,
        )
