import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from aliaser.common import L, bus
from aliaser.common.transaction import FileSystemAdapter, TransactionManager
from aliaser.config import ConfigResolver, ToolSettings
from aliaser.refactor.engine import (
    AmbiguousRename,
    EditResult,
    PackageShadow,
    ReferenceRewriter,
    RenameMap,
    SourceEditor,
    SpecifierResolver,
)

PROGRESS_EVERY = 200


@dataclass
class RunSummary:
    files_scanned: int = 0
    files_changed: int = 0
    files_post_processed: int = 0
    ambiguous: List[AmbiguousRename] = field(default_factory=list)
    shadowed: List[PackageShadow] = field(default_factory=list)

    @property
    def ambiguous_count(self) -> int:
        return len(self.ambiguous)


class ShortenRunner:
    """
    Runs the two passes over a project: specifier rewriting, then (optionally)
    propagation of the stable renames to other string literals.

    Rewritten contents are staged in a TransactionManager and only reach the
    disk when `write` is requested, after both passes have finished.
    """

    def __init__(
        self,
        root_path: Path,
        settings: Optional[ToolSettings] = None,
        fs: Optional[FileSystemAdapter] = None,
    ):
        self.root_path = Path(os.path.abspath(root_path))
        self.settings = settings or ToolSettings()
        self.config_resolver = ConfigResolver(
            self.root_path, config_files=self.settings.config_files
        )
        resolver = SpecifierResolver(
            tie_break=self.settings.tie_break, extensions=self.settings.extensions
        )
        self.editor = SourceEditor(self.root_path, resolver)
        self.tm = TransactionManager(self.root_path, fs)
        self.progress_every = PROGRESS_EVERY

    def process_file(self, file_path: Path) -> EditResult:
        text = self.tm.read_text(file_path)
        alias_config = self.config_resolver.resolve(file_path.parent)
        if alias_config is None:
            bus.debug(L.debug.log.no_config, path=file_path)
            return EditResult(changed=False, text=text)
        bus.debug(
            L.debug.log.config_resolved, path=file_path, config=alias_config.config_path
        )
        return self.editor.rewrite(text, file_path, alias_config)

    def run(
        self, files: Iterable[Path], write: bool = False, verbose: bool = False
    ) -> RunSummary:
        summary = RunSummary()
        rename_map = RenameMap()
        scanned: List[Path] = []

        # Pass 1: rewrite module specifiers
        for file_path in files:
            summary.files_scanned += 1
            scanned.append(file_path)
            if verbose:
                bus.info(L.shorten.run.scan_file, path=file_path)
            elif summary.files_scanned % self.progress_every == 0:
                bus.info(L.shorten.run.progress, count=summary.files_scanned)

            result = self.process_file(file_path)
            rename_map.extend(result.rename_pairs)
            if result.changed:
                summary.files_changed += 1
                self.tm.add_write(file_path, result.text)
                if not write:
                    bus.info(L.shorten.run.change, path=file_path)

        # Pass 2: propagate stable renames
        if self.settings.update_refs and len(rename_map) > 0:
            self._propagate(rename_map, scanned, summary, write)

        summary.shadowed = list(self.editor.shadowed)

        if write:
            self.tm.commit()
        self.report(summary, write)
        return summary

    def _propagate(
        self,
        rename_map: RenameMap,
        files: List[Path],
        summary: RunSummary,
        write: bool,
    ) -> None:
        stable_map = rename_map.build_stable_map()
        summary.ambiguous = stable_map.ambiguous
        if stable_map.ambiguous:
            bus.warning(L.shorten.warning.ambiguous, count=len(stable_map.ambiguous))
            for item in stable_map.ambiguous:
                bus.debug(
                    L.shorten.warning.ambiguous_detail,
                    old=item.old,
                    candidates=", ".join(item.candidates),
                )

        rewriter = ReferenceRewriter(stable_map.stable)
        for file_path in files:
            # Reads what pass 1 staged, so dry runs see the same text as --write
            text = self.tm.read_text(file_path)
            result = rewriter.rewrite(text, file_path)
            if not result.changed:
                continue
            summary.files_post_processed += 1
            self.tm.add_write(file_path, result.text)
            if not write:
                bus.info(L.shorten.run.post_change, path=file_path)

    def report(self, summary: RunSummary, write: bool) -> None:
        bus.info(L.shorten.run.scanned, count=summary.files_scanned)
        if write:
            bus.success(L.shorten.run.updated, count=summary.files_changed)
            if self.settings.update_refs:
                bus.success(
                    L.shorten.run.post_processed, count=summary.files_post_processed
                )
        else:
            bus.info(L.shorten.run.would_update, count=summary.files_changed)
            if self.settings.update_refs:
                bus.info(
                    L.shorten.run.would_post_process,
                    count=summary.files_post_processed,
                )
