from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import DefaultDict, Dict, Iterable, List, Set, Tuple, Union

from .edits import Edit, EditResult, apply_edits
from .syntax import (
    STRING_NODE_TYPES,
    as_plain_literal,
    iter_nodes,
    iter_specifier_nodes,
    parse,
)


@dataclass(frozen=True)
class AmbiguousRename:
    old: str
    candidates: Tuple[str, ...]


@dataclass
class StableMap:
    stable: Dict[str, str] = field(default_factory=dict)
    ambiguous: List[AmbiguousRename] = field(default_factory=list)


class RenameMap:
    """Every specifier rewritten during a scan, with all the aliases it became."""

    def __init__(self):
        self._targets: DefaultDict[str, Set[str]] = defaultdict(set)

    def add(self, old: str, new: str) -> None:
        self._targets[old].add(new)

    def extend(self, pairs: Iterable[Tuple[str, str]]) -> None:
        for old, new in pairs:
            self.add(old, new)

    def targets(self, old: str) -> Set[str]:
        return set(self._targets.get(old, ()))

    def __len__(self) -> int:
        return len(self._targets)

    def __contains__(self, old: object) -> bool:
        return old in self._targets

    def build_stable_map(self) -> StableMap:
        return build_stable_map(self)

    def items(self) -> Iterable[Tuple[str, Set[str]]]:
        return self._targets.items()


def build_stable_map(rename_map: RenameMap) -> StableMap:
    """
    Keeps only renames with a single observed target. A specifier that became
    different aliases in different files is reported instead of guessed.
    """
    result = StableMap()
    for old, targets in rename_map.items():
        if len(targets) == 1:
            result.stable[old] = next(iter(targets))
        else:
            result.ambiguous.append(AmbiguousRename(old, tuple(sorted(targets))))
    result.ambiguous.sort(key=lambda a: a.old)
    return result


class ReferenceRewriter:
    """
    Replaces string literals that exactly equal a rewritten specifier, such as
    the module keys passed to `jest.mock`. Module specifiers themselves are
    left to the SourceEditor.
    """

    def __init__(self, stable_map: Dict[str, str]):
        self.stable_map = stable_map

    def rewrite(self, text: str, file_path: Union[str, Path]) -> EditResult:
        if not self.stable_map or not any(old in text for old in self.stable_map):
            return EditResult(changed=False, text=text)

        source = text.encode("utf-8")
        root = parse(source, file_path).root_node

        specifier_spans = {
            (node.start_byte, node.end_byte)
            for node in iter_specifier_nodes(root)
        }

        edits: Dict[int, Edit] = {}
        for node in iter_nodes(root):
            if node.type not in STRING_NODE_TYPES:
                continue
            if (node.start_byte, node.end_byte) in specifier_spans:
                continue
            literal = as_plain_literal(node)
            if literal is None:
                continue
            replacement = self.stable_map.get(literal.text)
            if replacement is None or replacement == literal.text:
                continue
            edits[literal.start] = Edit(literal.start, literal.end, replacement)

        if not edits:
            return EditResult(changed=False, text=text)

        new_source = apply_edits(source, edits.values())
        return EditResult(changed=True, text=new_source.decode("utf-8"))
