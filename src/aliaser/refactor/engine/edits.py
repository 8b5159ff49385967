from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from aliaser.errors import OverlappingEditError


@dataclass(frozen=True)
class Edit:
    start: int
    end: int
    text: str


@dataclass
class EditResult:
    changed: bool
    text: str
    rename_pairs: List[Tuple[str, str]] = field(default_factory=list)


def apply_edits(source: bytes, edits: Iterable[Edit]) -> bytes:
    """
    Applies non-overlapping edits to the original source.

    Edits are spliced in descending start order, so every offset still refers
    to the original text when it is applied.
    """
    ordered = sorted(edits, key=lambda e: e.start, reverse=True)

    buffer = bytearray(source)
    lower_bound = len(source)
    for edit in ordered:
        if not 0 <= edit.start <= edit.end <= lower_bound:
            raise OverlappingEditError(
                f"Edit [{edit.start}, {edit.end}) overlaps another edit "
                "or falls outside the source"
            )
        buffer[edit.start : edit.end] = edit.text.encode("utf-8")
        lower_bound = edit.start

    return bytes(buffer)
