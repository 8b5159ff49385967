"""
Thin layer over tree-sitter for the handful of node shapes the engine needs.

All offsets are byte offsets into the UTF-8 encoded source, which is what
tree-sitter reports.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterator, Optional, Union

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

TYPESCRIPT = Language(tree_sitter_typescript.language_typescript())
TSX = Language(tree_sitter_typescript.language_tsx())

# The plain TypeScript grammar rejects JSX, so everything else uses TSX
_TYPESCRIPT_SUFFIXES = {".ts", ".mts", ".cts"}

STRING_NODE_TYPES = ("string", "template_string")


@lru_cache(maxsize=None)
def _parser_for(grammar: str) -> Parser:
    return Parser(TYPESCRIPT if grammar == "typescript" else TSX)


def grammar_for(path: Union[str, Path]) -> str:
    if Path(path).suffix.lower() in _TYPESCRIPT_SUFFIXES:
        return "typescript"
    return "tsx"


def parse(source: bytes, path: Union[str, Path]) -> Tree:
    return _parser_for(grammar_for(path)).parse(source)


def iter_nodes(root: Node) -> Iterator[Node]:
    """Pre-order traversal without recursion."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


@dataclass(frozen=True)
class StringLiteral:
    # Byte span of the text between the delimiters
    start: int
    end: int
    text: str


def as_plain_literal(node: Optional[Node]) -> Optional[StringLiteral]:
    """
    Returns the inner text of a string or template literal whose source text
    is its value: no escape sequences, entities or `${}` substitutions.
    """
    if node is None or node.type not in STRING_NODE_TYPES:
        return None
    if any(child.type != "string_fragment" for child in node.named_children):
        return None

    raw = node.text or b""
    delimiter = raw[:1]
    # Error recovery can produce literals that are missing their closing quote
    if len(raw) < 2 or delimiter not in (b'"', b"'", b"`") or raw[-1:] != delimiter:
        return None

    return StringLiteral(
        start=node.start_byte + 1,
        end=node.end_byte - 1,
        text=raw[1:-1].decode("utf-8"),
    )


def _first_argument(call: Node) -> Optional[Node]:
    arguments = call.child_by_field_name("arguments")
    if arguments is None:
        return None
    for child in arguments.named_children:
        if child.type != "comment":
            return child
    return None


def iter_specifier_nodes(root: Node) -> Iterator[Node]:
    """
    Yields the module specifier nodes of static imports, re-exports and
    dynamic `import()` calls. The nodes are not guaranteed to be literals.
    """
    for node in iter_nodes(root):
        if node.type in ("import_statement", "export_statement"):
            source = node.child_by_field_name("source")
            if source is not None:
                yield source
        elif node.type == "call_expression":
            function = node.child_by_field_name("function")
            if function is not None and function.type == "import":
                argument = _first_argument(node)
                if argument is not None:
                    yield argument
