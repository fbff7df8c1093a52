"""
Rendering of Code back to text.

``to_source`` writes the canonical literal form: reading it back with
``parse_source`` gives an equal tree. Maps print their head-position entry
first and bare, then the remaining entries in key order. An empty map
prints as ``{}``, which the grammar does not accept.

``format_tree`` writes an indented view for inspecting nested structure.
"""

from __future__ import annotations

from collections.abc import Iterable

from .ir.code import HEAD_POSITION_FIELD, Code, CodeNode, List, Map


def to_source(codes: Code | Iterable[Code]) -> str:
    """Render one Code value, or a sequence of them separated by spaces."""
    if isinstance(codes, CodeNode):
        return str(codes)
    return " ".join(str(code) for code in codes)


def format_tree(code: Code, indent: int = 2) -> str:
    """Render ``code`` one node per line, children indented under parents."""
    lines: list[str] = []
    _format_node(code, 0, indent, lines, label="")
    return "\n".join(lines)


def _format_node(code: Code, depth: int, indent: int, lines: list[str], label: str) -> None:
    pad = " " * (depth * indent)
    kind = type(code).__name__

    if isinstance(code, List):
        lines.append(f"{pad}{label}{kind} ({len(code.items)})")
        for item in code.items:
            _format_node(item, depth + 1, indent, lines, label="")
        return

    if isinstance(code, Map):
        lines.append(f"{pad}{label}{kind} ({len(code.entries)})")
        for key, value in code.entries.sorted_items():
            key_label = "<head>" if key == HEAD_POSITION_FIELD else str(key)
            _format_node(value, depth + 1, indent, lines, label=f"{key_label}: ")
        return

    lines.append(f"{pad}{label}{kind} {code}")
