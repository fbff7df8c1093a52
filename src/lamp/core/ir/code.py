"""
Code: the LAMP expression tree.

Code values are both the syntax tree produced by the parser and the data
the language manipulates. Every variant is an immutable pydantic model with
a total order and a hash consistent with equality, so any Code can be used
as a key of a Map (itself a Code variant).

Cross-variant order:
    Integer < Float < Character < StringLiteral < Identifier < List < Map

Within a variant the payloads are compared directly: integers numerically,
floats by decimal value then by text, text payloads by code point, lists
element-wise, and maps by their sorted entries.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lamp.core.canonical_map import CanonicalMap

INT_MIN = -(2**127)
INT_MAX = 2**127 - 1

HEAD_POSITION_FIELD_NAME = "head_position_field"

_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t", "\\": "\\\\"}


def escape_text(text: str, quote: str) -> str:
    """Escape ``text`` so it reads back unchanged between ``quote`` characters."""
    out: list[str] = []
    for c in text:
        if c in _ESCAPES:
            out.append(_ESCAPES[c])
        elif c == quote:
            out.append("\\" + c)
        else:
            out.append(c)
    return "".join(out)


# ---------------------------------------------------------------------------
# Shared ordering and hashing
# ---------------------------------------------------------------------------


class CodeNode(BaseModel):
    """Base for all Code variants: rank-then-payload ordering and hashing."""

    rank: ClassVar[int] = -1

    model_config = ConfigDict(frozen=True)

    def payload_key(self) -> Any:
        raise NotImplementedError

    def sort_key(self) -> tuple[int, Any]:
        return (self.rank, self.payload_key())

    def __hash__(self) -> int:
        return hash(self.sort_key())

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, CodeNode):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, CodeNode):
            return NotImplemented
        return self.sort_key() <= other.sort_key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, CodeNode):
            return NotImplemented
        return self.sort_key() > other.sort_key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, CodeNode):
            return NotImplemented
        return self.sort_key() >= other.sort_key()


# ---------------------------------------------------------------------------
# Atoms
# ---------------------------------------------------------------------------


class Integer(CodeNode):
    """An integer literal in the signed 128-bit range."""

    rank: ClassVar[int] = 0

    value: int = Field(description="Integer value")

    @field_validator("value")
    @classmethod
    def _check_range(cls, value: int) -> int:
        if not INT_MIN <= value <= INT_MAX:
            raise ValueError("Integer outside the signed 128-bit range")
        return value

    def payload_key(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


class Float(CodeNode):
    """
    A decimal literal kept as its exact source text.

    The text is never converted to a binary float, so ``Float(text="0.10")``
    and ``Float(text="0.1")`` are distinct values. They still order by
    numeric value first.
    """

    rank: ClassVar[int] = 1

    text: str = Field(pattern=r"^-?[0-9]+\.[0-9]+$", description="Exact decimal text")

    def payload_key(self) -> tuple[Decimal, str]:
        return (Decimal(self.text), self.text)

    def to_decimal(self) -> Decimal:
        return Decimal(self.text)

    def __str__(self) -> str:
        return self.text


class Character(CodeNode):
    """A single character literal."""

    rank: ClassVar[int] = 2

    value: str = Field(min_length=1, max_length=1, description="The character")

    def payload_key(self) -> str:
        return self.value

    def __str__(self) -> str:
        inner = escape_text(self.value, "'")
        return f"'{inner}'"


class StringLiteral(CodeNode):
    """A string literal with escapes already resolved."""

    rank: ClassVar[int] = 3

    value: str = Field(description="Decoded text")

    def payload_key(self) -> str:
        return self.value

    def __str__(self) -> str:
        inner = escape_text(self.value, '"')
        return f'"{inner}"'


class Identifier(CodeNode):
    """A bare name such as ``print`` or ``uint8_t``."""

    rank: ClassVar[int] = 4

    name: str = Field(min_length=1, description="Identifier name")

    def payload_key(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.name


# ---------------------------------------------------------------------------
# Compound
# ---------------------------------------------------------------------------


class List(CodeNode):
    """An ordered sequence of Code: ``[f a b]``."""

    rank: ClassVar[int] = 5

    items: tuple[Code, ...] = Field(default=(), description="Elements in source order")

    def payload_key(self) -> tuple[Code, ...]:
        return self.items

    def __str__(self) -> str:
        return "[" + " ".join(str(item) for item in self.items) + "]"


class Map(CodeNode):
    """
    A map literal: ``{if c: [eq a b] do: [foo]}``.

    The first entry of a literal may omit its key; it is then stored under
    HEAD_POSITION_FIELD.
    """

    rank: ClassVar[int] = 6

    entries: CanonicalMap[Code, Code] = Field(
        default_factory=CanonicalMap, description="Key to value association"
    )

    @field_validator("entries")
    @classmethod
    def _check_code_entries(cls, entries: CanonicalMap[Any, Any]) -> CanonicalMap[Any, Any]:
        for key, value in entries.items():
            if not isinstance(key, CodeNode) or not isinstance(value, CodeNode):
                raise ValueError("Map keys and values must be Code")
        return entries

    def payload_key(self) -> CanonicalMap[Code, Code]:
        return self.entries

    @property
    def head(self) -> Code | None:
        """The value stored in head position, if any."""
        return self.entries.get(HEAD_POSITION_FIELD)

    def __str__(self) -> str:
        parts: list[str] = []
        head = self.head
        if head is not None:
            parts.append(str(head))
        for key, value in self.entries.sorted_items():
            if key == HEAD_POSITION_FIELD:
                continue
            parts.append(f"{key}: {value}")
        return "{" + " ".join(parts) + "}"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Code = Integer | Float | Character | StringLiteral | Identifier | List | Map

HEAD_POSITION_FIELD = Identifier(name=HEAD_POSITION_FIELD_NAME)

# Rebuild models for recursive forward references
List.model_rebuild()
Map.model_rebuild()
