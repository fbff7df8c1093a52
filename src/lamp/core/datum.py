"""
Conversion of Python host values into Code.

Lets host code hand data to a LAMP consumer in the same tree shape the
parser produces:

    int          → Integer
    float        → Float (shortest exact text, e.g. 0.1 → "0.1")
    str          → StringLiteral
    list, tuple  → List
    Mapping      → Map (keys and values converted recursively)
    Code         → unchanged
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from .canonical_map import CanonicalMap
from .ir.code import Code, CodeNode, Float, Integer, List, Map, StringLiteral


def float_text(value: float) -> str:
    """Plain decimal text for a finite float, always with a fractional part."""
    if not math.isfinite(value):
        raise ValueError(f"Cannot represent {value!r} as a decimal literal")
    text = format(Decimal(repr(value)), "f")
    if "." not in text:
        text += ".0"
    return text


def to_code(value: Any) -> Code:
    """Convert a Python value to Code.

    Args:
        value: int, float, str, list/tuple, Mapping, or Code

    Returns:
        The equivalent Code value.

    Raises:
        TypeError: If the value (or a nested value) has no Code form.
            ``bool`` is rejected rather than silently read as an int.
        ValueError: For non-finite floats or integers outside 128 bits.
    """
    if isinstance(value, CodeNode):
        return value
    if isinstance(value, bool):
        raise TypeError("bool has no Code form")
    if isinstance(value, int):
        return Integer(value=value)
    if isinstance(value, float):
        return Float(text=float_text(value))
    if isinstance(value, str):
        return StringLiteral(value=value)
    if isinstance(value, (list, tuple)):
        return List(items=tuple(to_code(item) for item in value))
    if isinstance(value, Mapping):
        return Map(entries=CanonicalMap((to_code(k), to_code(v)) for k, v in value.items()))
    raise TypeError(f"{type(value).__name__} has no Code form")
