"""
LAMP - a small homoiconic expression language.

This package is the language front end: it reads source text into Code,
a tree of typed values that is both syntax and data.

Usage:
    from lamp import parse_source

    parse_source("[add 1 2]")
    # [List(items=(Identifier(name='add'), Integer(value=1), Integer(value=2)))]
"""

from __future__ import annotations

from ._version import __version__

# Re-export commonly used types for convenience
from .core import ir
from .core.canonical_map import CanonicalMap
from .core.errors import ConfigError, LampError, LexError, ParseError
from .core.parser import parse, parse_expr, parse_program, parse_source

__all__ = [
    "__version__",
    "ir",
    "CanonicalMap",
    "LampError",
    "LexError",
    "ParseError",
    "ConfigError",
    "parse",
    "parse_expr",
    "parse_program",
    "parse_source",
]
