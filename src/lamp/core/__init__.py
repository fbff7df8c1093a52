"""Core LAMP functionality: lexer, parser, canonical map, Code IR, printer."""

from . import ir
from .canonical_map import CanonicalMap
from .errors import (
    ConfigError,
    LampError,
    LexError,
    LexErrorKind,
    ParseError,
    ParseErrorKind,
    Span,
)
from .lexer import Lexer, Token, TokenKind, tokenize
from .parser import parse, parse_expr, parse_program, parse_source
from .printer import format_tree, to_source

__all__ = [
    "ir",
    "CanonicalMap",
    "LampError",
    "LexError",
    "LexErrorKind",
    "ParseError",
    "ParseErrorKind",
    "ConfigError",
    "Span",
    "Lexer",
    "Token",
    "TokenKind",
    "tokenize",
    "parse",
    "parse_expr",
    "parse_program",
    "parse_source",
    "format_tree",
    "to_source",
]
