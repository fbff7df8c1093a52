"""
Recursive descent parser for LAMP.

Grammar (WHITESPACE and COMMENT tokens are skipped between all others):
    expr      → atom | list | map
    atom      → INTEGER | FLOAT | CHARACTER | STRING_LITERAL | IDENTIFIER
    list      → "[" expr* "]"
    map       → "{" headentry pair* "}"
    headentry → expr (":" expr)?
    pair      → expr ":" expr

A head entry without ':' is stored under HEAD_POSITION_FIELD, so
``{if c: x}`` reads as ``{head_position_field: if c: x}``.
"""

from __future__ import annotations

import logging

from .canonical_map import CanonicalMap
from .errors import ParseError, ParseErrorKind, Span
from .ir.code import (
    HEAD_POSITION_FIELD,
    Character,
    Code,
    Float,
    Identifier,
    Integer,
    List,
    Map,
    StringLiteral,
)
from .lexer import Token, TokenKind, tokenize

logger = logging.getLogger(__name__)

PROGRAM_HEAD = Identifier(name="pgm")

# Lists and maps may nest at most this many levels
MAX_NESTING_DEPTH = 128


class _Parser:
    """Recursive descent parser over a token list."""

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.pos = 0
        self.depth = 0

    # -- Cursor helpers --

    def skip_trivia(self) -> None:
        while self.pos < len(self.tokens) and self.tokens[self.pos].is_trivia:
            self.pos += 1

    @property
    def current(self) -> Token | None:
        """The next significant token, or None at end of input."""
        self.skip_trivia()
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def at_end(self) -> bool:
        return self.current is None

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def end_span(self) -> Span:
        """Zero-length span just past the last token."""
        if not self.tokens:
            return Span(0, 0)
        return Span(self.tokens[-1].end, 0)

    def error_at_current(self, kind: ParseErrorKind, message: str) -> ParseError:
        tok = self.current
        if tok is None:
            return ParseError(kind, message, self.end_span(), self.pos)
        return ParseError(kind, message, tok.span, self.pos)

    # -- Grammar rules --

    def parse_expr(self) -> Code:
        """atom | list | map"""
        tok = self.current
        if tok is None:
            raise ParseError(
                ParseErrorKind.UNEXPECTED_END_OF_INPUT,
                "Expected an expression, reached end of input",
                self.end_span(),
                self.pos,
            )

        # Compound expressions
        if tok.kind in (TokenKind.LFN, TokenKind.LCOND):
            if self.depth >= MAX_NESTING_DEPTH:
                raise self.error_at_current(
                    ParseErrorKind.NESTING_TOO_DEEP,
                    f"Lists and maps nest deeper than {MAX_NESTING_DEPTH} levels",
                )
            self.depth += 1
            try:
                if tok.kind == TokenKind.LFN:
                    return self.parse_list()
                return self.parse_map()
            finally:
                self.depth -= 1

        # Atoms
        if tok.kind == TokenKind.INTEGER:
            self.advance()
            return Integer(value=tok.value)
        if tok.kind == TokenKind.FLOAT:
            self.advance()
            return Float(text=tok.value)
        if tok.kind == TokenKind.CHARACTER:
            self.advance()
            return Character(value=tok.value)
        if tok.kind == TokenKind.STRING_LITERAL:
            self.advance()
            return StringLiteral(value=tok.value)
        if tok.kind == TokenKind.IDENTIFIER:
            self.advance()
            return Identifier(name=tok.value)

        raise self.error_at_current(
            ParseErrorKind.UNEXPECTED_TOKEN,
            f"Unexpected token: {tok.kind.name}",
        )

    def parse_list(self) -> List:
        """'[' expr* ']'"""
        opener = self.advance()
        items: list[Code] = []
        while True:
            tok = self.current
            if tok is None:
                raise self._unterminated(ParseErrorKind.UNTERMINATED_LIST, "list", opener)
            if tok.kind == TokenKind.RFN:
                self.advance()
                return List(items=tuple(items))
            items.append(self.parse_expr())

    def parse_map(self) -> Map:
        """'{' headentry pair* '}'"""
        opener = self.advance()
        entries: dict[Code, Code] = {}

        first = self._map_expr(opener)
        tok = self._map_token(opener)
        if tok.kind == TokenKind.FIELD_DELIM:
            self.advance()
            entries[first] = self._map_expr(opener)
        else:
            entries[HEAD_POSITION_FIELD] = first

        while self._map_token(opener).kind != TokenKind.RCOND:
            key, value = self.parse_map_pair(opener)
            entries[key] = value

        self.advance()
        return Map(entries=CanonicalMap(entries))

    def parse_map_pair(self, opener: Token) -> tuple[Code, Code]:
        """expr ':' expr"""
        key = self._map_expr(opener)
        if self._map_token(opener).kind != TokenKind.FIELD_DELIM:
            raise self.error_at_current(
                ParseErrorKind.MISSING_FIELD_DELIMITER,
                f"Expected ':' after map key {key}",
            )
        self.advance()
        return key, self._map_expr(opener)

    def _map_token(self, opener: Token) -> Token:
        tok = self.current
        if tok is None:
            raise self._unterminated(ParseErrorKind.UNTERMINATED_MAP, "map", opener)
        return tok

    def _map_expr(self, opener: Token) -> Code:
        self._map_token(opener)
        return self.parse_expr()

    def _unterminated(self, kind: ParseErrorKind, what: str, opener: Token) -> ParseError:
        return ParseError(
            kind,
            f"Reached end of input while parsing {what} opened at offset {opener.start}",
            self.end_span(),
            self.pos,
        )

    def parse_all(self) -> list[Code]:
        exprs: list[Code] = []
        while not self.at_end():
            exprs.append(self.parse_expr())
        return exprs


def parse(tokens: list[Token]) -> list[Code]:
    """Parse a token list into its top-level Code values.

    Args:
        tokens: Output of :func:`lamp.core.lexer.tokenize`

    Returns:
        Top-level expressions in source order (empty for empty input).

    Raises:
        ParseError: If the tokens do not form a sequence of expressions.
    """
    exprs = _Parser(tokens).parse_all()
    logger.debug("Parsed %d tokens into %d expressions", len(tokens), len(exprs))
    return exprs


def parse_program(tokens: list[Token]) -> List:
    """Parse tokens and wrap the expressions as ``[pgm expr...]``."""
    return List(items=(PROGRAM_HEAD, *parse(tokens)))


def parse_source(source: str) -> list[Code]:
    """Tokenize and parse source text.

    Raises:
        LexError: If tokenization fails.
        ParseError: If parsing fails.
    """
    return parse(tokenize(source))


def parse_expr(source: str) -> Code:
    """Parse source text holding exactly one expression.

    Args:
        source: Expression text (e.g., "[add 1 2]")

    Returns:
        The parsed expression.

    Raises:
        LexError: If tokenization fails.
        ParseError: If the text is empty or holds more than one expression.
    """
    parser = _Parser(tokenize(source))
    expr = parser.parse_expr()

    # Ensure all tokens consumed
    if not parser.at_end():
        raise parser.error_at_current(
            ParseErrorKind.UNEXPECTED_TOKEN,
            "Unexpected token after expression",
        )

    return expr
