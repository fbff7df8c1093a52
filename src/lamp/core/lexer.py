"""
Lexer/Tokenizer for LAMP source text.

Converts raw text into a flat list of tokens whose spans partition the
input exactly: whitespace and comments are kept as tokens so that joining
every token's text gives back the original source.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from .errors import LexError, LexErrorKind, Span
from .ir.code import INT_MAX

logger = logging.getLogger(__name__)


class TokenKind(StrEnum):
    """Token types in LAMP source."""

    # Delimiters
    LFN = "["
    RFN = "]"
    LCOND = "{"
    RCOND = "}"
    FIELD_DELIM = ":"

    # Trivia
    WHITESPACE = "whitespace"
    COMMENT = "comment"

    # Literals
    INTEGER = "integer"
    FLOAT = "float"
    CHARACTER = "character"
    STRING_LITERAL = "string_literal"

    # Names
    IDENTIFIER = "identifier"
    SYMBOL = "symbol"


TRIVIA_KINDS = frozenset({TokenKind.WHITESPACE, TokenKind.COMMENT})

# Characters that may never appear inside a symbol run
RESERVED_CHARS = frozenset("[]{}#:\"'")

_DELIMITERS: dict[str, TokenKind] = {
    "[": TokenKind.LFN,
    "]": TokenKind.RFN,
    "{": TokenKind.LCOND,
    "}": TokenKind.RCOND,
    ":": TokenKind.FIELD_DELIM,
}

_ESCAPES = {"n": "\n", "r": "\r", "t": "\t"}

# Fractional digits of a float must fit an unsigned 64-bit value
FRACTION_MAX = 2**64 - 1


@dataclass(frozen=True)
class Token:
    """
    A single token in LAMP source.

    Attributes:
        kind: Type of token
        start: Offset of the first character (0-indexed)
        length: Number of source characters covered
        value: Semantic payload: int for INTEGER, exact text for FLOAT,
            decoded text for CHARACTER and STRING_LITERAL, raw text for
            names and trivia, None for delimiters
    """

    kind: TokenKind
    start: int
    length: int
    value: int | str | None = None

    @property
    def end(self) -> int:
        return self.start + self.length

    @property
    def span(self) -> Span:
        return Span(self.start, self.length)

    @property
    def is_trivia(self) -> bool:
        return self.kind in TRIVIA_KINDS

    def text(self, source: str) -> str:
        """The exact slice of ``source`` this token covers."""
        return source[self.start : self.end]

    def __repr__(self) -> str:
        if self.value is None:
            return f"Token({self.kind.name}, {self.start}+{self.length})"
        return f"Token({self.kind.name}, {self.value!r}, {self.start}+{self.length})"


def is_ascii_digit(c: str) -> bool:
    return "0" <= c <= "9"


def is_identifier_char(c: str) -> bool:
    return c.isalnum() or c == "_"


def is_symbol_char(c: str) -> bool:
    return not c.isspace() and not c.isalnum() and c not in RESERVED_CHARS


def _fits(digits: str, limit: int) -> bool:
    """Check a run of ASCII digits against ``limit`` without huge int parsing."""
    significant = digits.lstrip("0") or "0"
    if len(significant) > len(str(limit)):
        return False
    return int(significant) <= limit


class Lexer:
    """
    Lexer for LAMP source.

    Recognition rules are tried in a fixed order at the cursor; each rule
    consumes at least one character, so scanning always terminates.
    """

    def __init__(self, text: str):
        """
        Initialize lexer.

        Args:
            text: Source text to tokenize
        """
        self.text = text
        self.pos = 0
        self.tokens: list[Token] = []

    def current_char(self) -> str | None:
        """Get current character or None if at end."""
        return self.char_at(self.pos)

    def peek_char(self, offset: int = 1) -> str | None:
        """Peek ahead at character."""
        return self.char_at(self.pos + offset)

    def char_at(self, index: int) -> str | None:
        if index >= len(self.text):
            return None
        return self.text[index]

    def run_end(self, index: int, predicate: Callable[[str], bool]) -> int:
        """Index just past the maximal run starting at ``index`` matching ``predicate``."""
        n = len(self.text)
        while index < n and predicate(self.text[index]):
            index += 1
        return index

    def _emit(self, kind: TokenKind, end: int, value: int | str | None = None) -> Token:
        token = Token(kind, self.pos, end - self.pos, value)
        self.pos = end
        return token

    def next_token(self) -> Token:
        """
        Scan one token at the cursor and advance past it.

        Raises:
            LexError: If the token at the cursor is a malformed literal
        """
        start = self.pos
        ch = self.text[start]

        if ch.isalpha():
            end = self.run_end(start + 1, is_identifier_char)
            return self._emit(TokenKind.IDENTIFIER, end, self.text[start:end])

        if ch.isspace():
            end = self.run_end(start + 1, str.isspace)
            return self._emit(TokenKind.WHITESPACE, end, self.text[start:end])

        if is_ascii_digit(ch):
            return self.read_number()

        if ch in _DELIMITERS:
            return self._emit(_DELIMITERS[ch], start + 1)

        if ch == "#":
            if self.peek_char() == "#":
                return self.read_block_comment()
            return self.read_line_comment()

        if ch == '"':
            return self.read_string()

        if ch == "'":
            return self.read_char()

        end = self.run_end(start + 1, is_symbol_char)
        return self._emit(TokenKind.SYMBOL, end, self.text[start:end])

    def read_number(self) -> Token:
        """Read an integer, or a float when the digits continue after a '.'."""
        start = self.pos
        int_end = self.run_end(start, is_ascii_digit)
        whole = self.text[start:int_end]
        if not _fits(whole, INT_MAX):
            raise LexError(
                LexErrorKind.NUMBER_OVERFLOW,
                f"Cannot parse {whole!r} as a 128-bit integer",
                Span(start, int_end - start),
            )

        after = self.char_at(int_end + 1)
        if self.char_at(int_end) == "." and after is not None and is_ascii_digit(after):
            frac_end = self.run_end(int_end + 1, is_ascii_digit)
            fraction = self.text[int_end + 1 : frac_end]
            if not _fits(fraction, FRACTION_MAX):
                raise LexError(
                    LexErrorKind.DECIMAL_PARSE_FAILURE,
                    f"Cannot parse {fraction!r} as decimal digits",
                    Span(start, frac_end - start),
                )
            return self._emit(TokenKind.FLOAT, frac_end, self.text[start:frac_end])

        return self._emit(TokenKind.INTEGER, int_end, int(whole.lstrip("0") or "0"))

    def read_line_comment(self) -> Token:
        """Read '#' through the end of the line, newline included."""
        newline = self.text.find("\n", self.pos)
        end = len(self.text) if newline == -1 else newline + 1
        return self._emit(TokenKind.COMMENT, end, self.text[self.pos : end])

    def read_block_comment(self) -> Token:
        """
        Read a block comment opened by a run of two or more '#'.

        The first later run of two or more '#' closes the comment and is
        consumed whole, whatever the length of the opening run.
        """
        start = self.pos
        content_start = self.run_end(start, lambda c: c == "#")
        close = self.text.find("##", content_start)
        if close == -1:
            raise LexError(
                LexErrorKind.UNTERMINATED_COMMENT,
                "Reached end of input while reading block comment",
                Span(start, len(self.text) - start),
            )
        end = self.run_end(close, lambda c: c == "#")
        return self._emit(TokenKind.COMMENT, end, self.text[start:end])

    def read_escaped(
        self, index: int, quote: str, start: int, eof_kind: LexErrorKind
    ) -> tuple[str, int] | None:
        """
        Decode one literal character at ``index``.

        Returns:
            (character, source width) or None at an unescaped closing quote

        Raises:
            LexError: If the input ends first (kind ``eof_kind``)
        """
        c = self.char_at(index)
        if c == "\\":
            escaped = self.char_at(index + 1)
            if escaped is not None:
                return _ESCAPES.get(escaped, escaped), 2
        elif c is not None:
            if c == quote:
                return None
            return c, 1

        raise LexError(
            eof_kind,
            "Reached end of input while reading literal",
            Span(start, len(self.text) - start),
        )

    def read_string(self) -> Token:
        """Read a double-quoted string literal."""
        start = self.pos
        index = start + 1
        chars: list[str] = []
        while (
            decoded := self.read_escaped(index, '"', start, LexErrorKind.UNTERMINATED_STRING)
        ) is not None:
            c, width = decoded
            chars.append(c)
            index += width
        return self._emit(TokenKind.STRING_LITERAL, index + 1, "".join(chars))

    def read_char(self) -> Token:
        """Read a single-quoted character literal."""
        start = self.pos
        decoded = self.read_escaped(start + 1, "'", start, LexErrorKind.UNTERMINATED_CHAR)
        if decoded is None:
            raise LexError(
                LexErrorKind.INVALID_CHAR_LITERAL_LENGTH,
                "Character literal must be exactly one character long",
                Span(start, 2),
            )

        c, width = decoded
        close = start + 1 + width
        closing = self.char_at(close)
        if closing is None:
            raise LexError(
                LexErrorKind.UNTERMINATED_CHAR,
                "Reached end of input while reading character literal",
                Span(start, close - start),
            )
        if closing != "'":
            raise LexError(
                LexErrorKind.INVALID_CHAR_LITERAL_LENGTH,
                "Character literal must be exactly one character long",
                Span(start, close + 1 - start),
            )
        return self._emit(TokenKind.CHARACTER, close + 1, c)

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens covering the input with no gaps or overlaps

        Raises:
            LexError: If a malformed literal or comment is encountered
        """
        while self.pos < len(self.text):
            self.tokens.append(self.next_token())
        logger.debug("Tokenized %d characters into %d tokens", len(self.text), len(self.tokens))
        return self.tokens


def tokenize(text: str) -> list[Token]:
    """
    Convenience function to tokenize LAMP text.

    Args:
        text: Source text

    Returns:
        List of tokens
    """
    lexer = Lexer(text)
    return lexer.tokenize()
