"""
Error types for LAMP lexing, parsing, and configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True)
class Span:
    """
    A raw offset range in the source text.

    Attributes:
        start: Offset of the first character (0-indexed)
        length: Number of characters covered (0 for end-of-input positions)
    """

    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def format(self) -> str:
        """
        Format the span as a human-readable string.

        Returns:
            Formatted string like "offset 4" or "offsets 4..9"
        """
        if self.length <= 1:
            return f"offset {self.start}"
        return f"offsets {self.start}..{self.end}"


class LampError(Exception):
    """Base exception for all LAMP errors."""

    def __init__(self, message: str, span: Span | None = None):
        self.message = message
        self.span = span
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with the span if available."""
        if self.span:
            return f"{self.message} (at {self.span.format()})"
        return self.message


class LexErrorKind(StrEnum):
    """Ways a literal or comment can be malformed."""

    UNTERMINATED_STRING = "unterminated_string"
    UNTERMINATED_CHAR = "unterminated_char"
    INVALID_CHAR_LITERAL_LENGTH = "invalid_char_literal_length"
    NUMBER_OVERFLOW = "number_overflow"
    DECIMAL_PARSE_FAILURE = "decimal_parse_failure"
    UNTERMINATED_COMMENT = "unterminated_comment"


class ParseErrorKind(StrEnum):
    """Ways a token sequence can fail to form an expression."""

    UNEXPECTED_TOKEN = "unexpected_token"
    UNTERMINATED_LIST = "unterminated_list"
    UNTERMINATED_MAP = "unterminated_map"
    MISSING_FIELD_DELIMITER = "missing_field_delimiter"
    UNEXPECTED_END_OF_INPUT = "unexpected_end_of_input"
    NESTING_TOO_DEEP = "nesting_too_deep"


class LexError(LampError):
    """
    Raised when source text cannot be split into tokens.

    Examples:
    - String or character literal without a closing quote
    - Character literal holding more than one character
    - Integer outside the signed 128-bit range
    - Block comment that is never closed
    """

    def __init__(self, kind: LexErrorKind, message: str, span: Span):
        self.kind = kind
        super().__init__(message, span)


class ParseError(LampError):
    """
    Raised when tokens cannot be assembled into Code.

    Examples:
    - Closing bracket with no matching opener
    - End of input inside a list or map
    - Map pair without a ':' delimiter
    - Lists or maps nested deeper than the parser allows
    """

    def __init__(
        self,
        kind: ParseErrorKind,
        message: str,
        span: Span | None = None,
        token_index: int | None = None,
    ):
        self.kind = kind
        self.token_index = token_index
        super().__init__(message, span)


class ConfigError(LampError):
    """Raised when lamp.toml is unreadable or holds invalid values."""

    pass
