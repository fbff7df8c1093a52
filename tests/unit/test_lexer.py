"""Tests for the LAMP lexer.

Covers:
- Delimiters, identifiers, whitespace, symbols
- Numeric, character and string literals with escapes
- Line and block comments
- Lexical errors and their spans
"""

from __future__ import annotations

import pytest

from lamp.core.errors import LexError, LexErrorKind, Span
from lamp.core.lexer import Lexer, Token, TokenKind, tokenize

# ============================================================================
# Helpers
# ============================================================================


def kinds(source: str) -> list[TokenKind]:
    return [t.kind for t in tokenize(source)]


def significant(source: str) -> list[Token]:
    return [t for t in tokenize(source) if not t.is_trivia]


# ============================================================================
# Structure
# ============================================================================


class TestDelimiters:
    """Single-character delimiters and the whitespace between them."""

    def test_delimiters(self) -> None:
        assert tokenize("[] \n {}:") == [
            Token(TokenKind.LFN, 0, 1),
            Token(TokenKind.RFN, 1, 1),
            Token(TokenKind.WHITESPACE, 2, 3, " \n "),
            Token(TokenKind.LCOND, 5, 1),
            Token(TokenKind.RCOND, 6, 1),
            Token(TokenKind.FIELD_DELIM, 7, 1),
        ]

    def test_hello_world(self) -> None:
        assert tokenize('[print "Hello World"]') == [
            Token(TokenKind.LFN, 0, 1),
            Token(TokenKind.IDENTIFIER, 1, 5, "print"),
            Token(TokenKind.WHITESPACE, 6, 1, " "),
            Token(TokenKind.STRING_LITERAL, 7, 13, "Hello World"),
            Token(TokenKind.RFN, 20, 1),
        ]

    def test_empty_input(self) -> None:
        assert tokenize("") == []

    def test_token_end_and_text(self) -> None:
        source = "foo bar"
        tok = tokenize(source)[2]
        assert tok.end == 7
        assert tok.span == Span(4, 3)
        assert tok.text(source) == "bar"


class TestIdentifiers:
    """Identifiers start alphabetic and continue alphanumeric or '_'."""

    def test_identifiers(self) -> None:
        assert tokenize("print u8 uint8_t") == [
            Token(TokenKind.IDENTIFIER, 0, 5, "print"),
            Token(TokenKind.WHITESPACE, 5, 1, " "),
            Token(TokenKind.IDENTIFIER, 6, 2, "u8"),
            Token(TokenKind.WHITESPACE, 8, 1, " "),
            Token(TokenKind.IDENTIFIER, 9, 7, "uint8_t"),
        ]

    def test_unicode_letters(self) -> None:
        toks = significant("größe λx")
        assert [t.value for t in toks] == ["größe", "λx"]

    def test_leading_underscore_is_symbol(self) -> None:
        assert kinds("_foo") == [TokenKind.SYMBOL, TokenKind.IDENTIFIER]

    def test_digit_then_letters_splits(self) -> None:
        assert tokenize("8u") == [
            Token(TokenKind.INTEGER, 0, 1, 8),
            Token(TokenKind.IDENTIFIER, 1, 1, "u"),
        ]


class TestSymbols:
    """Runs of non-alphanumeric, non-reserved characters."""

    def test_symbols(self) -> None:
        assert tokenize("!%^ |&@foo") == [
            Token(TokenKind.SYMBOL, 0, 3, "!%^"),
            Token(TokenKind.WHITESPACE, 3, 1, " "),
            Token(TokenKind.SYMBOL, 4, 3, "|&@"),
            Token(TokenKind.IDENTIFIER, 7, 3, "foo"),
        ]

    def test_reserved_characters_end_a_run(self) -> None:
        assert kinds("+-[") == [TokenKind.SYMBOL, TokenKind.LFN]
        assert kinds("=:") == [TokenKind.SYMBOL, TokenKind.FIELD_DELIM]
        assert kinds('<"x"') == [TokenKind.SYMBOL, TokenKind.STRING_LITERAL]


# ============================================================================
# Literals
# ============================================================================


class TestNumbers:
    """Integers and exact-text floats."""

    def test_numeric_literals(self) -> None:
        assert tokenize("7 42 3.1415") == [
            Token(TokenKind.INTEGER, 0, 1, 7),
            Token(TokenKind.WHITESPACE, 1, 1, " "),
            Token(TokenKind.INTEGER, 2, 2, 42),
            Token(TokenKind.WHITESPACE, 4, 1, " "),
            Token(TokenKind.FLOAT, 5, 6, "3.1415"),
        ]

    def test_float_text_is_kept_verbatim(self) -> None:
        assert tokenize("0.10")[0].value == "0.10"
        assert tokenize("007.5")[0].value == "007.5"

    def test_dot_without_digit_is_not_a_float(self) -> None:
        assert tokenize("3.") == [
            Token(TokenKind.INTEGER, 0, 1, 3),
            Token(TokenKind.SYMBOL, 1, 1, "."),
        ]
        assert kinds("3.x") == [TokenKind.INTEGER, TokenKind.SYMBOL, TokenKind.IDENTIFIER]

    def test_largest_integer(self) -> None:
        largest = 2**127 - 1
        assert tokenize(str(largest))[0].value == largest

    def test_integer_overflow(self) -> None:
        with pytest.raises(LexError) as exc_info:
            tokenize(f"[a {2**127}]")
        assert exc_info.value.kind == LexErrorKind.NUMBER_OVERFLOW
        assert exc_info.value.span == Span(3, len(str(2**127)))

    def test_very_long_digit_run_overflows(self) -> None:
        with pytest.raises(LexError) as exc_info:
            tokenize("9" * 5000)
        assert exc_info.value.kind == LexErrorKind.NUMBER_OVERFLOW

    def test_leading_zeros_do_not_overflow(self) -> None:
        assert tokenize("0" * 60 + "1")[0].value == 1

    def test_leading_zeros_beyond_int_string_limit(self) -> None:
        tok = tokenize("0" * 5000 + "1")[0]
        assert tok.kind == TokenKind.INTEGER
        assert tok.value == 1
        assert tok.length == 5001

    def test_float_integer_part_overflow(self) -> None:
        with pytest.raises(LexError) as exc_info:
            tokenize(f"{2**128}.5")
        assert exc_info.value.kind == LexErrorKind.NUMBER_OVERFLOW

    def test_fraction_too_long(self) -> None:
        with pytest.raises(LexError) as exc_info:
            tokenize("1.18446744073709551616")
        assert exc_info.value.kind == LexErrorKind.DECIMAL_PARSE_FAILURE
        assert exc_info.value.span == Span(0, 22)

    def test_fraction_at_limit(self) -> None:
        assert tokenize("1.18446744073709551615")[0].kind == TokenKind.FLOAT


class TestCharacters:
    """Single-quoted character literals."""

    def test_char_literals(self) -> None:
        assert tokenize("'a''\\n''\\''") == [
            Token(TokenKind.CHARACTER, 0, 3, "a"),
            Token(TokenKind.CHARACTER, 3, 4, "\n"),
            Token(TokenKind.CHARACTER, 7, 4, "'"),
        ]

    def test_unknown_escape_maps_to_itself(self) -> None:
        assert tokenize("'\\q'")[0].value == "q"

    def test_two_characters(self) -> None:
        with pytest.raises(LexError) as exc_info:
            tokenize("'ab'")
        assert exc_info.value.kind == LexErrorKind.INVALID_CHAR_LITERAL_LENGTH

    def test_empty_literal(self) -> None:
        with pytest.raises(LexError) as exc_info:
            tokenize("''")
        assert exc_info.value.kind == LexErrorKind.INVALID_CHAR_LITERAL_LENGTH

    @pytest.mark.parametrize("source", ["'", "'a", "'\\", "'\\n"])
    def test_unterminated(self, source: str) -> None:
        with pytest.raises(LexError) as exc_info:
            tokenize(source)
        assert exc_info.value.kind == LexErrorKind.UNTERMINATED_CHAR
        assert exc_info.value.span.start == 0


class TestStrings:
    """Double-quoted string literals."""

    def test_string_literals(self) -> None:
        assert tokenize('"asdf""\\n\\r\\t\\""') == [
            Token(TokenKind.STRING_LITERAL, 0, 6, "asdf"),
            Token(TokenKind.STRING_LITERAL, 6, 10, '\n\r\t"'),
        ]

    def test_empty_string(self) -> None:
        assert tokenize('""') == [Token(TokenKind.STRING_LITERAL, 0, 2, "")]

    def test_string_spans_lines_and_reserved_chars(self) -> None:
        assert tokenize('"a\n[#:]"')[0].value == "a\n[#:]"

    def test_backslash_escape(self) -> None:
        assert tokenize('"a\\\\b"')[0].value == "a\\b"

    @pytest.mark.parametrize("source", ['"hello', '"hello\\', '"\\"'])
    def test_unterminated(self, source: str) -> None:
        with pytest.raises(LexError, match="end of input") as exc_info:
            tokenize(source)
        assert exc_info.value.kind == LexErrorKind.UNTERMINATED_STRING


# ============================================================================
# Comments
# ============================================================================


class TestComments:
    """Line comments and '##' block comments."""

    def test_comments(self) -> None:
        assert tokenize("foo#bar\nfoo\nbar##foo\nbar##bazz#fizzbuzz") == [
            Token(TokenKind.IDENTIFIER, 0, 3, "foo"),
            Token(TokenKind.COMMENT, 3, 5, "#bar\n"),
            Token(TokenKind.IDENTIFIER, 8, 3, "foo"),
            Token(TokenKind.WHITESPACE, 11, 1, "\n"),
            Token(TokenKind.IDENTIFIER, 12, 3, "bar"),
            Token(TokenKind.COMMENT, 15, 11, "##foo\nbar##"),
            Token(TokenKind.IDENTIFIER, 26, 4, "bazz"),
            Token(TokenKind.COMMENT, 30, 9, "#fizzbuzz"),
        ]

    def test_single_hash_inside_block(self) -> None:
        source = "## a # b ## x"
        toks = tokenize(source)
        assert toks[0] == Token(TokenKind.COMMENT, 0, 11, "## a # b ##")
        assert toks[-1].value == "x"

    def test_closing_run_consumed_whole(self) -> None:
        toks = tokenize("## a ####x")
        assert toks[0].value == "## a ####"
        assert toks[1].value == "x"

    def test_short_closing_run_closes_long_opening(self) -> None:
        toks = tokenize("#### a ## b")
        assert toks[0].value == "#### a ##"

    @pytest.mark.parametrize("source", ["## never closed", "####", "## a #"])
    def test_unterminated_block(self, source: str) -> None:
        with pytest.raises(LexError) as exc_info:
            tokenize(source)
        assert exc_info.value.kind == LexErrorKind.UNTERMINATED_COMMENT
        assert exc_info.value.span == Span(0, len(source))

    def test_line_comment_at_end_of_input(self) -> None:
        assert tokenize("#") == [Token(TokenKind.COMMENT, 0, 1, "#")]


# ============================================================================
# Lexer object
# ============================================================================


class TestLexer:
    """Direct use of the Lexer class."""

    def test_next_token_advances(self) -> None:
        lexer = Lexer("[a]")
        assert lexer.next_token().kind == TokenKind.LFN
        assert lexer.pos == 1
        assert lexer.current_char() == "a"
        assert lexer.peek_char() == "]"

    def test_error_message_includes_offsets(self) -> None:
        with pytest.raises(LexError, match=r"at offsets 2\.\.5"):
            tokenize("x 'ab")

    def test_spans_partition_input(self) -> None:
        source = "{if c: [eq a 'b'] # note\n do: \"x\\ty\" ##blk## 3.25}"
        toks = tokenize(source)
        assert "".join(t.text(source) for t in toks) == source
        for prev, nxt in zip(toks, toks[1:]):
            assert prev.end == nxt.start
