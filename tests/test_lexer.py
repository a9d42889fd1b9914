# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the Hack assembly lexer/tokenizer.
#
# Test coverage includes:
#   - Symbols, numbers, identifiers and keyword reclassification
#   - Comments, whitespace and NEWLINE collapsing
#   - Line/offset tracking
#   - Error collection without stopping
# =============================================================================

import pytest
from hack_asm.assembler.lexer import Lexer
from hack_asm.assembler.tokens import TokenType
from hack_asm.errors import LexicalError


# =============================================================================
# Helper Functions
# =============================================================================

def scan(source) -> tuple[list, Lexer]:
    lexer = Lexer(source, "<test>")
    return lexer.tokenize(), lexer


def types(source) -> list[TokenType]:
    """Token types with the trailing NEWLINE/EOF structure left in."""
    tokens, _ = scan(source)
    return [t.type for t in tokens]


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition for simple inputs."""

    def test_empty_source(self):
        """Empty source produces only EOF."""
        assert types("") == [TokenType.EOF]

    def test_whitespace_only(self):
        assert types("   \t   ") == [TokenType.EOF]

    def test_a_instruction(self):
        assert types("@21") == [
            TokenType.AT, TokenType.NUMBER, TokenType.NEWLINE, TokenType.EOF,
        ]

    def test_all_single_character_symbols(self):
        assert types("( ) ; @ = + - & | !")[:-2] == [
            TokenType.LPAREN, TokenType.RPAREN, TokenType.SEMICOLON,
            TokenType.AT, TokenType.EQUALS, TokenType.PLUS, TokenType.MINUS,
            TokenType.AMPERSAND, TokenType.PIPE, TokenType.BANG,
        ]

    def test_c_instruction(self):
        assert types("AM=M-1;JNE")[:-2] == [
            TokenType.AM, TokenType.EQUALS, TokenType.M, TokenType.MINUS,
            TokenType.NUMBER, TokenType.SEMICOLON, TokenType.JNE,
        ]

    def test_label_declaration(self):
        tokens, _ = scan("(LOOP)")
        assert [t.type for t in tokens[:3]] == [
            TokenType.LPAREN, TokenType.IDENTIFIER, TokenType.RPAREN,
        ]
        assert tokens[1].value == "LOOP"


# =============================================================================
# Number Tests
# =============================================================================

class TestNumbers:

    def test_decimal_number(self):
        tokens, _ = scan("123")
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == 123

    def test_underscore_separators_are_stripped(self):
        tokens, lexer = scan("16_384")
        assert tokens[0].value == 16384
        assert tokens[0].length == 6
        assert not lexer.has_errors()

    def test_max_address_is_accepted(self):
        tokens, lexer = scan("@32767")
        assert tokens[1].value == 32767
        assert not lexer.has_errors()

    def test_over_range_number_reports_and_still_emits_token(self):
        tokens, lexer = scan("@32768")
        assert tokens[1].type == TokenType.NUMBER
        assert tokens[1].value == 32768
        assert lexer.errors.error_count() == 1
        error = lexer.errors.errors[0]
        assert isinstance(error, LexicalError)
        assert "out of range" in error.message
        assert error.length == 5

    def test_very_long_literal_is_a_range_error(self):
        tokens, lexer = scan("@" + "9" * 5000 + "\nD=A")
        assert tokens[1].type == TokenType.NUMBER
        assert tokens[1].value > 32767
        assert lexer.errors.error_count() == 1
        assert "out of range" in lexer.errors.errors[0].message
        assert tokens[-2].type == TokenType.NEWLINE
        assert tokens[-3].type == TokenType.A

    def test_leading_zeros_do_not_count_as_range(self):
        tokens, lexer = scan("@" + "0" * 20 + "21")
        assert tokens[1].value == 21
        assert not lexer.has_errors()

    def test_number_followed_by_letters_splits(self):
        assert types("12abc")[:2] == [TokenType.NUMBER, TokenType.IDENTIFIER]


# =============================================================================
# Identifier and Keyword Tests
# =============================================================================

class TestIdentifiers:

    @pytest.mark.parametrize("name", [
        "LOOP", "i", "sum_1", "Main.fibonacci", "ponggame.0$ret", "R15x",
    ])
    def test_identifier_characters(self, name):
        tokens, lexer = scan(name)
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == name
        assert not lexer.has_errors()

    @pytest.mark.parametrize("lexeme,expected", [
        ("M", TokenType.M),
        ("D", TokenType.D),
        ("MD", TokenType.MD),
        ("A", TokenType.A),
        ("AM", TokenType.AM),
        ("AD", TokenType.AD),
        ("AMD", TokenType.AMD),
        ("JGT", TokenType.JGT),
        ("JEQ", TokenType.JEQ),
        ("JGE", TokenType.JGE),
        ("JLT", TokenType.JLT),
        ("JNE", TokenType.JNE),
        ("JLE", TokenType.JLE),
        ("JMP", TokenType.JMP),
    ])
    def test_keywords(self, lexeme, expected):
        tokens, _ = scan(lexeme)
        assert tokens[0].type == expected
        assert tokens[0].value is None

    @pytest.mark.parametrize("lexeme", ["Md", "jmp", "DM", "AMDX", "JMP1"])
    def test_near_keywords_are_identifiers(self, lexeme):
        tokens, _ = scan(lexeme)
        assert tokens[0].type == TokenType.IDENTIFIER

    def test_identifier_cannot_start_with_underscore(self):
        _, lexer = scan("_x")
        assert lexer.has_errors()


# =============================================================================
# Comments, Whitespace and Lines
# =============================================================================

class TestLines:

    def test_comment_is_skipped(self):
        assert types("D=A // set D") == [
            TokenType.D, TokenType.EQUALS, TokenType.A,
            TokenType.NEWLINE, TokenType.EOF,
        ]

    def test_comment_only_source(self):
        assert types("// nothing here") == [TokenType.EOF]

    def test_blank_lines_collapse(self):
        assert types("@1\n\n\n// c\n@2\n") == [
            TokenType.AT, TokenType.NUMBER, TokenType.NEWLINE,
            TokenType.AT, TokenType.NUMBER, TokenType.NEWLINE,
            TokenType.EOF,
        ]

    def test_no_newline_before_first_token(self):
        assert types("\n\n  @1")[0] == TokenType.AT

    def test_crlf_line_endings(self):
        assert types("@1\r\n@2\r\n") == types("@1\n@2\n")

    def test_accepts_list_of_lines(self):
        assert types(["@1\n", "D=A\n"]) == types("@1\nD=A\n")
        assert types(["@1\r\n", "D=A"]) == types("@1\nD=A\n")

    @pytest.mark.parametrize("separator", ["\x0b", "\x0c", "\x1c", "\x85", " "])
    def test_only_newline_ends_a_line(self, separator):
        tokens, lexer = scan(f"@1{separator}@2\n@3")
        assert lexer.errors.error_count() == 1
        error = lexer.errors.errors[0]
        assert error.message == f"unexpected character {separator!r}"
        assert (error.location.line, error.location.column) == (1, 3)
        assert tokens[-2].line == 2
        assert lexer.lines == [f"@1{separator}@2", "@3"]


# =============================================================================
# Position Tracking Tests
# =============================================================================

class TestPositions:

    def test_line_and_offset(self):
        tokens, _ = scan("@1\n  D=M")
        d = tokens[3]
        assert d.type == TokenType.D
        assert d.line == 2
        assert d.start == 2
        assert d.column == 3
        assert d.length == 1

    def test_identifier_length(self):
        tokens, _ = scan("@counter")
        assert tokens[1].start == 1
        assert tokens[1].length == 7

    def test_newline_sits_at_end_of_line(self):
        tokens, _ = scan("D=A  ")
        newline = tokens[3]
        assert newline.type == TokenType.NEWLINE
        assert newline.start == 5

    def test_eof_after_last_line(self):
        tokens, _ = scan("@1\nD=A")
        eof = tokens[-1]
        assert eof.type == TokenType.EOF
        assert eof.line == 2
        assert eof.start == 3

    def test_location_uses_filename(self):
        tokens, _ = scan("@1")
        assert str(tokens[0].location) == "<test>:1:1"


# =============================================================================
# Error Condition Tests
# =============================================================================

class TestErrors:

    def test_lone_slash(self):
        _, lexer = scan("D=A / note")
        assert lexer.errors.error_count() == 1
        assert "did you mean '//'" in lexer.errors.errors[0].message

    def test_unexpected_character(self):
        _, lexer = scan("D=D*A")
        error = lexer.errors.errors[0]
        assert error.message == "unexpected character '*'"
        assert error.location.line == 1
        assert error.location.column == 4

    def test_scanning_continues_after_error(self):
        tokens, lexer = scan("@1 # @2")
        assert lexer.errors.error_count() == 1
        assert [t.type for t in tokens].count(TokenType.AT) == 2

    def test_errors_collected_across_lines(self):
        _, lexer = scan("#\n%\n@1\n?")
        assert lexer.errors.error_count() == 3
        assert [e.location.line for e in lexer.errors.errors] == [1, 2, 4]

    def test_error_excerpt(self):
        _, lexer = scan("D=A#")
        text = str(lexer.errors.errors[0])
        assert text.startswith("<test>:1:4: error: unexpected character '#'")
        assert "1 | D=A#\n       ^--here" in text

    def test_max_errors_stops_scanning(self):
        lexer = Lexer("#\n#\n#\n#", "<test>", max_errors=2)
        tokens = lexer.tokenize()
        assert lexer.errors.error_count() == 2
        assert tokens[-1].type == TokenType.EOF
