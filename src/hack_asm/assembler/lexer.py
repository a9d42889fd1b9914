"""
Hack Assembly Language Lexer
============================

This module implements a lexer (tokenizer) for Hack assembly language.
It converts source lines into a list of tokens that the parser can process.

Lexical Surface
---------------
- Symbols: ``( ) ; @ = + - & | !``
- Comments: ``//`` to end of line (a lone ``/`` is an error)
- Numbers: decimal digits with optional ``_`` separators (``16_384``)
- Identifiers: ``[A-Za-z][A-Za-z0-9_.$]*``, reclassified as keywords on
  an exact match (``M``, ``AMD``, ``JMP`` ...)
- Whitespace: spaces, tabs and stray carriage returns are skipped

Every non-empty line ends with one NEWLINE token; blank and comment-only
lines produce nothing, so runs of them collapse into a single NEWLINE.
The token list always ends with EOF.

Error Recovery
--------------
The lexer never stops at a bad character. Each problem is recorded in
``lexer.errors`` and scanning resumes at the next character, so a file with
several typos reports all of them in one run. Over-range numbers still
produce a NUMBER token.

Example
-------
>>> from hack_asm.assembler.lexer import Lexer
>>> lexer = Lexer("D=D+1;JGT  // loop", "example.asm")
>>> for token in lexer.tokenize():
...     print(token)
Token(D, 1:1)
Token(EQUALS, 1:2)
Token(D, 1:3)
Token(PLUS, 1:4)
Token(NUMBER, 1, 1:5)
Token(SEMICOLON, 1:6)
Token(JGT, 1:7)
Token(NEWLINE, 1:19)
Token(EOF, 1:19)
"""

import logging
import string
from typing import Sequence

from hack_asm.errors import (
    ErrorCollector,
    LexicalError,
    SourceLocation,
    TooManyErrors,
)
from hack_asm.assembler.opcodes import MAX_ADDRESS
from hack_asm.assembler.tokens import KEYWORDS, SINGLE_CHAR_TOKENS, Token, TokenType


logger = logging.getLogger(__name__)


def split_lines(source: str | Sequence[str]) -> list[str]:
    """
    Return source as a list of lines without line endings.

    Only ``\\n`` (optionally preceded by ``\\r``) ends a line. Other
    characters that str.splitlines() treats as breaks, such as form feed,
    stay in the line and are reported by the scanner.
    """
    if isinstance(source, str):
        lines = source.split("\n")
        if lines[-1] == "":
            lines.pop()
    else:
        lines = [line[:-1] if line.endswith("\n") else line for line in source]
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class Lexer:
    """
    Tokenizes Hack assembly source code.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = lexer.tokenize()
        if lexer.has_errors():
            print(lexer.errors.report())

    Attributes:
        lines: The source lines being tokenized
        filename: Name of the source file (for error reporting)
        errors: Diagnostics collected while scanning
    """

    # Characters that can start an identifier
    IDENT_START = string.ascii_letters

    # Characters that can continue an identifier
    IDENT_CHARS = string.ascii_letters + string.digits + "_.$"

    DIGITS = string.digits + "_"

    WHITESPACE = " \t\r"

    def __init__(
        self,
        source: str | Sequence[str],
        filename: str = "<input>",
        max_errors: int = 100,
    ):
        """
        Initialize the lexer with source code.

        Args:
            source: Source text, or the source already split into lines
            filename: Name of the source file (for error messages)
            max_errors: Stop scanning after this many diagnostics
        """
        self.lines = split_lines(source)
        self.filename = filename
        self.errors = ErrorCollector(max_errors=max_errors)

        self._tokens: list[Token] = []

        # Position within the current line
        self._line = 1
        self._text = ""
        self._pos = 0
        self._start = 0

    def tokenize(self) -> list[Token]:
        """
        Scan the whole source.

        Returns:
            Every token in source order, ending with a single EOF token.
            Check has_errors() before trusting the result.
        """
        try:
            for index, text in enumerate(self.lines):
                self._scan_line(index + 1, text)
        except TooManyErrors:
            logger.debug(f"Stopped scanning {self.filename} after too many errors")

        # EOF sits just past the end of the last line
        last_line = max(len(self.lines), 1)
        last_text = self.lines[-1] if self.lines else ""
        self._tokens.append(
            Token(TokenType.EOF, last_line, len(last_text), 1, filename=self.filename)
        )

        logger.debug(
            f"Scanned {len(self._tokens)} tokens from {self.filename} "
            f"({self.errors.error_count()} errors)"
        )
        return self._tokens

    def has_errors(self) -> bool:
        return self.errors.has_errors()

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_line_end(self) -> bool:
        return self._pos >= len(self._text)

    def _peek(self) -> str:
        """Current character, or empty string at end of line."""
        if self._at_line_end():
            return ""
        return self._text[self._pos]

    def _advance(self) -> str:
        char = self._text[self._pos]
        self._pos += 1
        return char

    def _match(self, expected: str) -> bool:
        """Consume next character if it matches expected."""
        if self._peek() == expected:
            self._advance()
            return True
        return False

    def _lexeme(self) -> str:
        return self._text[self._start:self._pos]

    # =========================================================================
    # Token and Error Creation
    # =========================================================================

    def _add_token(self, token_type: TokenType, value: str | int | None = None) -> None:
        self._tokens.append(Token(
            type=token_type,
            line=self._line,
            start=self._start,
            length=self._pos - self._start,
            value=value,
            filename=self.filename,
        ))

    def _error(self, message: str) -> None:
        """Record a diagnostic spanning the current lexeme."""
        self.errors.add(LexicalError(
            message,
            SourceLocation(self.filename, self._line, self._start + 1),
            source_line=self._text,
            length=max(self._pos - self._start, 1),
        ))

    # =========================================================================
    # Scanning
    # =========================================================================

    def _scan_line(self, line_number: int, text: str) -> None:
        self._line = line_number
        self._text = text
        self._pos = 0

        while not self._at_line_end():
            self._start = self._pos
            self._scan_token()

        # Blank and comment-only lines collapse into the previous NEWLINE
        if self._tokens and self._tokens[-1].type != TokenType.NEWLINE:
            self._start = self._pos = len(text)
            self._tokens.append(
                Token(TokenType.NEWLINE, line_number, len(text), 1, filename=self.filename)
            )

    def _scan_token(self) -> None:
        char = self._advance()

        if char in self.WHITESPACE:
            return

        if char == "/":
            if self._match("/"):
                # Comment runs to end of line
                self._pos = len(self._text)
            else:
                self._error("unexpected character, did you mean '//'?")
            return

        if char in SINGLE_CHAR_TOKENS:
            self._add_token(SINGLE_CHAR_TOKENS[char])
            return

        if char in string.digits:
            self._scan_number()
            return

        if char in self.IDENT_START:
            self._scan_identifier()
            return

        self._error(f"unexpected character {char!r}")

    def _scan_number(self) -> None:
        """
        Scan a decimal literal.

        Underscores are digit separators and are dropped before conversion.
        A value above MAX_ADDRESS is reported, but the token is still
        emitted so the parser sees the instruction it belongs to. A literal
        with more significant digits than MAX_ADDRESS is never converted;
        its token carries MAX_ADDRESS + 1.
        """
        # _peek() returns '' at end of line, and '' is in every string
        while self._peek() and self._peek() in self.DIGITS:
            self._advance()

        digits = self._lexeme().replace("_", "")

        # Longer literals cannot fit, and int() refuses very long strings
        if len(digits.lstrip("0")) > len(str(MAX_ADDRESS)):
            value = MAX_ADDRESS + 1
        else:
            value = int(digits)

        if value > MAX_ADDRESS:
            self._error(
                f"address out of range, addresses range from 0 to {MAX_ADDRESS}"
            )
        self._add_token(TokenType.NUMBER, value)

    def _scan_identifier(self) -> None:
        while self._peek() and self._peek() in self.IDENT_CHARS:
            self._advance()

        name = self._lexeme()
        keyword = KEYWORDS.get(name)
        if keyword is not None:
            self._add_token(keyword)
        else:
            self._add_token(TokenType.IDENTIFIER, name)
