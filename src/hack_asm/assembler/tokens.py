"""
Hack Assembly Token Model
=========================

Token types, the Token record, and the keyword tables shared by the lexer
and the parser.

Token Types
-----------
- Symbols: ( ) ; @ = + - & | !
- NUMBER: decimal literal, ``_`` separators allowed (``1_000``)
- IDENTIFIER: label or variable name, ``[A-Za-z][A-Za-z0-9_.$]*``
- Destination keywords: M D MD A AM AD AMD
- Jump keywords: JGT JEQ JGE JLT JNE JLE JMP
- NEWLINE: end of a non-empty line (runs of blank lines collapse to one)
- EOF: end of input

Keywords are scanned as identifiers first and then reclassified by exact,
case-sensitive match, so ``Md`` or ``jmp`` are plain identifiers.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from hack_asm.errors import SourceLocation


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Lexical categories of Hack assembly."""

    # Structural tokens
    NEWLINE = auto()
    EOF = auto()

    # Values
    IDENTIFIER = auto()
    NUMBER = auto()

    # Symbols
    LPAREN = auto()      # (
    RPAREN = auto()      # )
    SEMICOLON = auto()   # ;
    AT = auto()          # @
    EQUALS = auto()      # =
    PLUS = auto()        # +
    MINUS = auto()       # -
    AMPERSAND = auto()   # &
    PIPE = auto()        # |
    BANG = auto()        # !

    # Register-selector keywords (valid destinations)
    M = auto()
    D = auto()
    MD = auto()
    A = auto()
    AM = auto()
    AD = auto()
    AMD = auto()

    # Jump keywords
    JGT = auto()
    JEQ = auto()
    JGE = auto()
    JLT = auto()
    JNE = auto()
    JLE = auto()
    JMP = auto()


SINGLE_CHAR_TOKENS = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ";": TokenType.SEMICOLON,
    "@": TokenType.AT,
    "=": TokenType.EQUALS,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "&": TokenType.AMPERSAND,
    "|": TokenType.PIPE,
    "!": TokenType.BANG,
}

# Reverse of SINGLE_CHAR_TOKENS, used to render operator shapes
SYMBOL_TEXT = {token_type: char for char, token_type in SINGLE_CHAR_TOKENS.items()}

DEST_KEYWORDS = frozenset({
    TokenType.M, TokenType.D, TokenType.MD,
    TokenType.A, TokenType.AM, TokenType.AD, TokenType.AMD,
})

JUMP_KEYWORDS = frozenset({
    TokenType.JGT, TokenType.JEQ, TokenType.JGE,
    TokenType.JLT, TokenType.JNE, TokenType.JLE, TokenType.JMP,
})

# Exact lexeme -> keyword token type
KEYWORDS = {token_type.name: token_type for token_type in DEST_KEYWORDS | JUMP_KEYWORDS}

# Keywords that can appear as a register operand inside a computation
REGISTER_OPERANDS = frozenset({TokenType.A, TokenType.D, TokenType.M})


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from the source code.

    Attributes:
        type: The TokenType classification
        line: Line number in source (1-indexed)
        start: Offset of the first character within its line (0-indexed)
        length: Number of source characters covered by the token
        value: Identifier name or integer value; None for everything else
        filename: Name of the source file
    """
    type: TokenType
    line: int
    start: int
    length: int
    value: str | int | None = None
    filename: str = "<input>"

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def column(self) -> int:
        """1-based column of the first character."""
        return self.start + 1

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    @property
    def is_line_end(self) -> bool:
        return self.type in (TokenType.NEWLINE, TokenType.EOF)

    @property
    def is_dest(self) -> bool:
        return self.type in DEST_KEYWORDS

    @property
    def is_jump(self) -> bool:
        return self.type in JUMP_KEYWORDS

    @property
    def shape(self) -> Optional[str]:
        """
        The text this token contributes to a computation mnemonic.

        Register operands render as their name, operators as their
        character and numbers as their decimal value, so ``D - 1``
        has shapes ``("D", "-", "1")``. Tokens that can never be part
        of a computation have no shape.
        """
        if self.type in REGISTER_OPERANDS:
            return self.type.name
        if self.type in SYMBOL_TEXT:
            return SYMBOL_TEXT[self.type]
        if self.type == TokenType.NUMBER:
            return str(self.value)
        return None
