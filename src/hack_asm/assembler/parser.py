"""
Hack Assembly Language Parser and Symbol Resolver
=================================================

This module converts the token list from the lexer into a fully resolved
Program: every A-instruction holds a numeric address and every label has
been bound in the SymbolTable.

Statement Types
---------------
1. **LabelDecl**: binds a name to the next instruction's address
   ```asm
   (LOOP)
   ```

2. **AInstruction**: loads a constant or a symbol's address into A
   ```asm
   @21
   @LOOP
   @counter
   ```

3. **CInstruction**: ``dest=comp;jump`` with dest and jump optional
   ```asm
   D=D+A
   0;JMP
   AM=M-1;JNE
   ```

Resolution Passes
-----------------
Labels are bound inline while parsing, to the number of instructions
parsed so far. Symbolic A-instructions are queued by index and resolved
only after the whole file has been parsed, so ``@END`` before ``(END)``
finds the label instead of allocating a variable. Unknown names become
variables at 16, 17, ... in order of first use.

Error Recovery
--------------
Every statement must be followed by the end of its line. When a statement
fails, or extra tokens trail it, the error is recorded and parsing resumes
after the next line terminator. At most one syntax error is therefore
reported per line.

Address Range
-------------
Literals above 32767 are lexical errors, and a failed lexing phase is never
parsed, so users only ever see the lexer's diagnostic. The parser still
records an AddressRangeError for such a NUMBER token, which matters only
when Parser is driven with a token list that skipped the lexer's checks.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from hack_asm.errors import (
    AddressRangeError,
    AssemblerError,
    AssemblySyntaxError,
    DuplicateSymbolError,
    ErrorCollector,
    SourceLocation,
    TooManyErrors,
)
from hack_asm.assembler.lexer import Lexer
from hack_asm.assembler.opcodes import (
    MAX_ADDRESS,
    MAX_PATTERN_LENGTH,
    Computation,
    Dest,
    Jump,
    match_computation,
)
from hack_asm.assembler.symbols import SymbolTable
from hack_asm.assembler.tokens import Token, TokenType


logger = logging.getLogger(__name__)


# =============================================================================
# Statement Data Classes
# =============================================================================

@dataclass
class Statement:
    """
    Base class for all parsed statements.

    Every statement has a source location for error reporting and listings.
    """
    location: SourceLocation


@dataclass
class LabelDecl(Statement):
    name: str


@dataclass
class Instruction(Statement):
    """A statement that occupies one word of ROM."""


@dataclass
class AInstruction(Instruction):
    """
    Address instruction.

    Attributes:
        target: Numeric address, or a symbol name until the resolver
                rewrites it to the symbol's address
    """
    target: Union[int, str]

    @property
    def is_symbolic(self) -> bool:
        return isinstance(self.target, str)


@dataclass
class CInstruction(Instruction):
    """
    Compute instruction.

    Attributes:
        comp: The ALU operation
        dest: Registers receiving the result (None stores nothing)
        jump: Jump condition (None never jumps)
    """
    comp: Computation
    dest: Optional[Dest] = None
    jump: Optional[Jump] = None


@dataclass
class Program:
    """
    A fully resolved program ready for encoding.

    An instruction's address is its index in ``instructions``.
    """
    instructions: list[Instruction] = field(default_factory=list)
    symbols: SymbolTable = field(default_factory=SymbolTable)

    def __len__(self) -> int:
        return len(self.instructions)


class _StatementFailed(Exception):
    """Unwinds a statement whose error has already been recorded."""


# =============================================================================
# Parser Implementation
# =============================================================================

class Parser:
    """
    Parses Hack assembly tokens into a resolved Program.

    Usage:
        lexer = Lexer(source, filename)
        tokens = lexer.tokenize()
        parser = Parser(tokens, lexer.lines, filename)
        program = parser.parse()
        if parser.has_errors():
            print(parser.errors.report())
    """

    def __init__(
        self,
        tokens: list[Token],
        lines: Sequence[str] = (),
        filename: str = "<input>",
        max_errors: int = 100,
    ):
        """
        Initialize the parser.

        Args:
            tokens: Token list from the lexer, ending with EOF
            lines: Source lines, used to quote the source in diagnostics
            filename: Source filename for error reporting
            max_errors: Stop parsing after this many diagnostics
        """
        if not tokens or tokens[-1].type != TokenType.EOF:
            last = tokens[-1] if tokens else None
            eof = Token(
                TokenType.EOF,
                last.line if last else 1,
                last.start + last.length if last else 0,
                1,
                filename=filename,
            )
            tokens = [*tokens, eof]

        self._tokens = tokens
        self._lines = list(lines)
        self._filename = filename
        self._pos = 0

        self.errors = ErrorCollector(max_errors=max_errors)
        self.symbols = SymbolTable()
        self.statements: list[Statement] = []
        self._instructions: list[Instruction] = []

        # Indices into _instructions of A-instructions naming a symbol
        self._pending: list[int] = []

    def parse(self) -> Program:
        """
        Parse all tokens, bind labels, then allocate variables.

        Returns:
            The Program. It is complete only if has_errors() is False.
        """
        try:
            while not self._at_end():
                if self._match(TokenType.NEWLINE):
                    continue
                self._statement()
        except TooManyErrors:
            logger.debug(f"Stopped parsing {self._filename} after too many errors")

        self._resolve_variables()
        self.symbols.freeze()

        logger.debug(
            f"Parsed {len(self._instructions)} instructions, "
            f"{len(self.symbols.user_symbols())} user symbols "
            f"({self.errors.error_count()} errors)"
        )
        return Program(self._instructions, self.symbols)

    def has_errors(self) -> bool:
        return self.errors.has_errors()

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _at_end(self) -> bool:
        return self._current().type == TokenType.EOF

    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _peek(self, offset: int = 0) -> Token:
        """Look ahead without consuming; clamps to EOF."""
        pos = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[pos]

    def _advance(self) -> Token:
        """Consume and return current token. EOF is never consumed."""
        token = self._current()
        if not self._at_end():
            self._pos += 1
        return token

    def _check(self, *types: TokenType) -> bool:
        return self._current().type in types

    def _match(self, *types: TokenType) -> Optional[Token]:
        if self._check(*types):
            return self._advance()
        return None

    def _expect(self, token_type: TokenType, message: str) -> Token:
        """Consume a token of the given type or fail the statement."""
        if not self._check(token_type):
            self._fail(message, self._current())
        return self._advance()

    def _synchronise(self) -> None:
        """Skip to and past the next line terminator."""
        while not self._current().is_line_end:
            self._advance()
        self._advance()

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def _source_line(self, line: int) -> str:
        if 1 <= line <= len(self._lines):
            return self._lines[line - 1]
        return ""

    def _fail(self, message: str, token: Token, length: Optional[int] = None) -> None:
        """Record a syntax error and abandon the current statement."""
        self.errors.add(AssemblySyntaxError(
            message,
            location=token.location,
            source_line=self._source_line(token.line),
            length=token.length if length is None else length,
        ))
        raise _StatementFailed()

    # =========================================================================
    # Statements
    # =========================================================================

    def _statement(self) -> None:
        try:
            if self._check(TokenType.LPAREN):
                statement = self._label_declaration()
            else:
                statement = self._instruction()

            if not self._current().is_line_end:
                self._fail(
                    "unexpected token after statement, "
                    "use a line break to separate statements",
                    self._current(),
                )
        except _StatementFailed:
            self._synchronise()
            return

        # Consume the terminator; EOF stays put
        self._advance()
        self.statements.append(statement)
        if isinstance(statement, Instruction):
            # Only committed instructions are queued for the variable pass
            if isinstance(statement, AInstruction) and statement.is_symbolic:
                self._pending.append(len(self._instructions))
            self._instructions.append(statement)

    def _label_declaration(self) -> LabelDecl:
        start = self._advance()  # (
        name_token = self._expect(TokenType.IDENTIFIER, "expected label name after '('")
        self._expect(TokenType.RPAREN, "expected ')' after label name")

        name = name_token.value
        address = len(self._instructions)
        if name in self.symbols:
            self.errors.add(DuplicateSymbolError(
                name,
                location=name_token.location,
                source_line=self._source_line(name_token.line),
                length=name_token.length,
                original_address=self.symbols[name],
                predefined=self.symbols.is_predefined(name),
            ))
        else:
            self.symbols.define_label(name, address)
            logger.debug(f"Label {name} = {address}")

        return LabelDecl(start.location, name)

    def _instruction(self) -> Instruction:
        if self._check(TokenType.AT):
            return self._a_instruction()
        return self._c_instruction()

    def _a_instruction(self) -> AInstruction:
        at = self._advance()  # @
        operand = self._current()

        if operand.type == TokenType.IDENTIFIER:
            self._advance()
            return AInstruction(at.location, operand.value)

        if operand.type == TokenType.NUMBER:
            self._advance()
            if operand.value > MAX_ADDRESS:
                # The lexer already rejects such literals, so through
                # Assembler and parse_source this is never reached. It
                # guards token lists handed to Parser directly.
                self.errors.add(AddressRangeError(
                    operand.value,
                    MAX_ADDRESS,
                    location=operand.location,
                    source_line=self._source_line(operand.line),
                    length=operand.length,
                ))
            return AInstruction(at.location, operand.value)

        self._fail("expected identifier or number after '@'", operand)

    def _c_instruction(self) -> CInstruction:
        first = self._current()

        dest = None
        if self._peek(1).type == TokenType.EQUALS:
            if not first.is_dest:
                self._fail("expected destination after '='", first)
            dest = Dest[first.type.name]
            self._advance()  # dest
            self._advance()  # =

        comp = self._computation()

        jump = None
        if self._match(TokenType.SEMICOLON):
            keyword = self._current()
            if not keyword.is_jump:
                self._fail("expected jump keyword after ';'", keyword)
            jump = Jump[keyword.type.name]
            self._advance()

        return CInstruction(first.location, comp, dest, jump)

    def _computation(self) -> Computation:
        """
        Greedily match the longest computation mnemonic at the cursor.

        The window never reaches past EOF, so fewer than three tokens are
        inspected at the end of input.
        """
        window = self._tokens[self._pos:self._pos + MAX_PATTERN_LENGTH]
        match = match_computation(window)
        if match is None:
            first = window[0]
            self._fail(
                "expected proper computation in c-instruction",
                first,
                length=self._window_span(window),
            )

        comp, length = match
        for _ in range(length):
            self._advance()
        return comp

    @staticmethod
    def _window_span(window: Sequence[Token]) -> int:
        """Characters covered by the window's tokens on the first token's line."""
        first = window[0]
        end = first.start + first.length
        for token in window[1:]:
            if token.is_line_end or token.line != first.line:
                break
            end = token.start + token.length
        return end - first.start

    # =========================================================================
    # Variable Resolution
    # =========================================================================

    def _resolve_variables(self) -> None:
        """
        Rewrite every symbolic A-instruction to its numeric address.

        Runs after all labels are bound. Names that are neither labels nor
        predefined are allocated as variables in order of first use.
        """
        for index in self._pending:
            instruction = self._instructions[index]
            name = instruction.target
            is_new = name not in self.symbols
            instruction.target = self.symbols.resolve(name)
            if is_new:
                logger.debug(f"Variable {name} = {instruction.target}")
        self._pending.clear()


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(
    source: str | Sequence[str],
    filename: str = "<input>",
    max_errors: int = 100,
) -> tuple[Program, list[AssemblerError]]:
    """
    Lex and parse source in one step.

    Returns:
        (program, diagnostics). The diagnostics list holds the lexer's
        errors if lexing failed (parsing is then skipped), otherwise the
        parser's errors.
    """
    lexer = Lexer(source, filename, max_errors=max_errors)
    tokens = lexer.tokenize()
    if lexer.has_errors():
        return Program(), list(lexer.errors.errors)

    parser = Parser(tokens, lexer.lines, filename, max_errors=max_errors)
    program = parser.parse()
    return program, list(parser.errors.errors)
