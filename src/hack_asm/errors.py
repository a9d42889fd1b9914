"""
Hack Assembler Error Hierarchy
==============================

This module defines the exception hierarchy for the Hack assembler.
All exceptions inherit from HackAsmError, allowing callers to catch all
assembler-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
HackAsmError (base)
├── AssemblerError (a located diagnostic in the user's source)
│   ├── LexicalError - illegal character, over-range literal
│   ├── AssemblySyntaxError - malformed statement, missing token
│   └── SemanticError
│       ├── DuplicateSymbolError - label or predefined name redefined
│       └── AddressRangeError - address literal outside 0..32767
├── CompilationFailed - a phase finished with diagnostics
└── InternalAssemblerError - broken internal contract (a bug, not user error)

Diagnostics Are Values
----------------------
The lexer and the parser never raise AssemblerError subclasses while they
run. Each diagnostic is built as an exception object and added to an
ErrorCollector, and scanning/parsing carries on. Once a phase completes with
a non-empty collector, the Assembler raises CompilationFailed carrying every
diagnostic.

Error messages follow this format:
    filename:line:column: error: description
    3 | 0;JPM
          ^^^--here
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional

from hack_asm.diagnostics import format_excerpt


# =============================================================================
# Base Exception Class
# =============================================================================

class HackAsmError(Exception):
    """
    Base exception for all Hack assembler errors.

        try:
            assembler.assemble_file("Max.asm")
        except HackAsmError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"

    @property
    def offset(self) -> int:
        """Zero-based offset of the column within its line."""
        return self.column - 1


# =============================================================================
# Located Diagnostics
# =============================================================================

class AssemblerError(HackAsmError):
    """
    Base exception for all diagnostics located in the assembly source.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        length: Number of characters to underline at the location
        source_line: The full text of the offending line (optional)
        hint: A suggestion for fixing the error (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        length: int = 1,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.source_line = source_line
        self.length = length
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source excerpt, and hint.

        Example output:
            Max.asm:7:3: error: expected jump keyword after ';'
            7 | 0;JPM
                  ^^^--here
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(format_excerpt(
                self.source_line,
                self.location.offset,
                self.length,
                self.location.line,
            ))

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class LexicalError(AssemblerError):
    """
    Error found while scanning characters into tokens.

    Examples:
        - Invalid character in source ('#', '%', a lone '/')
        - Decimal literal larger than 32767
    """
    pass


class AssemblySyntaxError(AssemblerError):
    """
    Syntax error in assembly source code.

    Raised when a line cannot be parsed as a label declaration,
    an A-instruction or a C-instruction.

    Examples:
        - Missing ')' after a label name
        - Unknown computation such as 'D*A'
        - ';' not followed by a jump keyword
    """
    pass


class SemanticError(AssemblerError):
    """Well-formed source that cannot be given a meaning."""
    pass


class DuplicateSymbolError(SemanticError):
    """
    Symbol bound more than once.

    Raised when a label is declared twice, or when a label reuses one of
    the predefined names (SP, R0, SCREEN, ...). The first binding wins.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        length: int = 1,
        original_address: Optional[int] = None,
        predefined: bool = False,
    ):
        self.symbol = symbol
        self.original_address = original_address
        self.predefined = predefined

        if predefined:
            hint = f"'{symbol}' is a predefined symbol and cannot be redeclared"
        elif original_address is not None:
            hint = f"'{symbol}' is already bound to address {original_address}"
        else:
            hint = None

        super().__init__(
            f"duplicate symbol '{symbol}'",
            location=location,
            source_line=source_line,
            length=length,
            hint=hint,
        )


class AddressRangeError(SemanticError):
    """
    Address literal does not fit in 15 bits.

    The instruction is still built so parsing can carry on, but the
    compilation is rejected; a truncated address is never emitted.
    """

    def __init__(
        self,
        value: int,
        maximum: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        length: int = 1,
    ):
        self.value = value
        self.maximum = maximum
        super().__init__(
            f"address out of range, max allowed value is {maximum}",
            location=location,
            source_line=source_line,
            length=length,
        )


# =============================================================================
# Pipeline Failures
# =============================================================================

class CompilationFailed(HackAsmError):
    """
    A compilation phase finished with one or more diagnostics.

    Attributes:
        phase: Name of the failing phase ("lexing" or "parsing")
        errors: The ErrorCollector holding every diagnostic
    """

    def __init__(self, phase: str, errors: "ErrorCollector"):
        self.phase = phase
        self.errors = errors
        super().__init__(errors.report())

    def error_count(self) -> int:
        return self.errors.error_count()


class InternalAssemblerError(HackAsmError):
    """
    An internal invariant of the assembler was violated.

    This never describes a problem in the user's program: the resolver
    guarantees it cannot happen. Seeing one means a bug in the assembler.
    """
    pass


# =============================================================================
# Error Collection for Multiple Error Reporting
# =============================================================================

class ErrorCollector:
    """
    Collects multiple errors for batch reporting.

    The lexer and parser use this to continue processing after encountering
    an error, collecting all errors before reporting them together.

    Example:
        collector = ErrorCollector(max_errors=100)

        try:
            # ... scan or parse ...
            if error_found:
                collector.add(AssemblySyntaxError(...))
        except TooManyErrors:
            pass  # stop the phase, report what we have

        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: int = 100):
        """
        Initialize the error collector.

        Args:
            max_errors: Maximum errors to collect before raising TooManyErrors
        """
        self.errors: list[AssemblerError] = []
        self.max_errors = max_errors

    def add(self, error: AssemblerError) -> None:
        """
        Add an error to the collection.

        Raises:
            TooManyErrors: If max_errors has been reached
        """
        self.errors.append(error)
        if len(self.errors) >= self.max_errors:
            raise TooManyErrors(f"too many errors ({self.max_errors}), stopping")

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def report(self) -> str:
        """
        Format all errors for display, blank line between each, followed
        by a summary line.
        """
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        error_word = "error" if len(self.errors) == 1 else "errors"
        lines.append(
            f"Encountered {len(self.errors)} {error_word}, aborting compilation"
        )

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors."""
        self.errors.clear()


class TooManyErrors(AssemblerError):
    """
    Raised when too many errors have been encountered.

    This stops a phase early when the input is clearly not assembly
    (a binary file, the wrong language) instead of reporting every line.
    """

    def __init__(self, message: str = "too many errors"):
        super().__init__(message)
