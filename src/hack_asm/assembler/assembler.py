"""
Hack Assembler - Main Interface
===============================

This module provides the Assembler class, which is the primary interface for
assembling Hack source code. It coordinates the lexer, parser/resolver and
code generator, and owns all file I/O so the pipeline itself never touches
the filesystem.

Example Usage
-------------
>>> from hack_asm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> asm.assemble_string('''
... @2
... D=A
... @3
... D=D+A
... @0
... M=D
... ''')
>>> print(asm.get_code(), end="")
0000000000000010
1110110000010000
0000000000000011
1110000010010000
0000000000000000
1110001100001000

Command-Line Usage
------------------
    $ hackasm Max.asm               # writes Max.hack
    $ hackasm Max.asm -o out.hack -s Max.sym -l Max.lst

Failure
-------
If lexing or parsing records any diagnostic, the phase raises
CompilationFailed carrying all of them. Nothing is encoded and no output
file is written, so a failed run never leaves a partial ``.hack`` behind.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from hack_asm.errors import CompilationFailed, ErrorCollector
from hack_asm.assembler.codegen import CodeGenerator
from hack_asm.assembler.lexer import Lexer
from hack_asm.assembler.parser import Parser, Program


logger = logging.getLogger(__name__)


@dataclass
class AssemblerOptions:
    """
    Assembler configuration options.

    Attributes:
        output_suffix: Extension of the default output file
        max_errors: Stop a phase after this many diagnostics
    """
    output_suffix: str = ".hack"
    max_errors: int = 100

    def __post_init__(self):
        if not self.output_suffix.startswith("."):
            self.output_suffix = "." + self.output_suffix
        if self.max_errors < 1:
            raise ValueError("max_errors must be at least 1")


class Assembler:
    """
    Main Hack assembler class.

    One instance can assemble several sources in turn; each call builds a
    fresh symbol table and error list, and the getters report on the most
    recent successful assembly.
    """

    def __init__(self, options: Optional[AssemblerOptions] = None):
        self.options = options or AssemblerOptions()
        self._codegen = CodeGenerator()
        self._program: Optional[Program] = None
        self._lines: list[str] = []
        self._errors = ErrorCollector(max_errors=self.options.max_errors)
        self._source_file: Optional[Path] = None

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> str:
        """
        Assemble source code from a string.

        The pipeline is strictly sequential:
        1. Lex the whole source
        2. Parse, bind labels, allocate variables
        3. Encode

        Args:
            source: Hack assembly source code
            filename: Virtual filename for error messages

        Returns:
            The ``.hack`` text

        Raises:
            CompilationFailed: If lexing or parsing produced diagnostics
        """
        self._program = None
        self._errors = ErrorCollector(max_errors=self.options.max_errors)

        lexer = Lexer(source, filename, max_errors=self.options.max_errors)
        tokens = lexer.tokenize()
        self._lines = lexer.lines
        if lexer.has_errors():
            self._errors = lexer.errors
            raise CompilationFailed("lexing", lexer.errors)

        parser = Parser(tokens, lexer.lines, filename, max_errors=self.options.max_errors)
        program = parser.parse()
        if parser.has_errors():
            self._errors = parser.errors
            raise CompilationFailed("parsing", parser.errors)

        code = self._codegen.generate(program)
        self._program = program

        logger.debug(f"Assembled {filename}: {len(program)} instructions")
        return code

    def assemble_file(self, filepath: str | Path) -> str:
        """
        Assemble source code from a file.

        Raises:
            CompilationFailed: If assembly fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        self._source_file = filepath
        source = filepath.read_text()
        return self.assemble_string(source, str(filepath))

    def output_path_for(self, filepath: str | Path) -> Path:
        """Default output path: the input path with the output suffix."""
        return Path(filepath).with_suffix(self.options.output_suffix)

    # =========================================================================
    # Results
    # =========================================================================

    def _require_program(self) -> Program:
        if self._program is None:
            raise RuntimeError("no successful assembly to report on")
        return self._program

    def get_program(self) -> Program:
        return self._require_program()

    def get_code(self) -> str:
        """Return the ``.hack`` text of the last assembly."""
        self._require_program()
        return self._codegen.get_code()

    def get_symbols(self) -> dict[str, int]:
        """
        Return the labels and variables of the last assembly.

        Predefined symbols are left out; see PREDEFINED_SYMBOLS for those.
        """
        return self._require_program().symbols.user_symbols()

    def get_listing(self) -> str:
        """
        Return a listing of address, encoded word and source line.

        Example:
                0  0000000000000010  @2
                1  1110110000010000  D=A
        """
        program = self._require_program()
        rows = []
        for address, (instruction, word) in enumerate(
            zip(program.instructions, self._codegen.get_words())
        ):
            line = instruction.location.line
            text = self._lines[line - 1].strip() if line <= len(self._lines) else ""
            rows.append(f"{address:5d}  {word}  {text}")
        return "".join(row + "\n" for row in rows)

    def format_symbols(self) -> str:
        """Return the user symbol table as ``NAME ADDRESS`` lines, by address."""
        symbols = sorted(self.get_symbols().items(), key=lambda item: (item[1], item[0]))
        return "".join(f"{name} {address}\n" for name, address in symbols)

    # =========================================================================
    # Output Methods
    # =========================================================================

    def write_hack(self, filepath: str | Path) -> None:
        """Write the encoded program."""
        Path(filepath).write_text(self.get_code())
        logger.info(f"Wrote {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        Path(filepath).write_text(self.format_symbols())
        logger.info(f"Wrote symbols to {filepath}")

    def write_listing(self, filepath: str | Path) -> None:
        Path(filepath).write_text(self.get_listing())
        logger.info(f"Wrote listing to {filepath}")

    # =========================================================================
    # Error Handling
    # =========================================================================

    def has_errors(self) -> bool:
        return self._errors.has_errors()

    def get_error_report(self) -> str:
        return self._errors.report()


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> str:
    """
    Convenience function to assemble source code.

    Raises:
        CompilationFailed: If assembly fails
    """
    return Assembler().assemble_string(source, filename)


def assemble_file(filepath: str | Path) -> str:
    """
    Convenience function to assemble a file, returning the ``.hack`` text.

    Raises:
        CompilationFailed: If assembly fails
    """
    return Assembler().assemble_file(filepath)
