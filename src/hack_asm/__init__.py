"""
hack-asm - Assembler for the Hack Computer
==========================================

This package assembles programs for the Hack computer, the 16-bit machine
built in the Nand2Tetris course. Source files (``.asm``) are translated to
``.hack`` files holding one 16-character binary word per instruction.

Main Components
---------------
- **assembler**: Lexer, parser/symbol resolver and code generator
- **diagnostics**: Caret-annotated source excerpts for error messages
- **errors**: Exception hierarchy and error collection
- **cli**: The ``hackasm`` command

Quick Start
-----------
    >>> from hack_asm import Assembler
    >>> asm = Assembler()
    >>> code = asm.assemble_file("Max.asm")
    >>> asm.write_hack("Max.hack")

Or from the command line:
    $ hackasm Max.asm
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from hack_asm.assembler import (
    Assembler,
    AssemblerOptions,
    assemble,
    assemble_file,
)
from hack_asm.errors import (
    HackAsmError,
    AssemblerError,
    LexicalError,
    AssemblySyntaxError,
    SemanticError,
    DuplicateSymbolError,
    AddressRangeError,
    CompilationFailed,
    InternalAssemblerError,
)

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "AssemblerOptions",
    "assemble",
    "assemble_file",
    # Exception hierarchy
    "HackAsmError",
    "AssemblerError",
    "LexicalError",
    "AssemblySyntaxError",
    "SemanticError",
    "DuplicateSymbolError",
    "AddressRangeError",
    "CompilationFailed",
    "InternalAssemblerError",
]
