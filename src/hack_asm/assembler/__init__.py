"""
Hack Assembler
==============

This package translates Hack assembly (``.asm``) into Hack machine code in
the ``.hack`` text format: one line of sixteen ``0``/``1`` characters per
instruction.

Main Components
---------------
- **Assembler**: Orchestrates the pipeline and owns file I/O
- **Lexer**: Tokenizes source lines, collecting lexical errors
- **Parser**: Parses tokens, binds labels and allocates variables
- **CodeGenerator**: Encodes the resolved program
- **SymbolTable**: Predefined symbols plus this program's labels/variables

Assembly Process
----------------
1. **Lexing**: characters -> tokens; any error fails the compilation
2. **Parsing**: tokens -> statements; labels bound inline, then a second
   pass rewrites symbolic A-instructions to numeric addresses
3. **Encoding**: instructions -> 16-bit words

Example Usage
-------------
>>> from hack_asm.assembler import assemble
>>> print(assemble("(LOOP)\\n@LOOP\\n0;JMP"), end="")
0000000000000000
1110101010000111
"""

from hack_asm.assembler.assembler import (
    Assembler,
    AssemblerOptions,
    assemble,
    assemble_file,
)
from hack_asm.assembler.lexer import Lexer
from hack_asm.assembler.tokens import Token, TokenType
from hack_asm.assembler.parser import (
    Parser,
    Program,
    Statement,
    LabelDecl,
    Instruction,
    AInstruction,
    CInstruction,
    parse_source,
)
from hack_asm.assembler.codegen import CodeGenerator, encode_instruction
from hack_asm.assembler.opcodes import (
    Computation,
    Dest,
    Jump,
    COMPUTATION_TABLE,
    MAX_ADDRESS,
    match_computation,
)
from hack_asm.assembler.symbols import (
    PREDEFINED_SYMBOLS,
    VARIABLE_BASE_ADDRESS,
    SymbolKind,
    SymbolTable,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "AssemblerOptions",
    "assemble",
    "assemble_file",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    # Parser
    "Parser",
    "Program",
    "Statement",
    "LabelDecl",
    "Instruction",
    "AInstruction",
    "CInstruction",
    "parse_source",
    # Code generator
    "CodeGenerator",
    "encode_instruction",
    # Opcodes
    "Computation",
    "Dest",
    "Jump",
    "COMPUTATION_TABLE",
    "MAX_ADDRESS",
    "match_computation",
    # Symbols
    "PREDEFINED_SYMBOLS",
    "VARIABLE_BASE_ADDRESS",
    "SymbolKind",
    "SymbolTable",
]
