"""
Hack Code Generator
===================

This module encodes a resolved Program into the ``.hack`` text format.

Output Format
-------------
One line per instruction, in program order, each exactly sixteen ``0``/``1``
characters and terminated by ``\\n``:

```
0000000000000010    @2
1110110000010000    D=A
```

- A-instruction: ``0`` followed by the 15-bit unsigned address
- C-instruction: ``111`` + comp (7) + dest (3) + jump (3)

The code generator trusts the resolver. An A-instruction that still names a
symbol, or holds an address that does not fit in 15 bits, means the
pipeline let a broken program through; that raises InternalAssemblerError
instead of producing wrong bits.
"""

import logging

from hack_asm.errors import InternalAssemblerError
from hack_asm.assembler.opcodes import (
    A_INSTRUCTION_PREFIX,
    C_INSTRUCTION_PREFIX,
    MAX_ADDRESS,
    NO_DEST,
    NO_JUMP,
)
from hack_asm.assembler.parser import AInstruction, CInstruction, Instruction, Program


logger = logging.getLogger(__name__)

WORD_BITS = 16

LINE_ENDING = "\n"


def encode_a_instruction(instruction: AInstruction) -> str:
    if instruction.is_symbolic:
        raise InternalAssemblerError(
            f"cannot encode unresolved symbol '{instruction.target}' "
            f"at {instruction.location}"
        )
    address = instruction.target
    if not 0 <= address <= MAX_ADDRESS:
        raise InternalAssemblerError(
            f"address {address} at {instruction.location} does not fit in 15 bits"
        )
    return f"{A_INSTRUCTION_PREFIX}{address:015b}"


def encode_c_instruction(instruction: CInstruction) -> str:
    dest = instruction.dest.code if instruction.dest else NO_DEST
    jump = instruction.jump.code if instruction.jump else NO_JUMP
    return f"{C_INSTRUCTION_PREFIX}{instruction.comp.code}{dest}{jump}"


def encode_instruction(instruction: Instruction) -> str:
    """
    Encode one instruction as a 16-character binary string.

    Raises:
        InternalAssemblerError: For unresolved or out-of-range A-instructions
    """
    if isinstance(instruction, AInstruction):
        word = encode_a_instruction(instruction)
    elif isinstance(instruction, CInstruction):
        word = encode_c_instruction(instruction)
    else:
        raise InternalAssemblerError(
            f"cannot encode {type(instruction).__name__} at {instruction.location}"
        )

    if len(word) != WORD_BITS:
        raise InternalAssemblerError(f"encoded word '{word}' is not {WORD_BITS} bits")
    return word


class CodeGenerator:
    """
    Encodes a resolved Program.

    Usage:
        codegen = CodeGenerator()
        text = codegen.generate(program)
        words = codegen.get_words()
    """

    def __init__(self):
        self._words: list[str] = []

    def generate(self, program: Program) -> str:
        """
        Encode every instruction of program.

        Returns:
            The ``.hack`` text, one terminated line per instruction
        """
        self._words = [encode_instruction(instr) for instr in program.instructions]
        logger.debug(f"Encoded {len(self._words)} instructions")
        return self.get_code()

    def get_words(self) -> list[str]:
        """Return the encoded instructions from the last generate() call."""
        return list(self._words)

    def get_code(self) -> str:
        return "".join(word + LINE_ENDING for word in self._words)
