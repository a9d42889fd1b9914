"""
Hack Instruction Set Definition
===============================

This module defines the binary fragments of the Hack C-instruction and the
greedy matcher that recognises computation mnemonics in a token stream.

C-Instruction Layout
--------------------
::

    1 1 1 a c1 c2 c3 c4 c5 c6 d1 d2 d3 j1 j2 j3
    |---| |---- comp -----| |-dest-| |-jump-|

- **comp** (7 bits): ALU operation, ``a`` selects A (0) or M (1) as operand
- **dest** (3 bits): A, D, M store enables; ``000`` when absent
- **jump** (3 bits): LT, EQ, GT conditions; ``000`` when absent

Computation Matching
--------------------
At the token level computation mnemonics share prefixes: after ``D -`` the
mnemonic may be ``D-1``, ``D-A`` or ``D-M``. COMPUTATION_TABLE lists every
(pattern, computation) pair ordered longest pattern first, and
match_computation() returns the first pattern that is a prefix of the
upcoming tokens. A shorter pattern is therefore used only when no longer
pattern fits.

Reference
---------
Nisan & Schocken, The Elements of Computing Systems, chapter 6.
"""

from enum import Enum
from typing import Optional, Sequence

from hack_asm.assembler.tokens import Token


# =============================================================================
# Instruction Fields
# =============================================================================

class Computation(Enum):
    """ALU operations, valued by their 7-bit ``a c1..c6`` code."""

    ZERO = "0101010"
    ONE = "0111111"
    MINUS_ONE = "0111010"
    D = "0001100"
    A = "0110000"
    M = "1110000"
    NOT_D = "0001101"
    NOT_A = "0110001"
    NOT_M = "1110001"
    MINUS_D = "0001111"
    MINUS_A = "0110011"
    MINUS_M = "1110011"
    D_PLUS_ONE = "0011111"
    A_PLUS_ONE = "0110111"
    M_PLUS_ONE = "1110111"
    D_MINUS_ONE = "0001110"
    A_MINUS_ONE = "0110010"
    M_MINUS_ONE = "1110010"
    D_PLUS_A = "0000010"
    D_PLUS_M = "1000010"
    D_MINUS_A = "0010011"
    D_MINUS_M = "1010011"
    A_MINUS_D = "0000111"
    M_MINUS_D = "1000111"
    D_AND_A = "0000000"
    D_AND_M = "1000000"
    D_OR_A = "0010101"
    D_OR_M = "1010101"

    @property
    def code(self) -> str:
        return self.value

    @property
    def mnemonic(self) -> str:
        return MNEMONICS[self]


class Dest(Enum):
    """Destination register sets, valued by their 3-bit ``d1 d2 d3`` code."""

    M = "001"
    D = "010"
    MD = "011"
    A = "100"
    AM = "101"
    AD = "110"
    AMD = "111"

    @property
    def code(self) -> str:
        return self.value


class Jump(Enum):
    """Jump conditions, valued by their 3-bit ``j1 j2 j3`` code."""

    JGT = "001"
    JEQ = "010"
    JGE = "011"
    JLT = "100"
    JNE = "101"
    JLE = "110"
    JMP = "111"

    @property
    def code(self) -> str:
        return self.value


NO_DEST = "000"
NO_JUMP = "000"

C_INSTRUCTION_PREFIX = "111"
A_INSTRUCTION_PREFIX = "0"

# Largest address an A-instruction can load (15 bits)
MAX_ADDRESS = 0x7FFF

# Longest computation pattern, in tokens
MAX_PATTERN_LENGTH = 3


# =============================================================================
# Computation Pattern Table
# =============================================================================
# Each pattern is the sequence of token shapes (see Token.shape) that spells
# the mnemonic. Order matters: all three-token patterns come first, then
# two-token, then one-token, so the first hit is the longest match.
# =============================================================================

COMPUTATION_TABLE: tuple[tuple[tuple[str, ...], Computation], ...] = (
    # Binary operations of D with A
    (("D", "+", "A"), Computation.D_PLUS_A),
    (("D", "-", "A"), Computation.D_MINUS_A),
    (("A", "-", "D"), Computation.A_MINUS_D),
    (("D", "&", "A"), Computation.D_AND_A),
    (("D", "|", "A"), Computation.D_OR_A),
    # Binary operations of D with M
    (("D", "+", "M"), Computation.D_PLUS_M),
    (("D", "-", "M"), Computation.D_MINUS_M),
    (("M", "-", "D"), Computation.M_MINUS_D),
    (("D", "&", "M"), Computation.D_AND_M),
    (("D", "|", "M"), Computation.D_OR_M),
    # Increment / decrement
    (("D", "+", "1"), Computation.D_PLUS_ONE),
    (("A", "+", "1"), Computation.A_PLUS_ONE),
    (("M", "+", "1"), Computation.M_PLUS_ONE),
    (("D", "-", "1"), Computation.D_MINUS_ONE),
    (("A", "-", "1"), Computation.A_MINUS_ONE),
    (("M", "-", "1"), Computation.M_MINUS_ONE),
    # Unary negation and complement
    (("-", "1"), Computation.MINUS_ONE),
    (("-", "D"), Computation.MINUS_D),
    (("-", "A"), Computation.MINUS_A),
    (("-", "M"), Computation.MINUS_M),
    (("!", "D"), Computation.NOT_D),
    (("!", "A"), Computation.NOT_A),
    (("!", "M"), Computation.NOT_M),
    # Constants and plain reads
    (("0",), Computation.ZERO),
    (("1",), Computation.ONE),
    (("D",), Computation.D),
    (("A",), Computation.A),
    (("M",), Computation.M),
)

MNEMONICS = {computation: "".join(pattern) for pattern, computation in COMPUTATION_TABLE}


def match_computation(
    tokens: Sequence[Token],
) -> Optional[tuple[Computation, int]]:
    """
    Greedily match a computation at the start of a token window.

    Args:
        tokens: Upcoming tokens; only the first MAX_PATTERN_LENGTH are
                inspected, and fewer is fine near the end of input

    Returns:
        (computation, number of tokens it spans), or None if no pattern
        is a prefix of the window
    """
    shapes = tuple(token.shape for token in tokens[:MAX_PATTERN_LENGTH])
    for pattern, computation in COMPUTATION_TABLE:
        if shapes[:len(pattern)] == pattern:
            return computation, len(pattern)
    return None
