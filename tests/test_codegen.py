# =============================================================================
# test_codegen.py - Code Generator Tests
# =============================================================================
# Tests for the binary encoding of A- and C-instructions and the output
# text layout.
# =============================================================================

import pytest

from hack_asm.assembler.codegen import (
    CodeGenerator,
    encode_instruction,
)
from hack_asm.assembler.opcodes import Computation, Dest, Jump
from hack_asm.assembler.parser import AInstruction, CInstruction, Program
from hack_asm.errors import InternalAssemblerError, SourceLocation


LOC = SourceLocation("<test>", 1, 1)


class TestAInstructions:

    @pytest.mark.parametrize("address,expected", [
        (0, "0000000000000000"),
        (21, "0000000000010101"),
        (16384, "0100000000000000"),
        (32767, "0111111111111111"),
    ])
    def test_addresses(self, address, expected):
        assert encode_instruction(AInstruction(LOC, address)) == expected

    def test_unresolved_symbol_is_internal_error(self):
        with pytest.raises(InternalAssemblerError, match="unresolved symbol 'foo'"):
            encode_instruction(AInstruction(LOC, "foo"))

    @pytest.mark.parametrize("address", [32768, -1])
    def test_out_of_range_is_internal_error(self, address):
        with pytest.raises(InternalAssemblerError):
            encode_instruction(AInstruction(LOC, address))


class TestCInstructions:

    @pytest.mark.parametrize("dest,comp,jump,expected", [
        (Dest.D, Computation.A, None, "1110110000010000"),
        (Dest.D, Computation.D_PLUS_A, None, "1110000010010000"),
        (Dest.M, Computation.D, None, "1110001100001000"),
        (None, Computation.ZERO, Jump.JMP, "1110101010000111"),
        (None, Computation.D, Jump.JGT, "1110001100000001"),
        (Dest.D, Computation.D_MINUS_M, None, "1111010011010000"),
        (Dest.AMD, Computation.M_PLUS_ONE, Jump.JNE, "1111110111111101"),
    ])
    def test_encodings(self, dest, comp, jump, expected):
        assert encode_instruction(CInstruction(LOC, comp, dest, jump)) == expected

    @pytest.mark.parametrize("comp", list(Computation))
    def test_every_computation_is_sixteen_bits(self, comp):
        word = encode_instruction(CInstruction(LOC, comp))
        assert len(word) == 16
        assert word.startswith("111")
        assert word.endswith("000000")

    @pytest.mark.parametrize("dest", list(Dest))
    def test_dest_bits(self, dest):
        word = encode_instruction(CInstruction(LOC, Computation.ZERO, dest))
        assert word[10:13] == dest.code

    @pytest.mark.parametrize("jump", list(Jump))
    def test_jump_bits(self, jump):
        word = encode_instruction(CInstruction(LOC, Computation.ZERO, None, jump))
        assert word[13:] == jump.code

    def test_greedy_distinctions_encode_differently(self):
        words = {
            encode_instruction(CInstruction(LOC, comp, Dest.D))
            for comp in (Computation.D_MINUS_A, Computation.D_MINUS_ONE, Computation.D_MINUS_M)
        }
        assert words == {"1110010011010000", "1110001110010000", "1111010011010000"}


class TestCodeGenerator:

    def test_generate_layout(self):
        program = Program([
            AInstruction(LOC, 2),
            CInstruction(LOC, Computation.A, Dest.D),
        ])
        codegen = CodeGenerator()
        code = codegen.generate(program)
        assert code == "0000000000000010\n1110110000010000\n"
        assert codegen.get_words() == ["0000000000000010", "1110110000010000"]

    def test_empty_program(self):
        assert CodeGenerator().generate(Program()) == ""

    def test_generate_refuses_unresolved_program(self):
        program = Program([AInstruction(LOC, 1), AInstruction(LOC, "LOOP")])
        with pytest.raises(InternalAssemblerError):
            CodeGenerator().generate(program)
