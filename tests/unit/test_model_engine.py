"""
Unit tests for the reference arithmetic of the execution engine.

These tests verify:
1. Wrapping add/subtract with carry and signed overflow
2. 16x16 multiply truncation
3. Unsigned divide and divide-by-zero policy
4. Shifts and the last-bit-out carry
5. Zero/Negative derivation
6. Per-opcode latency
"""

import pytest

from tinyalu.config import AluConfig, AluFlags, Opcode
from tinyalu.model.engine import execute, op_latency


class TestAddSub:
    """Test suite for ADD and SUB."""

    def test_simple_add(self):
        result = execute(Opcode.ADD, 20, 30)
        assert result.value == 50
        assert result.flags == AluFlags.NONE

    def test_add_wraparound(self):
        """Test that 0xFFFFFFFF + 1 wraps to 0 with Carry and Zero."""
        result = execute(Opcode.ADD, 0xFFFFFFFF, 0x00000001)
        assert result.value == 0
        assert result.flags & AluFlags.CARRY
        assert result.flags & AluFlags.ZERO
        assert not result.flags & AluFlags.OVERFLOW

    def test_add_signed_overflow(self):
        """Test that two positive operands producing a negative result overflow."""
        result = execute(Opcode.ADD, 0x7FFFFFFF, 1)
        assert result.value == 0x80000000
        assert result.flags == AluFlags.OVERFLOW | AluFlags.NEGATIVE

    def test_add_negative_overflow(self):
        """Test that two negative operands producing a positive result overflow."""
        result = execute(Opcode.ADD, 0x80000000, 0x80000000)
        assert result.value == 0
        assert result.flags == AluFlags.OVERFLOW | AluFlags.CARRY | AluFlags.ZERO

    def test_sub_equal_operands(self):
        """Test that A - A is zero with no borrow."""
        result = execute(Opcode.SUB, 0x12345678, 0x12345678)
        assert result.value == 0
        assert result.flags == AluFlags.ZERO

    def test_sub_borrow(self):
        """Test that B > A sets Carry and wraps."""
        result = execute(Opcode.SUB, 10, 30)
        assert result.value == 0xFFFFFFEC
        assert result.flags == AluFlags.CARRY | AluFlags.NEGATIVE

    def test_sub_signed_overflow(self):
        """Test that INT_MIN - 1 overflows."""
        result = execute(Opcode.SUB, 0x80000000, 1)
        assert result.value == 0x7FFFFFFF
        assert result.flags == AluFlags.OVERFLOW


class TestMulDiv:
    """Test suite for MUL and DIV."""

    def test_simple_mul(self):
        assert execute(Opcode.MUL, 6, 7).value == 42

    def test_mul_uses_low_halves_only(self):
        """Test that only bits 15:0 of each operand are multiplied."""
        assert execute(Opcode.MUL, 0x0000FFFF, 0x00000101).value == 0x0100FEFF
        assert execute(Opcode.MUL, 0xABCD0003, 0x12340005).value == 15

    def test_mul_max_halves(self):
        """Test the largest 16x16 product and its Negative flag."""
        result = execute(Opcode.MUL, 0xFFFF, 0xFFFF)
        assert result.value == 0xFFFE0001
        assert result.flags == AluFlags.NEGATIVE

    def test_div(self):
        assert execute(Opcode.DIV, 100, 7).value == 14
        assert execute(Opcode.DIV, 0xFFFFFFFF, 1).value == 0xFFFFFFFF
        assert execute(Opcode.DIV, 3, 4).value == 0

    @pytest.mark.parametrize("a", [0, 1, 0x7FFFFFFF, 0xFFFFFFFF])
    def test_div_by_zero(self, a):
        """Test that x / 0 is 0 with only the Zero flag."""
        result = execute(Opcode.DIV, a, 0)
        assert result.value == 0
        assert result.flags == AluFlags.ZERO


class TestShiftLogic:
    """Test suite for SHL, SHR, AND and OR."""

    def test_shl(self):
        result = execute(Opcode.SHL, 0x80000001, 1)
        assert result.value == 0x00000002
        assert result.flags & AluFlags.CARRY

    def test_shl_uses_b_mod_32(self):
        """Test that only B mod 32 is used as the shift amount."""
        assert execute(Opcode.SHL, 1, 33).value == 2
        assert execute(Opcode.SHL, 1, 32).value == 1

    def test_shift_by_zero_has_no_carry(self):
        assert execute(Opcode.SHL, 0xFFFFFFFF, 0).flags & AluFlags.CARRY == 0
        assert execute(Opcode.SHR, 0xFFFFFFFF, 0).flags & AluFlags.CARRY == 0

    def test_shr(self):
        result = execute(Opcode.SHR, 0x00000003, 1)
        assert result.value == 1
        assert result.flags & AluFlags.CARRY

    def test_shr_zero_fill(self):
        """Test that SHR is logical, not arithmetic."""
        result = execute(Opcode.SHR, 0x80000000, 31)
        assert result.value == 1
        assert not result.flags & AluFlags.NEGATIVE

    def test_and_complementary_patterns(self):
        result = execute(Opcode.AND, 0xF0F0F0F0, 0x0F0F0F0F)
        assert result.value == 0
        assert result.flags == AluFlags.ZERO

    def test_or_complementary_patterns(self):
        result = execute(Opcode.OR, 0xF0F0F0F0, 0x0F0F0F0F)
        assert result.value == 0xFFFFFFFF
        assert result.flags == AluFlags.NEGATIVE


class TestLatency:
    """Test suite for op_latency."""

    @pytest.fixture
    def config(self):
        return AluConfig(div_bits_per_cycle=2)

    @pytest.mark.parametrize(
        "opcode",
        [Opcode.ADD, Opcode.SUB, Opcode.SHL, Opcode.SHR, Opcode.AND, Opcode.OR],
    )
    def test_single_cycle_ops(self, config, opcode):
        assert op_latency(opcode, 5, config) == 1

    def test_mul_latency(self, config):
        assert op_latency(Opcode.MUL, 5, config) == 2

    def test_div_latency(self, config):
        """Test that DIV takes 16 iterations plus write-back within the poll budget."""
        assert op_latency(Opcode.DIV, 5, config) == 17
        assert op_latency(Opcode.DIV, 5, config) <= config.poll_budget

    def test_div_by_zero_is_single_cycle(self, config):
        assert op_latency(Opcode.DIV, 0, config) == 1
