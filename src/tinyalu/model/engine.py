"""
Reference arithmetic for the execution engine.

Pure functions mirroring the RTL engine: given an opcode and two 32-bit
operands, produce the result and the flags nibble. Timing lives in
op_latency() so the cycle model and the RTL agree on when DONE is reached.
"""

from dataclasses import dataclass

from ..config import OPERAND_BITS, OPERAND_MASK, AluConfig, AluFlags, Opcode

SIGN_BIT = 1 << (OPERAND_BITS - 1)
HALF_MASK = 0xFFFF


@dataclass(frozen=True)
class AluResult:
    """Result and flags of one completed operation."""

    value: int
    flags: AluFlags

    def __repr__(self) -> str:
        return f"AluResult(0x{self.value:08x}, {self.flags!r})"


def _add_flags(a: int, b: int, total: int) -> AluFlags:
    flags = AluFlags.NONE
    if total > OPERAND_MASK:
        flags |= AluFlags.CARRY
    result = total & OPERAND_MASK
    # Same-sign operands, differing-sign result
    if ~(a ^ b) & (a ^ result) & SIGN_BIT:
        flags |= AluFlags.OVERFLOW
    return flags


def _sub_flags(a: int, b: int) -> AluFlags:
    flags = AluFlags.NONE
    if b > a:
        flags |= AluFlags.CARRY
    result = (a - b) & OPERAND_MASK
    # Differing-sign operands, result sign differs from the minuend
    if (a ^ b) & (a ^ result) & SIGN_BIT:
        flags |= AluFlags.OVERFLOW
    return flags


def execute(opcode: Opcode, a: int, b: int) -> AluResult:
    """
    Compute one operation.

    Args:
        opcode: Operation to perform
        a: Operand A (32-bit unsigned)
        b: Operand B (32-bit unsigned)

    Returns:
        AluResult with the wrapped 32-bit value and derived flags.
    """
    a &= OPERAND_MASK
    b &= OPERAND_MASK
    flags = AluFlags.NONE
    shift = b % OPERAND_BITS

    opcode = Opcode(opcode)
    if opcode == Opcode.ADD:
        total = a + b
        value = total & OPERAND_MASK
        flags |= _add_flags(a, b, total)
    elif opcode == Opcode.SUB:
        value = (a - b) & OPERAND_MASK
        flags |= _sub_flags(a, b)
    elif opcode == Opcode.MUL:
        value = ((a & HALF_MASK) * (b & HALF_MASK)) & OPERAND_MASK
    elif opcode == Opcode.DIV:
        value = a // b if b else 0
    elif opcode == Opcode.SHL:
        value = (a << shift) & OPERAND_MASK
        if shift and (a >> (OPERAND_BITS - shift)) & 1:
            flags |= AluFlags.CARRY
    elif opcode == Opcode.SHR:
        value = a >> shift
        if shift and (a >> (shift - 1)) & 1:
            flags |= AluFlags.CARRY
    elif opcode == Opcode.AND:
        value = a & b
    else:
        value = a | b

    if value == 0:
        flags |= AluFlags.ZERO
    if value & SIGN_BIT:
        flags |= AluFlags.NEGATIVE

    return AluResult(value, flags)


def op_latency(opcode: Opcode, b: int, config: AluConfig) -> int:
    """Number of clock cycles the device spends in RUNNING for an operation."""
    if opcode == Opcode.MUL:
        return config.mul_latency
    if opcode == Opcode.DIV and b & OPERAND_MASK:
        return config.div_latency
    return 1
