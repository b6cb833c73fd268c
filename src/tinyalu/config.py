"""
Tinyalu Configuration Module

This module defines the configuration dataclass and the shared enumerations
for the byte-serial ALU. The operand width is fixed at 32 bits; the knobs here
only trade latency against area inside the execution engine.

Pin budget (Tiny Tapeout style tile):
    ui_in[7:0]   - command word (load slot or start + opcode)
    uio_in[7:0]  - load data byte, or readout selector
    uo_out[7:0]  - selected result byte or status byte
"""

from dataclasses import dataclass
from enum import IntEnum, IntFlag

OPERAND_BITS = 32
"""Native operand and result width."""

OPERAND_BYTES = OPERAND_BITS // 8
"""Bytes per operand."""

OPERAND_MASK = (1 << OPERAND_BITS) - 1


class Opcode(IntEnum):
    """3-bit operation codes carried in ui_in[3:1] of a start command."""

    ADD = 0
    SUB = 1
    MUL = 2  # 16x16 -> 32, low halves only
    DIV = 3  # Unsigned, x / 0 = 0
    SHL = 4
    SHR = 5
    AND = 6
    OR = 7


class OpState(IntEnum):
    """Operation state of the device."""

    IDLE = 0
    RUNNING = 1
    DONE = 2


class AluFlags(IntFlag):
    """
    Flags nibble as presented on the status byte.

    Bit layout: [3] Zero, [2] Negative, [1] Carry, [0] Overflow
    """

    NONE = 0
    OVERFLOW = 0x1
    CARRY = 0x2
    NEGATIVE = 0x4
    ZERO = 0x8


class Register(IntEnum):
    """Operand registers; the value is the first slot of the register."""

    A = 0
    B = 4


class Selector(IntEnum):
    """Readout selector values driven on uio_in[2:0]."""

    BYTE0 = 0  # Result LSB
    BYTE1 = 1
    BYTE2 = 2
    BYTE3 = 3  # Result MSB
    STATUS = 4  # Flags nibble + done/busy


@dataclass
class AluConfig:
    """
    Configuration for the byte-serial ALU.

    Example:
        >>> config = AluConfig(div_bits_per_cycle=4)
        >>> print(config.div_latency)  # 9
    """

    # =========================================================================
    # Execution Engine
    # =========================================================================
    div_bits_per_cycle: int = 2
    """Quotient bits retired per cycle by the restoring divider."""

    # =========================================================================
    # Host Protocol
    # =========================================================================
    poll_budget: int = 20
    """Clock cycles a caller polls for the done bit before giving up."""

    # =========================================================================
    # Computed Properties
    # =========================================================================
    @property
    def mul_latency(self) -> int:
        """Cycles in RUNNING for MUL (product stage + write-back)."""
        return 2

    @property
    def div_latency(self) -> int:
        """Cycles in RUNNING for DIV with a non-zero divisor (iterations + write-back)."""
        return OPERAND_BITS // self.div_bits_per_cycle + 1

    @property
    def max_latency(self) -> int:
        """Worst-case cycles in RUNNING over all opcodes."""
        return max(1, self.mul_latency, self.div_latency)

    def __post_init__(self):
        """Validate configuration parameters."""
        assert self.div_bits_per_cycle > 0, "div_bits_per_cycle must be positive"
        assert OPERAND_BITS % self.div_bits_per_cycle == 0, (
            "div_bits_per_cycle must divide the operand width"
        )
        assert self.div_bits_per_cycle <= 8, "div_bits_per_cycle is limited to 8"
        assert self.poll_budget > 0, "poll_budget must be positive"


# Pre-defined configurations
DEFAULT_CONFIG = AluConfig()
"""Default configuration: 17-cycle divide, 20-cycle polling budget."""

FAST_DIV_CONFIG = AluConfig(div_bits_per_cycle=8)
"""Five-cycle divide at the cost of a wider divider stage."""

SERIAL_DIV_CONFIG = AluConfig(div_bits_per_cycle=1, poll_budget=40)
"""Smallest divider; one quotient bit per cycle."""
