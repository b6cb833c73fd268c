"""
Bus protocol definitions for the byte-serial ALU.

This module defines:
1. Command word encoding for ui_in (load and start commands)
2. Operand slot addressing for the 8 byte slots of A and B
3. Status byte layout for selector 4 readback
4. Little-endian byte helpers for 32-bit operands

Command Word (ui_in):
    Bit   Load (bit7=1)          Start (bit7=0)
    7     1                      0
    6:4   slot (0-3 A, 4-7 B)    unused
    3:1   unused                 opcode
    0     unused                 start strobe

Status Byte (uo_out when selector = 4):
    Bit   Field
    3     Zero
    2     Negative
    1     Carry
    0     Overflow
    4     Done (result valid)
    5     Busy (operation in flight)
    7:6   reserved (0)
"""

from dataclasses import dataclass
from enum import Enum

from ..config import OPERAND_BYTES, OPERAND_MASK, AluFlags, Opcode, Register

# =============================================================================
# Bit Positions
# =============================================================================

LOAD_BIT = 7
SLOT_SHIFT = 4
SLOT_MASK = 0x7
OPCODE_SHIFT = 1
OPCODE_MASK = 0x7
STROBE_BIT = 0

SELECTOR_MASK = 0x7

FLAGS_MASK = 0xF
STATUS_DONE_BIT = 4
STATUS_BUSY_BIT = 5

NUM_SLOTS = 2 * OPERAND_BYTES


class CommandKind(Enum):
    """Decoded command type of a ui_in word."""

    LOAD = "load"
    START = "start"
    IDLE = "idle"  # Start-type word with the strobe low


@dataclass(frozen=True)
class BusCommand:
    """Software view of a decoded ui_in word."""

    kind: CommandKind
    slot: int = 0
    opcode: Opcode = Opcode.ADD

    def __repr__(self) -> str:
        if self.kind is CommandKind.LOAD:
            return f"BusCommand(LOAD, slot={self.slot})"
        if self.kind is CommandKind.START:
            return f"BusCommand(START, {self.opcode.name})"
        return "BusCommand(IDLE)"


@dataclass(frozen=True)
class AluStatus:
    """Decoded status byte."""

    flags: AluFlags
    done: bool
    busy: bool

    @property
    def zero(self) -> bool:
        return bool(self.flags & AluFlags.ZERO)

    @property
    def negative(self) -> bool:
        return bool(self.flags & AluFlags.NEGATIVE)

    @property
    def carry(self) -> bool:
        return bool(self.flags & AluFlags.CARRY)

    @property
    def overflow(self) -> bool:
        return bool(self.flags & AluFlags.OVERFLOW)


# =============================================================================
# Command Encoding
# =============================================================================


def encode_load(slot: int) -> int:
    """
    Create a load command word for ui_in.

    The data byte travels on uio_in in the same cycle.

    Args:
        slot: Operand slot (0-3 = A bytes LSB..MSB, 4-7 = B bytes LSB..MSB)

    Returns:
        8-bit ui_in value
    """
    if not 0 <= slot < NUM_SLOTS:
        raise ValueError(f"operand slot out of range: {slot}")
    return (1 << LOAD_BIT) | (slot << SLOT_SHIFT)


def encode_start(opcode: int) -> int:
    """Create a start command word (strobe set) for ui_in."""
    if not 0 <= opcode <= OPCODE_MASK:
        raise ValueError(f"opcode out of range: {opcode}")
    return (opcode << OPCODE_SHIFT) | (1 << STROBE_BIT)


def encode_idle() -> int:
    """Command word that neither loads nor starts (used while polling)."""
    return 0


def decode_command(ui_in: int) -> BusCommand:
    """Decode an 8-bit ui_in word the same way the bus decoder does."""
    ui_in &= 0xFF
    if ui_in >> LOAD_BIT & 1:
        return BusCommand(CommandKind.LOAD, slot=(ui_in >> SLOT_SHIFT) & SLOT_MASK)
    opcode = Opcode((ui_in >> OPCODE_SHIFT) & OPCODE_MASK)
    if ui_in >> STROBE_BIT & 1:
        return BusCommand(CommandKind.START, opcode=opcode)
    return BusCommand(CommandKind.IDLE, opcode=opcode)


# =============================================================================
# Operand Addressing
# =============================================================================


def operand_slot(register: Register, index: int) -> int:
    """
    Map (register, byte index) to an operand slot.

    Args:
        register: Register.A or Register.B
        index: Byte index within the operand (0 = LSB)

    Returns:
        Slot number 0-7
    """
    if not 0 <= index < OPERAND_BYTES:
        raise ValueError(f"byte index out of range: {index}")
    return Register(register) + index


def split_bytes(value: int) -> list[int]:
    """Split a 32-bit value into little-endian bytes."""
    if not 0 <= value <= OPERAND_MASK:
        raise ValueError(f"operand does not fit in 32 bits: {value:#x}")
    return [(value >> (8 * i)) & 0xFF for i in range(OPERAND_BYTES)]


def join_bytes(data) -> int:
    """Join little-endian bytes back into an integer."""
    value = 0
    for i, byte in enumerate(data):
        value |= (int(byte) & 0xFF) << (8 * i)
    return value


# =============================================================================
# Status Byte
# =============================================================================


def encode_status(flags: int, done: bool, busy: bool) -> int:
    """Pack flags and done/busy bits into the status byte."""
    return (
        (int(flags) & FLAGS_MASK)
        | (int(bool(done)) << STATUS_DONE_BIT)
        | (int(bool(busy)) << STATUS_BUSY_BIT)
    )


def decode_status(status: int) -> AluStatus:
    """Unpack a status byte read with selector 4."""
    return AluStatus(
        flags=AluFlags(status & FLAGS_MASK),
        done=bool(status >> STATUS_DONE_BIT & 1),
        busy=bool(status >> STATUS_BUSY_BIT & 1),
    )
