"""
Cycle-accurate behavioral model of the byte-serial ALU.

The model follows the RTL clock by clock: every call to step() corresponds to
one rising edge with the given pin values sampled. output() is the
combinational readback that the RTL drives on uo_out between edges.

Timing:
    edge t   : start command sampled in IDLE/DONE -> RUNNING, operands latched
    edge t+L : result and flags written, RUNNING -> DONE
    where L = op_latency(opcode, b) (1 for single-cycle ops)
"""

from dataclasses import dataclass, field

import numpy as np

from ..config import (
    OPERAND_BYTES,
    AluConfig,
    AluFlags,
    Opcode,
    OpState,
    Register,
    Selector,
)
from ..util.protocol import (
    NUM_SLOTS,
    SELECTOR_MASK,
    CommandKind,
    decode_command,
    encode_idle,
    encode_load,
    encode_start,
    encode_status,
    join_bytes,
    operand_slot,
)
from .engine import AluResult, execute, op_latency


@dataclass
class AluModel:
    """
    Software model of the device state.

    Attributes:
        config: Hardware configuration
        slots: Operand store, 8 byte slots (A bytes 0-3, B bytes 4-7)
        state: Current operation state
        result: Result register of the last completed operation
        flags: Flags register of the last completed operation
        cycle: Number of enabled clock edges since construction
    """

    config: AluConfig = field(default_factory=AluConfig)

    slots: np.ndarray = field(init=False)

    state: OpState = OpState.IDLE
    result: int = 0
    flags: AluFlags = AluFlags.NONE
    cycle: int = 0

    # In-flight operation
    opcode: Opcode = Opcode.ADD
    _pending: AluResult | None = field(default=None, repr=False)
    _remaining: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        self.slots = np.zeros(NUM_SLOTS, dtype=np.uint8)

    def reset(self) -> None:
        """Apply reset: clear operands, result, flags and return to IDLE."""
        self.slots.fill(0)
        self.state = OpState.IDLE
        self.result = 0
        self.flags = AluFlags.NONE
        self.opcode = Opcode.ADD
        self._pending = None
        self._remaining = 0

    # =========================================================================
    # Clock Edge
    # =========================================================================

    def step(self, ui_in: int = 0, uio_in: int = 0, *, rst_n: int = 1, ena: int = 1) -> None:
        """
        Advance one rising clock edge.

        Args:
            ui_in: Command word sampled this edge
            uio_in: Data byte (for loads) sampled this edge
            rst_n: Active-low synchronous reset; wins over ena
            ena: Clock enable; when low nothing changes
        """
        if not rst_n:
            self.reset()
            return
        if not ena:
            return

        self.cycle += 1

        # Completion is decided on the state held before this edge, so a
        # strobe on the completing edge is still ignored.
        if self.state == OpState.RUNNING:
            self._remaining -= 1
            if self._remaining == 0:
                assert self._pending is not None
                self.result = self._pending.value
                self.flags = self._pending.flags
                self._pending = None
                self.state = OpState.DONE
            starting = False
        else:
            starting = True

        cmd = decode_command(ui_in)
        if cmd.kind is CommandKind.LOAD:
            self.slots[cmd.slot] = uio_in & 0xFF
        elif cmd.kind is CommandKind.START and starting:
            a = self.operand(Register.A)
            b = self.operand(Register.B)
            self.opcode = cmd.opcode
            self._pending = execute(cmd.opcode, a, b)
            self._remaining = op_latency(cmd.opcode, b, self.config)
            self.state = OpState.RUNNING

    # =========================================================================
    # Combinational Readback
    # =========================================================================

    def output(self, uio_in: int) -> int:
        """Value driven on uo_out for the selector in uio_in[2:0]."""
        selector = uio_in & SELECTOR_MASK
        if selector < OPERAND_BYTES:
            return (self.result >> (8 * selector)) & 0xFF
        if selector == Selector.STATUS:
            return encode_status(
                self.flags,
                done=self.state == OpState.DONE,
                busy=self.state == OpState.RUNNING,
            )
        return 0

    # =========================================================================
    # Protocol Conveniences
    # =========================================================================

    def load_byte(self, register: Register, index: int, value: int) -> None:
        """Issue one load command (one clock edge)."""
        if not 0 <= value <= 0xFF:
            raise ValueError(f"byte value out of range: {value}")
        self.step(encode_load(operand_slot(register, index)), value)

    def read_byte(self, selector: int) -> int:
        """Read uo_out for a selector without advancing the clock."""
        if not 0 <= selector <= SELECTOR_MASK:
            raise ValueError(f"selector out of range: {selector}")
        return self.output(selector)

    def start(self, opcode: Opcode) -> None:
        """Issue one start command (one clock edge)."""
        self.step(encode_start(opcode))

    def tick(self, cycles: int = 1) -> None:
        """Advance idle clock edges."""
        for _ in range(cycles):
            self.step(encode_idle())

    def is_done(self) -> bool:
        return self.state == OpState.DONE

    def is_busy(self) -> bool:
        return self.state == OpState.RUNNING

    def operand(self, register: Register) -> int:
        """Current value of an operand register as assembled in the store."""
        base = Register(register)
        return join_bytes(self.slots[base : base + OPERAND_BYTES])
