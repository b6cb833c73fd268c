"""
AluDriver - Host side of the byte-serial protocol.

The driver plays the role of the single caller on the narrow bus: it loads
operands byte by byte, issues the start command, polls the done bit once per
clock and reads the result back one byte per selector. It talks to an
AluModel, which stands in for the pins.

Polling is bounded by AluConfig.poll_budget; running out of budget is a
liveness failure reported as AluTimeoutError, the device itself has no
notion of a failed operation.
"""

import logging

from .config import OPERAND_BYTES, Opcode, Register, Selector
from .model.alu import AluModel
from .model.engine import AluResult
from .util.protocol import (
    AluStatus,
    decode_status,
    encode_idle,
    encode_load,
    encode_start,
    join_bytes,
    operand_slot,
    split_bytes,
)

logger = logging.getLogger(__name__)


class AluTimeoutError(TimeoutError):
    """The done bit was not observed within the polling budget."""

    def __init__(self, opcode: Opcode, cycles: int):
        super().__init__(f"{opcode.name} not done after {cycles} cycles")
        self.opcode = opcode
        self.cycles = cycles


class AluDriver:
    """
    Caller-side protocol sequencer.

    Example:
        >>> driver = AluDriver(AluModel())
        >>> driver.run(Opcode.ADD, 20, 30).value
        50
    """

    def __init__(self, model: AluModel):
        self.model = model
        self.opcode = Opcode.ADD

    @property
    def config(self):
        return self.model.config

    def reset(self, cycles: int = 1) -> None:
        """Hold rst_n low for a number of cycles."""
        for _ in range(cycles):
            self.model.step(encode_idle(), 0, rst_n=0)
        logger.debug("reset for %d cycles", cycles)

    def load_operand(self, register: Register, value: int) -> None:
        """Load a 32-bit operand, LSB first, one byte per cycle."""
        for index, byte in enumerate(split_bytes(value)):
            self.model.step(encode_load(operand_slot(register, index)), byte)
        logger.debug("loaded %s = 0x%08x", Register(register).name, value)

    def start(self, opcode: Opcode) -> None:
        """Issue a start command; ignored by the device if an operation is in flight."""
        self.opcode = Opcode(opcode)
        self.model.step(encode_start(self.opcode), Selector.STATUS)
        logger.debug("start %s", self.opcode.name)

    def read_status(self) -> AluStatus:
        return decode_status(self.model.output(Selector.STATUS))

    def wait_done(self, max_cycles: int | None = None) -> int:
        """
        Poll the done bit once per clock.

        Args:
            max_cycles: Polling budget (defaults to config.poll_budget)

        Returns:
            Number of clock cycles waited.

        Raises:
            AluTimeoutError: done was not set within the budget.
        """
        budget = self.config.poll_budget if max_cycles is None else max_cycles
        for waited in range(budget + 1):
            if self.read_status().done:
                logger.debug("%s done after %d cycles", self.opcode.name, waited)
                return waited
            if waited < budget:
                self.model.step(encode_idle(), Selector.STATUS)
        raise AluTimeoutError(self.opcode, budget)

    def read_result(self) -> int:
        """Read the four result bytes through selectors 0-3."""
        return join_bytes(self.model.output(selector) for selector in range(OPERAND_BYTES))

    def run(self, opcode: Opcode, a: int, b: int, max_cycles: int | None = None) -> AluResult:
        """
        Perform one complete operation: load, start, poll, read back.

        Returns:
            AluResult with the value and flags read from the pins.
        """
        self.load_operand(Register.A, a)
        self.load_operand(Register.B, b)
        self.start(opcode)
        self.wait_done(max_cycles)
        result = AluResult(self.read_result(), self.read_status().flags)
        logger.debug(
            "%s(0x%08x, 0x%08x) -> %r", Opcode(opcode).name, a, b, result
        )
        return result
