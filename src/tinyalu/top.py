"""
TinyAlu - Top-level integration of the byte-serial ALU.

This module wires together the four datapath blocks behind the 8/8/8 pin
interface of a shared-silicon tile:
- BusDecoder: ui_in -> load / start commands
- OperandStore: byte slots for operands A and B
- ExecutionEngine: computes result and flags, owns IDLE/RUNNING/DONE
- ResultStore + OutputMux: hold the last result and drive uo_out

External Interfaces:
    ui_in[7:0]    command word (see util.protocol)
    uio_in[7:0]   load data, or readout selector in bits [2:0]
    uo_out[7:0]   selected result byte / status byte
    uio_out, uio_oe  tied low (bidirectional pins are inputs only)
    ena           clock enable, low freezes all state
    rst_n         active-low synchronous reset, wins over ena

Host Sequence for one operation:
1. Eight load commands (slots 0-3 for A, 4-7 for B), one per cycle
2. One start command with the opcode
3. Poll selector 4 until the done bit (bit 4) is set
4. Read selectors 0-3 for the result, 4 for the flags
"""

from amaranth import EnableInserter, Module, ResetInserter, Signal
from amaranth.lib.wiring import Component, In, Out

from .config import AluConfig
from .controller.bus_decoder import BusDecoder
from .core.engine import ExecutionEngine
from .memory.operand_store import OperandStore
from .memory.result_store import OutputMux, ResultStore
from .util.protocol import SELECTOR_MASK


class AluCore(Component):
    """
    Datapath and control of the ALU on the default clock domain.

    Ports:
        ui_in: Command word
        uio_in: Data byte / readout selector
        uo_out: Readback byte

        Debug:
            state: Operation state (OpState encoding)
            a, b: Assembled operands
    """

    def __init__(self, config: AluConfig):
        self.config = config

        super().__init__(
            {
                "ui_in": In(8),
                "uio_in": In(8),
                "uo_out": Out(8),
                "state": Out(2),
                "a": Out(32),
                "b": Out(32),
            }
        )

    def elaborate(self, _platform):
        m = Module()

        m.submodules.decoder = decoder = BusDecoder()
        m.submodules.operands = operands = OperandStore()
        m.submodules.engine = engine = ExecutionEngine(self.config)
        m.submodules.results = results = ResultStore()
        m.submodules.out_mux = out_mux = OutputMux()

        # Command path
        m.d.comb += [
            decoder.ui_in.eq(self.ui_in),
            decoder.uio_in.eq(self.uio_in),
            operands.write_en.eq(decoder.load_en),
            operands.write_slot.eq(decoder.load_slot),
            operands.write_data.eq(decoder.load_data),
            engine.start.eq(decoder.start),
            engine.opcode.eq(decoder.opcode),
            engine.a.eq(operands.a),
            engine.b.eq(operands.b),
        ]

        # Result path
        m.d.comb += [
            results.write_en.eq(engine.write),
            results.result_in.eq(engine.result),
            results.flags_in.eq(engine.flags),
        ]

        # Readout
        m.d.comb += [
            out_mux.selector.eq(self.uio_in & SELECTOR_MASK),
            out_mux.result.eq(results.result),
            out_mux.flags.eq(results.flags),
            out_mux.done.eq(engine.done),
            out_mux.busy.eq(engine.busy),
            self.uo_out.eq(out_mux.out),
        ]

        m.d.comb += [
            self.state.eq(engine.state),
            self.a.eq(operands.a),
            self.b.eq(operands.b),
        ]

        return m


class TinyAlu(Component):
    """
    Pin-level wrapper with Tiny Tapeout port names.

    Applies ena as a clock enable and ~rst_n as a synchronous reset to every
    register of AluCore. uo_out stays driven while ena is low.

    Parameters:
        config: AluConfig (defaults to the 17-cycle divider)
    """

    def __init__(self, config: AluConfig | None = None):
        self.config = config if config is not None else AluConfig()

        super().__init__(
            {
                "ui_in": In(8),
                "uio_in": In(8),
                "ena": In(1, init=1),
                "rst_n": In(1, init=1),
                "uo_out": Out(8),
                "uio_out": Out(8),
                "uio_oe": Out(8),
            }
        )

        self.core = AluCore(self.config)

    def elaborate(self, _platform):
        m = Module()

        core = self.core

        rst = Signal()
        m.d.comb += rst.eq(~self.rst_n)

        # Enable is applied first so that reset is not gated by it
        m.submodules.core = ResetInserter({"sync": rst})(EnableInserter({"sync": self.ena})(core))

        m.d.comb += [
            core.ui_in.eq(self.ui_in),
            core.uio_in.eq(self.uio_in),
            self.uo_out.eq(core.uo_out),
            self.uio_out.eq(0),
            self.uio_oe.eq(0),
        ]

        return m
