"""
Result/Flags Store and Output Multiplexer.

The store holds the result and flags of the last completed operation. Both
are written in the same cycle and kept until the next completion or reset;
reading them has no side effects.

The multiplexer is combinational and picks what uo_out shows this cycle:

    selector  uo_out
    0..3      result byte N (0 = LSB)
    4         status byte {2'b0, busy, done, Z, N, C, V}
    5..7      0 (reserved)
"""

from amaranth import Cat, Module, Signal
from amaranth.lib.wiring import Component, In, Out

from ..config import OPERAND_BITS, OPERAND_BYTES, Selector


class ResultStore(Component):
    """
    Result and flags registers.

    Ports:
        write_en: Latch result_in and flags_in this cycle
        result_in: Result computed by the execution engine
        flags_in: Flags nibble computed by the execution engine

        result: Stored result
        flags: Stored flags nibble (Z, N, C, V from bit 3 down)
    """

    def __init__(self):
        super().__init__(
            {
                "write_en": In(1),
                "result_in": In(OPERAND_BITS),
                "flags_in": In(4),
                "result": Out(OPERAND_BITS),
                "flags": Out(4),
            }
        )

    def elaborate(self, _platform):
        m = Module()

        result_reg = Signal(OPERAND_BITS)
        flags_reg = Signal(4)

        with m.If(self.write_en):
            m.d.sync += [
                result_reg.eq(self.result_in),
                flags_reg.eq(self.flags_in),
            ]

        m.d.comb += [
            self.result.eq(result_reg),
            self.flags.eq(flags_reg),
        ]

        return m


class OutputMux(Component):
    """
    Readout multiplexer for uo_out.

    Ports:
        selector: Readout selector from uio_in[2:0]
        result: Stored result
        flags: Stored flags nibble
        done: Operation state is DONE
        busy: Operation state is RUNNING

        out: Byte driven on uo_out
    """

    def __init__(self):
        super().__init__(
            {
                "selector": In(3),
                "result": In(OPERAND_BITS),
                "flags": In(4),
                "done": In(1),
                "busy": In(1),
                "out": Out(8),
            }
        )

    def elaborate(self, _platform):
        m = Module()

        with m.Switch(self.selector):
            for i in range(OPERAND_BYTES):
                with m.Case(i):
                    m.d.comb += self.out.eq(self.result.word_select(i, 8))
            with m.Case(Selector.STATUS):
                m.d.comb += self.out.eq(Cat(self.flags, self.done, self.busy))
            with m.Default():
                m.d.comb += self.out.eq(0)

        return m
