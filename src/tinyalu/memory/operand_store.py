"""
Operand Store.

Eight byte registers assembled one byte per cycle by load commands:

    slot:   7    6    5    4    3    2    1    0
          [B3] [B2] [B1] [B0] [A3] [A2] [A1] [A0]
           MSB            LSB  MSB            LSB

The registers are only changed by a load; operations read a snapshot taken
by the execution engine, so loads during RUNNING only affect the next start.
"""

from amaranth import Cat, Module, Signal
from amaranth.lib.wiring import Component, In, Out

from ..config import OPERAND_BITS, OPERAND_BYTES
from ..util.protocol import NUM_SLOTS


class OperandStore(Component):
    """
    Byte-addressable operand registers A and B.

    Ports:
        write_en: Store write_data into slot write_slot this cycle
        write_slot: Slot index (0-3 = A, 4-7 = B)
        write_data: Byte to store

        a: Assembled operand A
        b: Assembled operand B
    """

    def __init__(self):
        super().__init__(
            {
                "write_en": In(1),
                "write_slot": In(3),
                "write_data": In(8),
                "a": Out(OPERAND_BITS),
                "b": Out(OPERAND_BITS),
            }
        )

    def elaborate(self, _platform):
        m = Module()

        slots = [Signal(8, name=f"slot{i}") for i in range(NUM_SLOTS)]

        with m.If(self.write_en):
            with m.Switch(self.write_slot):
                for i, slot in enumerate(slots):
                    with m.Case(i):
                        m.d.sync += slot.eq(self.write_data)

        m.d.comb += [
            self.a.eq(Cat(*slots[:OPERAND_BYTES])),
            self.b.eq(Cat(*slots[OPERAND_BYTES:])),
        ]

        return m
