"""
BusDecoder - Splits the 8-bit command word into load and start commands.

The decoder is purely combinational. Bit 7 of ui_in selects between the two
mutually exclusive command types:

    ui_in[7] = 1 : load   - ui_in[6:4] is the operand slot, uio_in is the data
    ui_in[7] = 0 : start  - ui_in[0] is the strobe, ui_in[3:1] is the opcode

Nothing is buffered; a command is only acted on in the cycle it is sampled.
"""

from amaranth import Module
from amaranth.lib.wiring import Component, In, Out

from ..util.protocol import LOAD_BIT, OPCODE_SHIFT, SLOT_SHIFT, STROBE_BIT


class BusDecoder(Component):
    """
    Command decoder for the narrow input bus.

    Ports:
        ui_in: Command word from the dedicated input pins
        uio_in: Data byte from the bidirectional pins

        load_en: Load command this cycle
        load_slot: Operand slot addressed by the load (0-7)
        load_data: Byte to store
        start: Start strobe this cycle (never together with load_en)
        opcode: Opcode carried by the start command
    """

    def __init__(self):
        super().__init__(
            {
                "ui_in": In(8),
                "uio_in": In(8),
                "load_en": Out(1),
                "load_slot": Out(3),
                "load_data": Out(8),
                "start": Out(1),
                "opcode": Out(3),
            }
        )

    def elaborate(self, _platform):
        m = Module()

        is_load = self.ui_in[LOAD_BIT]

        m.d.comb += [
            self.load_en.eq(is_load),
            self.load_slot.eq(self.ui_in[SLOT_SHIFT : SLOT_SHIFT + 3]),
            self.load_data.eq(self.uio_in),
            self.start.eq(~is_load & self.ui_in[STROBE_BIT]),
            self.opcode.eq(self.ui_in[OPCODE_SHIFT : OPCODE_SHIFT + 3]),
        ]

        return m
