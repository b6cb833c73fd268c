"""
ExecutionEngine - Computes one ALU operation and owns the operation state.

Operations:
    ADD, SUB        : wrapping add/subtract, Carry = carry out / borrow,
                      Overflow = signed overflow
    MUL             : 16x16 -> 32 product of the low operand halves
    DIV             : unsigned restoring divide, x / 0 = 0
    SHL, SHR        : logical shifts by B mod 32, Carry = last bit shifted out
    AND, OR         : bitwise

Flags (bit 3 down): Zero, Negative, Carry, Overflow

State Machine:
    IDLE/DONE -> EXECUTE -> DONE                      (single-cycle ops, DIV by 0)
    IDLE/DONE -> MULTIPLY -> EXECUTE -> DONE          (MUL)
    IDLE/DONE -> DIVIDE x N -> EXECUTE -> DONE        (DIV, N = 32 / bits per cycle)

Operands and opcode are latched when the start strobe is accepted, so loads
that arrive while an operation is in flight cannot disturb it. A strobe seen
outside IDLE/DONE is ignored.
"""

from amaranth import Cat, Const, Module, Mux, Signal
from amaranth.lib.wiring import Component, In, Out

from ..config import OPERAND_BITS, AluConfig, Opcode, OpState


class ExecutionEngine(Component):
    """
    Multi-cycle execution engine.

    Ports:
        Command Interface:
            start: Start strobe from the bus decoder
            opcode: Operation to perform
            a: Operand A from the operand store
            b: Operand B from the operand store

        Result Interface:
            write: Result and flags are valid this cycle (one-cycle strobe)
            result: Computed result
            flags: Computed flags nibble

        Status:
            state: Operation state (OpState encoding)
            busy: Operation in flight
            done: Result of the last operation is valid

    Parameters:
        config: AluConfig selecting the divider width
    """

    def __init__(self, config: AluConfig):
        self.config = config

        super().__init__(
            {
                "start": In(1),
                "opcode": In(3),
                "a": In(OPERAND_BITS),
                "b": In(OPERAND_BITS),
                "write": Out(1),
                "result": Out(OPERAND_BITS),
                "flags": Out(4),
                "state": Out(2),
                "busy": Out(1),
                "done": Out(1),
            }
        )

    def elaborate(self, _platform):
        m = Module()
        cfg = self.config

        msb = OPERAND_BITS - 1
        div_iterations = OPERAND_BITS // cfg.div_bits_per_cycle

        # =================================================================
        # Latched Command
        # =================================================================

        opcode_reg = Signal(3, name="opcode_reg")
        a_reg = Signal(OPERAND_BITS, name="a_reg")
        b_reg = Signal(OPERAND_BITS, name="b_reg")

        # Multiplier stage
        product = Signal(OPERAND_BITS, name="product")

        # Divider: quo shifts the dividend out and the quotient in
        rem = Signal(OPERAND_BITS, name="rem")
        quo = Signal(OPERAND_BITS, name="quo")
        div_count = Signal(range(div_iterations), name="div_count")

        # =================================================================
        # Divider Stages (div_bits_per_cycle restoring steps per cycle)
        # =================================================================

        stage_rem, stage_quo = rem, quo
        for s in range(cfg.div_bits_per_cycle):
            shifted = Signal(OPERAND_BITS + 1, name=f"div_shifted{s}")
            fits = Signal(name=f"div_fits{s}")
            next_rem = Signal(OPERAND_BITS, name=f"div_rem{s}")
            next_quo = Signal(OPERAND_BITS, name=f"div_quo{s}")
            m.d.comb += [
                shifted.eq(Cat(stage_quo[msb], stage_rem)),
                fits.eq(shifted >= b_reg),
                next_rem.eq(Mux(fits, shifted - b_reg, shifted)),
                next_quo.eq(Cat(fits, stage_quo[:msb])),
            ]
            stage_rem, stage_quo = next_rem, next_quo

        # =================================================================
        # Write-back Datapath
        # =================================================================

        result = Signal(OPERAND_BITS, name="result_next")
        carry = Signal(name="carry")
        overflow = Signal(name="overflow")

        shamt = b_reg[:5]
        sum_ext = Signal(OPERAND_BITS + 1, name="sum_ext")
        shl_ext = Signal(2 * OPERAND_BITS, name="shl_ext")
        shr_ext = Signal(OPERAND_BITS + 1, name="shr_ext")
        m.d.comb += [
            sum_ext.eq(a_reg + b_reg),
            shl_ext.eq(a_reg << shamt),
            # Bit 0 holds the last bit shifted out of the right end
            shr_ext.eq(Cat(Const(0, 1), a_reg) >> shamt),
        ]

        with m.Switch(opcode_reg):
            with m.Case(Opcode.ADD):
                m.d.comb += [
                    result.eq(sum_ext[:OPERAND_BITS]),
                    carry.eq(sum_ext[OPERAND_BITS]),
                    overflow.eq((a_reg[msb] == b_reg[msb]) & (result[msb] != a_reg[msb])),
                ]
            with m.Case(Opcode.SUB):
                m.d.comb += [
                    result.eq((a_reg - b_reg)[:OPERAND_BITS]),
                    carry.eq(b_reg > a_reg),
                    overflow.eq((a_reg[msb] != b_reg[msb]) & (result[msb] != a_reg[msb])),
                ]
            with m.Case(Opcode.MUL):
                m.d.comb += result.eq(product)
            with m.Case(Opcode.DIV):
                m.d.comb += result.eq(Mux(b_reg == 0, 0, quo))
            with m.Case(Opcode.SHL):
                m.d.comb += [
                    result.eq(shl_ext[:OPERAND_BITS]),
                    carry.eq(shl_ext[OPERAND_BITS]),
                ]
            with m.Case(Opcode.SHR):
                m.d.comb += [
                    result.eq(shr_ext[1:]),
                    carry.eq(shr_ext[0]),
                ]
            with m.Case(Opcode.AND):
                m.d.comb += result.eq(a_reg & b_reg)
            with m.Case(Opcode.OR):
                m.d.comb += result.eq(a_reg | b_reg)

        m.d.comb += [
            self.result.eq(result),
            self.flags.eq(Cat(overflow, carry, result[msb], result == 0)),
        ]

        # =================================================================
        # State Machine
        # =================================================================

        def accept_start():
            with m.If(self.start):
                m.d.sync += [
                    opcode_reg.eq(self.opcode),
                    a_reg.eq(self.a),
                    b_reg.eq(self.b),
                ]
                with m.Switch(self.opcode):
                    with m.Case(Opcode.MUL):
                        m.next = "MULTIPLY"
                    with m.Case(Opcode.DIV):
                        m.d.sync += [
                            rem.eq(0),
                            quo.eq(self.a),
                            div_count.eq(0),
                        ]
                        with m.If(self.b == 0):
                            m.next = "EXECUTE"
                        with m.Else():
                            m.next = "DIVIDE"
                    with m.Default():
                        m.next = "EXECUTE"

        with m.FSM(init="IDLE"):
            # ---------------------------------------------------------
            # IDLE: Nothing computed since reset
            # ---------------------------------------------------------
            with m.State("IDLE"):
                m.d.comb += self.state.eq(OpState.IDLE)
                accept_start()

            # ---------------------------------------------------------
            # MULTIPLY: Register the 16x16 product
            # ---------------------------------------------------------
            with m.State("MULTIPLY"):
                m.d.comb += self.state.eq(OpState.RUNNING)
                m.d.sync += product.eq(a_reg[:16] * b_reg[:16])
                m.next = "EXECUTE"

            # ---------------------------------------------------------
            # DIVIDE: Retire div_bits_per_cycle quotient bits per cycle
            # ---------------------------------------------------------
            with m.State("DIVIDE"):
                m.d.comb += self.state.eq(OpState.RUNNING)
                m.d.sync += [
                    rem.eq(stage_rem),
                    quo.eq(stage_quo),
                    div_count.eq(div_count + 1),
                ]
                with m.If(div_count == div_iterations - 1):
                    m.next = "EXECUTE"

            # ---------------------------------------------------------
            # EXECUTE: Write result and flags
            # ---------------------------------------------------------
            with m.State("EXECUTE"):
                m.d.comb += [
                    self.state.eq(OpState.RUNNING),
                    self.write.eq(1),
                ]
                m.next = "DONE"

            # ---------------------------------------------------------
            # DONE: Result valid until the next accepted start
            # ---------------------------------------------------------
            with m.State("DONE"):
                m.d.comb += self.state.eq(OpState.DONE)
                accept_start()

        m.d.comb += [
            self.busy.eq(self.state == OpState.RUNNING),
            self.done.eq(self.state == OpState.DONE),
        ]

        return m
