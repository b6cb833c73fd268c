#!/usr/bin/env python3
"""
Byte-Serial Protocol Walkthrough.

This example drives the cycle-accurate model of the ALU through the same
pin-level sequence a host would use on the 8/8/8 tile. It shows:

1. Operand Loading
   - Eight load commands, one byte per cycle, A then B (LSB first)

2. Start and Poll
   - One start command carrying the opcode
   - Polling the done bit on the status byte (selector 4)

3. Readback
   - Result bytes through selectors 0-3, flags through selector 4
   - Comparison against the reference arithmetic

Usage:
    python 01_protocol_walkthrough.py [--op ADD] [--a 20] [--b 30]
    python 01_protocol_walkthrough.py --random 16 --seed 1

    --op NAME     Opcode name (ADD, SUB, MUL, DIV, SHL, SHR, AND, OR)
    --a, --b      Operands (decimal or 0x-prefixed hex)
    --random N    Run N random operations instead of a single one
    --trace       Print every bus cycle
    --verbose     Enable driver debug logging
"""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

# Add src to path if running from the examples directory
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from tinyalu.config import AluConfig, AluFlags, Opcode  # noqa: E402
from tinyalu.driver import AluDriver  # noqa: E402
from tinyalu.model import AluModel, execute  # noqa: E402
from tinyalu.util.protocol import decode_command, decode_status  # noqa: E402


class TracingModel(AluModel):
    """AluModel that prints the pins sampled on every clock edge."""

    def step(self, ui_in=0, uio_in=0, *, rst_n=1, ena=1):
        super().step(ui_in, uio_in, rst_n=rst_n, ena=ena)
        status = decode_status(self.output(4))
        print(
            f"  cycle {self.cycle:4d}  ui_in=0x{ui_in:02x} uio_in=0x{uio_in:02x}  "
            f"{decode_command(ui_in)!r:28s} state={self.state.name:7s} "
            f"done={int(status.done)}"
        )


def format_flags(flags: AluFlags) -> str:
    names = [("Z", AluFlags.ZERO), ("N", AluFlags.NEGATIVE), ("C", AluFlags.CARRY), ("V", AluFlags.OVERFLOW)]
    return "".join(name if flags & bit else "-" for name, bit in names)


def run_one(driver: AluDriver, opcode: Opcode, a: int, b: int) -> bool:
    """Run one operation and compare with the reference. Returns True on match."""
    cycle_start = driver.model.cycle
    got = driver.run(opcode, a, b)
    expected = execute(opcode, a, b)
    cycles = driver.model.cycle - cycle_start

    ok = got == expected
    mark = "OK " if ok else "BAD"
    print(
        f"[{mark}] {opcode.name:3s} 0x{a:08x}, 0x{b:08x} -> 0x{got.value:08x} "
        f"flags={format_flags(got.flags)}  ({cycles} cycles)"
    )
    if not ok:
        print(f"      expected 0x{expected.value:08x} flags={format_flags(expected.flags)}")
    return ok


def main():
    parser = argparse.ArgumentParser(description="Byte-serial ALU protocol walkthrough")
    parser.add_argument("--op", default="ADD", choices=[op.name for op in Opcode])
    parser.add_argument("--a", type=lambda s: int(s, 0), default=20)
    parser.add_argument("--b", type=lambda s: int(s, 0), default=30)
    parser.add_argument("--random", type=int, default=0, metavar="N")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--div-bits", type=int, default=2, help="Divider bits per cycle")
    parser.add_argument("--trace", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    config = AluConfig(div_bits_per_cycle=args.div_bits, poll_budget=40)
    model = TracingModel(config) if args.trace else AluModel(config)
    driver = AluDriver(model)
    driver.reset()

    print("=" * 72)
    print("Byte-serial ALU protocol walkthrough")
    print(f"  divider: {config.div_bits_per_cycle} bits/cycle ({config.div_latency} cycles)")
    print("=" * 72)

    if args.random:
        rng = np.random.default_rng(args.seed)
        failures = 0
        for _ in range(args.random):
            opcode = Opcode(int(rng.integers(0, len(Opcode))))
            a, b = (int(v) for v in rng.integers(0, 1 << 32, size=2, dtype=np.uint64))
            failures += not run_one(driver, opcode, a, b)
        print(f"\n{args.random - failures}/{args.random} operations matched the reference")
        return 1 if failures else 0

    return 0 if run_one(driver, Opcode[args.op], args.a, args.b) else 1


if __name__ == "__main__":
    sys.exit(main())
