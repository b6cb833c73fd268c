#!/usr/bin/env python3
"""Generate TinyAlu Verilog from tinyalu."""

import sys
from pathlib import Path

# Add src to path if running from scripts/
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from amaranth.back import verilog  # noqa: E402

from tinyalu.config import DEFAULT_CONFIG, FAST_DIV_CONFIG  # noqa: E402
from tinyalu.top import TinyAlu  # noqa: E402


def main():
    gen_dir = project_root / "gen"
    gen_dir.mkdir(exist_ok=True)

    alu = TinyAlu(DEFAULT_CONFIG)

    output_path = gen_dir / "tinyalu.v"
    with open(output_path, "w") as f:
        f.write(verilog.convert(alu, name="TinyAlu"))

    print(f"Generated {output_path}")

    # Also generate the fast-divide variant for area/timing comparison
    alu_fast = TinyAlu(FAST_DIV_CONFIG)

    output_path_fast = gen_dir / "tinyalu_fastdiv.v"
    with open(output_path_fast, "w") as f:
        f.write(verilog.convert(alu_fast, name="TinyAlu_FastDiv"))

    print(f"Generated {output_path_fast}")


if __name__ == "__main__":
    main()
