"""
Tinyalu - A byte-serial 32-bit ALU for an 8/8/8-pin shared-silicon tile.

This package provides the synthesizable design (Amaranth HDL), a
cycle-accurate behavioral model and a host-side protocol driver.
"""

from .config import AluConfig, AluFlags, Opcode, OpState, Register, Selector

__version__ = "0.1.0"
__all__ = [
    "AluConfig",
    "AluFlags",
    "Opcode",
    "OpState",
    "Register",
    "Selector",
    "__version__",
]
