"""
Register stores of the ALU.

- OperandStore: byte-addressable operand registers A and B
- ResultStore: result and flags of the last completed operation
- OutputMux: combinational readout of result bytes and status
"""

from .operand_store import OperandStore
from .result_store import OutputMux, ResultStore

__all__ = ["OperandStore", "ResultStore", "OutputMux"]
