"""
Core compute components.

- ExecutionEngine: multi-cycle ALU with IDLE/RUNNING/DONE sequencing
"""

from .engine import ExecutionEngine

__all__ = ["ExecutionEngine"]
