"""
Behavioral models of the tinyalu device.

- execute / op_latency: reference arithmetic and timing of the engine
- AluModel: cycle-accurate model of the pin-level protocol
"""

from .alu import AluModel
from .engine import AluResult, execute, op_latency

__all__ = ["AluModel", "AluResult", "execute", "op_latency"]
