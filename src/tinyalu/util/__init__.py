"""Utility modules for the tinyalu device."""

from .protocol import (
    AluStatus,
    BusCommand,
    CommandKind,
    decode_command,
    decode_status,
    encode_idle,
    encode_load,
    encode_start,
    encode_status,
    join_bytes,
    operand_slot,
    split_bytes,
)

__all__ = [
    # Command words
    "BusCommand",
    "CommandKind",
    "encode_load",
    "encode_start",
    "encode_idle",
    "decode_command",
    # Operand addressing
    "operand_slot",
    "split_bytes",
    "join_bytes",
    # Status byte
    "AluStatus",
    "encode_status",
    "decode_status",
]
