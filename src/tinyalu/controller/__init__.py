"""Command path controllers."""

from .bus_decoder import BusDecoder

__all__ = ["BusDecoder"]
