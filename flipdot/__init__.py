"""
Flip-dot panel driver package.

This package provides:
- An in-memory bitmap of dot states
- Frame encoding for the panel controller's serial protocol
- Serial transport with a debug mode that logs instead of transmitting
- A Panel class tying these together with send/queue/refresh semantics
"""

from .bitmap import Bitmap
from .errors import (
    ConfigError,
    FlipdotError,
    OutOfBoundsError,
    PortOpenError,
    ShortWriteError,
    UnsupportedLengthError,
    WriteFailedError,
)
from .panel import Panel
from .protocol_encoder import FrameEncoder, encode

__version__ = "0.1.0"

__all__ = [
    "Bitmap",
    "ConfigError",
    "FlipdotError",
    "FrameEncoder",
    "OutOfBoundsError",
    "Panel",
    "PortOpenError",
    "ShortWriteError",
    "UnsupportedLengthError",
    "WriteFailedError",
    "encode",
]
