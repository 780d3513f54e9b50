"""
Flipdot panel protocol configuration.

Frame format: 0x80 Command Address Data 0x8F

The command byte depends on how many data bytes follow (one per panel column)
and on whether the panel should show the data immediately or hold it until a
refresh. The table below comes from the controller documentation; the
pairings are not derivable from each other.
"""

from enum import Enum
from typing import Dict, Tuple

from .errors import UnsupportedLengthError


class Refresh(Enum):
    """Panel refresh behavior."""

    INSTANT = "instant"  # Show data as soon as received
    BUFFER = "buffer"  # Store data, show on refresh command

    def __str__(self) -> str:
        return self.value


# Special protocol bytes
FRAME_START = 0x80
FRAME_END = 0x8F
FLUSH_COMMAND = 0x82  # Refresh all buffered displays (0 data bytes)
BROADCAST_ADDRESS = 0xFF

# Bytes that wrap every frame besides address and data: start, command, end
FRAME_OVERHEAD = 3

# (data bytes, refresh) -> command byte
COMMAND_MAP: Dict[Tuple[int, bool], int] = {
    (112, False): 0x81,
    (112, True): 0x82,
    (56, False): 0x86,
    (56, True): 0x85,
    (28, False): 0x84,
    (28, True): 0x83,
    (14, False): 0x93,
    (14, True): 0x92,
    (7, False): 0x88,
    (7, True): 0x87,
    # Zero data bytes is the refresh-all command; it never carries an address
    (0, False): FLUSH_COMMAND,
    (0, True): FLUSH_COMMAND,
}

SUPPORTED_LENGTHS = frozenset(length for length, _ in COMMAND_MAP if length)


def get_command(data_bytes: int, refresh: bool) -> int:
    """Get the command byte for a payload size and refresh mode.

    Args:
        data_bytes: Number of packed data bytes (panel width)
        refresh: True to display immediately, False to buffer

    Returns:
        The protocol command byte

    Raises:
        UnsupportedLengthError: If no command exists for the payload size
    """
    command = COMMAND_MAP.get((data_bytes, bool(refresh)))
    if command is None:
        raise UnsupportedLengthError(data_bytes)
    return command


def refresh_mode(refresh: bool) -> Refresh:
    return Refresh.INSTANT if refresh else Refresh.BUFFER
