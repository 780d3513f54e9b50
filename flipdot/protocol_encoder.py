"""
Pure Protocol Encoding Logic

This module contains the FrameEncoder class, which handles the binary framing
protocol for flip-dot panel communication. It has no I/O dependencies; it
turns a Bitmap into a protocol frame.

Frame format: [0x80, command, <address bytes...>, <payload bytes...>, 0x8F]
"""

import logging
from typing import List, Optional

import numpy as np

from .bitmap import Bitmap
from .protocol_config import (
    BROADCAST_ADDRESS,
    FRAME_END,
    FRAME_START,
    get_command,
    refresh_mode,
)

logger = logging.getLogger(__name__)

BROADCAST = bytes([BROADCAST_ADDRESS])


def pack_columns(bitmap: Bitmap) -> bytes:
    """
    Pack each column of the bitmap into one byte, top row as the high bit.

    For example a 7 row column [1, 0, 0, 0, 0, 1, 1] --> 0b1000011 (67).
    Columns taller than 8 rows keep only the low byte, i.e. the bottom 8 rows.
    """
    tail = bitmap.cells[:, -8:].astype(np.uint16)
    weights = 1 << np.arange(tail.shape[1] - 1, -1, -1, dtype=np.uint16)
    return tail.dot(weights).astype(np.uint8).tobytes()


def unpack_column(value: int, height: int) -> List[bool]:
    """Undo the packing of a single column of at most 8 rows."""
    if not 0 < height <= 8:
        raise ValueError(f"Column height must be 1-8 to unpack, got {height}")
    return [bool((value >> (height - 1 - y)) & 1) for y in range(height)]


def resolve_address(
    panel_address: Optional[bytes], address: Optional[bytes]
) -> bytes:
    """
    Decide the address bytes carried by a frame.

    A panel with no address of its own is always addressed by broadcast, even
    if a different address was passed in. Otherwise the passed address is
    used, with None meaning broadcast.
    """
    if not panel_address:
        return BROADCAST
    if address is None:
        return BROADCAST
    return bytes(address)


class FrameEncoder:
    """
    Pure protocol encoder for flip-dot panel frames.

    All methods take inputs and return encoded bytes; nothing is cached, every
    call builds a fresh frame.
    """

    HEADER = FRAME_START
    EOT = FRAME_END

    def encode_raw(self, payload: bytes, address: bytes, refresh: bool) -> bytes:
        """
        Frame an already packed payload.

        Args:
            payload: Packed column bytes, one per panel column
            address: Address bytes to place after the command (may be empty)
            refresh: True to display immediately, False to buffer on the panel

        Returns:
            bytes: Complete protocol frame ready for transmission

        Raises:
            UnsupportedLengthError: If the payload length has no command
        """
        command = get_command(len(payload), refresh)
        if not payload:
            # The refresh-all command is never addressed
            address = b""

        return (
            bytes([self.HEADER, command])
            + bytes(address)
            + bytes(payload)
            + bytes([self.EOT])
        )

    def encode(
        self,
        bitmap: Bitmap,
        address: Optional[bytes],
        refresh: bool,
        panel_address: Optional[bytes] = None,
    ) -> bytes:
        """
        Encode the bitmap into a single panel frame.

        Args:
            bitmap: Dot states to send
            address: Address to send to; None for broadcast
            refresh: True to display immediately, False to buffer on the panel
            panel_address: The address the panel itself was configured with.
                Defaults to `address`. When empty the frame is broadcast.

        Returns:
            bytes: Complete protocol frame
        """
        if panel_address is None:
            panel_address = address

        payload = pack_columns(bitmap)
        frame = self.encode_raw(
            payload, resolve_address(panel_address, address), refresh
        )
        logger.debug(
            "Encoded %s frame: %d data bytes, %d bytes total",
            refresh_mode(refresh),
            len(payload),
            len(frame),
        )
        return frame

    def encode_flush(self) -> bytes:
        """
        Encode a flush/refresh-all command frame.

        Returns:
            bytes: Encoded flush frame ([0x80, 0x82, 0x8F])
        """
        return self.encode_raw(b"", b"", refresh=True)


_encoder = FrameEncoder()


def encode(
    bitmap: Bitmap,
    address: Optional[bytes],
    refresh: bool,
    panel_address: Optional[bytes] = None,
) -> bytes:
    """Encode with a shared FrameEncoder instance."""
    return _encoder.encode(bitmap, address, refresh, panel_address)
