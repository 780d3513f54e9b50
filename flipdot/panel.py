"""
Panel Controller

This module contains the Panel class, which ties a Bitmap to a serial port and
knows how to show it. A panel either owns a hardware port (connected mode) or
a NullSerialPort (debug mode); the mode is fixed when the panel is created.

Several panels on one bus can be updated at the same moment: queue() each
panel's content to its own address, then call refresh() once on any of them to
broadcast the refresh.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Union

import numpy as np

from .bitmap import Bitmap
from .config import PanelConfig, SerialConfig, parse_address
from .errors import FlipdotError, ShortWriteError, WriteFailedError
from .protocol_config import SUPPORTED_LENGTHS
from .protocol_encoder import FrameEncoder
from .serial_port import SerialPort, create_serial_port

logger = logging.getLogger(__name__)


class Panel:
    """
    A single flip-dot panel.

    Args:
        - width (int): number of columns, also the number of data bytes per frame
        - height (int): number of rows
        - port (str): serial device path; empty for debug mode
        - baudrate (int): serial speed; 0 for debug mode
        - address (bytes): panel address on the bus, as bytes, an int or a list
            of ints; None or empty broadcasts
        - serial_port (SerialPort): use this port instead of opening one
        - strict (bool): raise on out-of-range set() instead of ignoring it
        - timeout (float): serial timeout in seconds

    Raises:
        ConfigError: If the address is not 0-255 byte values
        PortOpenError: If the serial port cannot be opened
    """

    def __init__(
        self,
        width: int,
        height: int,
        port: str = "",
        baudrate: int = 0,
        address: Union[bytes, int, Sequence[int], None] = None,
        serial_port: Optional[SerialPort] = None,
        strict: bool = False,
        timeout: float = 1.0,
    ):
        self.bitmap = Bitmap(width, height, strict=strict)
        self._address = parse_address(address) or b""
        if width not in SUPPORTED_LENGTHS:
            logger.warning(
                "Panel width %d has no protocol command; sending will fail", width
            )
        self.encoder = FrameEncoder()
        self.serial_port = serial_port or create_serial_port(
            SerialConfig(port=port, baudrate=baudrate, timeout=timeout)
        )

    @classmethod
    def from_config(cls, config: PanelConfig) -> Panel:
        return cls(
            config.width,
            config.height,
            port=config.serial.port,
            baudrate=config.serial.baudrate,
            address=config.address,
            strict=config.strict,
            timeout=config.serial.timeout,
        )

    def __enter__(self) -> Panel:
        return self

    def __exit__(self, exc_type, exc_value, tb) -> None:
        self.close()

    @property
    def address(self) -> bytes:
        return self._address

    @property
    def width(self) -> int:
        return self.bitmap.width

    @property
    def height(self) -> int:
        return self.bitmap.height

    @property
    def is_debug(self) -> bool:
        return not self.serial_port.is_live

    def set(self, x: int, y: int, state: bool) -> bool:
        return self.bitmap.set(x, y, state)

    def get(self, x: int, y: int) -> bool:
        return self.bitmap.get(x, y)

    def clear(self, state: bool = False) -> None:
        self.bitmap.clear(state)

    def set_data(self, arr: np.ndarray) -> None:
        self.bitmap.set_data(arr)

    def get_frame(self, refresh: bool) -> bytes:
        """The frame send() (refresh=True) or queue() (refresh=False) would write."""
        return self.encoder.encode(self.bitmap, self._address, refresh, self._address)

    def get_refresh_frame(self) -> bytes:
        return self.get_frame(True)

    def send(self) -> None:
        """Send the bitmap to the panel and show it immediately."""
        self._write(self.get_frame(True))

    def queue(self) -> bool:
        """
        Send the bitmap to the panel without showing it; it is shown on the
        next refresh(). Failures are logged, not raised.

        Returns True if the frame was written.
        """
        try:
            self._write(self.get_frame(False))
            return True
        except FlipdotError as e:
            logger.warning("Failed to queue frame: %s", e)
            return False

    def refresh(self) -> None:
        """Broadcast a refresh so every panel shows what was queued."""
        frame = self.encoder.encode(self.bitmap, None, True, self._address)
        self._write(frame)

    def send_bulk_data(self, data: bytes) -> None:
        """Write a frame assembled by the caller as-is."""
        logger.info("Bulk data: %s", " ".join(f"0x{b:x}" for b in data))
        self._write(bytes(data))

    def print_state(self) -> None:
        for line in self.bitmap.render():
            logger.info(line)

    def close(self) -> None:
        """Close the serial port. Safe to call more than once."""
        if self.serial_port.is_open():
            self.serial_port.close()

    def _write(self, frame: bytes) -> None:
        # Every frame is start + command + address + data + end, so the
        # expected count is the frame length.
        expected = len(frame)
        try:
            n = self.serial_port.write(frame)
        except FlipdotError:
            raise
        except Exception as e:
            raise WriteFailedError(f"couldn't write to port: {e}") from e

        if self.is_debug:
            self.print_state()

        if n != expected:
            raise ShortWriteError(expected, n)
