"""
Serial Port I/O Boundary

This module provides the SerialPort classes, which handle all serial I/O for
flip-dot panels. A panel talks to one of two implementations:

- HardwareSerialPort: a real RS-485 link opened with pyserial
- NullSerialPort: debug mode, logs frames instead of transmitting them

I/O boundary class - handles all hardware interaction and connection management.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from serial import Serial, SerialException

from .config import SerialConfig
from .errors import PortOpenError, WriteFailedError

logger = logging.getLogger(__name__)


class SerialPort(ABC):
    """
    Abstract base class for serial port communication.

    Defines the write/flush/close capability set a panel needs from a byte
    stream.
    """

    is_live: bool = False

    @abstractmethod
    def write(self, data: bytes) -> int:
        """
        Write bytes to the port.

        Returns:
            int: Number of bytes the port reports as written

        Raises:
            WriteFailedError: If the write operation fails
        """
        pass

    @abstractmethod
    def flush(self) -> None:
        """Block until written bytes have been sent."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the port. Safe to call more than once."""
        pass

    @abstractmethod
    def is_open(self) -> bool:
        pass


class HardwareSerialPort(SerialPort):
    """
    Hardware serial port implementation using pyserial.

    The port is opened on construction; a panel is not usable without it.
    """

    is_live = True

    def __init__(self, config: SerialConfig):
        self.config = config
        self._serial: Optional[Serial] = None
        try:
            self._serial = Serial(
                port=config.port,
                baudrate=config.baudrate,
                timeout=config.timeout,
                write_timeout=config.timeout,
            )
        except (SerialException, OSError, ValueError) as e:
            raise PortOpenError(
                f"could not open serial port {config.port}: {e}"
            ) from e
        logger.info(
            "Connected to hardware serial port %s at %d baud",
            config.port,
            config.baudrate,
        )

    def write(self, data: bytes) -> int:
        if not self._serial:
            raise WriteFailedError("couldn't write to port: port is closed")
        try:
            n = self._serial.write(data)
        except (SerialException, OSError) as e:
            raise WriteFailedError(f"couldn't write to port: {e}") from e
        # pyserial may report None for an unknown count
        return len(data) if n is None else n

    def flush(self) -> None:
        if not self._serial:
            return
        try:
            self._serial.flush()
        except (SerialException, OSError) as e:
            raise WriteFailedError(f"couldn't flush port: {e}") from e

    def close(self) -> None:
        if self._serial:
            try:
                self._serial.close()
                logger.info("Disconnected from hardware serial port %s", self.config.port)
            finally:
                self._serial = None

    def is_open(self) -> bool:
        return self._serial is not None


class NullSerialPort(SerialPort):
    """
    Debug mode port used when no panel is connected.

    Never touches a device. Writes are logged as a hex dump and reported as
    fully written.
    """

    def __init__(self):
        self._open = True

    def write(self, data: bytes) -> int:
        logger.info("[DEBUG] Message: %s", bytes(data).hex())
        return len(data)

    def flush(self) -> None:
        pass

    def close(self) -> None:
        self._open = False

    def is_open(self) -> bool:
        return self._open


def create_serial_port(config: SerialConfig) -> SerialPort:
    """
    Factory function to create the appropriate serial port implementation.

    An empty port name or a zero baudrate selects debug mode.

    Raises:
        PortOpenError: If the hardware port cannot be opened
    """
    if config.debug:
        logger.info("Running in debug mode, with no panel connection")
        return NullSerialPort()

    logger.info("Creating hardware serial port")
    return HardwareSerialPort(config)
