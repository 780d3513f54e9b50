"""
Error taxonomy for the flipdot package.

Every error raised by this package derives from FlipdotError so callers can
catch the whole family at once. Errors that are also plain value/index
problems subclass the matching builtin as well.
"""


class FlipdotError(Exception):
    """Base exception for flipdot errors."""

    pass


class ConfigError(FlipdotError, ValueError):
    """Raised when a configuration value is invalid."""

    pass


class UnsupportedLengthError(FlipdotError, ValueError):
    """Raised when a payload length has no entry in the command table."""

    def __init__(self, length: int):
        self.length = length
        super().__init__(f"Unknown byte length {length} to send to board")


class OutOfBoundsError(FlipdotError, IndexError):
    """Raised by a strict bitmap when a coordinate is out of range."""

    def __init__(self, x: int, y: int, width: int, height: int):
        self.x = x
        self.y = y
        super().__init__(
            f"Coordinate ({x},{y}) out of range for {width}x{height} bitmap"
        )


class SerialTransportError(FlipdotError):
    """Base exception for transport-level serial errors."""

    pass


class PortOpenError(SerialTransportError):
    """Raised when the serial port cannot be opened."""

    pass


class WriteFailedError(SerialTransportError):
    """Raised when the transport write (or flush) itself fails."""

    pass


class ShortWriteError(SerialTransportError):
    """Raised when the transport wrote a different number of bytes than expected."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Didn't send all bytes to the board, expected {expected} bytes, "
            f"got {actual} bytes"
        )
