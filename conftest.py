"""Shared test fixtures."""

from typing import List, Optional

import pytest

from flipdot.serial_port import SerialPort


class FakeSerialPort(SerialPort):
    """In-memory live port that records writes and can misreport counts."""

    is_live = True

    def __init__(self, short_by: int = 0, error: Optional[Exception] = None):
        self.writes: List[bytes] = []
        self.short_by = short_by
        self.error = error
        self.flushes = 0
        self.closes = 0
        self._open = True

    def write(self, data: bytes) -> int:
        if self.error is not None:
            raise self.error
        self.writes.append(bytes(data))
        return len(data) - self.short_by

    def flush(self) -> None:
        self.flushes += 1

    def close(self) -> None:
        self.closes += 1
        self._open = False

    def is_open(self) -> bool:
        return self._open


@pytest.fixture
def fake_port() -> FakeSerialPort:
    return FakeSerialPort()
