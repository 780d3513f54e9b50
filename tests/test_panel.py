"""Tests for the Panel controller."""

import logging

import numpy as np
import pytest

from conftest import FakeSerialPort
from flipdot.config import PanelConfig, SerialConfig
from flipdot.errors import (
    ConfigError,
    PortOpenError,
    ShortWriteError,
    UnsupportedLengthError,
    WriteFailedError,
)
from flipdot.panel import Panel
from flipdot.serial_port import NullSerialPort


@pytest.fixture
def panel(fake_port) -> Panel:
    return Panel(28, 7, address=b"\x01", serial_port=fake_port)


def test_debug_mode_selected_without_port(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("serial port must not be opened in debug mode")

    monkeypatch.setattr("flipdot.serial_port.Serial", fail)

    for port, baud in [("", 9600), ("/dev/ttyUSB0", 0), ("", 0)]:
        p = Panel(7, 7, port=port, baudrate=baud)
        assert p.is_debug
        assert isinstance(p.serial_port, NullSerialPort)


def test_debug_panel_send_logs_frame_and_state(caplog):
    p = Panel(7, 1)
    p.clear(True)

    with caplog.at_level(logging.INFO):
        p.send()
        assert p.queue() is True
        p.refresh()

    assert bytes([0x80, 0x87, 0xFF] + [0x01] * 7 + [0x8F]).hex() in caplog.text
    assert bytes([0x80, 0x88, 0xFF] + [0x01] * 7 + [0x8F]).hex() in caplog.text
    assert "⚫️" * 7 in caplog.text


def test_send_writes_refresh_frame(panel, fake_port):
    panel.set(0, 0, True)
    panel.send()

    assert len(fake_port.writes) == 1
    frame = fake_port.writes[0]
    assert frame[:3] == bytes([0x80, 0x83, 0x01])
    assert frame[3] == 0x40
    assert frame[-1] == 0x8F
    assert len(frame) == len(panel.address) + panel.width + 3


def test_queue_writes_buffered_frame(panel, fake_port):
    assert panel.queue() is True
    assert fake_port.writes[0][:3] == bytes([0x80, 0x84, 0x01])


def test_refresh_broadcasts(panel, fake_port):
    panel.refresh()
    assert fake_port.writes[0][:3] == bytes([0x80, 0x83, 0xFF])


def test_get_frame_does_not_write(panel, fake_port):
    assert panel.get_frame(False)[1] == 0x84
    assert panel.get_frame(True)[1] == 0x83
    assert panel.get_refresh_frame() == panel.get_frame(True)
    assert fake_port.writes == []


def test_short_write_raises_with_counts():
    port = FakeSerialPort(short_by=1)
    p = Panel(28, 7, address=b"\x01", serial_port=port)

    with pytest.raises(ShortWriteError) as exc_info:
        p.send()

    assert exc_info.value.expected == 32
    assert exc_info.value.actual == 31
    assert "expected 32 bytes, got 31 bytes" in str(exc_info.value)


def test_short_write_on_queue_is_swallowed(caplog):
    p = Panel(28, 7, serial_port=FakeSerialPort(short_by=1))
    with caplog.at_level(logging.WARNING, logger="flipdot.panel"):
        assert p.queue() is False
    assert "Failed to queue frame" in caplog.text


def test_write_error_is_wrapped():
    p = Panel(14, 7, serial_port=FakeSerialPort(error=OSError("device gone")))
    with pytest.raises(WriteFailedError, match="device gone") as exc_info:
        p.send()
    assert isinstance(exc_info.value.__cause__, OSError)


def test_unsupported_width_aborts_before_write(fake_port):
    p = Panel(20, 7, serial_port=fake_port)

    with pytest.raises(UnsupportedLengthError):
        p.send()
    with pytest.raises(UnsupportedLengthError):
        p.refresh()
    with pytest.raises(UnsupportedLengthError):
        p.get_frame(True)
    assert p.queue() is False

    assert fake_port.writes == []


def test_multi_panel_queue_then_refresh():
    port = FakeSerialPort()
    left = Panel(28, 7, address=b"\x00", serial_port=port)
    right = Panel(28, 7, address=b"\x01", serial_port=port)
    left.clear(True)

    left.queue()
    right.queue()
    left.refresh()

    assert [w[:3] for w in port.writes] == [
        bytes([0x80, 0x84, 0x00]),
        bytes([0x80, 0x84, 0x01]),
        bytes([0x80, 0x83, 0xFF]),
    ]


def test_send_bulk_data(panel, fake_port):
    data = bytes([0x80, 0x82, 0x8F])
    panel.send_bulk_data(data)
    assert fake_port.writes == [data]


def test_address_is_read_only(panel):
    with pytest.raises(AttributeError):
        panel.address = b"\x02"


def test_out_of_bounds_set_does_not_raise(panel):
    assert panel.set(28, 0, True) is False
    assert panel.set(0, 7, True) is False
    assert panel.get_frame(True)[3:-1] == bytes(28)


def test_set_data(panel):
    arr = np.zeros((7, 28), dtype=bool)
    arr[6, :] = True
    panel.set_data(arr)
    assert panel.get_frame(True)[3:-1] == bytes([0x01] * 28)


def test_close_is_idempotent(fake_port):
    with Panel(7, 7, serial_port=fake_port) as p:
        pass
    p.close()
    assert fake_port.closes == 1
    assert not fake_port.is_open()

    debug = Panel(7, 7)
    debug.close()
    debug.close()


def test_from_config():
    cfg = PanelConfig(width=14, height=7, address=b"\x09", serial=SerialConfig())
    p = Panel.from_config(cfg)
    assert p.is_debug
    assert (p.width, p.height) == (14, 7)
    assert p.get_frame(False)[:3] == bytes([0x80, 0x93, 0x09])


@pytest.mark.parametrize(
    "address,expected",
    [
        (5, b"\x05"),
        ([1, 2], b"\x01\x02"),
        (bytearray(b"\x07"), b"\x07"),
        (b"\x05", b"\x05"),
    ],
)
def test_address_forms(address, expected):
    p = Panel(7, 1, address=address)
    assert p.address == expected
    assert p.get_frame(False)[: 2 + len(expected)] == bytes([0x80, 0x88]) + expected


@pytest.mark.parametrize("address", [256, -1, "ab", [1, 300], True])
def test_invalid_address_rejected(address):
    with pytest.raises(ConfigError):
        Panel(7, 1, address=address)


def test_unsupported_width_warns(caplog):
    with caplog.at_level(logging.WARNING, logger="flipdot.panel"):
        Panel(20, 7)
    assert "no protocol command" in caplog.text


def test_port_open_failure_through_constructor(monkeypatch):
    def fail(**kwargs):
        raise OSError("No such file or directory: '/dev/ttyUSB9'")

    monkeypatch.setattr("flipdot.serial_port.Serial", fail)

    with pytest.raises(PortOpenError, match="/dev/ttyUSB9"):
        Panel(28, 7, port="/dev/ttyUSB9", baudrate=57600)
