"""Tests for the pyserial-backed sink/source (port mocked)."""

from unittest import mock

import pytest
import serial

from libcobs.config import SerialConfig
from libcobs.errors import TransportExhausted
from libcobs.io.serial_transport import SerialPort
from libcobs.recv import CobsReceiver
from libcobs.send import CobsSender


@pytest.fixture
def fake_serial():
    with mock.patch("libcobs.io.serial_transport.serial.Serial") as cls:
        yield cls.return_value


def test_open_uses_config():
    cfg = SerialConfig(port="/dev/ttyACM3", baudrate=921600, timeout_s=0.2)
    port = SerialPort.from_config(cfg)
    with mock.patch("libcobs.io.serial_transport.serial.Serial") as cls:
        port.open()
        cls.assert_called_once_with(
            "/dev/ttyACM3", 921600, timeout=0.2, write_timeout=1.0
        )
    assert port.connected


def test_sender_writes_frame(fake_serial):
    fake_serial.write.side_effect = lambda buf: len(buf)
    with SerialPort("/dev/null") as port:
        n = CobsSender(port).send(b"\x11\x22\x00\x33")
    assert n == 6
    written = b"".join(c.args[0] for c in fake_serial.write.call_args_list)
    assert written == b"\x03\x11\x22\x02\x33\x00"
    fake_serial.close.assert_called_once()


def test_receiver_reads_frame(fake_serial):
    stream = bytearray(b"\x03\x11\x22\x02\x33\x00")

    def read(n):
        chunk = bytes(stream[:n])
        del stream[:n]
        return chunk

    fake_serial.read.side_effect = read
    with SerialPort("/dev/null") as port:
        assert CobsReceiver(port).recv() == b"\x11\x22\x00\x33"


def test_read_timeout_ends_frame(fake_serial):
    fake_serial.read.return_value = b""
    with SerialPort("/dev/null") as port:
        with pytest.raises(TransportExhausted):
            CobsReceiver(port).recv()


def test_write_error_fails_send(fake_serial):
    fake_serial.write.side_effect = serial.SerialException("gone")
    with SerialPort("/dev/null") as port:
        sender = CobsSender(port)
        with pytest.raises(TransportExhausted):
            sender.send(b"\x01")
        assert sender.stats().get() == (0, 0)


def test_closed_port_refuses_io():
    port = SerialPort("/dev/null")
    assert not port.connected
    assert port.send(b"\x01") is None
    assert port.recv(1) is None
