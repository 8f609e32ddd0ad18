"""Blocking pyserial port exposing the COBS sink and source contracts."""

from __future__ import annotations

import logging

import serial

from libcobs.config import SerialConfig

log = logging.getLogger(__name__)


class SerialPort:
    """Thin wrapper around pyserial for use with CobsSender/CobsReceiver.

    ``send`` returns the number of bytes written, or None if the port is
    closed or the write fails. ``recv`` blocks until ``length`` bytes have
    arrived or the read timeout expires and returns whatever arrived; an
    empty result ends the frame on the receiver side.
    """

    def __init__(
        self,
        port: str,
        baudrate: int = 115200,
        timeout_s: float = 1.0,
        write_timeout_s: float = 1.0,
        label: str = "serial",
    ) -> None:
        self.port = port
        self.baudrate = baudrate
        self.timeout_s = timeout_s
        self.write_timeout_s = write_timeout_s
        self.label = label
        self._ser: serial.Serial | None = None

    @classmethod
    def from_config(cls, cfg: SerialConfig, label: str = "serial") -> SerialPort:
        return cls(
            cfg.port,
            baudrate=cfg.baudrate,
            timeout_s=cfg.timeout_s,
            write_timeout_s=cfg.write_timeout_s,
            label=label,
        )

    @property
    def connected(self) -> bool:
        return self._ser is not None

    def open(self) -> None:
        if self._ser is not None:
            return
        self._ser = serial.Serial(
            self.port,
            self.baudrate,
            timeout=self.timeout_s,
            write_timeout=self.write_timeout_s,
        )
        log.info("%s: connected to %s @ %d", self.label, self.port, self.baudrate)

    def close(self) -> None:
        if self._ser is None:
            return
        try:
            self._ser.close()
        except (serial.SerialException, OSError) as e:
            log.warning("%s: close error: %s", self.label, e)
        self._ser = None
        log.info("%s: closed %s", self.label, self.port)

    def __enter__(self) -> SerialPort:
        self.open()
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def send(self, buf: bytes) -> int | None:
        if self._ser is None:
            log.warning("%s: write on closed port", self.label)
            return None
        try:
            written = self._ser.write(buf)
        except (serial.SerialException, OSError) as e:
            log.warning("%s: write error: %s", self.label, e)
            return None
        return len(buf) if written is None else written

    def recv(self, length: int) -> bytes | None:
        if self._ser is None:
            log.warning("%s: read on closed port", self.label)
            return None
        try:
            data = self._ser.read(length)
        except (serial.SerialException, OSError) as e:
            log.warning("%s: read error: %s", self.label, e)
            return None
        if not data:
            log.debug("%s: read timeout", self.label)
        return data
