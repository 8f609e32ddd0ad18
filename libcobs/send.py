"""COBS sender: encodes one frame per call into a caller-supplied sink.

Wire format: [code][code-1 data bytes] ... [0x00]
A code below 0xFF stands for its data plus one elided zero; 0xFF carries
254 data bytes and no zero.
"""

from __future__ import annotations

import logging
from typing import Protocol

from libcobs.errors import ShortWrite, TransportExhausted
from libcobs.statistics import CobsStatistics

log = logging.getLogger(__name__)

MAX_CODE = 0xFF
DELIMITER = b"\x00"


class SenderOperation(Protocol):
    """Sink capability.

    ``send`` must accept the whole chunk and return its length, or return
    None (or raise OSError) when the transport cannot take it.
    """

    def send(self, buf: bytes) -> int | None: ...


class CobsSender:
    """Frame encoder bound to one sink."""

    def __init__(self, sender: SenderOperation) -> None:
        self._sender = sender
        self._stats = CobsStatistics()

    def stats(self) -> CobsStatistics:
        return self._stats

    def send(self, buf: bytes) -> int:
        """Encode ``buf`` and write it to the sink, delimiter included.

        Returns the number of encoded bytes written. Raises
        TransportExhausted if any sink call fails; nothing is recorded in
        the statistics in that case.
        """
        data = memoryview(buf).cast("B")
        size = len(data)
        total = 0
        i = 0

        try:
            while True:
                start = i
                code = 1
                while i < size and data[i] != 0 and code != MAX_CODE:
                    code += 1
                    i += 1

                self._write(bytes((code,)), "code")
                if code > 1:
                    self._write(data[start:i].tobytes(), "block")
                total += code

                if i >= size:
                    break

                # A zero that ends a short run is carried by the block boundary.
                if data[i] == 0 and code < MAX_CODE:
                    i += 1

            self._write(DELIMITER, "delimiter")
        except TransportExhausted as e:
            log.warning(
                "send aborted at %s after %d encoded bytes: %s", e.stage, total, e
            )
            raise
        total += 1

        self._stats.update(size, total)
        log.debug("sent frame: %d raw -> %d encoded bytes", size, total)
        return total

    def _write(self, chunk: bytes, stage: str) -> None:
        try:
            accepted = self._sender.send(chunk)
        except OSError as e:
            raise TransportExhausted(f"sink error: {e}", stage=stage) from e
        if accepted is None:
            raise TransportExhausted("sink refused write", stage=stage)
        if accepted != len(chunk):
            raise ShortWrite(len(chunk), accepted, stage=stage)
