"""COBS receiver: decodes one frame per call from a caller-supplied source."""

from __future__ import annotations

import logging
from typing import Protocol

from libcobs.config import ShortReadPolicy
from libcobs.errors import ShortRead, SourceOverrun, TransportExhausted
from libcobs.statistics import CobsStatistics

log = logging.getLogger(__name__)

# Marks "no implicit zero before the next block": the start of a frame, or
# the block after a full 254-byte run.
_NO_ZERO = 0xFF


class ReceiverOperation(Protocol):
    """Source capability.

    ``recv(length)`` returns up to ``length`` bytes, or None / b"" at end of
    data. Raising OSError is treated the same as end of data.
    """

    def recv(self, length: int) -> bytes | None: ...


class CobsReceiver:
    """Frame decoder bound to one source."""

    def __init__(
        self,
        receiver: ReceiverOperation,
        *,
        short_read_policy: ShortReadPolicy = ShortReadPolicy.RETRY,
    ) -> None:
        self._receiver = receiver
        self._policy = ShortReadPolicy(short_read_policy)
        self._stats = CobsStatistics()

    @property
    def short_read_policy(self) -> ShortReadPolicy:
        return self._policy

    def stats(self) -> CobsStatistics:
        return self._stats

    def recv(self) -> bytes:
        """Read one frame up to and including its 0x00 delimiter.

        Returns the decoded payload. Raises TransportExhausted if the source
        runs dry or misbehaves before the delimiter; statistics are left
        untouched in that case.
        """
        out = bytearray()
        encoded = 0
        prev = _NO_ZERO

        try:
            while True:
                code = self._read(1, "code")[0]
                encoded += 1
                if code == 0:
                    break

                if prev != _NO_ZERO:
                    out.append(0)
                prev = code

                block = code - 1
                if block:
                    out += self._read(block, "block")
                    encoded += block
        except TransportExhausted as e:
            log.warning(
                "recv aborted at %s after %d encoded bytes: %s", e.stage, encoded, e
            )
            raise

        self._stats.update(len(out), encoded)
        log.debug("received frame: %d encoded -> %d raw bytes", encoded, len(out))
        return bytes(out)

    def _read(self, length: int, stage: str) -> bytes:
        buf = bytearray()
        while len(buf) < length:
            want = length - len(buf)
            try:
                chunk = self._receiver.recv(want)
            except OSError as e:
                raise TransportExhausted(f"source error: {e}", stage=stage) from e
            if not chunk:
                raise TransportExhausted(
                    f"source exhausted with {want} of {length} bytes outstanding",
                    stage=stage,
                )
            if len(chunk) > want:
                raise SourceOverrun(want, len(chunk), stage=stage)
            buf += chunk
            if len(buf) < length and self._policy is ShortReadPolicy.STRICT:
                raise ShortRead(length, len(buf), stage=stage)
        return bytes(buf)
