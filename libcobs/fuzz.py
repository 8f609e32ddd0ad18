"""Randomized loopback driver: encode into memory, decode it back, compare.

Buffers are biased towards zeros and lengths around the 254-byte block
limit, where the encoder and decoder disagree first if they disagree at all.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from libcobs.config import ShortReadPolicy
from libcobs.errors import CobsError
from libcobs.io.memory import MemorySink, MemorySource
from libcobs.recv import CobsReceiver
from libcobs.send import CobsSender

log = logging.getLogger(__name__)

_BOUNDARY_LENGTHS = (0, 1, 253, 254, 255, 256, 508, 509)


class LoopbackMismatch(CobsError):
    """A buffer did not survive an encode/decode round trip."""

    def __init__(self, message: str, data: bytes) -> None:
        super().__init__(message)
        self.data = data


@dataclass
class FuzzSummary:
    iterations: int = 0
    raw_bytes: int = 0
    encoded_bytes: int = 0
    seed: int | None = None

    @property
    def overhead(self) -> float:
        """Encoded bytes per raw byte (delimiters included)."""
        if not self.raw_bytes:
            return 0.0
        return self.encoded_bytes / self.raw_bytes


def loopback(
    data: bytes,
    *,
    policy: ShortReadPolicy = ShortReadPolicy.RETRY,
    chunk: int | None = None,
) -> tuple[int, int]:
    """Round-trip ``data`` through a memory sink and source.

    Returns the (raw, encoded) byte counts of the frame. Raises
    LoopbackMismatch on any discrepancy.
    """
    sink = MemorySink()
    sender = CobsSender(sink)
    sent = sender.send(data)
    encoded = sink.getvalue()

    if sent != len(encoded):
        raise LoopbackMismatch(
            f"send reported {sent} bytes, sink holds {len(encoded)}", data
        )
    if encoded[-1:] != b"\x00" or 0 in encoded[:-1]:
        raise LoopbackMismatch("encoded frame is not zero-free", data)

    source = MemorySource(encoded, chunk=chunk)
    receiver = CobsReceiver(source, short_read_policy=policy)
    decoded = receiver.recv()

    if decoded != data:
        raise LoopbackMismatch("decoded frame differs from input", data)
    if source.remaining:
        raise LoopbackMismatch(f"{source.remaining} encoded bytes left unread", data)
    if sender.stats().get() != receiver.stats().get():
        raise LoopbackMismatch(
            f"statistics differ: sender={sender.stats()} receiver={receiver.stats()}",
            data,
        )
    return sender.stats().get()


def random_buffer(rng: random.Random, max_len: int) -> bytes:
    """Random buffer, sometimes zero-heavy, sometimes zero-free."""
    if rng.random() < 0.2:
        n = rng.choice([n for n in _BOUNDARY_LENGTHS if n <= max_len] or [0])
    else:
        n = rng.randint(0, max_len)

    mode = rng.random()
    if mode < 0.3:
        return bytes(rng.randint(1, 0xFF) for _ in range(n))
    if mode < 0.5:
        return bytes(0 if rng.random() < 0.5 else rng.randint(1, 0xFF) for _ in range(n))
    return bytes(rng.getrandbits(8) for _ in range(n))


def run(
    iterations: int = 1000,
    max_len: int = 1024,
    seed: int | None = None,
    policy: ShortReadPolicy = ShortReadPolicy.RETRY,
) -> FuzzSummary:
    """Loop random buffers through ``loopback``; stop at the first failure."""
    if seed is None:
        seed = random.randrange(2**32)
    rng = random.Random(seed)
    summary = FuzzSummary(seed=seed)
    log.info("fuzz: %d iterations, max_len=%d, seed=%d", iterations, max_len, seed)

    for i in range(iterations):
        data = random_buffer(rng, max_len)
        # Short reads are only survivable when the receiver retries.
        chunk = None
        if policy is ShortReadPolicy.RETRY and rng.random() < 0.25:
            chunk = rng.randint(1, 8)
        try:
            raw, encoded = loopback(data, policy=policy, chunk=chunk)
        except CobsError:
            log.error("fuzz: iteration %d failed (seed=%d, len=%d)", i, seed, len(data))
            raise
        summary.iterations += 1
        summary.raw_bytes += raw
        summary.encoded_bytes += encoded

    log.info(
        "fuzz: ok, %d frames, %d raw -> %d encoded bytes",
        summary.iterations,
        summary.raw_bytes,
        summary.encoded_bytes,
    )
    return summary
