"""Consistent Overhead Byte Stuffing over pluggable byte sinks and sources.

Wire format: [COBS-encoded payload] [0x00 delimiter]
"""

from __future__ import annotations

from libcobs.config import ShortReadPolicy
from libcobs.errors import (
    CobsError,
    ShortRead,
    ShortWrite,
    SourceOverrun,
    TransportExhausted,
)
from libcobs.io.memory import MemorySink, MemorySource
from libcobs.recv import CobsReceiver, ReceiverOperation
from libcobs.send import CobsSender, SenderOperation
from libcobs.statistics import CobsStatistics

__version__ = "0.1.0"

__all__ = [
    "CobsError",
    "CobsReceiver",
    "CobsSender",
    "CobsStatistics",
    "MemorySink",
    "MemorySource",
    "ReceiverOperation",
    "SenderOperation",
    "ShortRead",
    "ShortReadPolicy",
    "ShortWrite",
    "SourceOverrun",
    "TransportExhausted",
    "decode",
    "encode",
]


def encode(data: bytes) -> bytes:
    """COBS-encode data, 0x00 delimiter included."""
    sink = MemorySink()
    CobsSender(sink).send(data)
    return sink.getvalue()


def decode(frame: bytes) -> bytes:
    """Decode one delimited frame. Bytes after the delimiter are ignored."""
    return CobsReceiver(MemorySource(frame)).recv()
