"""Exceptions raised by the COBS sender and receiver."""

from __future__ import annotations


class CobsError(Exception):
    """Base class for every error raised by libcobs."""


class TransportExhausted(CobsError):
    """The sink or source could not complete a requested write or read.

    The frame in progress is abandoned. Bytes already handed to a sink are
    not retracted, and no statistics are recorded for the call.
    """

    def __init__(self, message: str, *, stage: str = "") -> None:
        super().__init__(message)
        self.stage = stage


class ShortWrite(TransportExhausted):
    """The sink reported a count different from the size of the chunk."""

    def __init__(self, offered: int, accepted: int, *, stage: str = "") -> None:
        super().__init__(
            f"sink accepted {accepted} of {offered} bytes", stage=stage
        )
        self.offered = offered
        self.accepted = accepted


class ShortRead(TransportExhausted):
    """The source returned fewer bytes than requested (strict policy)."""

    def __init__(self, requested: int, received: int, *, stage: str = "") -> None:
        super().__init__(
            f"source returned {received} of {requested} bytes", stage=stage
        )
        self.requested = requested
        self.received = received


class SourceOverrun(TransportExhausted):
    """The source returned more bytes than requested."""

    def __init__(self, requested: int, received: int, *, stage: str = "") -> None:
        super().__init__(
            f"source returned {received} bytes, only {requested} requested",
            stage=stage,
        )
        self.requested = requested
        self.received = received
