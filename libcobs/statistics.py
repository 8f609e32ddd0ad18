"""Cumulative raw/encoded byte counters for a sender or receiver."""

from __future__ import annotations


class CobsStatistics:
    """Running totals of raw and encoded bytes.

    Updated once per completed frame. Python ints do not overflow, so the
    totals grow without bound for the lifetime of the owning codec.
    """

    __slots__ = ("_raw", "_encoded")

    def __init__(self) -> None:
        self._raw = 0
        self._encoded = 0

    def update(self, raw: int, encoded: int) -> None:
        if raw < 0 or encoded < 0:
            raise ValueError(f"negative statistics delta: raw={raw} encoded={encoded}")
        self._raw += raw
        self._encoded += encoded

    def get(self) -> tuple[int, int]:
        return (self._raw, self._encoded)

    @property
    def raw(self) -> int:
        return self._raw

    @property
    def encoded(self) -> int:
        return self._encoded

    def __repr__(self) -> str:
        return f"CobsStatistics(raw={self._raw}, encoded={self._encoded})"
