"""Tests for CobsStatistics."""

import pytest

from libcobs.statistics import CobsStatistics


def test_starts_at_zero():
    assert CobsStatistics().get() == (0, 0)


def test_update_accumulates():
    s = CobsStatistics()
    for n in range(1, 5):
        s.update(1, 1)
        assert s.get() == (n, n)


def test_raw_and_encoded_tracked_separately():
    s = CobsStatistics()
    s.update(4, 6)
    s.update(0, 2)
    assert s.get() == (4, 8)
    assert s.raw == 4
    assert s.encoded == 8


def test_no_wraparound():
    s = CobsStatistics()
    s.update(2**64 - 1, 2**64 - 1)
    s.update(1, 1)
    assert s.get() == (2**64, 2**64)


def test_negative_delta_rejected():
    s = CobsStatistics()
    s.update(3, 5)
    with pytest.raises(ValueError, match="negative"):
        s.update(-1, 0)
    assert s.get() == (3, 5)
