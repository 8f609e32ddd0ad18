"""Tests for the loopback fuzz driver."""

import random

import pytest

from libcobs import decode, encode
from libcobs.config import ShortReadPolicy
from libcobs.errors import ShortRead
from libcobs.fuzz import LoopbackMismatch, loopback, random_buffer, run


def test_module_encode_decode():
    assert encode(b"\x11\x22\x00\x33") == b"\x03\x11\x22\x02\x33\x00"
    assert decode(b"\x03\x11\x22\x02\x33\x00") == b"\x11\x22\x00\x33"
    assert decode(encode(b"")) == b""


@pytest.mark.parametrize("length", [0, 1, 2, 10, 253, 254, 255, 300, 508, 509, 1000])
def test_round_trip_lengths(length):
    data = (bytes(range(256)) * 4)[:length]
    raw, encoded = loopback(data)
    assert raw == length
    assert encoded == len(encode(data))


def test_round_trip_zero_runs():
    for data in (b"\x00" * 600, (b"\x01" * 254 + b"\x00") * 3, b"\xff" * 1000):
        loopback(data)


def test_round_trip_with_short_reads():
    data = bytes(range(1, 256)) * 3
    loopback(data, chunk=5)


def test_strict_policy_with_short_reads_fails():
    with pytest.raises(ShortRead):
        loopback(bytes(range(1, 256)), policy=ShortReadPolicy.STRICT, chunk=5)


def test_random_buffer_respects_max_len():
    rng = random.Random(42)
    for _ in range(200):
        assert len(random_buffer(rng, 64)) <= 64


def test_run_summary():
    summary = run(iterations=200, max_len=600, seed=42)
    assert summary.iterations == 200
    assert summary.seed == 42
    assert summary.encoded_bytes >= summary.raw_bytes + 2 * 200
    assert summary.overhead >= 1.0


def test_run_is_reproducible():
    a = run(iterations=50, max_len=300, seed=7)
    b = run(iterations=50, max_len=300, seed=7)
    assert (a.raw_bytes, a.encoded_bytes) == (b.raw_bytes, b.encoded_bytes)


def test_run_strict_policy():
    summary = run(iterations=50, max_len=300, seed=3, policy=ShortReadPolicy.STRICT)
    assert summary.iterations == 50


def test_mismatch_detected(monkeypatch):
    monkeypatch.setattr("libcobs.fuzz.CobsReceiver.recv", lambda self: b"\x02")
    with pytest.raises(LoopbackMismatch, match="differs") as exc:
        loopback(b"\x01")
    assert exc.value.data == b"\x01"
