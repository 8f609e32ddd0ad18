"""In-memory sink and source, used by the loopback driver and the tests."""

from __future__ import annotations


class MemorySink:
    """Collects everything written into a bytearray.

    With ``limit`` set, the sink refuses (returns None) any write that would
    take it past ``limit`` bytes in total.
    """

    def __init__(self, limit: int | None = None) -> None:
        self.data = bytearray()
        self.limit = limit
        self.calls = 0

    def send(self, buf: bytes) -> int | None:
        self.calls += 1
        if self.limit is not None and len(self.data) + len(buf) > self.limit:
            return None
        self.data += buf
        return len(buf)

    def getvalue(self) -> bytes:
        return bytes(self.data)

    def clear(self) -> None:
        self.data.clear()
        self.calls = 0


class MemorySource:
    """Serves bytes from a buffer; returns None once it is exhausted.

    ``chunk`` caps how many bytes a single ``recv`` hands out, to simulate a
    transport that delivers short reads.
    """

    def __init__(self, data: bytes, chunk: int | None = None) -> None:
        if chunk is not None and chunk < 1:
            raise ValueError(f"chunk must be positive, got {chunk}")
        self._data = bytes(data)
        self._offset = 0
        self.chunk = chunk

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def recv(self, length: int) -> bytes | None:
        n = min(length, self.remaining)
        if self.chunk is not None:
            n = min(n, self.chunk)
        if n <= 0:
            return None
        start = self._offset
        self._offset += n
        return self._data[start : start + n]
