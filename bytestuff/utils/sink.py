"""Append-only output sinks shared by the encoders and decoders.

Both sinks expose the same small surface so that one codec loop can write
either to a growable ``bytearray`` or into a caller-supplied buffer of fixed
size. Length codes are written through ``reserve()``/``patch()``: the codec
reserves a slot at the start of a block and patches its value by index once
the block length is known.
"""

from __future__ import annotations

from bytestuff.errors import CapacityExceeded


class GrowableSink:
    """Unbounded sink backed by a ``bytearray``. Never raises."""

    def __init__(self) -> None:
        self._buf = bytearray()

    def __len__(self) -> int:
        return len(self._buf)

    def append(self, value: int) -> None:
        self._buf.append(value)

    def extend(self, data: bytes) -> None:
        self._buf += data

    def reserve(self) -> int:
        index = len(self._buf)
        self._buf.append(0)
        return index

    def patch(self, index: int, value: int) -> None:
        self._buf[index] = value

    def truncate(self, length: int) -> None:
        del self._buf[length:]

    def getvalue(self) -> bytes:
        return bytes(self._buf)


class BoundedSink:
    """Sink writing into a caller-supplied buffer.

    Raises CapacityExceeded instead of growing; the buffer is never written
    past its end.
    """

    def __init__(self, buffer: bytearray | memoryview) -> None:
        view = memoryview(buffer)
        if view.readonly:
            raise TypeError("Output buffer must be writable")
        if view.format != "B" or view.ndim != 1:
            view = view.cast("B")
        self._view = view
        self._pos = 0

    def __len__(self) -> int:
        return self._pos

    @property
    def capacity(self) -> int:
        return len(self._view)

    def _claim(self, count: int) -> int:
        start = self._pos
        if start + count > len(self._view):
            raise CapacityExceeded(len(self._view))
        self._pos = start + count
        return start

    def append(self, value: int) -> None:
        self._view[self._claim(1)] = value

    def extend(self, data: bytes) -> None:
        start = self._claim(len(data))
        self._view[start:self._pos] = data

    def reserve(self) -> int:
        index = self._claim(1)
        self._view[index] = 0
        return index

    def patch(self, index: int, value: int) -> None:
        if index >= self._pos:
            raise IndexError(f"Patch index {index} outside written region")
        self._view[index] = value

    def truncate(self, length: int) -> None:
        self._pos = min(self._pos, length)


def as_bytes(data) -> bytes | bytearray:
    """Accept any bytes-like input; copy only when it lacks ``find``."""
    if isinstance(data, (bytes, bytearray)):
        return data
    return bytes(data)
