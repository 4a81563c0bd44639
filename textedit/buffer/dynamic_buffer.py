"""Growable byte buffer with bounds-checked positional edits."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator

from textedit.api.editing import TextSpan
from textedit.api.errors import AllocationFailure, OutOfRangeError

_LOG = logging.getLogger(__name__)

# Shared across buffers so (generation, start, length) identifies buffer contents.
_GENERATIONS = itertools.count(1)


class DynamicTextBuffer:
    """Owned byte storage with an explicit ``capacity >= length`` invariant."""

    __slots__ = ("_data", "_length", "_max_capacity", "_generation")

    def __init__(
        self,
        initial: bytes = b"",
        *,
        initial_capacity: int = 16,
        max_capacity: int | None = None,
    ) -> None:
        if initial_capacity < 0:
            raise ValueError("initial_capacity must be >= 0")
        if max_capacity is not None and max_capacity < len(initial):
            raise ValueError("max_capacity is smaller than the initial contents")
        capacity = max(int(initial_capacity), len(initial))
        if max_capacity is not None:
            capacity = min(capacity, int(max_capacity))
        self._data = bytearray(capacity)
        self._data[: len(initial)] = initial
        self._length = len(initial)
        self._max_capacity = max_capacity
        self._generation = next(_GENERATIONS)

    @property
    def length(self) -> int:
        return self._length

    @property
    def capacity(self) -> int:
        return len(self._data)

    @property
    def generation(self) -> int:
        """Process-unique token that changes on every successful mutation."""
        return self._generation

    def __len__(self) -> int:
        return self._length

    def __bytes__(self) -> bytes:
        return bytes(self._data[: self._length])

    def __iter__(self) -> Iterator[int]:
        return iter(self._data[: self._length])

    def __repr__(self) -> str:
        return f"DynamicTextBuffer({self.to_bytes()!r}, capacity={self.capacity})"

    def to_bytes(self) -> bytes:
        return bytes(self)

    def char_at(self, index: int) -> int:
        """Return the byte at ``index``."""
        if index < 0 or index >= self._length:
            raise OutOfRangeError("index outside buffer", position=index, count=1, length=self._length)
        return self._data[index]

    def read(self, span: TextSpan) -> bytes:
        """Copy the bytes covered by ``span`` after validating it."""
        span.validate(self._length)
        return bytes(self._data[span.start : span.end])

    def insert(self, pos: int, data: bytes, count: int | None = None) -> None:
        """Insert the first ``count`` bytes of ``data`` at ``pos``."""
        n = len(data) if count is None else int(count)
        if pos < 0 or pos > self._length or n < 0 or n > len(data):
            raise OutOfRangeError("insert outside buffer", position=pos, count=n, length=self._length)
        if n == 0:
            return
        required = self._length + n
        if required > len(self._data):
            self._grow(required)
        data_view = memoryview(data)[:n]
        self._data[pos + n : required] = self._data[pos : self._length]
        self._data[pos : pos + n] = data_view
        self._length = required
        self._generation = next(_GENERATIONS)
        _LOG.debug(
            "buffer_insert pos=%d count=%d length=%d capacity=%d",
            pos,
            n,
            self._length,
            len(self._data),
        )

    def delete(self, pos: int, count: int) -> None:
        """Remove ``count`` bytes starting at ``pos``; capacity is kept."""
        if pos < 0 or count < 0 or pos + count > self._length:
            raise OutOfRangeError("delete outside buffer", position=pos, count=count, length=self._length)
        if count == 0:
            return
        self._data[pos : self._length - count] = self._data[pos + count : self._length]
        self._data[self._length - count : self._length] = bytes(count)
        self._length -= count
        self._generation = next(_GENERATIONS)
        _LOG.debug("buffer_delete pos=%d count=%d length=%d", pos, count, self._length)

    def clear(self) -> None:
        self.delete(0, self._length)

    def _grow(self, required: int) -> None:
        capacity = len(self._data)
        target = max(capacity * 2, required)
        if self._max_capacity is not None:
            if required > self._max_capacity:
                raise AllocationFailure("buffer capacity limit reached", requested=required, capacity=capacity)
            target = min(target, self._max_capacity)
        try:
            grown = bytearray(target)
        except MemoryError as exc:
            raise AllocationFailure("buffer growth failed", requested=target, capacity=capacity) from exc
        grown[: self._length] = self._data[: self._length]
        self._data = grown
        _LOG.debug("buffer_grow capacity=%d->%d required=%d", capacity, target, required)
