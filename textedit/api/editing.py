"""Public contracts between the text core and an external editing state machine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from textedit.api.errors import OutOfRangeError


@dataclass(frozen=True, slots=True)
class TextSpan:
    """Transient ``(start, length)`` view into a buffer."""

    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def validate(self, buffer_length: int) -> "TextSpan":
        """Raise ``OutOfRangeError`` unless the span lies inside the buffer."""
        if self.start < 0 or self.length < 0 or self.start + self.length > buffer_length:
            raise OutOfRangeError(
                "span outside buffer",
                position=self.start,
                count=self.length,
                length=buffer_length,
            )
        return self

    @classmethod
    def between(cls, a: int, b: int) -> "TextSpan":
        """Span covering ``[min(a, b), max(a, b))``."""
        lo = min(a, b)
        return cls(start=lo, length=max(a, b) - lo)


@dataclass(frozen=True, slots=True)
class RowMetrics:
    """Bounding box and character count of one visual row."""

    x0: float
    x1: float
    y_min: float
    y_max: float
    baseline_delta: float
    char_count: int


class TextInputKind(Enum):
    KEY = "key"
    PASTE = "paste"


@dataclass(frozen=True, slots=True)
class TextInputOutcome:
    """Result of routing one text-input event into the buffer."""

    kind: TextInputKind
    applied: bool
    cursor: int


class EditingCallbacks(Protocol):
    """Callbacks an editing state machine requires from the text core."""

    def buffer_length(self) -> int: ...

    def char_at(self, index: int) -> int: ...

    def insert_chars(self, pos: int, data: bytes, count: int | None = None) -> bool: ...

    def delete_chars(self, pos: int, count: int) -> bool: ...

    def measure_width(self, span: TextSpan) -> int: ...

    def char_width(self, row_start: int, index: int) -> float: ...

    def row_at(self, start: int) -> RowMetrics: ...

    def locate_offset(self, x: float, y: float = 0.0) -> int: ...
