"""Row layout contract for an external cursor/navigation state machine."""

from __future__ import annotations

from collections.abc import Iterator

from textedit.api.editing import RowMetrics, TextSpan
from textedit.api.errors import OutOfRangeError
from textedit.buffer.dynamic_buffer import DynamicTextBuffer
from textedit.layout.measure import TextMeasurer
from textedit.layout.pen import NEWLINE


class RowLayoutOracle:
    """Answers row-at-offset and pointer-to-offset queries over a buffer."""

    def __init__(self, measurer: TextMeasurer, *, multiline: bool = False) -> None:
        self._measurer = measurer
        self._multiline = bool(multiline)

    @property
    def multiline(self) -> bool:
        return self._multiline

    def row_at(self, buffer: DynamicTextBuffer, start: int) -> RowMetrics:
        """Metrics of the visual row beginning at ``start``."""
        length = buffer.length
        if start < 0 or start > length:
            raise OutOfRangeError("row start outside buffer", position=start, count=0, length=length)
        count = self._row_char_count(buffer, start)
        width = self._measurer.measure_width(buffer, TextSpan(start, count))
        line = float(self._measurer.line_height_px)
        return RowMetrics(
            x0=0.0,
            x1=float(width),
            y_min=0.0,
            y_max=line,
            baseline_delta=line,
            char_count=count,
        )

    def iter_rows(self, buffer: DynamicTextBuffer) -> Iterator[tuple[int, RowMetrics]]:
        """Yield ``(start, row)`` pairs covering the buffer in order.

        A trailing empty row is produced for an empty buffer and, in
        multi-line mode, after a final newline, since the caret can sit there.
        """
        length = buffer.length
        start = 0
        while start < length:
            row = self.row_at(buffer, start)
            yield start, row
            start += row.char_count
        if length == 0 or (self._multiline and buffer.char_at(length - 1) == NEWLINE):
            yield length, self.row_at(buffer, length)

    def caret_positions(self, buffer: DynamicTextBuffer, row_start: int, count: int) -> list[int]:
        """Pixel x of each character boundary in ``[row_start, row_start + count]``."""
        return self._measurer.prefix_widths(buffer, TextSpan(row_start, count))

    def char_width(self, buffer: DynamicTextBuffer, row_start: int, index: int) -> float:
        """Width the character at ``index`` occupies within its row."""
        length = buffer.length
        if index < row_start or index >= length:
            raise OutOfRangeError("character outside row", position=index, count=1, length=length)
        positions = self.caret_positions(buffer, row_start, index - row_start + 1)
        return float(positions[-1] - positions[-2])

    def locate_offset(self, buffer: DynamicTextBuffer, x: float, y: float = 0.0) -> int:
        """Map a point relative to the text origin onto the nearest character boundary.

        Rows are stacked downwards by ``baseline_delta``; points above the
        first row or below the last clamp onto them. Within the row the
        closest boundary wins and an exact tie keeps the earlier offset.
        """
        rows = tuple(self.iter_rows(buffer))
        start, row = rows[-1]
        base_y = 0.0
        for candidate_start, candidate in rows:
            if y < base_y + candidate.y_max:
                start, row = candidate_start, candidate
                break
            base_y += candidate.baseline_delta
        count = row.char_count
        limit = count
        if self._multiline and count > 0 and buffer.char_at(start + count - 1) == NEWLINE:
            limit = count - 1
        positions = self.caret_positions(buffer, start, limit)
        best = 0
        best_distance = abs(x - positions[0])
        for k in range(1, limit + 1):
            distance = abs(x - positions[k])
            if distance < best_distance:
                best = k
                best_distance = distance
        return start + best

    def _row_char_count(self, buffer: DynamicTextBuffer, start: int) -> int:
        remaining = buffer.length - start
        if not self._multiline or remaining == 0:
            return remaining
        newline = buffer.read(TextSpan(start, remaining)).find(b"\n")
        return remaining if newline < 0 else newline + 1
