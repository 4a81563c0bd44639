"""Text control wiring buffer, measurer, row oracle and quad builder together."""

from __future__ import annotations

import logging

from textedit.api.editing import RowMetrics, TextInputKind, TextInputOutcome, TextSpan
from textedit.api.errors import AllocationFailure
from textedit.api.geometry import Rect
from textedit.buffer.dynamic_buffer import DynamicTextBuffer
from textedit.fonts.loading import load_font_session
from textedit.fonts.session import FontSession
from textedit.layout.measure import TextMeasurer, TextSize
from textedit.layout.pen import NEWLINE
from textedit.layout.quads import GlyphRun, QuadBuilder
from textedit.layout.rows import RowLayoutOracle
from textedit.runtime.config import TextEditConfig, get_textedit_config

_LOG = logging.getLogger(__name__)


class TextControl:
    """Callbacks for an editing state machine plus rendering and clipboard helpers.

    Offsets are byte positions in the buffer. Out-of-range offsets raise
    ``OutOfRangeError`` before anything changes; an insert the buffer cannot
    grow for is refused and reported as ``False``.
    """

    def __init__(
        self,
        session: FontSession,
        *,
        buffer: DynamicTextBuffer | None = None,
        multiline: bool = False,
        measure_cache_max: int = 256,
        color: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0),
        caret_width: float = 1.0,
    ) -> None:
        self._session = session
        self._buffer = buffer if buffer is not None else DynamicTextBuffer()
        self._measurer = TextMeasurer(session, cache_max=measure_cache_max)
        self._rows = RowLayoutOracle(self._measurer, multiline=multiline)
        self._quads = QuadBuilder(session, color=color)
        self._caret_width = float(caret_width)

    @property
    def buffer(self) -> DynamicTextBuffer:
        return self._buffer

    @property
    def session(self) -> FontSession:
        return self._session

    @property
    def measurer(self) -> TextMeasurer:
        return self._measurer

    @property
    def multiline(self) -> bool:
        return self._rows.multiline

    def text(self) -> bytes:
        return self._buffer.to_bytes()

    # Editing callbacks

    def buffer_length(self) -> int:
        return self._buffer.length

    def char_at(self, index: int) -> int:
        return self._buffer.char_at(index)

    def insert_chars(self, pos: int, data: bytes, count: int | None = None) -> bool:
        try:
            self._buffer.insert(pos, data, count)
        except AllocationFailure as exc:
            _LOG.warning(
                "text_insert_refused pos=%d requested=%d capacity=%d",
                pos,
                exc.requested,
                exc.capacity,
            )
            return False
        return True

    def delete_chars(self, pos: int, count: int) -> bool:
        self._buffer.delete(pos, count)
        return True

    def measure(self, span: TextSpan) -> TextSize:
        return self._measurer.measure(self._buffer, span)

    def measure_width(self, span: TextSpan) -> int:
        return self._measurer.measure_width(self._buffer, span)

    def char_width(self, row_start: int, index: int) -> float:
        return self._rows.char_width(self._buffer, row_start, index)

    def row_at(self, start: int) -> RowMetrics:
        return self._rows.row_at(self._buffer, start)

    def rows(self) -> list[tuple[int, RowMetrics]]:
        return list(self._rows.iter_rows(self._buffer))

    def locate_offset(self, x: float, y: float = 0.0) -> int:
        return self._rows.locate_offset(self._buffer, x, y)

    # Rendering glue

    def glyph_run(self, origin_x: float = 0.0, origin_y: float = 0.0) -> GlyphRun:
        return self._quads.build(self._buffer, TextSpan(0, self._buffer.length), origin_x, origin_y)

    def caret_rect(self, cursor: int) -> Rect:
        row_index, row_start = self._row_containing(cursor)
        line = float(self._measurer.line_height_px)
        x = self.measure_width(TextSpan(row_start, cursor - row_start))
        return Rect(float(x), row_index * line, self._caret_width, line)

    def selection_rects(self, sel_start: int, sel_end: int) -> list[Rect]:
        """One highlight rectangle per row touched by ``[min, max)``."""
        span = TextSpan.between(sel_start, sel_end).validate(self._buffer.length)
        line = float(self._measurer.line_height_px)
        rects: list[Rect] = []
        for row_index, (row_start, row) in enumerate(self._rows.iter_rows(self._buffer)):
            row_end = row_start + row.char_count
            lo = max(span.start, row_start)
            hi = min(span.end, row_end)
            if hi <= lo:
                continue
            x = self.measure_width(TextSpan(row_start, lo - row_start))
            w = self.measure_width(TextSpan(lo, hi - lo))
            rects.append(Rect(float(x), row_index * line, float(w), line))
        return rects

    def selection_rect(self, sel_start: int, sel_end: int) -> Rect:
        """Bounding box of the selection highlight."""
        rects = self.selection_rects(sel_start, sel_end)
        if not rects:
            caret = self.caret_rect(min(sel_start, sel_end))
            return Rect(caret.x, caret.y, 0.0, caret.h)
        bounds = rects[0]
        for rect in rects[1:]:
            bounds = bounds.union(rect)
        return bounds

    def _row_containing(self, cursor: int) -> tuple[int, int]:
        length = self._buffer.length
        TextSpan(0, cursor).validate(length)
        row_index = 0
        row_start = 0
        for row_index, (row_start, row) in enumerate(self._rows.iter_rows(self._buffer)):
            row_end = row_start + row.char_count
            ends_with_newline = (
                self.multiline and row.char_count > 0 and self._buffer.char_at(row_end - 1) == NEWLINE
            )
            if cursor < row_end or (cursor == row_end and not ends_with_newline):
                break
        return row_index, row_start

    # Clipboard bridge

    def copy_range(self, a: int, b: int) -> bytes:
        return self._buffer.read(TextSpan.between(a, b))

    def cut_range(self, a: int, b: int) -> bytes:
        span = TextSpan.between(a, b)
        data = self._buffer.read(span)
        self._buffer.delete(span.start, span.length)
        return data

    def paste(self, pos: int, data: bytes) -> bool:
        """Insert a whole paste with one buffer call."""
        return self.insert_chars(pos, data)

    @staticmethod
    def classify_text_input(text: str | bytes) -> TextInputKind:
        """One character is a key press; bytes are counted as UTF-8 characters."""
        if not isinstance(text, str):
            text = bytes(text).decode("utf-8", errors="replace")
        return TextInputKind.KEY if len(text) == 1 else TextInputKind.PASTE

    def handle_text_input(self, pos: int, text: str | bytes) -> TextInputOutcome:
        """Route typed or pasted text; a multi-character input is a single insert."""
        kind = self.classify_text_input(text)
        data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
        if kind is TextInputKind.KEY:
            applied = self.insert_chars(pos, data)
        else:
            applied = self.paste(pos, data)
        cursor = pos + len(data) if applied else pos
        _LOG.debug("text_input kind=%s applied=%s cursor=%d", kind.value, applied, cursor)
        return TextInputOutcome(kind=kind, applied=applied, cursor=cursor)


def create_text_control(*, config: TextEditConfig | None = None, session: FontSession | None = None) -> TextControl:
    """Build a control from configuration, loading the configured font unless a session is given."""
    active = config if config is not None else get_textedit_config()
    font_session = session if session is not None else load_font_session(active)
    buffer = DynamicTextBuffer(
        initial_capacity=active.buffer.initial_capacity,
        max_capacity=active.buffer.max_capacity,
    )
    return TextControl(
        font_session,
        buffer=buffer,
        multiline=active.layout.multiline,
        measure_cache_max=active.layout.measure_cache_max,
        color=active.layout.text_color,
    )
