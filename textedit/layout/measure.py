"""Pixel measurement of buffer slices."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from textedit.api.editing import TextSpan
from textedit.buffer.dynamic_buffer import DynamicTextBuffer
from textedit.fonts.session import FontSession
from textedit.layout.pen import CARRIAGE_RETURN, NEWLINE, advance_units

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TextSize:
    """Whole-pixel extent of measured text."""

    width: int
    height: int


class TextMeasurer:
    """Measures spans with the font session's pen arithmetic.

    Results are cached per ``(font revision, buffer generation, start, length)``;
    both tokens change on every font load and buffer mutation.
    """

    def __init__(self, session: FontSession, *, cache_max: int = 256) -> None:
        self._session = session
        self._cache_max = max(0, int(cache_max))
        self._cache: dict[tuple[int, int, int, int], TextSize] = {}

    @property
    def session(self) -> FontSession:
        return self._session

    @property
    def line_height_px(self) -> int:
        return self._session.line_height_px

    def measure(self, buffer: DynamicTextBuffer, span: TextSpan) -> TextSize:
        span.validate(buffer.length)
        if self._cache_max == 0:
            return self.measure_bytes(buffer.read(span))
        key = (self._session.revision, buffer.generation, span.start, span.length)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        size = self.measure_bytes(buffer.read(span))
        if len(self._cache) >= self._cache_max:
            self._cache.pop(next(iter(self._cache)))
        self._cache[key] = size
        return size

    def measure_width(self, buffer: DynamicTextBuffer, span: TextSpan) -> int:
        return self.measure(buffer, span).width

    def measure_bytes(self, data: Sequence[int]) -> TextSize:
        """Measure raw text without a buffer."""
        session = self._session
        line_height = session.line_height
        if not data:
            return TextSize(width=0, height=math.ceil(line_height))
        scale = session.scale
        max_width = 0.0
        line_width = 0.0
        lines = 1
        last = len(data) - 1
        for index, codepoint in enumerate(data):
            if codepoint == NEWLINE:
                max_width = max(max_width, line_width)
                line_width = 0.0
                lines += 1
                continue
            if codepoint == CARRIAGE_RETURN:
                continue
            next_codepoint = data[index + 1] if index < last else None
            line_width += scale * advance_units(session, codepoint, next_codepoint)
        width = max(max_width, line_width)
        return TextSize(width=math.ceil(width), height=math.ceil(lines * line_height))

    def prefix_widths(self, buffer: DynamicTextBuffer, span: TextSpan) -> list[int]:
        """Return ``measure([start, start + k)).width`` for every ``k`` in ``0..length``.

        Computed in one pass: the running pen uses the kerned advance toward
        the next character, while each prefix ends with the plain advance its
        last character gets when the measured span stops there.
        """
        data = buffer.read(span)
        session = self._session
        scale = session.scale
        out = [0]
        max_width = 0.0
        line_width = 0.0
        last = len(data) - 1
        for index, codepoint in enumerate(data):
            if codepoint == NEWLINE:
                max_width = max(max_width, line_width)
                line_width = 0.0
                out.append(math.ceil(max_width))
                continue
            if codepoint == CARRIAGE_RETURN:
                out.append(math.ceil(max(max_width, line_width)))
                continue
            closing = line_width + scale * advance_units(session, codepoint, None)
            out.append(math.ceil(max(max_width, closing)))
            next_codepoint = data[index + 1] if index < last else None
            line_width += scale * advance_units(session, codepoint, next_codepoint)
        return out

    def clear_cache(self) -> None:
        self._cache.clear()
