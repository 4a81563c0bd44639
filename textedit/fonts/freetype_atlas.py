"""Glyph metrics and a bitmap atlas rasterized through FreeType."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Self

import numpy as np

from textedit.api.errors import FontLoadError
from textedit.api.glyph_metrics import FontMetrics, GlyphBounds, GlyphMetrics
from textedit.runtime.errors import log_recoverable

_LOG = logging.getLogger(__name__)


def open_freetype_face(font_path: str) -> object:
    """Open a FreeType face, wrapping every backend failure in ``FontLoadError``."""
    if not font_path:
        raise FontLoadError("font path is empty", details={"path": font_path})
    try:
        import freetype

        return freetype.Face(font_path)
    except Exception as exc:
        raise FontLoadError("freetype face creation failed", details={"path": font_path}) from exc


def _rasterize_glyph_bitmap(
    *,
    face: object,
    codepoint: int,
) -> tuple[int, int, int, int, float, bytes] | None:
    """Render one glyph: ``(width, rows, left, top, advance, alpha)`` in pixels."""
    try:
        load_char = getattr(face, "load_char", None)
        glyph = getattr(face, "glyph", None)
        if not callable(load_char) or glyph is None:
            return None
        load_char(chr(codepoint))
        glyph = getattr(face, "glyph", glyph)
        bitmap = getattr(glyph, "bitmap", None)
        if bitmap is None:
            return None
        width = int(getattr(bitmap, "width", 0))
        rows = int(getattr(bitmap, "rows", 0))
        pitch = int(getattr(bitmap, "pitch", width))
        left = int(getattr(glyph, "bitmap_left", 0))
        top = int(getattr(glyph, "bitmap_top", 0))
        advance_raw = getattr(getattr(glyph, "advance", None), "x", 0)
        advance = float(advance_raw) / 64.0 if isinstance(advance_raw, (int, float)) else 0.0
        if width <= 0 or rows <= 0:
            return (0, 0, left, top, advance, b"")
        raw = bytes(getattr(bitmap, "buffer", b""))
        if pitch == width:
            alpha = raw[: width * rows]
        else:
            out = bytearray()
            row_pitch = max(width, abs(pitch))
            for row in range(rows):
                if pitch >= 0:
                    start = row * row_pitch
                else:
                    start = (rows - 1 - row) * row_pitch
                out.extend(raw[start : start + width])
            alpha = bytes(out)
        return (width, rows, left, top, advance, alpha)
    except Exception:
        log_recoverable(_LOG, "glyph_rasterization_failed", codepoint=codepoint)
        return None


class _ShelfPacker:
    """Row-by-row region allocator with a one-texel gutter."""

    def __init__(self, width: int, height: int) -> None:
        self.width = max(2, int(width))
        self.height = max(2, int(height))
        self._cursor_x = 1
        self._cursor_y = 1
        self._row_height = 0

    def pack(self, *, width: int, height: int) -> tuple[int, int] | None:
        region_w = max(1, int(width))
        region_h = max(1, int(height))
        if region_w + 2 >= self.width or region_h + 2 >= self.height:
            return None
        cursor_x = self._cursor_x
        cursor_y = self._cursor_y
        row_h = self._row_height
        if cursor_x + region_w + 1 >= self.width:
            cursor_x = 1
            cursor_y += row_h + 1
            row_h = 0
        if cursor_y + region_h + 1 >= self.height:
            return None
        self._cursor_x = cursor_x + region_w + 1
        self._cursor_y = cursor_y
        self._row_height = max(row_h, region_h)
        return (cursor_x, cursor_y)


class FreetypeAtlasMetricsProvider:
    """Bitmap-atlas provider; all metrics are pixels at ``raster_size``."""

    def __init__(
        self,
        *,
        face: object,
        font_metrics: FontMetrics,
        glyphs: dict[int, GlyphMetrics],
        glyph_indices: dict[int, int],
        atlas_pixels: np.ndarray,
    ) -> None:
        self._face = face
        self._font_metrics = font_metrics
        self._glyphs = glyphs
        self._glyph_indices = glyph_indices
        self._atlas_pixels = atlas_pixels
        self._has_kerning = bool(getattr(face, "has_kerning", False))
        self._kerning_cache: dict[tuple[int, int], float] = {}

    @property
    def font_metrics(self) -> FontMetrics:
        return self._font_metrics

    @property
    def atlas_size(self) -> tuple[int, int]:
        height, width = self._atlas_pixels.shape
        return (int(width), int(height))

    @property
    def distance_range(self) -> float | None:
        return None

    @property
    def atlas_pixels(self) -> np.ndarray:
        """Single-channel ``uint8`` coverage image, shape ``(height, width)``."""
        return self._atlas_pixels

    def glyph(self, codepoint: int) -> GlyphMetrics | None:
        return self._glyphs.get(codepoint)

    def kerned_advance(self, codepoint: int, next_codepoint: int) -> float | None:
        glyph = self._glyphs.get(codepoint)
        if glyph is None or next_codepoint not in self._glyphs:
            return None
        if not self._has_kerning:
            return glyph.advance
        pair = (codepoint, next_codepoint)
        kerning = self._kerning_cache.get(pair)
        if kerning is None:
            kerning = self._pair_kerning(pair)
            self._kerning_cache[pair] = kerning
        return glyph.advance + kerning

    def _pair_kerning(self, pair: tuple[int, int]) -> float:
        try:
            vector = self._face.get_kerning(self._glyph_indices[pair[0]], self._glyph_indices[pair[1]])
            return float(getattr(vector, "x", 0)) / 64.0
        except Exception:
            log_recoverable(_LOG, "kerning_lookup_failed", left=pair[0], right=pair[1])
            return 0.0

    @classmethod
    def from_face(
        cls,
        face: object,
        *,
        raster_size: int = 32,
        charset: Iterable[int] = range(0x20, 0x7F),
        atlas_size: tuple[int, int] = (512, 512),
    ) -> Self:
        """Rasterize ``charset`` into a fresh atlas; glyphs missing from the face are skipped."""
        try:
            face.set_pixel_sizes(0, int(max(1, raster_size)))
            size = face.size
            font_metrics = FontMetrics(
                ascent=float(size.ascender) / 64.0,
                descent=float(size.descender) / 64.0,
                line_height=float(size.height) / 64.0,
            )
        except Exception as exc:
            raise FontLoadError("freetype face has no usable size metrics", details={"raster_size": raster_size}) from exc
        packer = _ShelfPacker(*atlas_size)
        pixels = np.zeros((packer.height, packer.width), dtype=np.uint8)
        glyphs: dict[int, GlyphMetrics] = {}
        glyph_indices: dict[int, int] = {}
        skipped: list[int] = []
        for codepoint in charset:
            try:
                glyph_index = int(face.get_char_index(codepoint))
            except Exception:
                log_recoverable(_LOG, "glyph_index_lookup_failed", codepoint=codepoint)
                glyph_index = 0
            if glyph_index == 0:
                skipped.append(codepoint)
                continue
            raster = _rasterize_glyph_bitmap(face=face, codepoint=codepoint)
            if raster is None:
                skipped.append(codepoint)
                continue
            width, rows, left, top, advance, alpha = raster
            glyph_indices[codepoint] = glyph_index
            plane: GlyphBounds | None = None
            atlas: GlyphBounds | None = None
            if width > 0 and rows > 0:
                region = packer.pack(width=width, height=rows)
                if region is None:
                    _LOG.warning("atlas_full codepoint=%d atlas=%dx%d", codepoint, packer.width, packer.height)
                else:
                    x, y = region
                    pixels[y : y + rows, x : x + width] = np.frombuffer(alpha, dtype=np.uint8).reshape(rows, width)
                    plane = GlyphBounds(
                        left=float(left),
                        bottom=float(top - rows),
                        right=float(left + width),
                        top=float(top),
                    )
                    atlas = GlyphBounds(
                        left=float(x),
                        bottom=float(y + rows),
                        right=float(x + width),
                        top=float(y),
                    )
            glyphs[codepoint] = GlyphMetrics(
                codepoint=codepoint,
                advance=advance,
                plane_bounds=plane,
                atlas_bounds=atlas,
            )
        if skipped:
            _LOG.debug("freetype_glyphs_skipped count=%d", len(skipped))
        _LOG.info(
            "freetype_atlas_built glyphs=%d raster_size=%d atlas=%dx%d",
            len(glyphs),
            raster_size,
            packer.width,
            packer.height,
        )
        return cls(
            face=face,
            font_metrics=font_metrics,
            glyphs=glyphs,
            glyph_indices=glyph_indices,
            atlas_pixels=pixels,
        )
