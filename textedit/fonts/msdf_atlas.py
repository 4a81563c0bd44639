"""Glyph metrics from a prebaked multi-channel signed distance field atlas layout."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Self

from textedit.api.errors import FontLoadError
from textedit.api.glyph_metrics import FontMetrics, GlyphBounds, GlyphMetrics
from textedit.runtime.json_codec import loads

_LOG = logging.getLogger(__name__)


class MsdfAtlasMetricsProvider:
    """Read-only provider over an msdf-atlas-gen JSON layout.

    Font metrics, advances and plane bounds are in em units. Atlas bounds are
    stored in image row order regardless of the layout's ``yOrigin``.
    """

    def __init__(
        self,
        *,
        font_metrics: FontMetrics,
        atlas_size: tuple[int, int],
        distance_range: float,
        glyphs: Mapping[int, GlyphMetrics],
        kerning: Mapping[tuple[int, int], float] | None = None,
    ) -> None:
        self._font_metrics = font_metrics
        self._atlas_size = (int(atlas_size[0]), int(atlas_size[1]))
        self._distance_range = float(distance_range)
        self._glyphs = dict(glyphs)
        self._kerning = dict(kerning or {})

    @property
    def font_metrics(self) -> FontMetrics:
        return self._font_metrics

    @property
    def atlas_size(self) -> tuple[int, int]:
        return self._atlas_size

    @property
    def distance_range(self) -> float | None:
        return self._distance_range

    @property
    def glyph_count(self) -> int:
        return len(self._glyphs)

    def glyph(self, codepoint: int) -> GlyphMetrics | None:
        return self._glyphs.get(codepoint)

    def kerned_advance(self, codepoint: int, next_codepoint: int) -> float | None:
        glyph = self._glyphs.get(codepoint)
        if glyph is None or next_codepoint not in self._glyphs:
            return None
        return glyph.advance + self._kerning.get((codepoint, next_codepoint), 0.0)

    @classmethod
    def from_json_file(cls, path: str | Path) -> Self:
        layout_path = Path(path)
        try:
            raw = layout_path.read_bytes()
        except OSError as exc:
            raise FontLoadError("atlas layout unreadable", details={"path": str(layout_path)}) from exc
        try:
            layout = loads(raw)
        except ValueError as exc:
            raise FontLoadError("atlas layout is not valid JSON", details={"path": str(layout_path)}) from exc
        provider = cls.from_layout(layout)
        _LOG.info("msdf_layout_loaded path=%s glyphs=%d", layout_path, provider.glyph_count)
        return provider

    @classmethod
    def from_layout(cls, layout: Mapping[str, object]) -> Self:
        try:
            atlas = _mapping(layout, "atlas")
            metrics = _mapping(layout, "metrics")
            width = int(_number(atlas, "width"))
            height = int(_number(atlas, "height"))
            bottom_origin = str(atlas.get("yOrigin", "bottom")).strip().lower() == "bottom"
            font_metrics = FontMetrics(
                ascent=_number(metrics, "ascender"),
                descent=_number(metrics, "descender"),
                line_height=_number(metrics, "lineHeight"),
            )
            glyphs: dict[int, GlyphMetrics] = {}
            for entry in _sequence(layout, "glyphs"):
                glyph = _parse_glyph(entry, atlas_height=height, bottom_origin=bottom_origin)
                glyphs[glyph.codepoint] = glyph
            kerning: dict[tuple[int, int], float] = {}
            for entry in _sequence(layout, "kerning", required=False):
                pair = (int(_number(entry, "unicode1")), int(_number(entry, "unicode2")))
                kerning[pair] = _number(entry, "advance")
            distance_range = _number(atlas, "distanceRange", default=2.0)
        except (KeyError, TypeError, ValueError) as exc:
            raise FontLoadError("malformed atlas layout", details={"error": str(exc)}) from exc
        return cls(
            font_metrics=font_metrics,
            atlas_size=(width, height),
            distance_range=distance_range,
            glyphs=glyphs,
            kerning=kerning,
        )


def _parse_glyph(entry: Mapping[str, object], *, atlas_height: int, bottom_origin: bool) -> GlyphMetrics:
    codepoint = int(_number(entry, "unicode"))
    plane_raw = entry.get("planeBounds")
    atlas_raw = entry.get("atlasBounds")
    plane = _bounds(plane_raw) if isinstance(plane_raw, Mapping) else None
    atlas = _bounds(atlas_raw) if isinstance(atlas_raw, Mapping) else None
    if atlas is not None and bottom_origin:
        atlas = GlyphBounds(
            left=atlas.left,
            bottom=float(atlas_height) - atlas.bottom,
            right=atlas.right,
            top=float(atlas_height) - atlas.top,
        )
    return GlyphMetrics(
        codepoint=codepoint,
        advance=_number(entry, "advance"),
        plane_bounds=plane,
        atlas_bounds=atlas,
    )


def _bounds(raw: Mapping[str, object]) -> GlyphBounds:
    return GlyphBounds(
        left=_number(raw, "left"),
        bottom=_number(raw, "bottom"),
        right=_number(raw, "right"),
        top=_number(raw, "top"),
    )


def _mapping(raw: Mapping[str, object], key: str) -> Mapping[str, object]:
    value = raw[key]
    if not isinstance(value, Mapping):
        raise TypeError(f"{key} must be an object")
    return value


def _sequence(raw: Mapping[str, object], key: str, *, required: bool = True) -> list[Mapping[str, object]]:
    value = raw.get(key)
    if value is None and not required:
        return []
    if not isinstance(value, list):
        raise TypeError(f"{key} must be an array")
    return [item for item in value if isinstance(item, Mapping)]


def _number(raw: Mapping[str, object], key: str, *, default: float | None = None) -> float:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    return float(value)
