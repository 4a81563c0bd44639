"""Glyph quad layout for one draw call per built span."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from textedit.api.editing import TextSpan
from textedit.api.glyph_metrics import GlyphMetrics
from textedit.buffer.dynamic_buffer import DynamicTextBuffer
from textedit.fonts.session import FontSession
from textedit.layout.pen import (
    CARRIAGE_RETURN,
    NEWLINE,
    SPACE,
    TAB,
    advance_units,
    glyph_advance_units,
    resolve_glyph,
)

QUAD_INDICES: tuple[int, ...] = (0, 1, 2, 2, 3, 0)
VERTEX_FLOATS = 10  # position(2) tex_coord(2) px_range(2) color(4)


@dataclass(frozen=True, slots=True)
class GlyphVertex:
    position: tuple[float, float]
    tex_coord: tuple[float, float]
    px_range: tuple[float, float]
    color: tuple[float, float, float, float]


@dataclass(frozen=True, slots=True)
class GlyphQuad:
    """One drawable glyph; vertices run (l,b) (r,b) (r,t) (l,t)."""

    codepoint: int
    offset: int
    vertices: tuple[GlyphVertex, GlyphVertex, GlyphVertex, GlyphVertex]
    indices: tuple[int, ...] = QUAD_INDICES

    @property
    def left(self) -> float:
        return self.vertices[0].position[0]

    @property
    def right(self) -> float:
        return self.vertices[1].position[0]


@dataclass(frozen=True, slots=True)
class GlyphRun:
    """Quads of one ``build`` call plus the final pen state.

    ``extent`` is the widest line's pen advance relative to the origin;
    ``ceil(extent)`` equals the measured width of the same text.
    """

    quads: tuple[GlyphQuad, ...]
    pen_x: float
    pen_y: float
    extent: float

    def __len__(self) -> int:
        return len(self.quads)


class QuadBuilder:
    """Walks text and emits one quad per visible glyph."""

    def __init__(
        self,
        session: FontSession,
        *,
        color: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0),
    ) -> None:
        self._session = session
        self._color = color

    @property
    def color(self) -> tuple[float, float, float, float]:
        return self._color

    def build(
        self,
        buffer: DynamicTextBuffer,
        span: TextSpan,
        origin_x: float = 0.0,
        origin_y: float = 0.0,
    ) -> GlyphRun:
        return self.build_bytes(buffer.read(span), origin_x, origin_y, first_offset=span.start)

    def build_bytes(
        self,
        data: Sequence[int],
        origin_x: float = 0.0,
        origin_y: float = 0.0,
        *,
        first_offset: int = 0,
    ) -> GlyphRun:
        session = self._session
        provider = session.provider
        scale = session.scale
        line_height = session.line_height
        fallback = session.fallback_codepoint
        # Advance accumulates from 0.0 exactly like the measurer; the origin is added per quad.
        advance_x = 0.0
        pen_y = float(origin_y)
        extent = 0.0
        quads: list[GlyphQuad] = []
        last = len(data) - 1
        for index, codepoint in enumerate(data):
            if codepoint == CARRIAGE_RETURN:
                continue
            if codepoint == NEWLINE:
                extent = max(extent, advance_x)
                advance_x = 0.0
                pen_y -= line_height
                continue
            next_codepoint = data[index + 1] if index < last else None
            if codepoint == SPACE or codepoint == TAB:
                advance_x += scale * advance_units(session, codepoint, next_codepoint)
                continue
            glyph, substituted = resolve_glyph(provider, codepoint, fallback)
            if glyph is None:
                continue
            if glyph.drawable:
                quads.append(
                    self._glyph_quad(
                        glyph,
                        codepoint=codepoint,
                        offset=first_offset + index,
                        pen_x=float(origin_x) + advance_x,
                        pen_y=pen_y,
                    )
                )
            advance_x += scale * glyph_advance_units(provider, glyph, substituted, codepoint, next_codepoint)
        extent = max(extent, advance_x)
        return GlyphRun(
            quads=tuple(quads),
            pen_x=float(origin_x) + advance_x,
            pen_y=pen_y,
            extent=extent,
        )

    def _glyph_quad(
        self,
        glyph: GlyphMetrics,
        *,
        codepoint: int,
        offset: int,
        pen_x: float,
        pen_y: float,
    ) -> GlyphQuad:
        session = self._session
        scale = session.scale
        plane = glyph.plane_bounds
        atlas = glyph.atlas_bounds
        if plane is None or atlas is None:
            raise ValueError(f"glyph {codepoint} has no quad bounds")
        pl = pen_x + plane.left * scale
        pr = pen_x + plane.right * scale
        pb = pen_y + plane.bottom * scale
        pt = pen_y + plane.top * scale
        atlas_w, atlas_h = session.atlas_size
        texel_w = 1.0 / float(atlas_w)
        texel_h = 1.0 / float(atlas_h)
        al = atlas.left * texel_w
        ar = atlas.right * texel_w
        ab = atlas.bottom * texel_h
        at = atlas.top * texel_h
        px_range = _screen_px_range(
            session.provider.distance_range,
            quad_w=pr - pl,
            quad_h=pt - pb,
            atlas_w=atlas.right - atlas.left,
            atlas_h=atlas.bottom - atlas.top,
        )
        color = self._color
        return GlyphQuad(
            codepoint=codepoint,
            offset=offset,
            vertices=(
                GlyphVertex(position=(pl, pb), tex_coord=(al, ab), px_range=px_range, color=color),
                GlyphVertex(position=(pr, pb), tex_coord=(ar, ab), px_range=px_range, color=color),
                GlyphVertex(position=(pr, pt), tex_coord=(ar, at), px_range=px_range, color=color),
                GlyphVertex(position=(pl, pt), tex_coord=(al, at), px_range=px_range, color=color),
            ),
        )


def _screen_px_range(
    distance_range: float | None,
    *,
    quad_w: float,
    quad_h: float,
    atlas_w: float,
    atlas_h: float,
) -> tuple[float, float]:
    """Distance-field range in screen pixels, at least 1.0; zero for bitmap atlases."""
    if distance_range is None:
        return (0.0, 0.0)
    rx = distance_range * abs(quad_w) / abs(atlas_w) if atlas_w else 1.0
    ry = distance_range * abs(quad_h) / abs(atlas_h) if atlas_h else 1.0
    return (max(rx, 1.0), max(ry, 1.0))


def pack_quads(quads: Sequence[GlyphQuad]) -> tuple[np.ndarray, np.ndarray]:
    """Flatten quads into ``float32`` vertices ``(4n, 10)`` and ``uint32`` indices ``(6n,)``."""
    vertices = np.zeros((len(quads) * 4, VERTEX_FLOATS), dtype=np.float32)
    indices = np.zeros(len(quads) * 6, dtype=np.uint32)
    for quad_index, quad in enumerate(quads):
        base = quad_index * 4
        for corner, vertex in enumerate(quad.vertices):
            vertices[base + corner] = (
                *vertex.position,
                *vertex.tex_coord,
                *vertex.px_range,
                *vertex.color,
            )
        indices[quad_index * 6 : quad_index * 6 + 6] = [base + i for i in quad.indices]
    return vertices, indices
