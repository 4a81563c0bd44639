"""Public glyph metrics provider contracts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class FontMetrics:
    """Font-wide vertical metrics in font units."""

    ascent: float
    descent: float
    line_height: float


@dataclass(frozen=True, slots=True)
class GlyphBounds:
    """Axis-aligned glyph rectangle."""

    left: float
    bottom: float
    right: float
    top: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom


@dataclass(frozen=True, slots=True)
class GlyphMetrics:
    """Per-glyph advance and quad bounds.

    Plane bounds are baseline relative font units with y pointing up. Atlas
    bounds are texels of the atlas image in row order, so ``bottom`` is the
    larger row index for an upright glyph.
    """

    codepoint: int
    advance: float
    plane_bounds: GlyphBounds | None = None
    atlas_bounds: GlyphBounds | None = None

    @property
    def drawable(self) -> bool:
        return self.plane_bounds is not None and self.atlas_bounds is not None


class GlyphMetricsProvider(Protocol):
    """Read-only glyph source shared by measurement and quad layout."""

    @property
    def font_metrics(self) -> FontMetrics:
        """Return font-wide metrics in font units."""

    @property
    def atlas_size(self) -> tuple[int, int]:
        """Return atlas image dimensions in texels."""

    @property
    def distance_range(self) -> float | None:
        """Return the SDF pixel range, or ``None`` for plain bitmap atlases."""

    def glyph(self, codepoint: int) -> GlyphMetrics | None:
        """Return glyph metrics, or ``None`` when the glyph is not loaded."""

    def kerned_advance(self, codepoint: int, next_codepoint: int) -> float | None:
        """Return the pair-adjusted advance, or ``None`` if either glyph is missing."""
