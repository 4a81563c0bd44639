"""Text measurement, row layout and glyph quad building."""

from textedit.layout.measure import TextMeasurer, TextSize
from textedit.layout.quads import GlyphQuad, GlyphRun, GlyphVertex, QuadBuilder, pack_quads
from textedit.layout.rows import RowLayoutOracle

__all__ = [
    "GlyphQuad",
    "GlyphRun",
    "GlyphVertex",
    "QuadBuilder",
    "RowLayoutOracle",
    "TextMeasurer",
    "TextSize",
    "pack_quads",
]
