"""Pen-advance arithmetic shared by the measurer and the quad builder.

Both walk text with ``x += session.scale * advance_units(...)`` starting from
``0.0``; keeping the rule here is what lets caret/selection pixel offsets and
drawn glyph positions agree over arbitrarily long strings.
"""

from __future__ import annotations

from textedit.api.glyph_metrics import GlyphMetrics, GlyphMetricsProvider
from textedit.fonts.session import FontSession

NEWLINE = 0x0A
CARRIAGE_RETURN = 0x0D
TAB = 0x09
SPACE = 0x20


def breaks_kerning(codepoint: int | None) -> bool:
    """Line breaks end a kerning pair; so does the end of the text."""
    return codepoint is None or codepoint == NEWLINE or codepoint == CARRIAGE_RETURN


def resolve_glyph(
    provider: GlyphMetricsProvider, codepoint: int, fallback_codepoint: int
) -> tuple[GlyphMetrics | None, bool]:
    """Return ``(glyph, substituted)``; ``glyph`` is ``None`` when even the fallback is missing."""
    glyph = provider.glyph(codepoint)
    if glyph is not None:
        return glyph, False
    return provider.glyph(fallback_codepoint), True


def glyph_advance_units(
    provider: GlyphMetricsProvider,
    glyph: GlyphMetrics,
    substituted: bool,
    codepoint: int,
    next_codepoint: int | None,
) -> float:
    if substituted or breaks_kerning(next_codepoint):
        return float(glyph.advance)
    kerned = provider.kerned_advance(codepoint, next_codepoint)
    return float(glyph.advance) if kerned is None else float(kerned)


def tab_advance_units(session: FontSession) -> float:
    space = session.provider.glyph(SPACE)
    if space is None:
        return 0.0
    return float(session.tab_width) * float(space.advance)


def advance_units(session: FontSession, codepoint: int, next_codepoint: int | None) -> float:
    """Unscaled advance for ``codepoint`` followed by ``next_codepoint``.

    Line breaks are the caller's business and never reach this function.
    """
    if codepoint == TAB:
        return tab_advance_units(session)
    provider = session.provider
    glyph, substituted = resolve_glyph(provider, codepoint, session.fallback_codepoint)
    if glyph is None:
        return 0.0
    return glyph_advance_units(provider, glyph, substituted, codepoint, next_codepoint)
