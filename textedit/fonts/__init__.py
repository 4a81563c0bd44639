"""Glyph metric providers, font discovery and the shared font session."""

from textedit.fonts.discovery import discover_system_font, iter_system_font_candidates
from textedit.fonts.freetype_atlas import FreetypeAtlasMetricsProvider, open_freetype_face
from textedit.fonts.loading import create_font_registry, load_font_session, resolve_font_path
from textedit.fonts.msdf_atlas import MsdfAtlasMetricsProvider
from textedit.fonts.registry import FontHandle, FontRegistry
from textedit.fonts.session import FontSession

__all__ = [
    "FontHandle",
    "FontRegistry",
    "FontSession",
    "FreetypeAtlasMetricsProvider",
    "MsdfAtlasMetricsProvider",
    "create_font_registry",
    "discover_system_font",
    "iter_system_font_candidates",
    "load_font_session",
    "open_freetype_face",
    "resolve_font_path",
]
