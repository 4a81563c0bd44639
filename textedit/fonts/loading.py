"""Font session construction from configuration."""

from __future__ import annotations

import logging

from textedit.api.errors import FontLoadError
from textedit.api.glyph_metrics import GlyphMetricsProvider
from textedit.fonts.discovery import discover_system_font
from textedit.fonts.freetype_atlas import FreetypeAtlasMetricsProvider, open_freetype_face
from textedit.fonts.msdf_atlas import MsdfAtlasMetricsProvider
from textedit.fonts.registry import FontRegistry
from textedit.fonts.session import FontSession
from textedit.runtime.config import TextEditConfig, TextEditFontConfig, get_textedit_config

_LOG = logging.getLogger(__name__)


def create_font_registry(font_config: TextEditFontConfig) -> FontRegistry:
    """Registry with the ``freetype`` and ``msdf`` backends configured."""
    registry = FontRegistry()

    def _load_freetype(path: str) -> GlyphMetricsProvider:
        return FreetypeAtlasMetricsProvider.from_face(
            open_freetype_face(path),
            raster_size=font_config.raster_size,
            charset=[ord(ch) for ch in font_config.charset],
            atlas_size=font_config.atlas_size,
        )

    registry.register_kind("freetype", _load_freetype)
    registry.register_kind("msdf", MsdfAtlasMetricsProvider.from_json_file)
    return registry


def resolve_font_path(font_config: TextEditFontConfig) -> str:
    if font_config.path:
        return font_config.path
    if font_config.kind == "msdf":
        raise FontLoadError("msdf font kind requires an atlas layout path", details={"kind": font_config.kind})
    return discover_system_font()


def load_font_session(
    config: TextEditConfig | None = None,
    *,
    registry: FontRegistry | None = None,
) -> FontSession:
    """Create a session and load the configured font into it.

    The session holds one registry reference, released when it unloads the font.
    """
    active = config if config is not None else get_textedit_config()
    font_config = active.font
    fonts = registry if registry is not None else create_font_registry(font_config)
    path = resolve_font_path(font_config)
    handle = fonts.load(font_config.kind, path)
    session = FontSession(
        pixel_size=font_config.pixel_size,
        tab_width=active.layout.tab_width,
        fallback_char=active.layout.fallback_char,
    )
    try:
        session.load(fonts.get(handle), release=lambda: fonts.release(handle))
    except FontLoadError:
        fonts.release(handle)
        raise
    _LOG.debug("font_session_ready kind=%s path=%s", font_config.kind, path)
    return session
