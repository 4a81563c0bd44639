"""Explicitly owned font state shared by measurement and quad layout."""

from __future__ import annotations

import itertools
import logging
import math
from collections.abc import Callable

from textedit.api.errors import FontLoadError, FontNotLoadedError
from textedit.api.glyph_metrics import FontMetrics, GlyphMetricsProvider

_LOG = logging.getLogger(__name__)

_REVISIONS = itertools.count(1)


class FontSession:
    """Loaded glyph provider plus the pixel scale derived from it.

    Replacing the provider is a stop-the-world operation for the caller: no
    measurement or build may be in flight. Every load/unload bumps
    ``revision`` so cached measurements keyed by it cannot outlive the font.
    """

    def __init__(
        self,
        *,
        pixel_size: float = 24.0,
        tab_width: int = 4,
        fallback_char: str = "?",
    ) -> None:
        if pixel_size <= 0.0:
            raise ValueError("pixel_size must be > 0")
        if tab_width < 0:
            raise ValueError("tab_width must be >= 0")
        if len(fallback_char) != 1:
            raise ValueError("fallback_char must be a single character")
        self._pixel_size = float(pixel_size)
        self._tab_width = int(tab_width)
        self._fallback_codepoint = ord(fallback_char)
        self._provider: GlyphMetricsProvider | None = None
        self._release: Callable[[], None] | None = None
        self._atlas_size: tuple[int, int] = (0, 0)
        self._scale = 0.0
        self._line_height = 0.0
        self._revision = next(_REVISIONS)

    @property
    def loaded(self) -> bool:
        return self._provider is not None

    @property
    def provider(self) -> GlyphMetricsProvider:
        if self._provider is None:
            raise FontNotLoadedError("no font loaded in session")
        return self._provider

    @property
    def font_metrics(self) -> FontMetrics:
        return self.provider.font_metrics

    @property
    def pixel_size(self) -> float:
        return self._pixel_size

    @property
    def tab_width(self) -> int:
        return self._tab_width

    @property
    def fallback_codepoint(self) -> int:
        return self._fallback_codepoint

    @property
    def scale(self) -> float:
        """Font units to pixels: ``pixel_size / (ascent - descent)``."""
        self._require_loaded()
        return self._scale

    @property
    def line_height(self) -> float:
        """Scaled baseline-to-baseline distance in (fractional) pixels."""
        self._require_loaded()
        return self._line_height

    @property
    def line_height_px(self) -> int:
        return math.ceil(self.line_height)

    @property
    def atlas_size(self) -> tuple[int, int]:
        self._require_loaded()
        return self._atlas_size

    @property
    def revision(self) -> int:
        return self._revision

    def _require_loaded(self) -> None:
        if self._provider is None:
            raise FontNotLoadedError("no font loaded in session")

    def load(
        self,
        provider: GlyphMetricsProvider,
        *,
        atlas_size: tuple[int, int] | None = None,
        release: Callable[[], None] | None = None,
    ) -> None:
        """Install ``provider``; ``atlas_size`` overrides the provider's own dimensions.

        ``release`` is called once when this provider leaves the session,
        either by ``unload`` or by the next successful ``load``.
        """
        metrics = provider.font_metrics
        em_height = float(metrics.ascent) - float(metrics.descent)
        if em_height <= 0.0:
            raise FontLoadError(
                "font metrics have no vertical extent",
                details={"ascent": metrics.ascent, "descent": metrics.descent},
            )
        width, height = atlas_size if atlas_size is not None else provider.atlas_size
        if width <= 0 or height <= 0:
            raise FontLoadError("atlas dimensions must be positive", details={"atlas_size": (width, height)})
        self._drop_provider()
        self._provider = provider
        self._release = release
        self._atlas_size = (int(width), int(height))
        self._scale = self._pixel_size / em_height
        self._line_height = self._scale * float(metrics.line_height)
        self._revision = next(_REVISIONS)
        _LOG.info(
            "font_loaded pixel_size=%.2f scale=%.6f line_height=%.3f atlas=%dx%d sdf=%s",
            self._pixel_size,
            self._scale,
            self._line_height,
            self._atlas_size[0],
            self._atlas_size[1],
            provider.distance_range is not None,
        )

    def unload(self) -> None:
        if self._provider is None:
            return
        self._drop_provider()
        self._atlas_size = (0, 0)
        self._scale = 0.0
        self._line_height = 0.0
        self._revision = next(_REVISIONS)
        _LOG.info("font_unloaded")

    def _drop_provider(self) -> None:
        release, self._release = self._release, None
        self._provider = None
        if release is not None:
            release()
