"""Public text-edit API contracts."""

from textedit.api.editing import (
    EditingCallbacks,
    RowMetrics,
    TextInputKind,
    TextInputOutcome,
    TextSpan,
)
from textedit.api.errors import (
    AllocationFailure,
    FontLoadError,
    FontNotLoadedError,
    OutOfRangeError,
    TextEditError,
)
from textedit.api.geometry import Rect
from textedit.api.glyph_metrics import FontMetrics, GlyphBounds, GlyphMetrics, GlyphMetricsProvider
from textedit.api.logging import TextEditLoggingConfig

__all__ = [
    "AllocationFailure",
    "EditingCallbacks",
    "FontLoadError",
    "FontMetrics",
    "FontNotLoadedError",
    "GlyphBounds",
    "GlyphMetrics",
    "GlyphMetricsProvider",
    "OutOfRangeError",
    "Rect",
    "RowMetrics",
    "TextEditError",
    "TextEditLoggingConfig",
    "TextInputKind",
    "TextInputOutcome",
    "TextSpan",
]
