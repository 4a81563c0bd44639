from __future__ import annotations

import copy
from types import SimpleNamespace

import pytest

from textedit.fonts.msdf_atlas import MsdfAtlasMetricsProvider
from textedit.fonts.session import FontSession

# Em-unit values are binary fractions so scaled pixel values are exact at pixel_size=20.
_ADVANCES: dict[str, float] = {
    "A": 0.625,
    "V": 0.625,
    "H": 0.625,
    "i": 0.25,
    "a": 0.5,
    "b": 0.5,
    "c": 0.5,
    "d": 0.5,
    "?": 0.5,
}


def _glyph_entry(index: int, char: str, advance: float) -> dict[str, object]:
    x = float(index * 16)
    return {
        "unicode": ord(char),
        "advance": advance,
        "planeBounds": {"left": 0.0625, "bottom": 0.0, "right": advance - 0.0625, "top": 0.625},
        "atlasBounds": {"left": x, "bottom": 4.0, "right": x + 12.0, "top": 20.0},
    }


MSDF_LAYOUT: dict[str, object] = {
    "atlas": {"type": "msdf", "distanceRange": 2, "size": 20, "width": 256, "height": 64, "yOrigin": "bottom"},
    "metrics": {"emSize": 1, "lineHeight": 1.25, "ascender": 0.75, "descender": -0.25},
    "glyphs": [{"unicode": 32, "advance": 0.25}]
    + [_glyph_entry(index, char, advance) for index, (char, advance) in enumerate(_ADVANCES.items())],
    "kerning": [
        {"unicode1": ord("A"), "unicode2": ord("V"), "advance": -0.125},
        {"unicode1": ord("V"), "unicode2": ord("A"), "advance": -0.125},
        {"unicode1": ord("H"), "unicode2": ord("i"), "advance": -0.0625},
    ],
}


@pytest.fixture
def msdf_layout() -> dict[str, object]:
    return copy.deepcopy(MSDF_LAYOUT)


@pytest.fixture
def msdf_provider(msdf_layout: dict[str, object]) -> MsdfAtlasMetricsProvider:
    return MsdfAtlasMetricsProvider.from_layout(msdf_layout)


@pytest.fixture
def session(msdf_provider: MsdfAtlasMetricsProvider) -> FontSession:
    """Scale 20 px/em, line height 25 px."""
    font_session = FontSession(pixel_size=20.0, tab_width=4, fallback_char="?")
    font_session.load(msdf_provider)
    return font_session


class FakeFreetypeFace:
    """Duck-typed freetype.Face with 26.6 fixed-point metrics."""

    def __init__(self) -> None:
        self.size = SimpleNamespace(ascender=16 * 64, descender=-4 * 64, height=24 * 64)
        self.has_kerning = True
        self.pixel_sizes: list[tuple[int, int]] = []
        self.glyph = SimpleNamespace()
        self._indices = {ord(" "): 1, ord("A"): 2, ord("B"): 3}
        self._bitmaps = {
            ord(" "): (0, 0, 0, 0, 4, b""),
            ord("A"): (3, 4, 1, 12, 8, bytes(range(10, 22))),
            ord("B"): (2, 2, 0, 10, 6, bytes((200, 201, 202, 203))),
        }

    def set_pixel_sizes(self, width: int, height: int) -> None:
        self.pixel_sizes.append((width, height))

    def get_char_index(self, codepoint: int) -> int:
        return self._indices.get(codepoint, 0)

    def load_char(self, char: str) -> None:
        width, rows, left, top, advance, alpha = self._bitmaps[ord(char)]
        self.glyph = SimpleNamespace(
            bitmap=SimpleNamespace(width=width, rows=rows, pitch=width, buffer=list(alpha)),
            bitmap_left=left,
            bitmap_top=top,
            advance=SimpleNamespace(x=advance * 64),
        )

    def get_kerning(self, left: int, right: int) -> SimpleNamespace:
        if (left, right) == (2, 3):
            return SimpleNamespace(x=-64)
        return SimpleNamespace(x=0)


@pytest.fixture
def fake_face() -> FakeFreetypeFace:
    return FakeFreetypeFace()
