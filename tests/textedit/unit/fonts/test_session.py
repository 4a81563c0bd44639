from __future__ import annotations

import pytest

from textedit.api.errors import FontLoadError, FontNotLoadedError
from textedit.fonts.msdf_atlas import MsdfAtlasMetricsProvider
from textedit.fonts.session import FontSession


def test_load_derives_scale_and_line_height(msdf_provider: MsdfAtlasMetricsProvider) -> None:
    session = FontSession(pixel_size=20.0)

    session.load(msdf_provider)

    assert session.loaded
    assert session.scale == 20.0
    assert session.line_height == 25.0
    assert session.line_height_px == 25
    assert session.atlas_size == (256, 64)
    assert session.fallback_codepoint == ord("?")


def test_atlas_size_override(msdf_provider: MsdfAtlasMetricsProvider) -> None:
    session = FontSession()

    session.load(msdf_provider, atlas_size=(512, 128))

    assert session.atlas_size == (512, 128)


def test_unloaded_session_refuses_queries(msdf_provider: MsdfAtlasMetricsProvider) -> None:
    session = FontSession()
    with pytest.raises(FontNotLoadedError):
        session.provider
    with pytest.raises(FontNotLoadedError):
        session.scale

    session.load(msdf_provider)
    session.unload()

    assert not session.loaded
    with pytest.raises(FontNotLoadedError):
        session.line_height


def test_revision_changes_on_every_load_and_unload(msdf_provider: MsdfAtlasMetricsProvider) -> None:
    session = FontSession()
    revisions = [session.revision]

    session.load(msdf_provider)
    revisions.append(session.revision)
    session.load(msdf_provider)
    revisions.append(session.revision)
    session.unload()
    revisions.append(session.revision)

    assert len(set(revisions)) == 4


def test_load_rejects_degenerate_metrics(msdf_layout: dict[str, object]) -> None:
    msdf_layout["metrics"]["ascender"] = -0.25
    provider = MsdfAtlasMetricsProvider.from_layout(msdf_layout)

    with pytest.raises(FontLoadError):
        FontSession().load(provider)


def test_load_rejects_empty_atlas(msdf_provider: MsdfAtlasMetricsProvider) -> None:
    with pytest.raises(FontLoadError):
        FontSession().load(msdf_provider, atlas_size=(0, 64))



def test_release_runs_once_when_provider_leaves_session(msdf_provider: MsdfAtlasMetricsProvider) -> None:
    released: list[str] = []
    font_session = FontSession()

    font_session.load(msdf_provider, release=lambda: released.append("first"))
    font_session.load(msdf_provider, release=lambda: released.append("second"))
    assert released == ["first"]

    font_session.unload()
    font_session.unload()
    assert released == ["first", "second"]


def test_failed_load_keeps_current_provider_and_release(msdf_provider: MsdfAtlasMetricsProvider) -> None:
    released: list[str] = []
    font_session = FontSession()
    font_session.load(msdf_provider, release=lambda: released.append("kept"))

    with pytest.raises(FontLoadError):
        font_session.load(msdf_provider, atlas_size=(0, 64), release=lambda: released.append("rejected"))

    assert released == []
    assert font_session.provider is msdf_provider

@pytest.mark.parametrize(
    "kwargs",
    [{"pixel_size": 0.0}, {"tab_width": -1}, {"fallback_char": ""}, {"fallback_char": "ab"}],
)
def test_constructor_validation(kwargs: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        FontSession(**kwargs)
