from __future__ import annotations

import os
from pathlib import Path

import pytest

from textedit.api.errors import FontLoadError
from textedit.fonts import discovery
from textedit.runtime.config import load_textedit_config


def test_env_override_is_explicit_only() -> None:
    env = {"TEXTEDIT_FONT_PATHS": os.pathsep.join(["/missing/one.ttf", " ", "/missing/two.ttf"])}

    assert discovery.iter_system_font_candidates(env=env) == ("/missing/one.ttf", "/missing/two.ttf")


def test_discover_returns_first_existing_candidate(tmp_path: Path) -> None:
    font = tmp_path / "Mono.ttf"
    font.write_bytes(b"\x00\x01\x00\x00")
    env = {"TEXTEDIT_FONT_PATHS": os.pathsep.join([str(tmp_path / "missing.ttf"), str(font)])}

    assert discovery.discover_system_font(env=env) == os.path.normpath(str(font))


def test_discover_failure_lists_checked_candidates() -> None:
    env = {"TEXTEDIT_FONT_PATHS": "/missing/one.ttf"}

    with pytest.raises(FontLoadError) as exc_info:
        discovery.discover_system_font(env=env)

    assert exc_info.value.details["font_candidates_checked"] == (os.path.normpath("/missing/one.ttf"),)


def test_platform_directories_are_scanned_for_font_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "b.otf").write_bytes(b"")
    (tmp_path / "A.ttf").write_bytes(b"")
    (tmp_path / "readme.txt").write_text("fonts", encoding="utf-8")
    monkeypatch.setattr(discovery, "_platform_font_files", lambda: ())
    monkeypatch.setattr(discovery, "_platform_font_directories", lambda: (str(tmp_path), str(tmp_path / "nope")))

    candidates = discovery.iter_system_font_candidates(env={})

    assert [Path(item).name for item in candidates] == ["A.ttf", "b.otf"]


def test_single_font_path_setting_is_not_a_candidate_list(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(discovery, "_platform_font_files", lambda: ("/usr/share/fonts/Default.ttf",))
    monkeypatch.setattr(discovery, "_platform_font_directories", lambda: ())
    env = {"TEXTEDIT_FONT_PATH": os.pathsep.join(["/fonts/a.ttf", "/fonts/b.ttf"])}

    assert discovery.iter_system_font_candidates(env=env) == ("/usr/share/fonts/Default.ttf",)


def test_candidate_list_does_not_become_the_configured_font_path() -> None:
    env = {"TEXTEDIT_FONT_PATHS": os.pathsep.join(["/fonts/a.ttf", "/fonts/b.ttf"])}

    assert load_textedit_config(env=env).font.path is None
