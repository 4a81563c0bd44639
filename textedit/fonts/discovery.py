"""System font file discovery for the freetype backend."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

from textedit.api.errors import FontLoadError

_LOG = logging.getLogger(__name__)

_FONT_SUFFIXES = (".ttf", ".otf", ".ttc")


def discover_system_font(*, env: Mapping[str, str] | None = None) -> str:
    """Return the first existing candidate font file."""
    checked: list[str] = []
    for candidate in iter_system_font_candidates(env=env):
        normalized = os.path.normpath(candidate)
        checked.append(normalized)
        if os.path.isfile(normalized):
            _LOG.debug("system_font_selected path=%s checked=%d", normalized, len(checked))
            return normalized
    raise FontLoadError(
        "system font discovery failed",
        details={"font_candidates_checked": tuple(checked[:64])},
    )


def iter_system_font_candidates(*, env: Mapping[str, str] | None = None) -> tuple[str, ...]:
    """Candidate font paths; ``TEXTEDIT_FONT_PATHS`` entries replace platform defaults."""
    source = os.environ if env is None else env
    override = str(source.get("TEXTEDIT_FONT_PATHS", "")).strip()
    if override:
        return tuple(item.strip() for item in override.split(os.pathsep) if item.strip())
    candidates = list(_platform_font_files())
    for directory in _platform_font_directories():
        candidates.extend(_scan_font_directory(directory))
    return tuple(candidates)


def _scan_font_directory(directory: str) -> list[str]:
    if not os.path.isdir(directory):
        return []
    try:
        entries = sorted(os.scandir(directory), key=lambda entry: entry.name.lower())
    except OSError:
        _LOG.debug("font_directory_unreadable path=%s", directory, exc_info=True)
        return []
    return [entry.path for entry in entries if entry.is_file() and entry.name.lower().endswith(_FONT_SUFFIXES)]


def _platform_font_files() -> tuple[str, ...]:
    if os.name == "nt":
        return (
            r"C:\Windows\Fonts\consola.ttf",
            r"C:\Windows\Fonts\segoeui.ttf",
            r"C:\Windows\Fonts\arial.ttf",
        )
    if sys.platform == "darwin":
        return (
            "/System/Library/Fonts/Menlo.ttc",
            "/System/Library/Fonts/SFNS.ttf",
            "/Library/Fonts/Arial.ttf",
        )
    if os.name == "posix":
        return (
            "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
            "/usr/share/fonts/TTF/DejaVuSans.ttf",
        )
    return ()


def _platform_font_directories() -> tuple[str, ...]:
    if os.name == "nt":
        return (r"C:\Windows\Fonts",)
    if sys.platform == "darwin":
        return ("/System/Library/Fonts", "/Library/Fonts")
    if os.name == "posix":
        return (
            "/usr/share/fonts/truetype",
            "/usr/share/fonts",
            os.path.expanduser("~/.fonts"),
        )
    return ()
