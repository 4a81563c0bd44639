"""Centralized text-edit configuration sourced from environment."""

from __future__ import annotations

import os
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Callable, Mapping, TypeVar

from textedit.api.logging import TextEditLoggingConfig

DEFAULT_CHARSET = "".join(chr(code) for code in range(0x20, 0x7F))


@dataclass(frozen=True, slots=True)
class TextEditFontConfig:
    path: str | None
    kind: str
    pixel_size: float
    raster_size: int
    atlas_size: tuple[int, int]
    charset: str


@dataclass(frozen=True, slots=True)
class TextEditLayoutConfig:
    tab_width: int
    fallback_char: str
    multiline: bool
    text_color: tuple[float, float, float, float]
    measure_cache_max: int


@dataclass(frozen=True, slots=True)
class TextEditBufferConfig:
    initial_capacity: int
    max_capacity: int | None


@dataclass(frozen=True, slots=True)
class TextEditConfig:
    font: TextEditFontConfig
    layout: TextEditLayoutConfig
    buffer: TextEditBufferConfig
    logging: TextEditLoggingConfig


_TEXTEDIT_CONFIG: ContextVar[TextEditConfig | None] = ContextVar("textedit_config", default=None)


def _raw(name: str, *, env: Mapping[str, str] | None = None) -> str | None:
    value = os.getenv(name) if env is None else env.get(name)
    return None if value is None else str(value)


def _flag(name: str, default: bool, *, env: Mapping[str, str] | None = None) -> bool:
    raw = _raw(name, env=env)
    if raw is None:
        return bool(default)
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return bool(default)


T = TypeVar("T", int, float)


def _number(
    name: str,
    default: T,
    parse: Callable[[str], T],
    *,
    minimum: T | None = None,
    env: Mapping[str, str] | None = None,
) -> T:
    raw = _raw(name, env=env)
    try:
        value = default if raw is None else parse(raw.strip())
    except ValueError:
        value = default
    return value if minimum is None else max(minimum, value)


def _int(name: str, default: int, *, minimum: int | None = None, env: Mapping[str, str] | None = None) -> int:
    return _number(name, int(default), int, minimum=minimum, env=env)


def _float(name: str, default: float, *, minimum: float | None = None, env: Mapping[str, str] | None = None) -> float:
    return _number(name, float(default), float, minimum=minimum, env=env)


def _text(name: str, default: str, *, env: Mapping[str, str] | None = None) -> str:
    raw = _raw(name, env=env)
    if raw is None:
        return str(default)
    value = raw.strip()
    return value if value else str(default)


def _resolution(raw: str) -> tuple[int, int] | None:
    value = str(raw).strip().lower()
    if not value:
        return None
    normalized = value.replace(" ", "")
    for sep in ("x", ",", ":"):
        if sep in normalized:
            left, right = normalized.split(sep, 1)
            try:
                width = max(1, int(left))
                height = max(1, int(right))
            except ValueError:
                return None
            return (width, height)
    return None


def _normalize_font_kind(raw: str) -> str:
    value = str(raw).strip().lower()
    if value in {"msdf", "sdf", "msdf_atlas", "json"}:
        return "msdf"
    return "freetype"


def parse_hex_color(raw: str) -> tuple[float, float, float, float] | None:
    """Parse ``#rgb``, ``#rgba``, ``#rrggbb`` or ``#rrggbbaa`` into unit floats."""
    normalized = raw.strip().lower()
    if not normalized.startswith("#"):
        return None
    value = normalized.removeprefix("#")
    if len(value) in {3, 4}:
        value = "".join(ch * 2 for ch in value)
    if len(value) == 6:
        value = f"{value}ff"
    if len(value) != 8:
        return None
    try:
        channels = tuple(int(value[index : index + 2], 16) for index in range(0, 8, 2))
    except ValueError:
        return None
    return (
        float(channels[0]) / 255.0,
        float(channels[1]) / 255.0,
        float(channels[2]) / 255.0,
        float(channels[3]) / 255.0,
    )


def resolve_log_level_name(default: str = "INFO", *, env: Mapping[str, str] | None = None) -> str:
    """Resolve log level with the package-prefixed override taking precedence."""
    value = _raw("TEXTEDIT_LOG_LEVEL", env=env)
    if value is None:
        value = _raw("LOG_LEVEL", env=env) or default
    return value.strip().upper()


def load_textedit_config(*, env: Mapping[str, str] | None = None) -> TextEditConfig:
    scope_env = env

    font_path = _text("TEXTEDIT_FONT_PATH", "", env=scope_env)
    atlas_size = _resolution(_text("TEXTEDIT_ATLAS_SIZE", "512x512", env=scope_env)) or (512, 512)
    charset = _raw("TEXTEDIT_FONT_CHARSET", env=scope_env) or DEFAULT_CHARSET

    fallback_char = _text("TEXTEDIT_FALLBACK_CHAR", "?", env=scope_env)
    if len(fallback_char) != 1:
        fallback_char = "?"
    text_color = parse_hex_color(_text("TEXTEDIT_TEXT_COLOR", "#000000", env=scope_env))
    max_capacity = _int("TEXTEDIT_BUFFER_MAX_CAPACITY", 0, minimum=0, env=scope_env)

    return TextEditConfig(
        font=TextEditFontConfig(
            path=font_path or None,
            kind=_normalize_font_kind(_text("TEXTEDIT_FONT_KIND", "freetype", env=scope_env)),
            pixel_size=_float("TEXTEDIT_FONT_PIXEL_SIZE", 24.0, minimum=1.0, env=scope_env),
            raster_size=_int("TEXTEDIT_FONT_RASTER_SIZE", 32, minimum=6, env=scope_env),
            atlas_size=atlas_size,
            charset=charset,
        ),
        layout=TextEditLayoutConfig(
            tab_width=_int("TEXTEDIT_TAB_WIDTH", 4, minimum=0, env=scope_env),
            fallback_char=fallback_char,
            multiline=_flag("TEXTEDIT_MULTILINE", False, env=scope_env),
            text_color=text_color if text_color is not None else (0.0, 0.0, 0.0, 1.0),
            measure_cache_max=_int("TEXTEDIT_MEASURE_CACHE_MAX", 256, minimum=0, env=scope_env),
        ),
        buffer=TextEditBufferConfig(
            initial_capacity=_int("TEXTEDIT_BUFFER_INITIAL_CAPACITY", 16, minimum=0, env=scope_env),
            max_capacity=max_capacity if max_capacity > 0 else None,
        ),
        logging=TextEditLoggingConfig(
            level_name=resolve_log_level_name(env=scope_env),
            console_format=_text("TEXTEDIT_LOG_FORMAT", "text", env=scope_env).lower(),
            file_path=_text("TEXTEDIT_LOG_FILE", "", env=scope_env) or None,
            file_format=_text("TEXTEDIT_LOG_FILE_FORMAT", "json", env=scope_env).lower(),
        ),
    )


def initialize_textedit_config(*, env: Mapping[str, str] | None = None) -> TextEditConfig:
    config = load_textedit_config(env=env)
    _TEXTEDIT_CONFIG.set(config)
    return config


def set_textedit_config(config: TextEditConfig) -> TextEditConfig:
    _TEXTEDIT_CONFIG.set(config)
    return config


def get_textedit_config() -> TextEditConfig:
    config = _TEXTEDIT_CONFIG.get()
    if config is not None:
        return config
    return initialize_textedit_config()


__all__ = [
    "DEFAULT_CHARSET",
    "TextEditBufferConfig",
    "TextEditConfig",
    "TextEditFontConfig",
    "TextEditLayoutConfig",
    "get_textedit_config",
    "initialize_textedit_config",
    "load_textedit_config",
    "parse_hex_color",
    "resolve_log_level_name",
    "set_textedit_config",
]
