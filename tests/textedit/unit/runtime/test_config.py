from __future__ import annotations

import pytest

from textedit.runtime import config as config_module
from textedit.runtime.config import (
    DEFAULT_CHARSET,
    get_textedit_config,
    initialize_textedit_config,
    load_textedit_config,
    parse_hex_color,
    resolve_log_level_name,
    set_textedit_config,
)


def test_defaults_from_empty_env() -> None:
    config = load_textedit_config(env={})

    assert config.font.path is None
    assert config.font.kind == "freetype"
    assert config.font.pixel_size == 24.0
    assert config.font.raster_size == 32
    assert config.font.atlas_size == (512, 512)
    assert config.font.charset == DEFAULT_CHARSET
    assert config.layout.tab_width == 4
    assert config.layout.fallback_char == "?"
    assert config.layout.multiline is False
    assert config.layout.text_color == (0.0, 0.0, 0.0, 1.0)
    assert config.layout.measure_cache_max == 256
    assert config.buffer.initial_capacity == 16
    assert config.buffer.max_capacity is None
    assert config.logging.level_name == "INFO"
    assert config.logging.console_format == "text"
    assert config.logging.file_path is None


def test_env_overrides() -> None:
    config = load_textedit_config(
        env={
            "TEXTEDIT_FONT_PATH": "/fonts/atlas.json",
            "TEXTEDIT_FONT_KIND": "MSDF",
            "TEXTEDIT_FONT_PIXEL_SIZE": "18.5",
            "TEXTEDIT_ATLAS_SIZE": "1024 x 256",
            "TEXTEDIT_TAB_WIDTH": "8",
            "TEXTEDIT_MULTILINE": "yes",
            "TEXTEDIT_TEXT_COLOR": "#ff000080",
            "TEXTEDIT_BUFFER_MAX_CAPACITY": "4096",
            "TEXTEDIT_LOG_FORMAT": "JSON",
            "TEXTEDIT_LOG_FILE": "logs/textedit.jsonl",
        }
    )

    assert config.font.path == "/fonts/atlas.json"
    assert config.font.kind == "msdf"
    assert config.font.pixel_size == 18.5
    assert config.font.atlas_size == (1024, 256)
    assert config.layout.tab_width == 8
    assert config.layout.multiline is True
    assert config.layout.text_color == pytest.approx((1.0, 0.0, 0.0, 128 / 255))
    assert config.buffer.max_capacity == 4096
    assert config.logging.console_format == "json"
    assert config.logging.file_path == "logs/textedit.jsonl"


def test_invalid_values_fall_back_to_defaults() -> None:
    config = load_textedit_config(
        env={
            "TEXTEDIT_FONT_PIXEL_SIZE": "huge",
            "TEXTEDIT_TAB_WIDTH": "-3",
            "TEXTEDIT_ATLAS_SIZE": "square",
            "TEXTEDIT_FALLBACK_CHAR": "??",
            "TEXTEDIT_MULTILINE": "maybe",
            "TEXTEDIT_TEXT_COLOR": "black",
        }
    )

    assert config.font.pixel_size == 24.0
    assert config.layout.tab_width == 0
    assert config.font.atlas_size == (512, 512)
    assert config.layout.fallback_char == "?"
    assert config.layout.multiline is False
    assert config.layout.text_color == (0.0, 0.0, 0.0, 1.0)


def test_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEXTEDIT_FONT_RASTER_SIZE", "48")

    assert load_textedit_config().font.raster_size == 48


def test_log_level_prefers_package_variable() -> None:
    assert resolve_log_level_name(env={"LOG_LEVEL": "debug"}) == "DEBUG"
    assert resolve_log_level_name(env={"LOG_LEVEL": "debug", "TEXTEDIT_LOG_LEVEL": "warning"}) == "WARNING"
    assert resolve_log_level_name("error", env={}) == "ERROR"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("#fff", (1.0, 1.0, 1.0, 1.0)),
        ("#00000000", (0.0, 0.0, 0.0, 0.0)),
        ("#0000ff", (0.0, 0.0, 1.0, 1.0)),
        ("0000ff", None),
        ("#12345", None),
        ("#gggggg", None),
    ],
)
def test_parse_hex_color(raw: str, expected: tuple[float, float, float, float] | None) -> None:
    assert parse_hex_color(raw) == expected


def test_active_config_lives_in_context(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module, "_TEXTEDIT_CONFIG", config_module.ContextVar("test_config", default=None))
    monkeypatch.setenv("TEXTEDIT_TAB_WIDTH", "2")

    first = get_textedit_config()
    assert first.layout.tab_width == 2
    assert get_textedit_config() is first

    replacement = initialize_textedit_config(env={"TEXTEDIT_TAB_WIDTH": "6"})
    assert get_textedit_config() is replacement

    set_textedit_config(first)
    assert get_textedit_config() is first
