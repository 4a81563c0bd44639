from __future__ import annotations

import logging
import sys
from pathlib import Path

import orjson
import pytest

from textedit.api.logging import TextEditLoggingConfig
from textedit.runtime.errors import log_recoverable
from textedit.runtime.logging import (
    JsonFormatter,
    configure_textedit_logging,
    get_textedit_logger,
    setup_textedit_logging,
    shutdown_textedit_logging,
)


@pytest.fixture
def package_logger():
    logger = logging.getLogger("textedit")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    shutdown_textedit_logging()
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord("textedit.test", logging.WARNING, __file__, 1, "insert refused pos=%d", (3,), None)
    record.__dict__.update(extra)
    return record


def test_json_formatter_keeps_extra_fields() -> None:
    payload = orjson.loads(JsonFormatter().format(_record(requested=17, span=(1, 2))))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "textedit.test"
    assert payload["msg"] == "insert refused pos=3"
    assert payload["fields"] == {"requested": 17, "span": [1, 2]}


def test_json_formatter_stringifies_unknown_values() -> None:
    payload = orjson.loads(JsonFormatter().format(_record(handle=object())))

    assert payload["fields"]["handle"].startswith("<object object")


def test_json_formatter_includes_exception() -> None:
    try:
        raise ValueError("bad atlas")
    except ValueError:
        record = logging.LogRecord("textedit", logging.ERROR, __file__, 1, "boom", (), sys.exc_info())

    payload = orjson.loads(JsonFormatter().format(record))

    assert "ValueError: bad atlas" in payload["exc_info"]
    assert "fields" not in payload


def test_configure_console_only(package_logger: logging.Logger) -> None:
    root_handlers = list(logging.getLogger().handlers)

    logger = configure_textedit_logging(TextEditLoggingConfig(level_name="debug", console_format="json"))

    assert logger is package_logger
    assert package_logger.level == logging.DEBUG
    assert package_logger.propagate is False
    assert len(package_logger.handlers) == 1
    assert isinstance(package_logger.handlers[0].formatter, JsonFormatter)
    assert logging.getLogger().handlers == root_handlers


def test_unknown_level_name_falls_back_to_info(package_logger: logging.Logger) -> None:
    configure_textedit_logging(TextEditLoggingConfig(level_name="chatty"))

    assert package_logger.level == logging.INFO


def test_configure_with_file_streams_through_queue(package_logger: logging.Logger, tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "textedit.jsonl"
    configure_textedit_logging(TextEditLoggingConfig(level_name="INFO", file_path=str(log_path)))

    get_textedit_logger("textedit.fonts").info("font_loaded kind=%s", "msdf", extra={"glyphs": 95})
    shutdown_textedit_logging()

    lines = log_path.read_text(encoding="utf-8").splitlines()
    payload = orjson.loads(lines[-1])
    assert payload["logger"] == "textedit.fonts"
    assert payload["msg"] == "font_loaded kind=msdf"
    assert payload["fields"]["glyphs"] == 95


def test_setup_is_noop_when_handlers_exist(package_logger: logging.Logger) -> None:
    sentinel = logging.NullHandler()
    package_logger.handlers[:] = [sentinel]

    setup_textedit_logging()

    assert package_logger.handlers == [sentinel]


def test_get_textedit_logger_nests_foreign_names() -> None:
    assert get_textedit_logger("host.widget").name == "textedit.host.widget"
    assert get_textedit_logger("textedit.layout").name == "textedit.layout"


def test_log_recoverable_attaches_traceback_and_fields(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.recoverable")
    caplog.set_level(logging.DEBUG, logger=logger.name)

    try:
        raise OSError("glyph load failed")
    except OSError:
        log_recoverable(logger, "glyph_rasterization_failed", codepoint=65)

    record = caplog.records[-1]
    assert record.exc_info is not None
    assert record.getMessage() == "glyph_rasterization_failed codepoint=65"
    assert record.backend_fields == {"codepoint": 65}
