"""Logging setup for the ``textedit`` logger tree."""

from __future__ import annotations

import logging
import queue
from datetime import UTC, datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path

from textedit.api.logging import TextEditLoggingConfig
from textedit.runtime.config import resolve_log_level_name
from textedit.runtime.json_codec import dumps_text

PACKAGE_LOGGER_NAME = "textedit"
TEXT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_QUEUE_LISTENER: QueueListener | None = None

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRIBUTES = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per record; ``extra`` values are kept under ``fields``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        fields = {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES}
        if fields:
            payload["fields"] = fields
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return dumps_text(payload)


def configure_textedit_logging(config: TextEditLoggingConfig) -> logging.Logger:
    """Attach console (and optional file) handlers to the package logger.

    The host application's root logger is left alone; records stop at the
    ``textedit`` logger once it has its own handlers. With a file configured,
    both handlers run on a ``QueueListener`` thread so a slow disk never
    stalls a keystroke.
    """
    global _QUEUE_LISTENER

    shutdown_textedit_logging()

    handlers: list[logging.Handler] = [_handler(logging.StreamHandler(), config.console_format)]
    if config.file_path:
        file_path = Path(config.file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            _handler(logging.FileHandler(file_path, mode="a", encoding="utf-8", delay=True), config.file_format)
        )

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(_resolve_level(config.level_name))
    logger.propagate = False

    if len(handlers) == 1:
        logger.addHandler(handlers[0])
        return logger

    log_queue: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
    logger.addHandler(QueueHandler(log_queue))
    _QUEUE_LISTENER = QueueListener(log_queue, *handlers, respect_handler_level=True)
    _QUEUE_LISTENER.start()
    return logger


def shutdown_textedit_logging() -> None:
    """Drain and stop the background listener if one is running."""
    global _QUEUE_LISTENER

    if _QUEUE_LISTENER is None:
        return
    _QUEUE_LISTENER.stop()
    for handler in _QUEUE_LISTENER.handlers:
        handler.close()
    _QUEUE_LISTENER = None


def setup_textedit_logging() -> None:
    """Console logging at the environment's level unless already configured."""
    if logging.getLogger(PACKAGE_LOGGER_NAME).handlers:
        return
    configure_textedit_logging(TextEditLoggingConfig(level_name=resolve_log_level_name(default="INFO")))


def get_textedit_logger(name: str) -> logging.Logger:
    """Logger below the package tree for callers outside ``textedit``."""
    if name == PACKAGE_LOGGER_NAME or name.startswith(f"{PACKAGE_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER_NAME}.{name}")


def _resolve_level(level_name: str) -> int:
    value = level_name.strip().upper()
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value)
    return level if isinstance(level, int) else logging.INFO


def _handler(handler: logging.Handler, kind: str) -> logging.Handler:
    if kind.strip().lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_LOG_FORMAT))
    return handler
