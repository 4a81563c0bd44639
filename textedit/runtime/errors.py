"""Logging for tolerated failures at font backend boundaries."""

from __future__ import annotations

import logging


def log_recoverable(
    logger: logging.Logger,
    event: str,
    *,
    level: int = logging.DEBUG,
    **fields: object,
) -> None:
    """Log a tolerated backend failure with its traceback.

    Font backends raise their own exception classes (``freetype.FT_Exception``
    derives from ``Exception`` directly), so callers catch ``Exception`` at the
    backend call and report it here. ``fields`` are appended as ``key=value``
    pairs and kept as structured ``backend_fields`` for the JSON formatter.
    """
    suffix = " ".join(f"{key}={value}" for key, value in fields.items())
    message = f"{event} {suffix}" if suffix else event
    logger.log(level, message, exc_info=True, extra={"backend_fields": dict(fields)})
