"""JSON codec helpers for atlas layouts and structured log export."""

from __future__ import annotations

from typing import Any

import orjson


def loads(raw: bytes | bytearray | memoryview | str) -> Any:
    """Parse JSON text or UTF-8 bytes."""
    return orjson.loads(raw)


def dumps_bytes(payload: Any, *, pretty: bool = False, sort_keys: bool = False) -> bytes:
    """Serialize payload to UTF-8 JSON bytes."""
    options = 0
    if pretty:
        options |= orjson.OPT_INDENT_2
    if sort_keys:
        options |= orjson.OPT_SORT_KEYS
    # Log records carry arbitrary ``extra`` values; stringify what orjson cannot encode.
    return orjson.dumps(payload, default=repr, option=options)


def dumps_text(payload: Any, *, pretty: bool = False, sort_keys: bool = False) -> str:
    return dumps_bytes(payload, pretty=pretty, sort_keys=sort_keys).decode("utf-8")
