from __future__ import annotations

import json
import logging

from avalonia_mcp.utils.logger import JsonFormatter, SimpleFormatter


def _record(msg: str, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="avalonia_mcp.services.resource_cache",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields() -> None:
    record = _record("Failed to preload resource", event_code="cache.preload.failed", loaded=["a"])
    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["message"] == "Failed to preload resource"
    assert payload["event_code"] == "cache.preload.failed"
    assert payload["loaded"] == ["a"]
    assert "pathname" not in payload


def test_simple_formatter_appends_event_code() -> None:
    line = SimpleFormatter().format(_record("Resource cache cleared", event_code="cache.clear"))
    assert line.endswith("Resource cache cleared [cache.clear]")
