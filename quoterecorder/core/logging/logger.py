"""JSON line logging on top of loguru.

Every record carries a ``trace_id`` plus the ``market``/``code``/``error_code``
of the quote being handled; any other bound or contextual field lands under
``context``. :func:`log_context` scopes those fields to a block, and because
they live in context variables each asyncio task sees only its own.
"""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterator, TextIO
from uuid import uuid4

from loguru import logger

from quoterecorder.core.logging.config import LogConfig

_TRACE_ID: ContextVar[str | None] = ContextVar("quoterecorder_trace_id", default=None)
_FIELDS: ContextVar[dict[str, Any]] = ContextVar("quoterecorder_log_fields", default={})

_TOP_LEVEL = ("market", "code", "error_code")


def _patch(record: dict[str, Any]) -> None:
    extra = record["extra"]
    for key, value in _FIELDS.get().items():
        extra.setdefault(key, value)
    if not extra.get("trace_id"):
        extra["trace_id"] = _TRACE_ID.get() or uuid4().hex


def _json_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _to_json(record: dict[str, Any]) -> str:
    extra = record["extra"]
    payload: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "trace_id": extra.get("trace_id"),
    }
    payload.update({key: extra.get(key) for key in _TOP_LEVEL})

    context = {key: value for key, value in extra.items() if key != "trace_id" and key not in _TOP_LEVEL}
    if context:
        payload["context"] = context

    exception = record["exception"]
    if exception is not None and exception.type is not None:
        payload["exception"] = f"{exception.type.__name__}: {exception.value}"
    return json.dumps(payload, ensure_ascii=False, default=_json_value)


class _JsonLineSink:
    """Writes one JSON document per record to a stream or appends it to a file."""

    def __init__(self, stream: TextIO | None = None, path: Path | None = None) -> None:
        self._stream = stream
        self._path = path
        if path is not None:
            path.parent.mkdir(parents=True, exist_ok=True)

    def __call__(self, message: Any) -> None:
        line = _to_json(message.record) + "\n"
        if self._path is not None:
            with open(self._path, "a", encoding="utf-8") as f:
                f.write(line)
            return
        # stderr 在写入时解析，测试运行器可能已替换它
        stream = self._stream or sys.stderr
        stream.write(line)
        stream.flush()


def configure_logging(config: LogConfig | None = None) -> None:
    """Replace every loguru handler with the JSON sinks described by ``config``."""

    config = config or LogConfig()
    handlers: list[dict[str, Any]] = []
    if config.console:
        handlers.append({"sink": _JsonLineSink(stream=config.stream), "level": config.level})
    if config.file is not None:
        handlers.append({"sink": _JsonLineSink(path=config.file), "level": config.level})
    logger.configure(handlers=handlers, patcher=_patch)


@contextmanager
def log_context(*, trace_id: str | None = None, **fields: Any) -> Iterator[str]:
    """Attach ``fields`` and a trace id to every record logged inside the block.

    Nested blocks merge their fields and keep the enclosing trace id unless a
    new one is given.
    """

    active = trace_id or _TRACE_ID.get() or uuid4().hex
    trace_token = _TRACE_ID.set(active)
    fields_token = _FIELDS.set({**_FIELDS.get(), **fields})
    try:
        yield active
    finally:
        _FIELDS.reset(fields_token)
        _TRACE_ID.reset(trace_token)


configure_logging()


__all__ = ["configure_logging", "log_context", "logger"]
