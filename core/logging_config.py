"""Structured JSON logging shared by the engine and the HTTP surface.

Engine modules log through ``get_logger(__name__)``. Keyword context
is passed with ``extra={"ctx_<name>": value}`` and lands under ``context``.
The API binds a request id per call; it is stamped on every record emitted
while that request is being handled.
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional

_request_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    return _request_id_var.get()


def bind_request_id(value: Optional[str]) -> contextvars.Token:
    return _request_id_var.set(value)


def unbind_request_id(token: contextvars.Token) -> None:
    _request_id_var.reset(token)


def log_context(**fields: Any) -> dict[str, Any]:
    """Build an ``extra`` mapping whose keys are picked up by JSONFormatter."""
    return {f"ctx_{key}": value for key, value in fields.items()}


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        request_id = get_request_id()
        if request_id:
            log_entry["request_id"] = request_id
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = {
                "type": type(record.exc_info[1]).__name__,
                "message": str(record.exc_info[1]),
            }
        context = {k[len("ctx_"):]: v for k, v in record.__dict__.items() if k.startswith("ctx_")}
        if context:
            log_entry["context"] = context
        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging to stdout. Safe to call repeatedly."""
    root = logging.getLogger()
    if any(isinstance(h.formatter, JSONFormatter) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Reduce noise from third-party libraries
    for name in ("uvicorn.access", "httpx"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger for a module."""
    return logging.getLogger(name)
