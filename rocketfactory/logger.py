"""Process-wide structured logger enriched with request context fields."""

from __future__ import annotations

import contextvars
import json
import logging
import sys
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator

TRACE_ID_KEY = "trace_id"
USER_ID_KEY = "user_id"

_trace_id: contextvars.ContextVar[str] = contextvars.ContextVar(TRACE_ID_KEY, default="")
_user_id: contextvars.ContextVar[str] = contextvars.ContextVar(USER_ID_KEY, default="")

_LEVEL_NAMES = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "FATAL",
}

_init_lock = threading.Lock()
_initialized = False
_level_backend: logging.Logger | None = None
_global: ContextLogger | None = None


class _StdoutHandler(logging.Handler):
    """Writes formatted records to whatever ``sys.stdout`` currently is."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            sys.stdout.write(self.format(record) + "\n")
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        sys.stdout.flush()


class _Formatter(logging.Formatter):
    def __init__(self, as_json: bool) -> None:
        super().__init__()
        self._as_json = as_json

    def format(self, record: logging.LogRecord) -> str:
        fields: dict[str, Any] = getattr(record, "fields", {})
        stamp = datetime.fromtimestamp(record.created).astimezone().isoformat(timespec="milliseconds")
        level = _LEVEL_NAMES.get(record.levelno, record.levelname)
        path = Path(record.pathname)
        caller = f"{path.parent.name}/{path.name}:{record.lineno}"
        message = record.getMessage()
        if self._as_json:
            entry = {"level": level, "timestamp": stamp, "caller": caller, "message": message}
            entry.update(fields)
            return json.dumps(entry, default=str, ensure_ascii=False)
        parts = [stamp, level, caller, message]
        if fields:
            parts.append(json.dumps(fields, default=str, ensure_ascii=False))
        return "\t".join(parts)


class ContextLogger:
    """Logger that adds bound fields and context fields to every entry."""

    def __init__(self, backend: logging.Logger | None = None, fields: dict[str, Any] | None = None) -> None:
        self._backend = backend
        self._fields = dict(fields or {})

    def _with(self, fields: dict[str, Any]) -> ContextLogger:
        return ContextLogger(self._backend, {**self._fields, **fields})

    def _flush(self) -> None:
        if self._backend is not None:
            for handler in self._backend.handlers:
                handler.flush()

    def _log(self, level: int, msg: str, fields: dict[str, Any], stacklevel: int) -> None:
        backend = self._backend
        if backend is not None and backend.isEnabledFor(level):
            merged = {**self._fields, **fields_from_context(), **fields}
            backend.log(level, msg, extra={"fields": merged}, stacklevel=stacklevel)
        if level == logging.CRITICAL:
            raise SystemExit(1)

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, kwargs, 3)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, kwargs, 3)

    def warn(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, kwargs, 3)

    def error(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, kwargs, 3)

    def fatal(self, msg: str, **kwargs: Any) -> None:
        """Log the message and exit the process with status 1."""
        self._log(logging.CRITICAL, msg, kwargs, 3)


class NoopLogger(ContextLogger):
    """Logger without an output: every entry is discarded."""

    def __init__(self) -> None:
        super().__init__(None)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, kwargs, 3)

    def error(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, kwargs, 3)


def parse_level(level: str) -> int:
    """Map a level name to a logging level; unknown names mean INFO."""
    return {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warn": logging.WARNING,
        "warning": logging.WARNING,
        "error": logging.ERROR,
    }.get(level.lower(), logging.INFO)


@contextmanager
def context_scope(trace_id: str = "", user_id: str = "") -> Iterator[None]:
    """Attach trace and user identifiers to log entries made inside the block."""
    trace_token = _trace_id.set(trace_id)
    user_token = _user_id.set(user_id)
    try:
        yield
    finally:
        _user_id.reset(user_token)
        _trace_id.reset(trace_token)


def fields_from_context() -> dict[str, str]:
    """Return the non-empty context fields of the current context."""
    fields: dict[str, str] = {}
    trace_id = _trace_id.get()
    if trace_id:
        fields[TRACE_ID_KEY] = trace_id
    user_id = _user_id.get()
    if user_id:
        fields[USER_ID_KEY] = user_id
    return fields


def init(level: str, as_json: bool) -> None:
    """Initialise the global logger once; later calls are ignored."""
    global _initialized, _level_backend, _global
    with _init_lock:
        if _initialized:
            return
        _initialized = True
        backend = logging.Logger("rocketfactory")
        backend.propagate = False
        backend.setLevel(parse_level(level))
        handler = _StdoutHandler()
        handler.setFormatter(_Formatter(as_json))
        backend.addHandler(handler)
        _level_backend = backend
        _global = ContextLogger(backend)


def set_level(level: str) -> None:
    """Change the level of the logger created by :func:`init`."""
    if _level_backend is None:
        return
    _level_backend.setLevel(parse_level(level))


def init_for_benchmark() -> None:
    """Install a global logger that writes nothing."""
    global _global
    _global = ContextLogger(None)


def get_logger() -> ContextLogger | None:
    """Return the global logger, or None before initialisation."""
    return _global


def set_nop_logger() -> None:
    """Replace the global logger with one that writes nothing."""
    global _global
    _global = ContextLogger(None)


def sync() -> None:
    """Flush the global logger's output."""
    if _global is not None:
        _global._flush()


def with_fields(**kwargs: Any) -> ContextLogger:
    """Return a logger with extra fields bound to every entry."""
    if _global is None:
        return ContextLogger(None)
    return _global._with(kwargs)


def with_context() -> ContextLogger:
    """Return a logger with the current context fields bound."""
    if _global is None:
        return ContextLogger(None)
    return _global._with(fields_from_context())


def _require() -> ContextLogger:
    if _global is None:
        raise RuntimeError("logger is not initialized")
    return _global


def debug(msg: str, **kwargs: Any) -> None:
    _require()._log(logging.DEBUG, msg, kwargs, 3)


def info(msg: str, **kwargs: Any) -> None:
    _require()._log(logging.INFO, msg, kwargs, 3)


def warn(msg: str, **kwargs: Any) -> None:
    _require()._log(logging.WARNING, msg, kwargs, 3)


def error(msg: str, **kwargs: Any) -> None:
    _require()._log(logging.ERROR, msg, kwargs, 3)


def fatal(msg: str, **kwargs: Any) -> None:
    _require()._log(logging.CRITICAL, msg, kwargs, 3)


def _reset() -> None:
    global _initialized, _level_backend, _global
    with _init_lock:
        _initialized = False
        _level_backend = None
        _global = None