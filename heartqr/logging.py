"""heartqr structured logging: AUDIT events, console/JSON output and call tracing."""

import dataclasses
import functools
import json
import logging
import sys
import time
import traceback
from datetime import datetime, timezone

ROOT = "heartqr"

# Custom AUDIT level (between WARNING=30 and ERROR=40)
AUDIT = 35
logging.addLevelName(AUDIT, "AUDIT")


def _truncate(value: object, max_len: int = 80) -> str:
    """Truncate a value's string form for safe logging."""
    s = str(value)
    if len(s) > max_len:
        return s[:max_len] + "..."
    return s


def _timestamp(record: logging.LogRecord, fmt: str) -> str:
    return datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(fmt)[:-3]


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log files and machine parsing."""

    def format(self, record):
        entry = {
            "ts": _timestamp(record, "%Y-%m-%dT%H:%M:%S.%f") + "Z",
            "level": record.levelname,
            "src": record.name,
        }
        event = getattr(record, "event", None)
        if event:
            entry["event"] = event
        elif record.getMessage():
            entry["msg"] = record.getMessage()
        if hasattr(record, "duration_ms"):
            entry["duration_ms"] = round(record.duration_ms, 2)
        if getattr(record, "ctx", None):
            entry["ctx"] = record.ctx
        if record.exc_info and record.exc_info[1]:
            entry["traceback"] = traceback.format_exception(*record.exc_info)
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable coloured console output."""

    COLORS = {
        "DEBUG": "\033[36m",    # cyan
        "INFO": "\033[32m",     # green
        "AUDIT": "\033[35m",    # magenta
        "WARNING": "\033[33m",  # yellow
        "ERROR": "\033[31m",    # red
    }
    RESET = "\033[0m"

    def __init__(self, color: bool = True):
        super().__init__()
        self.color = color

    def format(self, record):
        level = f"{record.levelname:5s}"
        if self.color and record.levelname in self.COLORS:
            level = f"{self.COLORS[record.levelname]}{level}{self.RESET}"
        parts = [_timestamp(record, "%H:%M:%S.%f"), level, f"[{record.name}]"]

        event = getattr(record, "event", None)
        if event:
            parts.append(event)
        if hasattr(record, "duration_ms"):
            parts.append(f"({record.duration_ms:.1f}ms)")

        ctx = getattr(record, "ctx", None)
        if ctx:
            parts.append(" ".join(f"{k}={_truncate(v)}" for k, v in ctx.items()))
        elif not event and record.getMessage():
            parts.append(record.getMessage())

        if record.exc_info and record.exc_info[1]:
            parts.append("\n" + "".join(traceback.format_exception(*record.exc_info)))
        return " ".join(parts)


def setup_logging(level: str = "INFO", log_file: str | None = None, json_format: bool = False):
    """Configure the heartqr root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, AUDIT).
        log_file: If set, also write JSON lines to this path.
        json_format: Use JSON on the console as well.
    """
    root = logging.getLogger(ROOT)
    level_value = logging.getLevelName(level.upper())
    root.setLevel(level_value if isinstance(level_value, int) else logging.INFO)
    root.handlers.clear()
    root.propagate = False

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(JsonFormatter() if json_format else ConsoleFormatter(color=sys.stderr.isatty()))
    root.addHandler(console)

    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(JsonFormatter())
        root.addHandler(fh)
    return root


def get_logger(module_name: str) -> logging.Logger:
    """Get a logger scoped under the heartqr namespace."""
    if module_name == ROOT or module_name.startswith(ROOT + "."):
        return logging.getLogger(module_name)
    return logging.getLogger(f"{ROOT}.{module_name}")


def _emit(log: logging.Logger, level: int, event: str, ctx: dict | None = None,
          duration_ms: float | None = None, exc_info=None) -> None:
    if not log.isEnabledFor(level):
        return
    record = log.makeRecord(
        name=log.name, level=level, fn="", lno=0,
        msg="", args=(), exc_info=exc_info,
    )
    record.event = event
    record.ctx = ctx or {}
    if duration_ms is not None:
        record.duration_ms = duration_ms
    log.handle(record)


def audit(event: str, logger: logging.Logger | None = None, **context):
    """Emit an AUDIT-level structured entry.

    Args:
        event: Machine-readable event tag (e.g. "render.done").
        logger: Logger to use. Defaults to the heartqr root.
        **context: Key-value pairs describing the event.
    """
    _emit(logger or logging.getLogger(ROOT), AUDIT, event, context)


def _summarize(value) -> str:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return _truncate(repr(value), 80)
    if isinstance(value, tuple):
        return "(" + ", ".join(_summarize(v) if not isinstance(v, tuple) else "tuple" for v in value) + ")"
    if isinstance(value, list):
        return f"list[{len(value)}]"
    if isinstance(value, dict):
        return f"dict[{len(value)} keys]"
    if dataclasses.is_dataclass(value) and len(repr(value)) <= 120:
        return repr(value)
    return type(value).__name__


def _safe_arg(value) -> str:
    s = repr(value)
    if len(s) > 100 or "Image" in type(value).__name__:
        return f"<{type(value).__name__}>"
    return _truncate(s, 80)


def trace(func=None, *, logger_name: str | None = None):
    """Decorator that logs entry (DEBUG), exit with timing (INFO) and errors (ERROR).

    Exceptions are logged with their traceback and re-raised unchanged.
    """
    def decorator(fn):
        log = get_logger(logger_name or fn.__module__)

        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            name = fn.__name__
            if log.isEnabledFor(logging.DEBUG):
                _emit(log, logging.DEBUG, f"{name}.enter", {
                    "args": [_safe_arg(a) for a in args],
                    "kwargs": {k: _safe_arg(v) for k, v in kwargs.items()},
                })

            start = time.perf_counter()
            try:
                result = fn(*args, **kwargs)
            except Exception:
                _emit(log, logging.ERROR, f"{name}.error", {"function": name},
                      duration_ms=(time.perf_counter() - start) * 1000,
                      exc_info=sys.exc_info())
                raise
            _emit(log, logging.INFO, f"{name}.done", {"result": _summarize(result)},
                  duration_ms=(time.perf_counter() - start) * 1000)
            return result

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator
