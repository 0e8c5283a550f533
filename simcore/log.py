#!/usr/bin/env python3
"""
Logging setup for the solar system simulator.

Components obtain namespaced loggers via get_logger("physics") etc. The kernel
never configures handlers itself; the host calls configure_logging() once.
"""
import json
import logging
import sys
from datetime import datetime
from typing import Any, Dict

ROOT_LOGGER_NAME = "simcore"

# LogRecord attributes that are not user-supplied `extra` fields
_RESERVED = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'exc_info', 'exc_text',
    'stack_info', 'taskName', 'message', 'asctime',
}


class StructuredFormatter(logging.Formatter):
    """
    Formatter that outputs either human-readable lines or JSON lines.

    Extra fields passed via `extra={...}` are appended to the message.
    """

    def __init__(self, fmt_type: str = "human"):
        self.fmt_type = fmt_type
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = {}
        for key, value in record.__dict__.items():
            if key in _RESERVED:
                continue
            try:
                json.dumps(value)
                extra[key] = value
            except (TypeError, ValueError):
                extra[key] = str(value)
        if extra:
            log_data["extra"] = extra

        if self.fmt_type == "json":
            return json.dumps(log_data, ensure_ascii=False)
        return self._format_human_readable(log_data)

    def _format_human_readable(self, log_data: Dict[str, Any]) -> str:
        timestamp = log_data["timestamp"][:19]
        formatted = f"{timestamp} {log_data['level']:<8} {log_data['logger']:<20} {log_data['message']}"
        if "exception" in log_data:
            formatted += f"\n{log_data['exception']}"
        if log_data.get("extra"):
            extra_str = ", ".join(f"{k}={v}" for k, v in log_data["extra"].items())
            formatted += f" | {extra_str}"
        return formatted


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a component, namespaced under `simcore.`."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(level: str = "INFO", json_format: bool = False) -> logging.Logger:
    """
    Install a single stderr handler on the package root logger.

    Calling this again replaces the previous handler, so it is safe to call
    more than once.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(getattr(logging, level.upper()))
    for handler in list(root.handlers):
        if getattr(handler, "_simcore_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter("json" if json_format else "human"))
    handler._simcore_handler = True
    root.addHandler(handler)
    root.propagate = False

    root.debug("Logging configured", extra={"log_level": level, "json_format": json_format})
    return root
