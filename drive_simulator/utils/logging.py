"""
Structured logging utilities for the drive simulator
"""

import json
import logging
from typing import Any, Dict, Optional, TextIO


class StructuredFormatter(logging.Formatter):
    """Formatter producing ``[time] LEVEL logger: message`` lines."""

    def __init__(self) -> None:
        super().__init__(
            fmt="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


class StructuredLogger:
    """
    Thin wrapper around a stdlib logger that appends keyword context
    to every message as sorted ``key=value`` pairs.
    """

    def __init__(
        self,
        name: str,
        level: int = logging.INFO,
        stream: Optional[TextIO] = None,
    ):
        """
        Initialize structured logger

        Args:
            name: Logger name
            level: Logging level
            stream: Optional stream for the console handler (defaults to stderr)
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)

        if not self.logger.handlers:
            handler = logging.StreamHandler(stream)
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)
            # Records already carry their context; don't print them twice
            self.logger.propagate = False

    def log(self, level: str, message: str, exc_info: bool = False, **context: Any) -> None:
        """
        Log message with structured context

        Args:
            level: Log level ("debug", "info", "warning", "error", "critical")
            message: Log message
            exc_info: Attach the active exception traceback
            **context: Additional context fields
        """
        formatted = format_context(context)
        full_message = f"{message} | {formatted}" if formatted else message
        log_method = getattr(self.logger, level.lower())
        log_method(full_message, exc_info=exc_info)

    def debug(self, message: str, **context: Any) -> None:
        self.log("debug", message, **context)

    def info(self, message: str, **context: Any) -> None:
        self.log("info", message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self.log("warning", message, **context)

    def error(self, message: str, **context: Any) -> None:
        self.log("error", message, **context)

    def exception(self, message: str, **context: Any) -> None:
        """Log an error along with the traceback of the exception being handled"""
        self.log("error", message, exc_info=True, **context)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return value if " " not in value else f"\"{value}\""
    if isinstance(value, float):
        return f"{value:.6g}"
    if isinstance(value, (int, bool)) or value is None:
        return str(value)
    try:
        return json.dumps(value, ensure_ascii=False)
    except TypeError:
        return repr(value)


def format_context(context: Dict[str, Any]) -> str:
    """Return formatted key=value pairs for log context."""
    return " ".join(
        f"{key}={_format_value(value)}" for key, value in sorted(context.items())
    )


# Named logger cache
_loggers: Dict[str, StructuredLogger] = {}
_default_level = logging.INFO


def get_logger(name: str = "drive_simulator") -> StructuredLogger:
    """
    Get a cached structured logger

    Args:
        name: Logger name

    Returns:
        StructuredLogger instance
    """
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name, level=_default_level)
    return _loggers[name]


def set_log_level(level: int) -> None:
    """Change the level of every cached logger and of loggers created later."""
    global _default_level
    _default_level = level
    for structured in _loggers.values():
        structured.set_level(level)
