"""
Structured logging for the Product Admin console.

Every entry is tagged with the active operation's correlation ID. Output is
JSON or a colored console line depending on LOG_FORMAT; the optional log
file is always JSON.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from product_admin.core.config import config
from product_admin.utils.correlation_id import get_correlation_id

LOGGER_NAME = "product_admin"

# Attributes every LogRecord has; anything else on a record came from ``extra``
_STANDARD_RECORD_FIELDS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "taskName"}


def _build_handlers(level: int, console_json: bool) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []

    if config.log_to_console:
        stream = logging.StreamHandler(sys.stdout)
        stream.setFormatter(JSONFormatter() if console_json else ConsoleFormatter())
        handlers.append(stream)

    if config.log_to_file:
        directory = os.path.dirname(config.log_file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        file_handler = logging.FileHandler(config.log_file_path)
        file_handler.setFormatter(JSONFormatter())
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(level)
    return handlers


class StructuredLogger:
    """
    Thin wrapper over the ``product_admin`` stdlib logger.

    Callers pass context as ``metadata``; failures go in ``error`` and are
    reduced to their type and message.
    """

    def __init__(self):
        self.service_name = config.service_name
        self.environment = config.environment
        self.json_output = config.log_format.lower() == "json"

        level = getattr(logging, config.log_level.upper(), logging.INFO)
        self._logger = logging.getLogger(LOGGER_NAME)
        self._logger.setLevel(level)
        self._logger.handlers[:] = _build_handlers(level, self.json_output)

    def _build_log_entry(
        self,
        level: str,
        message: str,
        correlation_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> Dict[str, Any]:
        entry: Dict[str, Any] = dict(
            timestamp=datetime.now(timezone.utc).isoformat(),
            level=level.upper(),
            service=self.service_name,
            environment=self.environment,
            message=message,
            correlationId=correlation_id or get_correlation_id(),
        )
        if metadata:
            entry["metadata"] = metadata
        return {**entry, **kwargs}

    def _log(
        self,
        level: str,
        message: str,
        correlation_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        entry = self._build_log_entry(level, message, correlation_id, metadata, **kwargs)
        levelno = logging.getLevelName(entry["level"])

        if self.json_output:
            self._logger.log(levelno, json.dumps(entry, default=str))
            return
        # 'message' would overwrite the LogRecord attribute
        entry.pop("message")
        self._logger.log(levelno, message, extra=entry)

    @staticmethod
    def _attach_error(
        metadata: Optional[Dict[str, Any]],
        error: Optional[Union[str, Exception]],
    ) -> Dict[str, Any]:
        merged = dict(metadata or {})
        if isinstance(error, Exception):
            merged["error"] = {"type": type(error).__name__, "message": str(error)}
        elif error:
            merged["error"] = {"message": error}
        return merged

    def debug(self, message: str, correlation_id: Optional[str] = None,
              metadata: Optional[Dict[str, Any]] = None, **kwargs):
        self._log("DEBUG", message, correlation_id, metadata, **kwargs)

    def info(self, message: str, correlation_id: Optional[str] = None,
             metadata: Optional[Dict[str, Any]] = None, **kwargs):
        self._log("INFO", message, correlation_id, metadata, **kwargs)

    def warning(self, message: str, correlation_id: Optional[str] = None,
                metadata: Optional[Dict[str, Any]] = None,
                error: Optional[Union[str, Exception]] = None, **kwargs):
        self._log("WARNING", message, correlation_id, self._attach_error(metadata, error), **kwargs)

    def error(self, message: str, correlation_id: Optional[str] = None,
              error: Optional[Union[str, Exception]] = None,
              metadata: Optional[Dict[str, Any]] = None, **kwargs):
        self._log("ERROR", message, correlation_id, self._attach_error(metadata, error), **kwargs)

    def performance(
        self,
        operation: str,
        duration_ms: int,
        threshold_ms: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        """Record the duration of an API call. Calls slower than ``threshold_ms`` are warnings."""
        timing = {
            **(metadata or {}),
            "operation": operation,
            "durationMs": duration_ms,
            "thresholdMs": threshold_ms,
        }
        slow = threshold_ms is not None and duration_ms > threshold_ms
        self._log("WARNING" if slow else "DEBUG", f"{operation} took {duration_ms}ms",
                  metadata=timing, **kwargs)


class JSONFormatter(logging.Formatter):
    """One JSON object per line; fields passed via ``extra`` are kept."""

    def format(self, record):
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": config.service_name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value) for key, value in vars(record).items()
            if key not in _STANDARD_RECORD_FIELDS
        )
        return json.dumps(payload, default=str)


_LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}
_RESET = "\033[0m"


class ConsoleFormatter(logging.Formatter):
    """Colored single-line output for local use."""

    def format(self, record):
        when = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        color = _LEVEL_COLORS.get(record.levelno, _RESET)
        operation = getattr(record, "correlationId", None) or "-"

        line = f"{color}{when} {record.levelname:<7}{_RESET} {operation[:8]} {record.getMessage()}"
        failure = (getattr(record, "metadata", None) or {}).get("error")
        if isinstance(failure, dict):
            line += f" ({failure.get('type', 'error')}: {failure.get('message')})"
        elif failure:
            line += f" (error: {failure})"
        return line


logger = StructuredLogger()
