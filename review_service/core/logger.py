"""
Structured logging for the Review Service.

Every entry carries the service name, environment, timestamp and the trace and
span ids of the current request so log lines can be joined with traces. Output is JSON
(for log shippers) or colored console lines (for local development), selected
with LOG_FORMAT.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from review_service.core.config import config
from review_service.middleware.trace_context import get_span_id, get_trace_id

LOG_LEVEL = config.log_level.upper()
LOG_FORMAT = config.log_format.lower()

# LogRecord attributes that are not user supplied extras
_RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName", "levelname",
    "levelno", "lineno", "module", "msecs", "message", "pathname", "process",
    "processName", "relativeCreated", "thread", "threadName", "exc_info",
    "exc_text", "stack_info", "taskName",
}


class StructuredLogger:
    """
    Logger with structured entries, correlation ids and metadata support.
    """

    def __init__(self, name: str = None):
        self.service_name = config.service_name
        self.environment = config.environment
        self._logger = logging.getLogger(name or self.service_name)
        self._setup_logging()

    def _setup_logging(self):
        """Configure the service logger with handlers"""
        self._logger.handlers.clear()
        self._logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
        self._logger.propagate = False

        if config.log_to_console:
            console_handler = logging.StreamHandler(sys.stdout)
            if LOG_FORMAT == "json":
                console_handler.setFormatter(JSONFormatter())
            else:
                console_handler.setFormatter(ConsoleFormatter())
            self._logger.addHandler(console_handler)

        if config.log_to_file:
            log_dir = os.path.dirname(config.log_file_path)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)

            file_handler = logging.FileHandler(config.log_file_path)
            file_handler.setFormatter(JSONFormatter())  # Always JSON for files
            self._logger.addHandler(file_handler)

    def _build_log_entry(
        self,
        level: str,
        message: str,
        correlation_id: Optional[str] = None,
        user_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> Dict[str, Any]:
        """Build structured log entry"""
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level.upper(),
            "service": self.service_name,
            "environment": self.environment,
            "message": message,
            "correlationId": correlation_id or get_trace_id(),
        }

        span_id = get_span_id()
        if span_id:
            entry["spanId"] = span_id

        if user_id:
            entry["userId"] = user_id

        if metadata:
            entry["metadata"] = metadata

        entry.update(kwargs)

        return entry

    def _log(
        self,
        level: str,
        message: str,
        correlation_id: Optional[str] = None,
        user_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        log_entry = self._build_log_entry(
            level, message, correlation_id, user_id, metadata, **kwargs
        )

        # 'message' would clash with the LogRecord attribute
        extra_data = {k: v for k, v in log_entry.items() if k != "message"}
        self._logger.log(getattr(logging, level), message, extra=extra_data)

    def debug(self, message: str, correlation_id: Optional[str] = None,
              user_id: Optional[str] = None, metadata: Optional[Dict[str, Any]] = None, **kwargs):
        """Debug level logging"""
        self._log("DEBUG", message, correlation_id, user_id, metadata, **kwargs)

    def info(self, message: str, correlation_id: Optional[str] = None,
             user_id: Optional[str] = None, metadata: Optional[Dict[str, Any]] = None, **kwargs):
        """Info level logging"""
        self._log("INFO", message, correlation_id, user_id, metadata, **kwargs)

    def warning(self, message: str, correlation_id: Optional[str] = None,
                user_id: Optional[str] = None, metadata: Optional[Dict[str, Any]] = None, **kwargs):
        """Warning level logging"""
        self._log("WARNING", message, correlation_id, user_id, metadata, **kwargs)

    def error(
        self,
        message: str,
        correlation_id: Optional[str] = None,
        user_id: Optional[str] = None,
        error: Optional[Union[str, Exception]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        """Error level logging"""
        if metadata is None:
            metadata = {}

        if error:
            if isinstance(error, Exception):
                metadata["error"] = {
                    "type": type(error).__name__,
                    "message": str(error),
                }
            else:
                metadata["error"] = {"message": str(error)}

        self._log("ERROR", message, correlation_id, user_id, metadata, **kwargs)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record):
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": config.service_name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colored console formatter for development"""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset = self.COLORS['RESET']

        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')
        line = f"{color}[{timestamp}] {record.levelname}{reset} - {record.getMessage()}"

        metadata = getattr(record, "metadata", None)
        if metadata:
            line = f"{line} {json.dumps(metadata, default=str)}"

        return line


logger = StructuredLogger()
