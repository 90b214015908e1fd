"""
Structured logging system with correlation IDs for Article History.

This module provides structured logging on top of structlog, with correlation
ID tracking so that every log line emitted while handling one host request
(e.g. a single CLI command) can be tied together.
"""

import logging
import uuid
import time
import threading
import contextvars
from typing import Optional
from enum import Enum
import structlog
import json


# Context variable for correlation ID
correlation_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)

# Context variable for request ID
request_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "request_id", default=None
)


class LogLevel(Enum):
    """Log levels for structured logging."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class CorrelationIdProcessor:
    """Processor to add correlation ID to log records."""

    def __call__(self, logger, method_name, event_dict):
        """Add correlation and request IDs to log event."""
        correlation_id = correlation_id_context.get()
        if correlation_id:
            event_dict["correlation_id"] = correlation_id

        request_id = request_id_context.get()
        if request_id:
            event_dict["request_id"] = request_id

        return event_dict


class TimestampProcessor:
    """Processor to add consistent timestamps."""

    def __call__(self, logger, method_name, event_dict):
        event_dict["timestamp"] = time.time()
        event_dict["timestamp_iso"] = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
        return event_dict


class ComponentProcessor:
    """Processor to add component information."""

    def __init__(self, component: str):
        self.component = component

    def __call__(self, logger, method_name, event_dict):
        event_dict.setdefault("component", self.component)
        return event_dict


class HistoryFormatter:
    """Adds the fields every Article History log event carries."""

    def __call__(self, logger, method_name, event_dict):
        event_dict.setdefault("level", method_name)
        event_dict.setdefault("logger", getattr(logger, "name", None))
        event_dict["thread_name"] = threading.current_thread().name
        return event_dict


class StructuredLogger:
    """
    Structured logger for Article History with correlation ID support.

    Wraps a structlog logger bound to the stdlib logging tree, so level
    filtering and handlers configured via ``configure_logging`` apply.
    """

    def __init__(self, name: str, component: Optional[str] = None):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            component: Component name for logging context
        """
        self.name = name
        self.component = component or name

        self.logger = structlog.wrap_logger(
            logging.getLogger(name),
            processors=[
                structlog.stdlib.filter_by_level,
                TimestampProcessor(),
                CorrelationIdProcessor(),
                ComponentProcessor(self.component),
                HistoryFormatter(),
                structlog.dev.ConsoleRenderer(colors=False),
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
        )

    def _log(self, level: LogLevel, message: str, **kwargs):
        getattr(self.logger, level.value)(message, **kwargs)

    def debug(self, message: str, **kwargs):
        self._log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log(LogLevel.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(LogLevel.WARNING, message, **kwargs)

    def error(self, message: str, error: Optional[Exception] = None, **kwargs):
        """Log error message with optional exception."""
        if error:
            kwargs.update(
                {
                    "error_type": type(error).__name__,
                    "error_message": str(error),
                }
            )
            kind = getattr(error, "kind", None)
            if kind is not None:
                kwargs["error_kind"] = kind.value
        self._log(LogLevel.ERROR, message, **kwargs)

    def with_context(self, **context) -> "StructuredLogger":
        """Create a new logger with additional context."""
        new_logger = StructuredLogger(self.name, self.component)
        new_logger.logger = self.logger.bind(**context)
        return new_logger


class CorrelationIdManager:
    """Manager for correlation ID lifecycle."""

    @staticmethod
    def generate_correlation_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def generate_request_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def set_correlation_id(correlation_id: Optional[str]):
        correlation_id_context.set(correlation_id)

    @staticmethod
    def set_request_id(request_id: Optional[str]):
        request_id_context.set(request_id)

    @staticmethod
    def get_correlation_id() -> Optional[str]:
        return correlation_id_context.get()

    @staticmethod
    def get_request_id() -> Optional[str]:
        return request_id_context.get()

    @staticmethod
    def clear_context():
        """Clear all context variables."""
        correlation_id_context.set(None)
        request_id_context.set(None)


class LoggingContext:
    """Context manager for logging with correlation IDs."""

    def __init__(self, correlation_id: Optional[str] = None, request_id: Optional[str] = None):
        """
        Initialize logging context.

        Args:
            correlation_id: Correlation ID (generated if not provided)
            request_id: Request ID (generated if not provided)
        """
        self.correlation_id = correlation_id or CorrelationIdManager.generate_correlation_id()
        self.request_id = request_id or CorrelationIdManager.generate_request_id()

        self.prev_correlation_id = None
        self.prev_request_id = None

    def __enter__(self):
        self.prev_correlation_id = CorrelationIdManager.get_correlation_id()
        self.prev_request_id = CorrelationIdManager.get_request_id()

        CorrelationIdManager.set_correlation_id(self.correlation_id)
        CorrelationIdManager.set_request_id(self.request_id)

        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        CorrelationIdManager.set_correlation_id(self.prev_correlation_id)
        CorrelationIdManager.set_request_id(self.prev_request_id)


class OperationLogger:
    """Logger for tracking operations with timing."""

    def __init__(self, logger: StructuredLogger, operation: str):
        """
        Initialize operation logger.

        Args:
            logger: Structured logger instance
            operation: Operation name
        """
        self.logger = logger
        self.operation = operation
        self.start_time = None
        self.context = {}

    def start(self, **context):
        """Start operation logging."""
        self.start_time = time.time()
        self.context = context
        self.logger.debug(
            f"Starting operation: {self.operation}",
            operation=self.operation,
            operation_status="started",
            **context,
        )

    def success(self, **additional_context):
        """Log successful operation completion."""
        if self.start_time:
            duration_ms = (time.time() - self.start_time) * 1000
            self.logger.debug(
                f"Operation completed successfully: {self.operation}",
                operation=self.operation,
                operation_status="success",
                duration_ms=duration_ms,
                **self.context,
                **additional_context,
            )

    def error(self, error: Exception, **additional_context):
        """Log operation error."""
        if self.start_time:
            duration_ms = (time.time() - self.start_time) * 1000
            self.logger.error(
                f"Operation failed: {self.operation}",
                error=error,
                operation=self.operation,
                operation_status="error",
                duration_ms=duration_ms,
                **self.context,
                **additional_context,
            )

    def __enter__(self):
        if self.start_time is None:
            self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.error(exc_val)
        else:
            self.success()


class JSONFormatter(logging.Formatter):
    """JSON formatter for standard library logging integration."""

    def format(self, record):
        log_entry = {
            "timestamp": record.created,
            "timestamp_iso": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "thread_name": record.threadName,
        }

        correlation_id = CorrelationIdManager.get_correlation_id()
        if correlation_id:
            log_entry["correlation_id"] = correlation_id

        request_id = CorrelationIdManager.get_request_id()
        if request_id:
            log_entry["request_id"] = request_id

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def get_logger(name: str, component: Optional[str] = None) -> StructuredLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name
        component: Component name for context

    Returns:
        Configured structured logger
    """
    return StructuredLogger(name, component)


def configure_logging(
    log_level: str = "INFO",
    json_format: bool = False,
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
):
    """
    Configure global logging settings.

    Args:
        log_level: Minimum log level
        json_format: Whether to use JSON formatting
        log_format: Format string used when json_format is False
    """
    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(log_format)

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
