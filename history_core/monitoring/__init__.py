"""
Monitoring package for Article History.

Provides structured logging with correlation IDs and timed operation logging.
"""

from .structured_logger import (
    StructuredLogger,
    CorrelationIdManager,
    LoggingContext,
    OperationLogger,
    JSONFormatter,
    get_logger,
    configure_logging,
)

__all__ = [
    "StructuredLogger",
    "CorrelationIdManager",
    "LoggingContext",
    "OperationLogger",
    "JSONFormatter",
    "get_logger",
    "configure_logging",
]
