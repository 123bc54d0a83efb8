"""
Logging utilities for the publishing client.

Provides JSON-structured and human-readable formatters that surface the
publish context (endpoint uri, channel, batch size) attached to log records
through the 'extra' parameter.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional


PACKAGE_LOGGER_NAME = "pubcontrol"

CONTEXT_FIELDS = ("uri", "channels", "batch_size", "worker")


class StructuredFormatter(logging.Formatter):
    """
    Formatter that outputs JSON-structured log lines.
    
    Each log line includes:
    - Standard log fields (timestamp, level, message, logger)
    - Publish context fields if present (uri, channels, batch_size, worker)
    - Exception text if present
    """
    
    def __init__(self, include_timestamp: bool = True):
        super().__init__()
        self.include_timestamp = include_timestamp
    
    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_entry = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        
        if self.include_timestamp:
            log_entry["timestamp"] = datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat()
        
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_entry[field] = value
        
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        
        return json.dumps(log_entry, default=str)


class HumanReadableFormatter(logging.Formatter):
    """
    Formatter that outputs human-readable log lines with publish context.
    
    Format: TIMESTAMP - LOGGER - LEVEL - MESSAGE [uri=X batch_size=Y]
    """
    
    def __init__(self, include_timestamp: bool = True):
        if include_timestamp:
            fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            fmt = "%(name)s - %(levelname)s - %(message)s"
        super().__init__(fmt)
    
    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with publish context."""
        base = super().format(record)
        
        context_parts = []
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                context_parts.append(f"{field}={value}")
        
        if context_parts:
            return f"{base} [{' '.join(context_parts)}]"
        return base


def configure_logging(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    include_timestamp: bool = True,
    structured: bool = False,
    stream=None,
) -> logging.Logger:
    """
    Configure logging for the pubcontrol package.
    
    Only the package logger is touched. A handler is added only if the
    logger has none, so repeated calls do not duplicate output.
    
    Args:
        level: Logging level (default: INFO)
        format_string: Custom format string (ignored if structured=True)
        include_timestamp: Whether to include timestamp in log messages
        structured: If True, output JSON-structured logs; if False, human-readable
        stream: Output stream (default: sys.stdout)
        
    Returns:
        The configured package logger
        
    Example:
        >>> from pubcontrol.core.logging import configure_logging
        >>> configure_logging(level=logging.DEBUG, structured=True)
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(level)
    
    if not package_logger.handlers:
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setLevel(level)
        
        if structured:
            formatter = StructuredFormatter(include_timestamp=include_timestamp)
        elif format_string:
            formatter = logging.Formatter(format_string)
        else:
            formatter = HumanReadableFormatter(include_timestamp=include_timestamp)
        
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
    
    return package_logger
