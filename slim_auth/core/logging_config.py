"""
Structured logging configuration for SlimAuth.

Provides JSON-formatted logging and security event logging for session
identity changes and access token checks.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from slim_auth.core.config import Settings, settings as default_settings

# Attributes present on every LogRecord; anything else came in through `extra`
_RESERVED_RECORD_ATTRS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName', 'taskName',
    'processName', 'process', 'exc_info', 'exc_text', 'stack_info',
}

SENSITIVE_KEYWORDS = {
    'password', 'secret', 'token', 'credential', 'cookie', 'private', 'confidential'
}


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging with sensitive field redaction.
    """

    def __init__(self, include_sensitive: bool = False):
        """
        Initialize structured formatter.

        Args:
            include_sensitive: Whether to include potentially sensitive data in logs
        """
        super().__init__()
        self.include_sensitive = include_sensitive

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON"""

        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra_fields = {}
        for key, value in record.__dict__.items():
            if key in _RESERVED_RECORD_ATTRS:
                continue
            if not self.include_sensitive and self._is_sensitive_field(key):
                extra_fields[key] = "[REDACTED]"
            else:
                extra_fields[key] = value

        if extra_fields:
            log_entry["extra"] = extra_fields

        return json.dumps(log_entry, default=self._json_default)

    def _is_sensitive_field(self, key: str) -> bool:
        """Check if field name suggests sensitive data"""
        key_lower = key.lower()
        return any(keyword in key_lower for keyword in SENSITIVE_KEYWORDS)

    def _json_default(self, obj: Any) -> str:
        """JSON serializer for objects not serializable by default"""
        if isinstance(obj, datetime):
            return obj.isoformat()
        return str(obj)


def setup_logging(
    log_level: str = "INFO",
    enable_json: bool = True,
    log_file: Optional[str] = None,
    include_sensitive: bool = False
) -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        enable_json: Whether to use JSON formatting
        log_file: Optional file path for logging
        include_sensitive: Whether to include sensitive data in logs
    """

    # Clear any existing handlers
    logging.root.handlers.clear()

    if enable_json:
        formatter = StructuredFormatter(include_sensitive=include_sensitive)
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def get_security_logger(name: str) -> logging.Logger:
    """
    Get a logger configured for security events.

    Args:
        name: Logger name

    Returns:
        Logger instance configured for security logging
    """
    return logging.getLogger(f"security.{name}")


def log_security_event(
    event_type: str,
    message: str,
    user_id: Optional[str] = None,
    extra_data: Optional[Dict[str, Any]] = None,
    level: int = logging.INFO,
) -> None:
    """
    Log a security event with structured data.

    Args:
        event_type: Type of security event (user_set, session_reset, ...)
        message: Human-readable message
        user_id: Optional user identifier
        extra_data: Additional structured data
        level: Logging level for the event
    """
    logger = get_security_logger("events")

    security_data: Dict[str, Any] = {
        "event_type": event_type,
    }
    if user_id:
        security_data["user_id"] = user_id
    if extra_data:
        security_data.update(extra_data)

    logger.log(level, message, extra=security_data)


def init_application_logging(app_settings: Optional[Settings] = None) -> None:
    """Initialize logging from session settings"""
    app_settings = app_settings or default_settings
    is_dev = app_settings.is_dev

    log_level = "DEBUG" if is_dev else app_settings.log_level
    # Plain text in development
    enable_json = app_settings.json_logging and not is_dev

    setup_logging(
        log_level=log_level,
        enable_json=enable_json,
        include_sensitive=is_dev,
    )

    logger = logging.getLogger("slim_auth.startup")
    logger.info(
        "Structured logging initialized",
        extra={
            "dev_mode": is_dev,
            "json_logging": enable_json,
            "log_level": log_level,
        }
    )
