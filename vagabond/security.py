"""Security utilities for Vagabond.

This module provides:
- CQL identifier validation (keyspace and tracking table names are
  interpolated into statements because CQL cannot bind them)
- Migration name validation (names become directory names)
- Log sanitization for credentials
"""

import re
import logging
from typing import Optional

from .exceptions import QueryInjectionError, InvalidMigrationNameError

logger = logging.getLogger(__name__)

COMMENT_MARKER = "//"

# Unquoted CQL identifiers: letters, digits and underscore, at most 48 chars
_CQL_IDENTIFIER = re.compile(r'^[A-Za-z][A-Za-z0-9_]{0,47}$')


def validate_identifier(identifier: str, kind: str = "identifier") -> str:
    """Validate a keyspace or table name for interpolation into CQL.

    Args:
        identifier: Name to validate
        kind: What the name is, used in the error message

    Returns:
        The validated identifier

    Raises:
        QueryInjectionError: If the name is not a plain CQL identifier
    """
    if not identifier or not _CQL_IDENTIFIER.match(identifier):
        raise QueryInjectionError(
            f"{kind.capitalize()} '{identifier}' is not a valid CQL identifier"
        )
    return identifier


def validate_migration_name(name: str) -> str:
    """Validate that a migration name can be a manifest line and a directory.

    Raises:
        InvalidMigrationNameError: If the name is unusable
    """
    if not name or not name.strip():
        raise InvalidMigrationNameError("Migration name cannot be empty")
    if name != name.strip():
        raise InvalidMigrationNameError(
            f"Migration name '{name}' has leading or trailing whitespace"
        )
    if name.startswith(COMMENT_MARKER):
        raise InvalidMigrationNameError(
            f"Migration name '{name}' starts with the comment marker '{COMMENT_MARKER}'"
        )
    if name in ('.', '..') or '/' in name or '\\' in name or '\n' in name:
        raise InvalidMigrationNameError(
            f"Migration name '{name}' cannot be used as a directory name"
        )
    return name


def sanitize_log_message(message: str) -> str:
    """Remove credentials from log messages."""
    return re.sub(
        r'(password|passwd|secret|token)\s*[=:]\s*[^\s,]+',
        r'\1=***REDACTED***',
        message,
        flags=re.IGNORECASE
    )


class SensitiveDataFilter(logging.Filter):
    """Logging filter that removes credentials."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = sanitize_log_message(record.msg)
        if record.args and isinstance(record.args, tuple):
            record.args = tuple(
                sanitize_log_message(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )
        return True


def setup_secure_logging(logger_name: Optional[str] = None) -> logging.Logger:
    """Set up a logger with the credential filter attached.

    Args:
        logger_name: Name of logger (None for root logger)

    Returns:
        Configured logger
    """
    secure_logger = logging.getLogger(logger_name)
    sensitive_filter = SensitiveDataFilter()

    for handler in secure_logger.handlers:
        handler.addFilter(sensitive_filter)
    secure_logger.addFilter(sensitive_filter)

    return secure_logger
