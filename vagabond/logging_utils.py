"""
Logging utilities for Vagabond.

Provides operation-aware logging using Python's contextvars so every record
written during a command carries the name of the operation (apply, rollback,
...) that produced it.
"""

import logging
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from typing import Optional

from .config_schema import LoggingConfig
from .security import SensitiveDataFilter

# Context variable holding the operation currently running
_operation_context: ContextVar[Optional[str]] = ContextVar('operation', default=None)

LOG_FORMAT = '%(asctime)s - [%(operation)s] - %(name)s - %(levelname)s - %(message)s'


class OperationFilter(logging.Filter):
    """
    Logging filter that adds the current operation to log records.

    Lets the log file be grepped per command invocation.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        operation = get_operation_context()
        record.operation = operation if operation else "no_operation"
        return True


def set_operation_context(operation: str) -> None:
    """Set the operation name used by all subsequent log messages."""
    _operation_context.set(operation)


def clear_operation_context() -> None:
    """Clear the current operation from the logging context."""
    _operation_context.set(None)


def get_operation_context() -> Optional[str]:
    """Get the current operation name or None if not set."""
    return _operation_context.get()


def setup_main_logging(config: LoggingConfig, debug: bool = False) -> logging.Logger:
    """
    Setup application logging to the configured rotating log file.

    Terminal output is rendered by the CLI through rich; the console handler
    here is only added when ``config.console`` is set.

    Args:
        config: Logging section of the configuration
        debug: Force DEBUG level regardless of configuration

    Returns:
        The configured root logger
    """
    level = logging.DEBUG if debug else getattr(logging, config.level.value)

    log_file = config.log_file
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove any existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=config.max_log_size_mb * 1024 * 1024,
        backupCount=config.backup_count,
        encoding='utf-8'
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(file_handler)

    if config.console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s', datefmt='%H:%M:%S'
        ))
        console_handler.setLevel(logging.WARNING)
        root_logger.addHandler(console_handler)

    for handler in root_logger.handlers:
        handler.addFilter(OperationFilter())
        handler.addFilter(SensitiveDataFilter())

    # The driver is chatty about connection pools at INFO
    logging.getLogger('cassandra').setLevel(logging.WARNING)

    logging.getLogger(__name__).debug("Logging configuration initialized")
    return root_logger
