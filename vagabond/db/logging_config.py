"""
Database logging helpers.

Statement-level logging for the ``vagabond.db`` logger: every CQL statement is
logged with its duration at DEBUG, failures at ERROR. Bound parameters are
never written to the log.
"""

import logging
from typing import Any, Dict, Optional


def log_statement(logger: logging.Logger, statement: str, duration: Optional[float] = None,
                  has_params: bool = False) -> None:
    """
    Log an executed CQL statement.

    Args:
        logger: Database logger instance
        statement: CQL statement text
        duration: Execution time in seconds
        has_params: Whether the statement had bound parameters
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return

    message = f"CQL: {' '.join(statement.split())}"
    if has_params:
        message += " [bound]"
    if duration is not None:
        message += f" ({duration:.3f}s)"
    logger.debug(message)


def log_connection_event(logger: logging.Logger, event: str, details: Optional[str] = None) -> None:
    """
    Log session lifecycle events.

    Args:
        logger: Database logger instance
        event: Event type ('connecting', 'connected', 'keyspace', 'closed', 'error')
        details: Additional event details
    """
    message = f"Session {event}"
    if details:
        message += f": {details}"

    if event == 'error':
        logger.error(message)
    elif event in ('connected', 'closed'):
        logger.info(message)
    else:
        logger.debug(message)


class CqlLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that prefixes messages with the contact point and keyspace.
    """

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg, kwargs):
        host = self.extra.get('host', 'unknown')
        keyspace = self.extra.get('keyspace') or '-'
        return f"[{host}/{keyspace}] {msg}", kwargs

    def statement(self, statement: str, duration: Optional[float] = None,
                  has_params: bool = False) -> None:
        """Log an executed statement."""
        if self.isEnabledFor(logging.DEBUG):
            log_statement(self, statement, duration, has_params)

    def connection_event(self, event: str, details: Optional[str] = None) -> None:
        """Log a session lifecycle event."""
        log_connection_event(self, event, details)


def get_db_logger(host: str, keyspace: Optional[str] = None) -> CqlLoggerAdapter:
    """Return the adapter used by database sessions."""
    return CqlLoggerAdapter(logging.getLogger('vagabond.db'),
                            {'host': host, 'keyspace': keyspace})
