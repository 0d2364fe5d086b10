"""
Script executor.

Splits a migration script on the statement delimiter and runs the statements
one by one. Cassandra has no multi-statement transactions: when a statement
fails, the ones before it stay applied.
"""

import logging
from typing import List, Optional

from ..exceptions import DatabaseError, StatementExecutionError

logger = logging.getLogger(__name__)

COMMENT_PREFIXES = ('--', '//')


def _is_comment_only(fragment: str) -> bool:
    lines = [line.strip() for line in fragment.splitlines() if line.strip()]
    return bool(lines) and all(line.startswith(COMMENT_PREFIXES) for line in lines)


def split_statements(script: str, delimiter: str = ';') -> List[str]:
    """
    Split a script into executable statements.

    Blank fragments (including the one after the final delimiter) and
    fragments holding only comment lines are dropped.
    """
    statements = []
    for fragment in script.split(delimiter):
        statement = fragment.strip()
        if not statement or _is_comment_only(statement):
            continue
        statements.append(statement)
    return statements


class ScriptExecutor:
    """Runs migration scripts against a session."""

    def __init__(self, delimiter: str = ';'):
        self.delimiter = delimiter

    def run(self, session, script: str, source: Optional[str] = None) -> int:
        """
        Execute every statement of ``script`` in order.

        Args:
            session: Session providing ``execute(statement)``
            script: Script text
            source: Script location, used in log and error messages

        Returns:
            Number of statements executed

        Raises:
            StatementExecutionError: On the first failing statement. Earlier
                statements are not undone.
        """
        statements = split_statements(script, self.delimiter)
        label = source or "script"

        if not statements:
            logger.warning(f"{label} has no statements to execute")
            return 0

        for position, statement in enumerate(statements, start=1):
            try:
                session.execute(statement)
            except DatabaseError as e:
                logger.error(f"Statement {position}/{len(statements)} of {label} failed "
                             f"after {position - 1} executed: {e}")
                raise StatementExecutionError(statement, position, position - 1, e, source) from e
            logger.debug(f"Executed statement {position}/{len(statements)} of {label}")

        logger.info(f"Executed {len(statements)} statements from {label}")
        return len(statements)
