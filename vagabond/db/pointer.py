"""
Current-pointer store.

The tracking table holds at most one row: the name of the most recently
applied migration. It is the only persisted migration state; the manifest on
disk knows nothing about what is applied.
"""

import logging
from typing import List, Optional

from ..config_schema import MultiRowPolicy, PointerConfig, PointerWriteMode
from ..exceptions import PointerStateError

logger = logging.getLogger(__name__)


class CurrentPointerStore:
    """Reads and replaces the current migration pointer."""

    def __init__(self, config: Optional[PointerConfig] = None):
        self.config = config or PointerConfig()
        self.table = self.config.table

    def ensure_table(self, session) -> None:
        """Create the tracking table if it does not exist yet."""
        session.execute(
            f"CREATE TABLE IF NOT EXISTS {self.table} (migration text, PRIMARY KEY (migration))"
        )
        logger.debug(f"Tracking table {self.table} ensured")

    def _rows(self, session) -> List[str]:
        return [row[0] for row in session.query(f"SELECT migration FROM {self.table}")]

    def get(self, session) -> Optional[str]:
        """
        Get the current migration name.

        Returns:
            The name stored in the tracking table, None if it is empty

        Raises:
            PointerStateError: If several rows exist and the policy is ``reject``
        """
        rows = self._rows(session)
        if not rows:
            return None

        if len(rows) > 1:
            if self.config.multi_row_policy == MultiRowPolicy.REJECT:
                raise PointerStateError(
                    f"Tracking table {self.table} holds {len(rows)} rows "
                    f"({', '.join(rows)}); expected at most one. "
                    f"Fix it by hand or set pointer.multi_row_policy to 'first'."
                )
            logger.warning(f"Tracking table {self.table} holds {len(rows)} rows, using {rows[0]}")

        return rows[0]

    def clear(self, session) -> None:
        """Erase every row of the tracking table."""
        session.execute(f"TRUNCATE {self.table}")
        logger.debug("Current migration cleared")

    def set(self, session, name: str) -> None:
        """
        Make ``name`` the sole row of the tracking table.

        In ``truncate_insert`` mode this is two statements: a crash between
        them leaves the table empty, which reads as "nothing applied".
        ``batch`` mode replaces the existing rows in one LOGGED batch instead.
        """
        if self.config.write_mode == PointerWriteMode.BATCH:
            statements = [
                (f"DELETE FROM {self.table} WHERE migration = %s", (existing,))
                for existing in self._rows(session) if existing != name
            ]
            statements.append((f"INSERT INTO {self.table} (migration) VALUES (%s)", (name,)))
            session.execute_batch(statements)
        else:
            self.clear(session)
            session.query(f"INSERT INTO {self.table} (migration) VALUES (%s)", (name,))

        logger.info(f"Current migration set to {name}")
