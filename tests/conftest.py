"""Shared fixtures: an in-memory stand-in for a Cassandra session."""

import re
from typing import List, Optional, Sequence

import pytest

from vagabond.config_schema import LoggingConfig, MigrationsConfig, VagabondConfig
from vagabond.exceptions import DatabaseError
from vagabond.migrations.registry import MigrationRegistry
from vagabond.migrations.store import MigrationStore


class FakeCassandraSession:
    """
    Emulates the tracking table and records every executed statement.

    Statements listed in ``fail_on`` raise ``DatabaseError`` instead of
    executing, like an invalid query would on a real cluster.
    """

    def __init__(self, table: str = 'vagabond', fail_on: Sequence[str] = ()):
        self.table = table
        self.rows: List[str] = []
        self.table_exists = False
        self.executed: List[str] = []
        self.batches: List[list] = []
        self.fail_on = set(fail_on)

    def _normalize(self, statement: str) -> str:
        return ' '.join(statement.split())

    def _check(self, statement: str) -> None:
        if statement in self.fail_on or self._normalize(statement) in self.fail_on:
            raise DatabaseError(f"Invalid query: {statement}")

    def _apply(self, statement: str, params: Optional[Sequence] = None) -> List[tuple]:
        s = self._normalize(statement)
        t = self.table
        if s.startswith(f"CREATE TABLE IF NOT EXISTS {t} "):
            self.table_exists = True
        elif s == f"SELECT migration FROM {t}":
            return [(row,) for row in self.rows]
        elif s == f"TRUNCATE {t}":
            self.rows.clear()
        elif s == f"INSERT INTO {t} (migration) VALUES (%s)":
            if params[0] not in self.rows:
                self.rows.append(params[0])
        elif s == f"DELETE FROM {t} WHERE migration = %s":
            if params[0] in self.rows:
                self.rows.remove(params[0])
        return []

    def execute(self, statement: str) -> None:
        self._check(statement)
        self.executed.append(statement)
        self._apply(statement)

    def query(self, statement: str, params: Optional[Sequence] = None) -> List[tuple]:
        self._check(statement)
        self.executed.append(statement)
        return self._apply(statement, params)

    def execute_batch(self, statements) -> None:
        for statement, _ in statements:
            self._check(statement)
        self.batches.append(list(statements))
        for statement, params in statements:
            self.executed.append(statement)
            self._apply(statement, params)

    @property
    def pointer(self) -> Optional[str]:
        return self.rows[0] if self.rows else None

    @property
    def migration_statements(self) -> List[str]:
        """Executed statements that do not touch the tracking table."""
        pattern = re.compile(rf"\b{self.table}\b")
        return [s for s in self.executed if not pattern.search(s)]


@pytest.fixture
def fake_session():
    return FakeCassandraSession()


@pytest.fixture
def config(tmp_path):
    """Configuration rooted in a temporary directory."""
    return VagabondConfig(
        migrations=MigrationsConfig(directory=tmp_path / 'migrations'),
        logging=LoggingConfig(log_file=tmp_path / 'logs' / 'vagabond.log'),
    )


@pytest.fixture
def make_migrations(config):
    """Initialize the migrations directory and add migrations with scripts.

    Usage: ``make_migrations({'A': ('up;', 'down;'), 'B': None})``
    """
    def _make(migrations):
        registry = MigrationRegistry.initialize(config.migrations)
        store = MigrationStore(config.migrations)
        for name, scripts in migrations.items():
            store.create(name)
            registry.append(name)
            if scripts is not None:
                up, down = scripts
                store.script_path(name, 'up').write_text(up, encoding='utf-8')
                store.script_path(name, 'down').write_text(down, encoding='utf-8')
        return registry
    return _make
