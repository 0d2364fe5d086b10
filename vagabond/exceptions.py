"""Error taxonomy for the Vagabond migration tool.

Every failure surfaced to the operator is a ``VagabondError``. Nothing is
retried and nothing already committed to the database is undone, so the
subclasses exist mainly to carry enough context (paths, statements) for the
operator to reconcile state by hand.
"""

from typing import Optional
from pathlib import Path


class VagabondError(Exception):
    """Base exception for all Vagabond errors."""
    pass


class ConfigurationError(VagabondError):
    """Raised for missing manifest, missing environment values or invalid config."""
    pass


class InvalidMigrationNameError(ConfigurationError):
    """Raised when a migration name cannot be used as a directory name."""
    pass


class QueryInjectionError(ConfigurationError):
    """Raised when a keyspace or table name is not a plain CQL identifier."""
    pass


class DuplicateNameError(VagabondError):
    """Raised when a migration name is already used."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Migration name {name} is already used!")


class MigrationIOError(VagabondError):
    """Raised for filesystem problems with the migrations directory."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else None
        if self.path is not None:
            message = f"{message}: {self.path}"
        super().__init__(message)


class DatabaseError(VagabondError):
    """Raised for connection, authentication and keyspace failures."""
    pass


class StatementExecutionError(DatabaseError):
    """Raised when a migration statement fails.

    Statements executed before the failing one stay applied; Cassandra has
    no multi-statement transactions to roll them back.
    """

    def __init__(self, statement: str, position: int, executed: int, cause: Exception,
                 source: Optional[str] = None):
        self.statement = statement
        self.position = position
        self.executed = executed
        self.cause = cause
        self.source = source
        location = f" in {source}" if source else ""
        super().__init__(
            f"Error applying migration query{location} "
            f"(statement {position}): {statement.strip()}: {cause}"
        )

    @property
    def cleanup_hint(self) -> str:
        if self.executed == 0:
            return "No statement of this script was executed."
        return (f"{self.executed} statement(s) before it were already executed and "
                f"were not undone. You should probably clean this up.")


class PointerStateError(DatabaseError):
    """Raised when the tracking table holds more than one row."""
    pass


class LogicError(VagabondError):
    """Raised when an operation is not possible in the current migration state."""
    pass


class UnknownMigrationError(LogicError):
    """Raised when the current pointer names a migration missing from the manifest."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Current migration {name} is not listed in the manifest. "
            f"Was it removed by hand?"
        )
