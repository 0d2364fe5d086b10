"""
Migration sequencer.

Implements init, new, apply, rollback, redo, delete and status on top of the
registry, the store directory, the current-pointer store and the executor.

Migrations are applied strictly in manifest order with no gaps, so the
pointer alone tells which ones are applied: every entry up to and including
it. Script execution always happens before the pointer moves, so a failed
script leaves the pointer where it was.

There is no cross-process locking. Two concurrent ``apply`` runs against the
same keyspace can both pick the same migration; invocations must be
serialized by whoever runs them.
"""

import logging
from typing import Callable, List, Optional

from ..config_schema import VagabondConfig
from ..db.pointer import CurrentPointerStore
from ..exceptions import (
    DatabaseError, DuplicateNameError, LogicError, MigrationIOError, VagabondError
)
from ..security import validate_migration_name
from .executor import ScriptExecutor
from .models import MigrationEntry, MigrationState, OperationResult
from .registry import MigrationRegistry
from .store import DOWN, UP, MigrationStore

logger = logging.getLogger(__name__)


class Sequencer:
    """
    Migration state machine.

    The database session is obtained lazily through ``session_factory`` so
    that manifest problems are reported before any database contact.
    """

    OPERATIONS = ('init', 'new', 'apply', 'rollback', 'redo', 'delete', 'status')

    def __init__(self, config: VagabondConfig,
                 session=None,
                 session_factory: Optional[Callable[[], object]] = None,
                 store: Optional[MigrationStore] = None,
                 pointer: Optional[CurrentPointerStore] = None,
                 executor: Optional[ScriptExecutor] = None,
                 progress: Optional[Callable[[str], None]] = None):
        """
        Args:
            config: Loaded configuration
            session: Already opened session
            session_factory: Callable returning a session, used when ``session`` is None
            store: Migration directory store
            pointer: Current-pointer store
            executor: Script executor
            progress: Callback receiving operator-facing progress notes
        """
        self.config = config
        self._session = session
        self._session_factory = session_factory
        self._table_ready = False
        self.store = store or MigrationStore(config.migrations)
        self.pointer = pointer or CurrentPointerStore(config.pointer)
        self.executor = executor or ScriptExecutor(config.migrations.delimiter)
        self.progress = progress or (lambda message: None)

    # ------------------------------------------------------------------
    # helpers

    def _notify(self, message: str) -> None:
        logger.info(message)
        self.progress(message)

    def load_registry(self) -> MigrationRegistry:
        return MigrationRegistry.open(self.config.migrations)

    def _session_with_table(self):
        if self._session is None:
            if self._session_factory is None:
                raise DatabaseError("No database session available")
            self._session = self._session_factory()
        if not self._table_ready:
            self.pointer.ensure_table(self._session)
            self._table_ready = True
        return self._session

    def _prepare(self):
        """Load the manifest, then open the session and read the pointer."""
        registry = self.load_registry()
        session = self._session_with_table()
        current = self.pointer.get(session)
        if current is not None:
            # Fails on a pointer the manifest does not know
            registry.index_of(current)
        return registry, session, current

    def _run_script(self, session, name: str, direction: str) -> int:
        script = self.store.read_up(name) if direction == UP else self.store.read_down(name)
        source = str(self.store.script_path(name, direction))
        return self.executor.run(session, script, source=source)

    @staticmethod
    def entries_for(registry: MigrationRegistry, current: Optional[str]) -> List[MigrationEntry]:
        """Derive applied/pending state for every manifest entry."""
        boundary = registry.index_of(current) if current is not None else -1
        return [
            MigrationEntry(
                index=index,
                name=name,
                state=MigrationState.APPLIED if index <= boundary else MigrationState.PENDING,
                is_current=index == boundary,
            )
            for index, name in enumerate(registry)
        ]

    # ------------------------------------------------------------------
    # filesystem operations

    def init(self) -> OperationResult:
        """Create the migrations directory and manifest."""
        MigrationRegistry.initialize(self.config.migrations)
        return OperationResult.success(
            'init', f"{self.config.migrations.directory} initialized"
        )

    def new(self, name: str) -> OperationResult:
        """Create an empty migration and append it to the manifest."""
        validate_migration_name(name)
        registry = self.load_registry()
        if name in registry:
            raise DuplicateNameError(name)

        path = self.store.create(name)
        try:
            registry.append(name)
        except MigrationIOError:
            # Directory and manifest entry exist together or not at all
            self.store.delete(name)
            raise
        return OperationResult.success(
            'new', "Migration created", migration=name,
            details={
                'path': str(path),
                'up': str(self.store.script_path(name, UP)),
                'down': str(self.store.script_path(name, DOWN)),
            }
        )

    # ------------------------------------------------------------------
    # database operations

    def status(self) -> OperationResult:
        """Report every migration as applied or pending. Read only."""
        registry, _, current = self._prepare()
        entries = self.entries_for(registry, current)
        applied = sum(1 for entry in entries if entry.applied)
        return OperationResult.success(
            'status', f"{applied} applied, {len(entries) - applied} pending",
            current=current, entries=entries
        )

    def apply(self) -> OperationResult:
        """Apply the next pending migration."""
        registry, session, current = self._prepare()
        name = registry.next_after(current)
        if name is None:
            raise LogicError("No migration to apply!")

        self._notify(f"Applying {name}")
        executed = self._run_script(session, name, UP)
        self.pointer.set(session, name)
        return OperationResult.success(
            'apply', f"Applied {name}", migration=name, current=name,
            details={'statements': executed}
        )

    def rollback(self) -> OperationResult:
        """Undo the current migration and move the pointer back one entry."""
        registry, session, current = self._prepare()
        if current is None:
            raise LogicError("Nothing to roll back: no migration currently applied")

        self._notify(f"Rolling back {current}")
        executed = self._run_script(session, current, DOWN)

        previous = registry.previous_of(current)
        if previous is not None:
            self.pointer.set(session, previous)
        else:
            self.pointer.clear(session)

        return OperationResult.success(
            'rollback', f"Rolled back {current}", migration=current, current=previous,
            details={'statements': executed}
        )

    def redo(self) -> OperationResult:
        """Run the current migration's down script, then its up script."""
        _, session, current = self._prepare()
        if current is None:
            raise LogicError("No migration currently applied")

        self._notify(f"Applying {self.store.script_name(DOWN)}")
        down = self._run_script(session, current, DOWN)
        self._notify(f"Applying {self.store.script_name(UP)}")
        up = self._run_script(session, current, UP)

        return OperationResult.success(
            'redo', "Redone successfully", migration=current, current=current,
            details={'down_statements': down, 'up_statements': up}
        )

    def delete(self) -> OperationResult:
        """
        Delete every unapplied migration, directory and manifest entry.

        Entries are removed last first so the manifest and the directories
        stay consistent if a removal fails halfway.
        """
        registry, _, current = self._prepare()
        pending = registry.pending_after(current)

        deleted = []
        for name in reversed(pending):
            self._notify(f"Deleting {name}")
            self.store.delete(name)
            registry.remove_trailing([name])
            deleted.append(name)

        deleted.reverse()
        if not deleted:
            message = "No unapplied migrations to delete"
        else:
            message = f"Deleted {len(deleted)} unapplied migration(s)"
        return OperationResult.success(
            'delete', message, current=current, details={'deleted': deleted}
        )

    # ------------------------------------------------------------------

    def run(self, operation: str, *args) -> OperationResult:
        """
        Run an operation and report its outcome as an ``OperationResult``.

        ``VagabondError`` is converted into a failed result; anything else is
        a bug and propagates.
        """
        if operation not in self.OPERATIONS:
            raise ValueError(f"Unknown operation: {operation}")

        try:
            return getattr(self, operation)(*args)
        except VagabondError as e:
            logger.error(f"{operation} failed: {e}")
            return OperationResult.failure(operation, e)
