"""
Cassandra session management.

Opens a single session per invocation through the DataStax driver, binds the
configured keyspace and exposes the two capabilities the migration engine
needs: execute a statement and run a parameterized query. Driver failures are
re-raised as ``DatabaseError``.
"""

import time
from typing import Any, Callable, List, Optional, Sequence, Tuple

from cassandra import DriverException, OperationTimedOut
from cassandra.cluster import Cluster, NoHostAvailable
from cassandra.protocol import ErrorMessage
from cassandra.query import BatchStatement, BatchType, SimpleStatement, tuple_factory

from ..config_manager import require_host
from ..config_schema import VagabondConfig
from ..exceptions import DatabaseError
from .auth import CredentialOutcome, build_auth_provider, check_credentials
from .logging_config import get_db_logger

# Server-side errors such as syntax errors arrive as ErrorMessage
# subclasses, which are not DriverException
DRIVER_ERRORS = (DriverException, ErrorMessage, NoHostAvailable, OperationTimedOut)


class CassandraSession:
    """Thin wrapper over a connected driver session."""

    def __init__(self, session, logger):
        self._session = session
        self.logger = logger
        self._statement_count = 0
        self._total_time = 0.0

    def _run(self, statement: Any, params: Optional[Sequence[Any]], text: str) -> List[tuple]:
        start_time = time.time()
        try:
            result = self._session.execute(statement, params)
        except DRIVER_ERRORS as e:
            self.logger.error(f"Statement failed: {' '.join(text.split())}: {e}")
            raise DatabaseError(str(e)) from e

        duration = time.time() - start_time
        self._statement_count += 1
        self._total_time += duration
        self.logger.statement(text, duration, has_params=bool(params))

        if result is None:
            return []
        return [tuple(row) for row in result]

    def execute(self, statement: str) -> None:
        """Execute a single CQL statement, discarding any rows."""
        self._run(SimpleStatement(statement), None, statement)

    def query(self, statement: str, params: Optional[Sequence[Any]] = None) -> List[tuple]:
        """Run a parameterized query and return its rows as tuples."""
        return self._run(SimpleStatement(statement), params, statement)

    def execute_batch(self, statements: Sequence[Tuple[str, Sequence[Any]]]) -> None:
        """Execute statements as one LOGGED batch (applied atomically by Cassandra)."""
        batch = BatchStatement(batch_type=BatchType.LOGGED)
        for statement, params in statements:
            batch.add(SimpleStatement(statement), params)
        text = "BATCH " + "; ".join(statement for statement, _ in statements)
        self._run(batch, None, text)

    @property
    def stats(self) -> dict:
        return {
            'statement_count': self._statement_count,
            'total_time': self._total_time,
        }


class CassandraSessionManager:
    """
    Builds a ``CassandraSession`` from configuration.

    Usage::

        with CassandraSessionManager(config) as session:
            ...
    """

    def __init__(self, config: VagabondConfig, cluster_factory=Cluster,
                 warn: Optional[Callable[[str], None]] = None):
        self.config = config
        self.cluster_factory = cluster_factory
        self.warn = warn
        self.address, self.port = config.cassandra.contact_point() if config.cassandra.host else (None, None)
        self.logger = get_db_logger(config.cassandra.host or 'unknown', config.cassandra.keyspace)
        self.warnings: List[str] = []
        self._cluster = None
        self._session: Optional[CassandraSession] = None

    def open(self) -> CassandraSession:
        """Connect, authenticate and bind the keyspace.

        Raises:
            ConfigurationError: If CASSANDRA_HOST is not configured
            DatabaseError: If connecting or binding the keyspace fails
        """
        if self._session is not None:
            return self._session

        require_host(self.config)
        settings = self.config.cassandra

        credentials = check_credentials(settings.username, settings.password)
        if credentials.outcome == CredentialOutcome.ONE_SIDED:
            self._warn(credentials.warning)

        self.logger.connection_event('connecting', f"{self.address}:{self.port} "
                                                   f"({credentials.outcome.value})")
        try:
            self._cluster = self.cluster_factory(
                contact_points=[self.address],
                port=self.port,
                auth_provider=build_auth_provider(credentials.auth),
                connect_timeout=settings.connect_timeout,
            )
            raw_session = self._cluster.connect()
        except DRIVER_ERRORS as e:
            self.logger.connection_event('error', str(e))
            self._shutdown_cluster()
            raise DatabaseError(f"Error initializing session: {e}") from e

        raw_session.row_factory = tuple_factory
        raw_session.default_timeout = settings.request_timeout
        session = CassandraSession(raw_session, self.logger)

        if settings.keyspace:
            try:
                # Keyspace is validated as a plain identifier; USE cannot be bound
                session.execute(f"USE {settings.keyspace}")
            except DatabaseError as e:
                self._shutdown_cluster()
                raise DatabaseError(
                    f"Error setting keyspace {settings.keyspace}. Does it exist? {e}"
                ) from e
            self.logger.connection_event('keyspace', settings.keyspace)
        else:
            self._warn("No keyspace specified. The next operation may or may not error.")

        self.logger.connection_event('connected', f"{self.address}:{self.port}")
        self._session = session
        return session

    def _warn(self, message: str) -> None:
        self.logger.warning(message)
        self.warnings.append(message)
        if self.warn is not None:
            self.warn(message)

    def _shutdown_cluster(self) -> None:
        if self._cluster is not None:
            self._cluster.shutdown()
            self._cluster = None

    def close(self) -> None:
        """Shut the cluster connection down."""
        if self._cluster is not None:
            self._shutdown_cluster()
            details = None
            if self._session is not None:
                stats = self._session.stats
                details = f"{stats['statement_count']} statements in {stats['total_time']:.3f}s"
            self.logger.connection_event('closed', details)
        self._session = None

    def __enter__(self) -> CassandraSession:
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
