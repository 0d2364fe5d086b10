"""
Migration registry.

The manifest is a flat text file: a ``//`` comment banner followed by one
migration name per line, in application order. Order is the only thing that
defines which migration comes next.
"""

import logging
from typing import Iterable, Iterator, List, Optional

from ..config_schema import MigrationsConfig
from ..exceptions import (
    ConfigurationError, DuplicateNameError, LogicError, MigrationIOError,
    UnknownMigrationError
)
from ..security import COMMENT_MARKER

logger = logging.getLogger(__name__)

MANIFEST_BANNER = "//list of migration names in order, current migration is stored in db."


class MigrationRegistry:
    """
    Ordered, persisted list of migration names.

    Raw manifest lines are kept so that rewrites preserve comments.
    """

    def __init__(self, config: Optional[MigrationsConfig] = None):
        self.config = config or MigrationsConfig()
        self.manifest_path = self.config.manifest_path
        self._lines: List[str] = []
        self._names: List[str] = []

    @classmethod
    def initialize(cls, config: Optional[MigrationsConfig] = None) -> 'MigrationRegistry':
        """
        Create the migrations directory and an empty manifest.

        Raises:
            MigrationIOError: If the directory already exists or cannot be created
        """
        registry = cls(config)
        directory = registry.config.directory

        try:
            directory.mkdir(parents=True)
        except FileExistsError as e:
            raise MigrationIOError("Cannot create directory, it already exists", directory) from e
        except OSError as e:
            raise MigrationIOError(f"Cannot create directory ({e.strerror})", directory) from e

        registry._lines = [MANIFEST_BANNER]
        registry._write()
        logger.info(f"Initialized migrations directory {directory}")
        return registry

    @classmethod
    def open(cls, config: Optional[MigrationsConfig] = None) -> 'MigrationRegistry':
        """Create a registry and load its manifest."""
        return cls(config).load()

    def load(self) -> 'MigrationRegistry':
        """
        Read the manifest.

        Raises:
            ConfigurationError: If the manifest does not exist
            DuplicateNameError: If a name appears twice
        """
        try:
            text = self.manifest_path.read_text(encoding='utf-8')
        except FileNotFoundError as e:
            raise ConfigurationError(
                f"Error reading {self.manifest_path}. Make sure the directory is initialized."
            ) from e
        except OSError as e:
            raise ConfigurationError(f"Error reading {self.manifest_path}: {e}") from e
        except UnicodeDecodeError as e:
            raise ConfigurationError(
                f"Error reading {self.manifest_path}, it is not valid UTF-8: {e}"
            ) from e

        lines = [line.rstrip('\r') for line in text.split('\n')]
        while lines and not lines[-1].strip():
            lines.pop()

        names: List[str] = []
        for line in lines:
            name = self._name_of(line)
            if name is None:
                continue
            if name in names:
                raise DuplicateNameError(name)
            names.append(name)

        self._lines = lines
        self._names = names
        logger.debug(f"Loaded {len(names)} migrations from {self.manifest_path}")
        return self

    @staticmethod
    def _name_of(line: str) -> Optional[str]:
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_MARKER):
            return None
        return stripped

    def _write(self) -> None:
        text = '\n'.join(self._lines) + '\n'
        try:
            self.manifest_path.write_text(text, encoding='utf-8')
        except OSError as e:
            raise MigrationIOError(f"Error writing manifest ({e.strerror})", self.manifest_path) from e

    @property
    def names(self) -> List[str]:
        return list(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._names))

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def index_of(self, name: str) -> int:
        """Position of ``name`` in the manifest.

        Raises:
            UnknownMigrationError: If the name is not listed
        """
        try:
            return self._names.index(name)
        except ValueError:
            raise UnknownMigrationError(name) from None

    def next_after(self, current: Optional[str]) -> Optional[str]:
        """Migration following ``current``; the first one when nothing is applied."""
        if current is None:
            return self._names[0] if self._names else None
        index = self.index_of(current)
        if index + 1 < len(self._names):
            return self._names[index + 1]
        return None

    def previous_of(self, name: str) -> Optional[str]:
        """Migration preceding ``name``, None for the first one."""
        index = self.index_of(name)
        return self._names[index - 1] if index > 0 else None

    def pending_after(self, current: Optional[str]) -> List[str]:
        """Names strictly after ``current`` (all names when nothing is applied)."""
        if current is None:
            return list(self._names)
        return self._names[self.index_of(current) + 1:]

    def append(self, name: str) -> None:
        """
        Add ``name`` as the last migration.

        Raises:
            DuplicateNameError: If the name already exists; the manifest is untouched
        """
        if name in self._names:
            raise DuplicateNameError(name)

        self._lines.append(name)
        self._names.append(name)
        try:
            self._write()
        except MigrationIOError:
            self._lines.pop()
            self._names.pop()
            raise
        logger.info(f"Added migration {name} to manifest")

    def remove_trailing(self, names: Iterable[str]) -> None:
        """
        Drop a trailing run of migrations from the manifest.

        Raises:
            LogicError: If ``names`` is not exactly the last entries of the manifest
        """
        to_remove = list(names)
        if not to_remove:
            return

        tail = self._names[-len(to_remove):] if len(to_remove) <= len(self._names) else []
        if sorted(tail) != sorted(to_remove) or len(set(to_remove)) != len(to_remove):
            raise LogicError(
                f"Only trailing migrations can be removed; {', '.join(to_remove)} "
                f"is not the end of the manifest"
            )

        remaining = set(to_remove)
        kept_reversed = []
        for line in reversed(self._lines):
            name = self._name_of(line)
            if name in remaining:
                remaining.discard(name)
                continue
            kept_reversed.append(line)

        self._lines = list(reversed(kept_reversed))
        self._names = self._names[:len(self._names) - len(to_remove)]
        self._write()
        logger.info(f"Removed {', '.join(to_remove)} from manifest")
