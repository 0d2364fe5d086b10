"""
Migration store directory.

Each migration lives in ``<migrations>/<name>/`` with an ``up`` and a ``down``
script. Scripts are created empty and filled in by hand.
"""

import shutil
import logging
from pathlib import Path
from typing import Optional

from ..config_schema import MigrationsConfig
from ..exceptions import MigrationIOError

logger = logging.getLogger(__name__)

UP = 'up'
DOWN = 'down'


class MigrationStore:
    """Maps migration names to their script directories."""

    def __init__(self, config: Optional[MigrationsConfig] = None):
        self.config = config or MigrationsConfig()
        self.root = self.config.directory

    def path_for(self, name: str) -> Path:
        return self.root / name

    def script_name(self, direction: str) -> str:
        return f"{direction}.{self.config.script_extension}"

    def script_path(self, name: str, direction: str) -> Path:
        return self.path_for(name) / self.script_name(direction)

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_dir()

    def create(self, name: str) -> Path:
        """
        Create the directory and empty scripts for a new migration.

        Raises:
            MigrationIOError: If the directory already exists or cannot be written
        """
        path = self.path_for(name)
        try:
            path.mkdir()
        except FileExistsError as e:
            raise MigrationIOError("Cannot create directory, it already exists", path) from e
        except OSError as e:
            raise MigrationIOError(f"Cannot create directory ({e.strerror})", path) from e

        for direction in (UP, DOWN):
            script = self.script_path(name, direction)
            try:
                script.write_text('', encoding='utf-8')
            except OSError as e:
                raise MigrationIOError(f"Error creating {script.name}", script) from e

        logger.info(f"Created migration directory {path}")
        return path

    def _read(self, name: str, direction: str) -> str:
        script = self.script_path(name, direction)
        try:
            return script.read_text(encoding='utf-8')
        except OSError as e:
            raise MigrationIOError(f"Error reading {script.name}", script) from e
        except UnicodeDecodeError as e:
            raise MigrationIOError(f"Error reading {script.name}, it is not valid UTF-8", script) from e

    def read_up(self, name: str) -> str:
        """Text of the migration's up script."""
        return self._read(name, UP)

    def read_down(self, name: str) -> str:
        """Text of the migration's down script."""
        return self._read(name, DOWN)

    def delete(self, name: str) -> None:
        """
        Remove the migration directory and everything in it.

        Raises:
            MigrationIOError: If the directory does not exist or cannot be removed
        """
        path = self.path_for(name)
        if not self.exists(name):
            raise MigrationIOError("Error deleting directory, it does not exist", path)
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise MigrationIOError(f"Error deleting directory ({e.strerror})", path) from e
        logger.info(f"Deleted migration directory {path}")
