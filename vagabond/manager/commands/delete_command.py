"""
Delete Command - Remove every unapplied migration.

Directories of pending migrations are deleted from disk together with their
manifest entries. Applied migrations are never touched.
"""

from ..command_base import BaseCommand


class DeleteCommand(BaseCommand):
    """Delete all unapplied migrations."""

    name = 'delete'
    description = 'Deletes all unapplied migrations'
