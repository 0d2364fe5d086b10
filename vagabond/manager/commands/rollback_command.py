"""
Rollback Command - Undo the current migration.
"""

from ..command_base import BaseCommand


class RollbackCommand(BaseCommand):
    """Roll back the last applied migration."""

    name = 'rollback'
    description = 'Undoes the last migration'
