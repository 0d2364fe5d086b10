"""
Redo Command - Undo and re-apply the current migration.

Useful while iterating on a migration: edit up/down, then redo.
"""

from ..command_base import BaseCommand


class RedoCommand(BaseCommand):
    """Run the current migration's down script, then its up script."""

    name = 'redo'
    description = 'Undoes and applies the last migration'
