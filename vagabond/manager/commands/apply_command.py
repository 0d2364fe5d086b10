"""
Apply Command - Apply the next pending migration.
"""

from ..command_base import BaseCommand


class ApplyCommand(BaseCommand):
    """Apply the next migration."""

    name = 'apply'
    description = 'Applies the next migration'
