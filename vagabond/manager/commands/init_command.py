"""
Init Command - Create the migrations directory and manifest.
"""

from ..command_base import BaseCommand


class InitCommand(BaseCommand):
    """Initialize the migrations directory."""

    name = 'init'
    description = 'Initialize the migrations directory'
    requires_database = False
