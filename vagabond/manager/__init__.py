"""
Manager Package - command-line front end for Vagabond.
"""

from .command_base import BaseCommand
from .commands import COMMANDS

__all__ = ['BaseCommand', 'COMMANDS']
