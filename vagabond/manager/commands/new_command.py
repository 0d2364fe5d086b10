"""
New Command - Add an empty migration at the end of the manifest.
"""

import argparse

from rich.markup import escape

from ...migrations.models import OperationResult
from ..command_base import BaseCommand
from .. import colors


class NewCommand(BaseCommand):
    """Create a new, empty migration."""

    name = 'new'
    description = 'Add new migration'
    requires_database = False

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument('name', metavar='NAME', help='Name of migration')

    def operation_args(self, args: argparse.Namespace) -> tuple:
        return (args.name,)

    def render(self, result: OperationResult, args: argparse.Namespace) -> None:
        self.print_success(result.message)
        for key in ('up', 'down'):
            if key in result.details:
                self.console.print(f"   {escape(result.details[key])}", style=colors.PATHS)
