"""
Status Command - Show which migrations are applied.

Applied migrations (everything up to and including the current pointer) are
printed in green with a check mark, pending ones in red.
"""

import argparse

from rich.markup import escape

from ...migrations.models import OperationResult
from ..command_base import BaseCommand
from .. import colors


class StatusCommand(BaseCommand):
    """Show applied and pending migrations."""

    name = 'status'
    description = 'Shows applied and pending migrations (default)'

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument('--json', action='store_true',
                            help='Output status as JSON')

    def machine_output(self, args: argparse.Namespace) -> bool:
        return getattr(args, 'json', False)

    def render(self, result: OperationResult, args: argparse.Namespace) -> None:
        if self.quiet:
            self.print_json(result.model_dump(mode='json'))
            return

        if not result.entries:
            self.print_info("No migrations in manifest")
            return

        for entry in result.entries:
            style = colors.state_color(entry.state.value)
            if entry.applied:
                self.console.print(f"✅ {escape(entry.name)}", style=style)
            else:
                self.console.print(escape(entry.name), style=style)

    def render_failure(self, result: OperationResult) -> None:
        if self.quiet:
            self.print_json(result.model_dump(mode='json'))
            return
        super().render_failure(result)
