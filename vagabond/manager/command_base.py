"""
Base Command - Common functionality for all CLI commands.

Provides shared utilities including:
- Service injection (config, sequencer)
- Rich output for success, error, warning and progress messages
- JSON output handling
- Exit status mapping for ``OperationResult``
"""

from abc import ABC
from typing import Any, Dict, List, Optional
import argparse
import json

from rich.console import Console
from rich.markup import escape

from ..migrations.models import OperationResult
from . import colors


class BaseCommand(ABC):
    """Base class for all commands.

    Subclasses set ``name`` and ``description``; most only need to say
    whether they touch the database and which arguments they pass on.
    """

    name: str = ''
    description: str = ''
    requires_database: bool = True

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.config = None
        self.sequencer = None
        self.warnings: List[str] = []
        self.quiet = False

    def inject_services(self, services: Dict[str, Any]) -> None:
        """Inject required services (config, sequencer)."""
        self.config = services.get('config')
        self.sequencer = services.get('sequencer')
        if self.sequencer is None:
            raise ValueError(f"Sequencer is required for the {self.name} command")

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Add command-specific arguments."""
        pass

    def operation_args(self, args: argparse.Namespace) -> tuple:
        """Positional arguments passed on to the sequencer operation."""
        return ()

    def machine_output(self, args: argparse.Namespace) -> bool:
        """Whether stdout must carry nothing but the rendered result."""
        return False

    def warn(self, message: str) -> None:
        """Record an operator warning; printed unless output is machine readable."""
        self.warnings.append(message)
        if not self.quiet:
            self.print_warning(message)

    def progress(self, message: str) -> None:
        if not self.quiet:
            self.print_warning(message)

    def execute(self, args: argparse.Namespace) -> int:
        """Run the operation and render its result. Returns the exit status."""
        self.quiet = self.machine_output(args)
        result = self.sequencer.run(self.name, *self.operation_args(args))
        result.warnings.extend(self.warnings)
        if result.ok:
            self.render(result, args)
        else:
            self.render_failure(result)
        return self.exit_status(result)

    def render(self, result: OperationResult, args: argparse.Namespace) -> None:
        self.print_success(result.message)

    def render_failure(self, result: OperationResult) -> None:
        self.print_error(result.message)
        hint = result.details.get('cleanup_hint')
        if hint:
            self.print_warning(hint)
        path = result.details.get('path')
        if path:
            self.console.print(f"   {escape(path)}", style=colors.PATHS)

    @staticmethod
    def exit_status(result: OperationResult) -> int:
        return 0 if result.ok else 1

    # Output formatting utilities
    def print_success(self, message: str) -> None:
        """Print success message in green."""
        self.console.print(escape(message), style=colors.STATUS_SUCCESS)

    def print_error(self, message: str) -> None:
        """Print error message in red."""
        self.console.print(escape(message), style=colors.STATUS_ERROR)

    def print_warning(self, message: str) -> None:
        """Print warning or progress note in yellow."""
        self.console.print(escape(message), style=colors.STATUS_WARNING)

    def print_info(self, message: str) -> None:
        self.console.print(escape(message), style=colors.STATUS_INFO)

    def print_json(self, data: Any) -> None:
        """Print data as JSON without rich markup processing."""
        self.console.print_json(json.dumps(data, default=str))
