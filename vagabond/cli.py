"""
Vagabond - A very simple Cassandra migration tool

Keeps an ordered manifest of migrations in ./migrations and the name of the
current migration in a table of the target keyspace.

Usage:
    vagabond init              # Create ./migrations
    vagabond new add_users     # Add an empty migration
    vagabond apply             # Apply the next migration
    vagabond rollback          # Undo the last migration
    vagabond redo              # Undo and re-apply the last migration
    vagabond delete            # Delete all unapplied migrations
    vagabond status            # Show applied/pending migrations (default)
"""

import argparse
import logging
import sys
from typing import Dict, List, Mapping, Optional

from rich.console import Console

from . import __version__
from .config_manager import load_config
from .db.session import CassandraSessionManager
from .exceptions import ConfigurationError
from .logging_utils import clear_operation_context, set_operation_context, setup_main_logging
from .manager import COMMANDS, BaseCommand
from .migrations.sequencer import Sequencer

DEFAULT_COMMAND = 'status'


class VagabondManager:
    """Parses the command line, builds the services and runs one command."""

    def __init__(self, console: Optional[Console] = None,
                 session_manager_factory=CassandraSessionManager,
                 environ: Optional[Mapping[str, str]] = None):
        self.console = console or Console()
        self.session_manager_factory = session_manager_factory
        self.environ = environ
        self.commands: Dict[str, BaseCommand] = {}
        for command_class in COMMANDS:
            command = command_class(self.console)
            self.commands[command.name] = command

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog='vagabond',
            description="A very simple cassandra migration tool.",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self._get_epilog()
        )
        parser.add_argument('--config', metavar='PATH',
                            help='YAML configuration file (default: ./vagabond.yaml if present)')
        parser.add_argument('--debug', action='store_true',
                            help='Enable debug logging')
        parser.add_argument('--version', action='version',
                            version=f'%(prog)s {__version__}')

        subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
        for command in self.commands.values():
            subparser = subparsers.add_parser(command.name, help=command.description,
                                              description=command.description)
            command.add_arguments(subparser)
        return parser

    def _get_epilog(self) -> str:
        return """
Environment:
  CASSANDRA_HOST        contact point, host or host:port (required)
  CASSANDRA_USER        username (together with CASSANDRA_PASSWORD)
  CASSANDRA_PASSWORD    password (together with CASSANDRA_USER)
  CASSANDRA_KEYSPACE    keyspace holding the migrations table

Values are also read from a .env file in the current directory.
"""

    def _setup_logging(self, config, debug: bool) -> None:
        try:
            setup_main_logging(config.logging, debug=debug)
        except OSError as e:
            # Fallback to basic logging when the log file is not writable
            logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING,
                                format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            logging.getLogger(__name__).warning(f"Could not setup file logging: {e}")

    def run(self, argv: List[str]) -> int:
        """Run one command. Returns the process exit status."""
        parser = self.build_parser()
        try:
            args = parser.parse_args(argv)
        except SystemExit as e:
            return e.code if isinstance(e.code, int) else 1

        command_name = args.command or DEFAULT_COMMAND
        command = self.commands[command_name]

        try:
            config = load_config(args.config, self.environ)
        except ConfigurationError as e:
            command.print_error(str(e))
            return 1

        self._setup_logging(config, args.debug)
        set_operation_context(command_name)

        session_manager = None
        if command.requires_database:
            session_manager = self.session_manager_factory(config, warn=command.warn)

        sequencer = Sequencer(
            config,
            session_factory=session_manager.open if session_manager else None,
            progress=command.progress
        )
        command.inject_services({'config': config, 'sequencer': sequencer})

        try:
            return command.execute(args)
        finally:
            if session_manager is not None:
                session_manager.close()
            clear_operation_context()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    manager = VagabondManager()

    try:
        return manager.run(sys.argv[1:] if argv is None else argv)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130
    except Exception as e:
        logging.error(f"Unexpected error: {e}", exc_info=True)
        print(f"❌ Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
