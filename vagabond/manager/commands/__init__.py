"""
Vagabond CLI commands, one class per operation.
"""

from .init_command import InitCommand
from .new_command import NewCommand
from .apply_command import ApplyCommand
from .rollback_command import RollbackCommand
from .redo_command import RedoCommand
from .delete_command import DeleteCommand
from .status_command import StatusCommand

COMMANDS = [
    InitCommand,
    NewCommand,
    RedoCommand,
    RollbackCommand,
    ApplyCommand,
    DeleteCommand,
    StatusCommand,
]

__all__ = [
    'InitCommand',
    'NewCommand',
    'ApplyCommand',
    'RollbackCommand',
    'RedoCommand',
    'DeleteCommand',
    'StatusCommand',
    'COMMANDS',
]
