"""
Migration engine.

- Registry: ordered manifest of migration names
- Store: up/down script directories
- Executor: statement splitting and execution
- Sequencer: apply / rollback / redo / delete / status
"""

from .executor import ScriptExecutor, split_statements
from .models import MigrationEntry, MigrationState, OperationResult
from .registry import MigrationRegistry, MANIFEST_BANNER
from .sequencer import Sequencer
from .store import MigrationStore, UP, DOWN

__all__ = [
    'ScriptExecutor',
    'split_statements',
    'MigrationEntry',
    'MigrationState',
    'OperationResult',
    'MigrationRegistry',
    'MANIFEST_BANNER',
    'Sequencer',
    'MigrationStore',
    'UP',
    'DOWN',
]
