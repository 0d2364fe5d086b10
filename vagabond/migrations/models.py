"""
Migration data models.

Pydantic models for the derived per-migration status and for the structured
outcome every sequencer operation reports.
"""

from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from ..exceptions import MigrationIOError, StatementExecutionError, VagabondError


class MigrationState(str, Enum):
    """Derived status of a migration relative to the current pointer."""
    APPLIED = "applied"
    PENDING = "pending"


class MigrationEntry(BaseModel):
    """One manifest entry with its derived state."""

    index: int = Field(..., ge=0, description="Position in the manifest")
    name: str = Field(..., min_length=1, description="Migration name")
    state: MigrationState = Field(..., description="Applied or pending")
    is_current: bool = Field(default=False, description="Whether this is the current pointer")

    @property
    def applied(self) -> bool:
        return self.state == MigrationState.APPLIED


class OperationResult(BaseModel):
    """
    Outcome of a sequencer operation.

    Failures are never silent: ``ok`` is False and ``message`` carries the
    error text, ``error_type`` the exception class name.
    """

    operation: str = Field(..., description="Operation name")
    ok: bool = Field(..., description="Whether the operation succeeded")
    message: str = Field(..., description="Human readable outcome")
    error_type: Optional[str] = Field(None, description="Exception class on failure")
    migration: Optional[str] = Field(None, description="Migration the operation acted on")
    current: Optional[str] = Field(None, description="Current pointer after the operation")
    entries: List[MigrationEntry] = Field(default_factory=list, description="Status entries")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal warnings")
    details: Dict[str, Any] = Field(default_factory=dict, description="Extra context")

    @classmethod
    def success(cls, operation: str, message: str, **kwargs) -> 'OperationResult':
        return cls(operation=operation, ok=True, message=message, **kwargs)

    @classmethod
    def failure(cls, operation: str, error: VagabondError) -> 'OperationResult':
        details: Dict[str, Any] = {}
        if isinstance(error, StatementExecutionError):
            details = {
                'statement': error.statement,
                'position': error.position,
                'executed': error.executed,
                'source': error.source,
                'cleanup_hint': error.cleanup_hint,
            }
        elif isinstance(error, MigrationIOError) and error.path is not None:
            details = {'path': str(error.path)}

        return cls(
            operation=operation,
            ok=False,
            message=str(error),
            error_type=type(error).__name__,
            details=details,
        )
