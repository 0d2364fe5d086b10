"""
Color scheme constants for Rich terminal output.

Keeps the palette consistent across commands: green for success and applied
migrations, red for errors and pending ones, yellow for warnings and
progress notes.
"""

STATUS_SUCCESS = "bold green"      # ✅ applied, completed
STATUS_ERROR = "bold red"          # ❌ errors, pending
STATUS_WARNING = "yellow"          # ⚠️ warnings, progress notes
STATUS_INFO = "cyan"               # ℹ️ information
PATHS = "dim blue"                 # File paths

APPLIED = "green"
PENDING = "red"


def state_color(state: str) -> str:
    """Get the color for a migration state."""
    return APPLIED if state.lower() == 'applied' else PENDING
