"""
FILE: mdtasks/cli/commands/__init__.py
PURPOSE: CLI command modules
"""

# Export all command handlers for easy importing
from .tasks import (
    ls,
    show,
    add,
    done,
    reopen,
    edit,
    due,
    priority,
    hide,
    unhide,
    note,
    check,
)
from .system import (
    version,
    help,
)

__all__ = [
    "ls",
    "show",
    "add",
    "done",
    "reopen",
    "edit",
    "due",
    "priority",
    "hide",
    "unhide",
    "note",
    "check",
    "version",
    "help",
]
