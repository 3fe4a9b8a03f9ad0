"""
FILE: mdtasks/cli/prompts.py
PURPOSE: Interactive entry of a new task (summary, due date, priority, notes, hidden)
EXPORTS:
  - NewTaskInput (dataclass)
  - prompt_new_task() -> NewTaskInput
DEPENDENCIES:
  - prompt_toolkit (line editing, validation, confirm)
  - mdtasks.core.constants (DUE_DATE_PATTERN, priorities)
NOTES:
  - Used by `mdtasks add` when no description argument is given
  - Validation mirrors the service layer so bad input is re-asked, not rejected
  - Ctrl-C / Ctrl-D propagate as KeyboardInterrupt / EOFError to the caller
"""

from dataclasses import dataclass
from typing import Optional

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.shortcuts import confirm
from prompt_toolkit.validation import Validator

from ..core.constants import DEFAULT_PRIORITY, DUE_DATE_PATTERN, PRIORITY_LABELS


@dataclass
class NewTaskInput:
    description: str
    due_date: Optional[str] = None
    priority: int = DEFAULT_PRIORITY
    detailed_description: str = ""
    hidden: bool = False


_description_validator = Validator.from_callable(
    lambda text: bool(text.strip()),
    error_message="Task summary cannot be empty.",
    move_cursor_to_end=True,
)

_due_date_validator = Validator.from_callable(
    lambda text: not text.strip() or bool(DUE_DATE_PATTERN.match(text.strip())),
    error_message="Invalid date format. Please use YYYY-MM-DD or leave empty.",
    move_cursor_to_end=True,
)

_priority_validator = Validator.from_callable(
    lambda text: text.strip() in {str(p) for p in PRIORITY_LABELS},
    error_message="Priority must be 1 (High), 2 (Medium) or 3 (Low).",
    move_cursor_to_end=True,
)


def prompt_new_task() -> NewTaskInput:
    """Ask for the fields of a new task, one prompt each."""
    description = prompt("Task summary: ", validator=_description_validator)
    due_date = prompt("Due date (YYYY-MM-DD, optional): ", validator=_due_date_validator)
    priority = prompt(
        "Priority (1=High, 2=Medium, 3=Low): ",
        default=str(DEFAULT_PRIORITY),
        validator=_priority_validator,
        completer=WordCompleter([str(p) for p in PRIORITY_LABELS]),
    )
    details = prompt(
        "Detailed description (optional, Esc+Enter to finish): ",
        multiline=True,
    )
    hidden = confirm("Hidden task?")

    return NewTaskInput(
        description=description.strip(),
        due_date=due_date.strip() or None,
        priority=int(priority.strip()),
        detailed_description=details.strip(),
        hidden=hidden,
    )
