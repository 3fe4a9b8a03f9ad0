"""
FILE: mdtasks/core/service.py
PURPOSE: Business logic layer for task operations
EXPORTS:
  - list_tasks(keyword, priority, file_filter, show_hidden, sort_by, descending) -> List[TaskRecord]
  - filter_tasks(tasks, ...) -> List[TaskRecord]
  - sort_tasks(tasks, sort_by, descending) -> List[TaskRecord]
  - get_task(task_id) -> TaskRecord
  - create_task(description, file_path, due_date, priority, detailed_description, hidden) -> TaskRecord
  - update_task(task_id, field, value) -> TaskRecord
  - complete_task(task_id) -> TaskRecord
  - reopen_task(task_id) -> TaskRecord
  - update_description(task_id, description) -> TaskRecord
  - set_due_date(task_id, due_date) -> TaskRecord
  - set_priority(task_id, priority) -> TaskRecord
  - set_hidden(task_id, hidden) -> TaskRecord
  - set_detailed_description(task_id, text) -> TaskRecord
  - find_malformed() -> List[MalformedLine]
DEPENDENCIES:
  - mdtasks.core.vault (file access and scanning)
  - mdtasks.core.codec (encode_task, decode_line)
  - mdtasks.core.models (TaskRecord, MalformedLine)
  - mdtasks.core.exceptions (TaskNotFoundError, InvalidInputError)
NOTES:
  - All functions validate input and raise descriptive errors
  - No direct file access (use vault layer)
  - Updates never touch a record in place: the line is located in the
    current file, patched, written, and re-decoded
  - Task ids are "<file path>-<line number>" and change when lines shift
"""

import logging
from functools import cmp_to_key
from typing import Any, List, Optional

from . import vault, codec
from .models import TaskRecord, MalformedLine
from .constants import (
    DEFAULT_PRIORITY,
    DEFAULT_TASK_FILE,
    DUE_DATE_PATTERN,
    VALID_PRIORITIES,
    FIELD_IS_COMPLETED,
    FIELD_DESCRIPTION,
    FIELD_DUE_DATE,
    FIELD_PRIORITY,
    FIELD_HIDDEN,
    FIELD_DETAILED_DESCRIPTION,
)
from .exceptions import TaskNotFoundError, InvalidInputError

logger = logging.getLogger(__name__)

# Sortable columns -> TaskRecord attribute
SORT_COLUMNS = {
    "description": "description",
    "dueDate": "due_date",
    "due_date": "due_date",
    "priority": "priority",
    "filePath": "file_path",
    "file_path": "file_path",
    "isCompleted": "is_completed",
    "is_completed": "is_completed",
    "hidden": "hidden",
    "lineNumber": "line_number",
    "line_number": "line_number",
}


def _validate_due_date(due_date: Optional[str]) -> Optional[str]:
    """Trim a due date; empty means "no due date"."""
    if due_date is None:
        return None
    due_date = due_date.strip()
    if not due_date:
        return None
    if not DUE_DATE_PATTERN.match(due_date):
        raise InvalidInputError(
            f"Invalid date format '{due_date}'. Please use YYYY-MM-DD or leave empty."
        )
    return due_date


def _validate_priority(priority: int) -> int:
    if priority not in VALID_PRIORITIES:
        raise InvalidInputError(
            f"Invalid priority {priority}. Must be one of: 1 (High), 2 (Medium), 3 (Low)"
        )
    return priority


def filter_tasks(
    tasks: List[TaskRecord],
    keyword: Optional[str] = None,
    priority: Optional[int] = None,
    file_filter: Optional[str] = None,
    show_hidden: bool = False,
) -> List[TaskRecord]:
    """
    Apply the report filters.

    Args:
        tasks: Tasks to filter
        keyword: Case-insensitive substring of the description
        priority: Exact priority match (None = all)
        file_filter: Case-insensitive substring of the file path
        show_hidden: Include tasks marked hidden

    Returns:
        Matching tasks, order preserved
    """
    keyword = keyword.lower() if keyword else None
    file_filter = file_filter.lower() if file_filter else None

    result = []
    for task in tasks:
        if keyword and keyword not in task.description.lower():
            continue
        if priority is not None and task.priority != priority:
            continue
        if file_filter and file_filter not in task.file_path.lower():
            continue
        if task.hidden and not show_hidden:
            continue
        result.append(task)
    return result


def _compare(a: Any, b: Any, attribute: str) -> int:
    if attribute == "due_date":
        # Tasks without a due date go after dated ones
        if not a and not b:
            return 0
        if not a:
            return 1
        if not b:
            return -1
        a, b = str(a), str(b)
    elif not (isinstance(a, (int, float)) and isinstance(b, (int, float))):
        a, b = str(a).lower(), str(b).lower()
    return (a > b) - (a < b)


def sort_tasks(
    tasks: List[TaskRecord],
    sort_by: Optional[str],
    descending: bool = False,
) -> List[TaskRecord]:
    """
    Sort tasks by a report column.

    Args:
        tasks: Tasks to sort
        sort_by: Column name (camelCase or snake_case), None keeps the order
        descending: Reverse the comparison

    Returns:
        New sorted list (stable)

    Raises:
        InvalidInputError: If the column is unknown

    Notes:
        - Strings compare case-insensitively
        - Ascending puts tasks without due date last; descending reverses the
          whole comparison so they come first
    """
    if sort_by is None:
        return list(tasks)
    if sort_by not in SORT_COLUMNS:
        columns = sorted(c for c in SORT_COLUMNS if "_" not in c)
        raise InvalidInputError(
            f"Invalid sort column '{sort_by}'. Must be one of: {', '.join(columns)}"
        )

    attribute = SORT_COLUMNS[sort_by]
    sign = -1 if descending else 1
    return sorted(
        tasks,
        key=cmp_to_key(
            lambda a, b: sign * _compare(getattr(a, attribute), getattr(b, attribute), attribute)
        ),
    )


def list_tasks(
    keyword: Optional[str] = None,
    priority: Optional[int] = None,
    file_filter: Optional[str] = None,
    show_hidden: bool = False,
    sort_by: Optional[str] = None,
    descending: bool = False,
) -> List[TaskRecord]:
    """
    Scan the vault and return the filtered, sorted task list.

    Default order (no sort_by) is file path, then line order in the file.
    """
    tasks = filter_tasks(
        vault.load_tasks(),
        keyword=keyword,
        priority=priority,
        file_filter=file_filter,
        show_hidden=show_hidden,
    )
    return sort_tasks(tasks, sort_by, descending)


def get_task(task_id: str) -> TaskRecord:
    """
    Find a task by id in a fresh scan.

    Raises:
        TaskNotFoundError: If no task has this id
    """
    for task in vault.load_tasks():
        if task.id == task_id:
            return task
    raise TaskNotFoundError(task_id)


def create_task(
    description: str,
    file_path: Optional[str] = None,
    due_date: Optional[str] = None,
    priority: int = DEFAULT_PRIORITY,
    detailed_description: str = "",
    hidden: bool = False,
) -> TaskRecord:
    """
    Create a new task line at the end of a markdown file.

    Args:
        description: Task summary (required, must not be empty)
        file_path: Vault-relative file (defaults to Tasks.md)
        due_date: Optional YYYY-MM-DD date
        priority: 1 (High), 2 (Medium) or 3 (Low)
        detailed_description: Optional longer notes (may span lines)
        hidden: Hide from the default report

    Returns:
        The TaskRecord decoded from the written line

    Raises:
        InvalidInputError: If description, due date or priority is invalid
    """
    file_path = file_path or DEFAULT_TASK_FILE
    line = codec.encode_task(
        description,
        priority=_validate_priority(priority),
        due_date=_validate_due_date(due_date),
        detailed_description=(detailed_description or "").strip(),
        hidden=hidden,
    )

    line_number = vault.append_task_line(file_path, line)
    logger.info("Created task in %s:%d", file_path, line_number)
    return codec.decode_line(line, file_path, line_number)


def update_task(task_id: str, field: str, value: Any) -> TaskRecord:
    """
    Change one field of a task and write it back to its file.

    Args:
        task_id: Task id from the latest scan
        field: Field name (see constants.UPDATABLE_FIELDS)
        value: New value

    Returns:
        The task re-decoded from the patched line

    Raises:
        TaskNotFoundError: If task_id isn't in the current scan
        InvalidInputError: If the value fails validation
        TaskFileNotFoundError, LineIndexOutOfBoundsError, MarkerNotFoundError,
        MalformedMetadataError, CheckboxNotFoundError: From the patch
    """
    if field == FIELD_DESCRIPTION:
        value = (value or "").strip()
        if not value:
            raise InvalidInputError("Description cannot be empty")
    elif field == FIELD_DUE_DATE:
        value = _validate_due_date(value)

    task = get_task(task_id)
    new_line = vault.update_task_line(task.file_path, task.line_number, field, value)
    logger.info("Updated %s of task %s", field, task_id)

    return codec.decode_line(new_line, task.file_path, task.line_number)


def complete_task(task_id: str) -> TaskRecord:
    """Tick the task's checkbox."""
    return update_task(task_id, FIELD_IS_COMPLETED, True)


def reopen_task(task_id: str) -> TaskRecord:
    """Clear the task's checkbox."""
    return update_task(task_id, FIELD_IS_COMPLETED, False)


def update_description(task_id: str, description: str) -> TaskRecord:
    return update_task(task_id, FIELD_DESCRIPTION, description)


def set_due_date(task_id: str, due_date: Optional[str]) -> TaskRecord:
    """Set or (with None / "") remove the due date."""
    return update_task(task_id, FIELD_DUE_DATE, due_date)


def set_priority(task_id: str, priority: int) -> TaskRecord:
    return update_task(task_id, FIELD_PRIORITY, _validate_priority(priority))


def set_hidden(task_id: str, hidden: bool) -> TaskRecord:
    return update_task(task_id, FIELD_HIDDEN, hidden)


def set_detailed_description(task_id: str, text: Optional[str]) -> TaskRecord:
    """Set or (with None / "") remove the detailed description."""
    return update_task(task_id, FIELD_DETAILED_DESCRIPTION, text or None)


def find_malformed() -> List[MalformedLine]:
    """Every line in the vault whose metadata block could not be decoded."""
    malformed: List[MalformedLine] = []
    for result in vault.load_scan_results().values():
        malformed.extend(result.malformed)
    return malformed
