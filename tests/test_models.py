"""
Tests for task records: overdue detection and row styling.
"""

# Path setup handled by conftest.py
from datetime import date

import pytest

from mdtasks.core.models import TaskRecord
from mdtasks.formatting import TaskFormatter, OVERDUE_STYLE, PENDING_STYLE


TODAY = date(2025, 3, 10)


def _task(due_date=None, is_completed=False, line_number=0):
    return TaskRecord(
        id=f"Tasks.md-{line_number}",
        description="Task",
        file_path="Tasks.md",
        line_number=line_number,
        raw_line="",
        is_completed=is_completed,
        due_date=due_date,
    )


def test_open_task_past_due_is_overdue():
    assert _task("2025-03-09").is_overdue(TODAY) is True


@pytest.mark.parametrize("due_date", ["2025-03-10", "2025-03-11", "2030-01-01"])
def test_due_today_or_later_is_not_overdue(due_date):
    """Test that only dates strictly before today count."""
    assert _task(due_date).is_overdue(TODAY) is False


def test_completed_task_is_never_overdue():
    assert _task("2020-01-01", is_completed=True).is_overdue(TODAY) is False


@pytest.mark.parametrize("due_date", [None, "", "someday", "2025/01/01", 20250101])
def test_missing_or_unparsable_due_date_is_not_overdue(due_date):
    assert _task(due_date).is_overdue(TODAY) is False


def test_is_overdue_defaults_to_current_date():
    assert _task("2000-01-01").is_overdue() is True
    assert _task("2999-12-31").is_overdue() is False


def test_table_rows_styled_by_overdue_state():
    """Test that overdue rows are red, other open rows green, done rows plain."""
    tasks = [
        _task("2000-01-01", line_number=0),
        _task("2999-12-31", line_number=1),
        _task(None, line_number=2),
        _task("2000-01-01", is_completed=True, line_number=3),
    ]

    table = TaskFormatter.create_table(tasks)

    assert [row.style for row in table.rows] == [
        OVERDUE_STYLE,
        PENDING_STYLE,
        PENDING_STYLE,
        None,
    ]
