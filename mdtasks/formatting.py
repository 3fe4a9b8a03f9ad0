"""
FILE: mdtasks/formatting.py
PURPOSE: Shared formatting utilities for CLI output
EXPORTS:
  - TaskFormatter: Class for formatting tasks
  - priority_style: Rich style for a priority value
  - row_style: Rich row style (overdue / pending) for a task
DEPENDENCIES:
  - rich (for table / panel formatting)
  - json (for JSON serialization)
  - typing (type hints)
  - mdtasks.core.models (TaskRecord, MalformedLine)
  - mdtasks.core.service (SORT_COLUMNS)
NOTES:
  - Centralized formatting logic for consistency across commands
  - Text from markdown files is escaped before it reaches rich markup
  - Sort indicator (▲/▼) is shown on the sorted column header
  - Open tasks past their due date are shown in red, other open tasks in green
"""

import json
from typing import List, Optional
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .core.models import TaskRecord, MalformedLine
from .core.service import SORT_COLUMNS


# Table column header -> TaskRecord attribute it shows
COLUMN_ATTRIBUTES = {
    "Status": "is_completed",
    "Description": "description",
    "Due": "due_date",
    "Priority": "priority",
    "Hidden": "hidden",
    "File": "file_path",
}

PRIORITY_STYLES = {1: "bold red", 2: "yellow", 3: "dim"}

# Row styles for open tasks; completed rows stay unstyled
OVERDUE_STYLE = "red"
PENDING_STYLE = "green"


def priority_style(priority: int) -> str:
    return PRIORITY_STYLES.get(priority, "white")


def row_style(task: TaskRecord) -> Optional[str]:
    if task.is_completed:
        return None
    return OVERDUE_STYLE if task.is_overdue() else PENDING_STYLE


class TaskFormatter:
    """Centralized task display formatting."""

    @staticmethod
    def create_table(
        tasks: List[TaskRecord],
        title: str = "Tasks",
        sort_by: Optional[str] = None,
        descending: bool = False,
        show_hidden_column: bool = False,
    ) -> Table:
        """
        Create Rich table for tasks.

        Args:
            tasks: Tasks to display (already filtered and sorted)
            title: Table title
            sort_by: Sort key in effect, marks its column header
            descending: Sort direction in effect
            show_hidden_column: Whether to show the Hidden column

        Returns:
            Rich Table object ready for display
        """
        table = Table(title=title, show_header=True, header_style="bold cyan")

        headers = ["Status", "Description", "Due", "Priority"]
        if show_hidden_column:
            headers.append("Hidden")
        headers.append("File")

        sorted_attribute = SORT_COLUMNS.get(sort_by) if sort_by else None
        for header in headers:
            label = header
            if COLUMN_ATTRIBUTES[header] == sorted_attribute:
                label = f"{header} {'▼' if descending else '▲'}"
            if header == "Status":
                table.add_column(label, style="magenta", width=6, no_wrap=True)
            elif header == "Description":
                table.add_column(label, style="white")
            elif header == "File":
                table.add_column(label, style="blue")
            else:
                table.add_column(label, no_wrap=True)

        for task in tasks:
            status = "[green]✓[/green]" if task.is_completed else "[yellow]○[/yellow]"
            style = priority_style(task.priority)
            row = [
                status,
                escape(task.description) or "[dim]-[/dim]",
                escape(str(task.due_date)) if task.due_date else "[dim]-[/dim]",
                f"[{style}]{task.priority_label}[/{style}]",
            ]
            if show_hidden_column:
                row.append("yes" if task.hidden else "[dim]no[/dim]")
            row.append(f"{escape(task.file_path)}[dim]:{task.line_number}[/dim]")
            table.add_row(*row, style=row_style(task))

        return table

    @staticmethod
    def create_panel(task: TaskRecord) -> Panel:
        """Detail view of a single task."""
        details = Text()
        details.append(f"{task.id}\n", style="bold cyan")
        details.append(f"{task.description or '-'}\n\n", style="bold white")

        if task.detailed_description:
            details.append("Details:\n", style="dim")
            details.append(f"{task.detailed_description}\n\n", style="white")

        details.append("Status: ", style="dim")
        if task.is_completed:
            details.append("done\n", style="green")
        else:
            details.append("open\n", style="yellow")

        details.append("Priority: ", style="dim")
        details.append(f"{task.priority_label}\n", style=priority_style(task.priority))

        details.append("Due: ", style="dim")
        if task.is_overdue():
            details.append(f"{task.due_date} (overdue)\n", style=OVERDUE_STYLE)
        else:
            details.append(f"{task.due_date or '-'}\n", style="white")

        if task.hidden:
            details.append("Hidden: ", style="dim")
            details.append("yes\n", style="white")

        details.append("Location: ", style="dim")
        details.append(f"{task.file_path}:{task.line_number}", style="blue")

        return Panel(details, border_style="blue", padding=(1, 2))

    @staticmethod
    def create_malformed_table(malformed: List[MalformedLine]) -> Table:
        table = Table(title="Malformed task lines", show_header=True, header_style="bold red")
        table.add_column("Location", style="blue", no_wrap=True)
        table.add_column("Problem", style="red")
        table.add_column("Line", style="dim")
        for item in malformed:
            table.add_row(
                f"{escape(item.file_path)}:{item.line_number}",
                escape(item.reason),
                escape(item.raw_line.strip()),
            )
        return table

    @staticmethod
    def to_json_array(tasks: List[TaskRecord]) -> str:
        """
        Convert task list to JSON array string.

        Args:
            tasks: List of tasks to serialize

        Returns:
            JSON string with array of task objects
        """
        return json.dumps([t.to_dict() for t in tasks], indent=2, ensure_ascii=False)

    @staticmethod
    def to_raw_lines(tasks: List[TaskRecord]) -> List[str]:
        """
        Convert task list to plain text lines.

        Args:
            tasks: List of tasks to format

        Returns:
            List of formatted strings, one per task
        """
        lines = []
        for task in tasks:
            status_marker = "x" if task.is_completed else " "
            due = f" (due {task.due_date})" if task.due_date else ""
            lines.append(f"{task.id}: [{status_marker}] {task.description}{due}")
        return lines
