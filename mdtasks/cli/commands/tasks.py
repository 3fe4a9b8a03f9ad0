"""
FILE: mdtasks/cli/commands/tasks.py
PURPOSE: Task commands (ls, show, add, done, reopen, edit, due, priority, hide, unhide, note, check)
"""

import json
from typing import List, Optional

import typer
from rich.markup import escape

from ..main import app, console, error_console
from .. import prompts
from ...core import service
from ...core.models import TaskRecord
from ...core.exceptions import MdtasksError, InvalidInputError
from ...formatting import TaskFormatter


def _fail(e: Exception) -> None:
    error_console.print(f"[red]Error:[/red] {escape(str(e))}")
    raise typer.Exit(1)


def _report(task: TaskRecord, message: str, json_output: bool, raw: bool) -> None:
    """Print the outcome of a single-task update."""
    if json_output:
        typer.echo(task.to_json())
    elif raw:
        typer.echo(f"{message}: {task.id}")
    else:
        console.print(f"[green]✓[/green] {message}: {escape(task.description)} [dim]({escape(task.id)})[/dim]")


def _apply_to_each(task_ids: List[str], update, message: str, raw: bool) -> None:
    """
    Run an update for several task ids, reporting each failure.

    Exits with 1 only if no task could be updated.
    """
    updated = []
    errors = []
    for task_id in task_ids:
        try:
            updated.append(update(task_id))
        except MdtasksError as e:
            errors.append(str(e))

    for task in updated:
        _report(task, message, json_output=False, raw=raw)

    for error in errors:
        error_console.print(f"[red]Error:[/red] {escape(error)}")
    if errors and not updated:
        raise typer.Exit(1)


@app.command()
def ls(
    keyword: Optional[str] = typer.Option(None, "--keyword", "-k", help="Filter by text in description"),
    priority: Optional[int] = typer.Option(None, "--priority", "-p", help="Filter by priority (1-3)"),
    file_filter: Optional[str] = typer.Option(None, "--file", "-f", help="Filter by text in file path"),
    show_hidden: bool = typer.Option(False, "--all", "-a", help="Include hidden tasks"),
    sort_by: Optional[str] = typer.Option(
        None, "--sort", "-s", help="Sort column: description, dueDate, priority, filePath, isCompleted, hidden"
    ),
    descending: bool = typer.Option(False, "--desc", help="Sort descending"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List tasks found in the vault's markdown files.

    Example:
        mdtasks ls
        mdtasks ls --keyword milk --priority 1
        mdtasks ls --file projects/ --sort dueDate
        mdtasks ls --all --json
    """
    try:
        tasks = service.list_tasks(
            keyword=keyword,
            priority=priority,
            file_filter=file_filter,
            show_hidden=show_hidden,
            sort_by=sort_by,
            descending=descending,
        )
    except MdtasksError as e:
        _fail(e)

    if json_output:
        typer.echo(TaskFormatter.to_json_array(tasks))
    elif raw:
        for line in TaskFormatter.to_raw_lines(tasks):
            typer.echo(line)
    else:
        if not tasks:
            console.print("[dim]No tasks match the current filters, or no tasks found.[/dim]")
            return
        console.print(
            TaskFormatter.create_table(
                tasks,
                sort_by=sort_by,
                descending=descending,
                show_hidden_column=show_hidden,
            )
        )
        console.print(f"\n[dim]Total: {len(tasks)} task(s)[/dim]")


@app.command()
def show(
    task_id: str = typer.Argument(..., help="Task ID (file path and line, e.g. Tasks.md-3)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Show full details for a task including its detailed description.

    Example:
        mdtasks show Tasks.md-3
    """
    try:
        task = service.get_task(task_id)
    except MdtasksError as e:
        _fail(e)

    if json_output:
        typer.echo(task.to_json())
    elif raw:
        typer.echo(f"Task {task.id}")
        typer.echo(f"Description: {task.description}")
        typer.echo(f"Status: {'done' if task.is_completed else 'open'}")
        typer.echo(f"Priority: {task.priority_label}")
        if task.due_date:
            typer.echo(f"Due: {task.due_date}")
        if task.hidden:
            typer.echo("Hidden: yes")
        if task.detailed_description:
            typer.echo(f"Details: {task.detailed_description}")
    else:
        console.print(TaskFormatter.create_panel(task))


@app.command()
def add(
    description: Optional[str] = typer.Argument(None, help="Task summary (prompted if omitted)"),
    file_path: Optional[str] = typer.Option(None, "--file", "-f", help="Vault file to append to (default: Tasks.md)"),
    due_date: Optional[str] = typer.Option(None, "--due", "-d", help="Due date (YYYY-MM-DD)"),
    priority: int = typer.Option(2, "--priority", "-p", help="Priority: 1=High, 2=Medium, 3=Low"),
    details: Optional[str] = typer.Option(None, "--details", help="Detailed description"),
    hidden: bool = typer.Option(False, "--hidden", help="Hide from the default report"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Append a new task line to a markdown file.

    Example:
        mdtasks add "Buy milk"
        mdtasks add "Ship release" --due 2025-01-31 --priority 1 --file Work.md
        mdtasks add          # interactive
    """
    if description is None:
        try:
            answers = prompts.prompt_new_task()
        except (KeyboardInterrupt, EOFError):
            error_console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(1)
        description = answers.description
        due_date = answers.due_date
        priority = answers.priority
        details = answers.detailed_description
        hidden = answers.hidden

    try:
        task = service.create_task(
            description,
            file_path=file_path,
            due_date=due_date,
            priority=priority,
            detailed_description=details or "",
            hidden=hidden,
        )
    except MdtasksError as e:
        _fail(e)

    if json_output:
        typer.echo(task.to_json())
    elif raw:
        typer.echo(task.id)
    else:
        console.print(
            f"[green]✓ Created task [bold]{escape(task.id)}[/bold]:[/green] {escape(task.description)}"
        )


@app.command()
def done(
    task_ids: List[str] = typer.Argument(..., help="Task ID(s) to complete"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Tick the checkbox of one or more tasks.

    Example:
        mdtasks done Tasks.md-3
        mdtasks done Tasks.md-3 Work.md-10
    """
    _apply_to_each(task_ids, service.complete_task, "Completed", raw)


@app.command()
def reopen(
    task_ids: List[str] = typer.Argument(..., help="Task ID(s) to reopen"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Clear the checkbox of one or more tasks.

    Example:
        mdtasks reopen Tasks.md-3
    """
    _apply_to_each(task_ids, service.reopen_task, "Reopened", raw)


@app.command()
def edit(
    task_id: str = typer.Argument(..., help="Task ID to edit"),
    description: str = typer.Argument(..., help="New task summary"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Change a task's description (the text between checkbox and metadata).

    Example:
        mdtasks edit Tasks.md-3 "Buy oat milk"
    """
    try:
        task = service.update_description(task_id, description)
    except MdtasksError as e:
        _fail(e)
    _report(task, "Updated", json_output, raw)


@app.command()
def due(
    task_id: str = typer.Argument(..., help="Task ID"),
    due_date: Optional[str] = typer.Argument(None, help="Due date (YYYY-MM-DD)"),
    clear: bool = typer.Option(False, "--clear", help="Remove the due date"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Set or clear a task's due date.

    Example:
        mdtasks due Tasks.md-3 2025-01-31
        mdtasks due Tasks.md-3 --clear
    """
    try:
        if due_date is None and not clear:
            raise InvalidInputError("Give a due date (YYYY-MM-DD) or --clear")
        task = service.set_due_date(task_id, None if clear else due_date)
    except MdtasksError as e:
        _fail(e)
    _report(task, "Due date cleared" if clear else f"Due {task.due_date}", json_output, raw)


@app.command()
def priority(
    task_id: str = typer.Argument(..., help="Task ID"),
    value: int = typer.Argument(..., help="Priority: 1=High, 2=Medium, 3=Low"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Set a task's priority.

    Example:
        mdtasks priority Tasks.md-3 1
    """
    try:
        task = service.set_priority(task_id, value)
    except MdtasksError as e:
        _fail(e)
    _report(task, f"Priority {task.priority_label}", json_output, raw)


@app.command()
def hide(
    task_ids: List[str] = typer.Argument(..., help="Task ID(s) to hide"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Hide one or more tasks from the default report (see `ls --all`).

    Example:
        mdtasks hide Tasks.md-3
    """
    _apply_to_each(task_ids, lambda task_id: service.set_hidden(task_id, True), "Hidden", raw)


@app.command()
def unhide(
    task_ids: List[str] = typer.Argument(..., help="Task ID(s) to show again"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Show one or more hidden tasks in the default report again.

    Example:
        mdtasks unhide Tasks.md-3
    """
    _apply_to_each(task_ids, lambda task_id: service.set_hidden(task_id, False), "Unhidden", raw)


@app.command()
def note(
    task_id: str = typer.Argument(..., help="Task ID"),
    text: Optional[str] = typer.Argument(None, help="Detailed description"),
    clear: bool = typer.Option(False, "--clear", help="Remove the detailed description"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Set or clear a task's detailed description.

    Example:
        mdtasks note Tasks.md-3 "Semi-skimmed, 2 litres"
        mdtasks note Tasks.md-3 --clear
    """
    try:
        if text is None and not clear:
            raise InvalidInputError("Give the detailed description text or --clear")
        task = service.set_detailed_description(task_id, None if clear else text)
    except MdtasksError as e:
        _fail(e)
    _report(task, "Notes cleared" if clear else "Notes updated", json_output, raw)


@app.command()
def check(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Report task lines whose metadata block can't be parsed.

    Exits with 1 when malformed lines are found.

    Example:
        mdtasks check
    """
    try:
        malformed = service.find_malformed()
    except MdtasksError as e:
        _fail(e)

    if json_output:
        typer.echo(json.dumps(
            [
                {
                    "filePath": m.file_path,
                    "lineNumber": m.line_number,
                    "reason": m.reason,
                    "rawLine": m.raw_line,
                }
                for m in malformed
            ],
            indent=2,
            ensure_ascii=False,
        ))
    elif not malformed:
        console.print("[green]✓ All task lines are well-formed[/green]")
    else:
        console.print(TaskFormatter.create_malformed_table(malformed))

    if malformed:
        raise typer.Exit(1)
