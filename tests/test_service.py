"""
Tests for the service layer: report filters, sorting, create and update.
"""

# Path setup handled by conftest.py
import pytest

from mdtasks.core import service
from mdtasks.core.exceptions import (
    TaskNotFoundError,
    InvalidInputError,
)


@pytest.fixture
def sample_vault(write_note):
    """A small vault with tasks spread over two files."""
    write_note(
        "Tasks.md",
        "\n".join([
            "# Inbox",
            '- [ ] Buy milk %%task-plugin:{"priority":1,"dueDate":"2025-03-01"}%%',
            '- [x] Water plants %%task-plugin:{"priority":3}%%',
            '- [ ] Secret gift %%task-plugin:{"priority":2,"hidden":true,"dueDate":"2025-01-15"}%%',
            "",
        ]),
    )
    write_note(
        "projects/Work.md",
        "\n".join([
            '- [ ] Ship release %%task-plugin:{"priority":1,"dueDate":"2025-02-01"}%%',
            '- [ ] write docs %%task-plugin:{"priority":2}%%',
            "",
        ]),
    )


# --- Listing and filtering ---

def test_list_hides_hidden_tasks_by_default(sample_vault):
    """Test that hidden tasks only show with show_hidden."""
    tasks = service.list_tasks()
    assert [t.description for t in tasks] == [
        "Buy milk",
        "Water plants",
        "Ship release",
        "write docs",
    ]

    tasks = service.list_tasks(show_hidden=True)
    assert "Secret gift" in [t.description for t in tasks]
    assert len(tasks) == 5


def test_filter_by_keyword_case_insensitive(sample_vault):
    tasks = service.list_tasks(keyword="MILK")
    assert [t.description for t in tasks] == ["Buy milk"]


def test_filter_by_priority(sample_vault):
    tasks = service.list_tasks(priority=1)
    assert [t.description for t in tasks] == ["Buy milk", "Ship release"]


def test_filter_by_file(sample_vault):
    tasks = service.list_tasks(file_filter="projects/")
    assert all(t.file_path == "projects/Work.md" for t in tasks)
    assert len(tasks) == 2


def test_filters_combine(sample_vault):
    """Test that all filters must match at once."""
    tasks = service.list_tasks(keyword="gift", priority=2, show_hidden=True)
    assert [t.description for t in tasks] == ["Secret gift"]

    assert service.list_tasks(keyword="gift", priority=1, show_hidden=True) == []


def test_list_empty_vault():
    assert service.list_tasks() == []


# --- Sorting ---

def test_sort_by_due_date_puts_undated_last(sample_vault):
    """Test that tasks without due date come after dated ones ascending."""
    tasks = service.list_tasks(sort_by="dueDate", show_hidden=True)
    assert [t.due_date for t in tasks] == [
        "2025-01-15",
        "2025-02-01",
        "2025-03-01",
        None,
        None,
    ]


def test_sort_by_due_date_descending(sample_vault):
    tasks = service.list_tasks(sort_by="dueDate", descending=True, show_hidden=True)
    assert [t.due_date for t in tasks] == [
        None,
        None,
        "2025-03-01",
        "2025-02-01",
        "2025-01-15",
    ]


def test_sort_by_description_case_insensitive(sample_vault):
    tasks = service.list_tasks(sort_by="description")
    assert [t.description for t in tasks] == [
        "Buy milk",
        "Ship release",
        "Water plants",
        "write docs",
    ]


def test_sort_by_priority_is_stable(sample_vault):
    """Test that ties keep file/line order."""
    tasks = service.list_tasks(sort_by="priority")
    assert [t.description for t in tasks] == [
        "Buy milk",
        "Ship release",
        "write docs",
        "Water plants",
    ]


def test_sort_accepts_snake_case(sample_vault):
    """Test that file path sorting ignores case, so Tasks.md beats projects/ descending."""
    camel = service.list_tasks(sort_by="filePath", descending=True)
    snake = service.list_tasks(sort_by="file_path", descending=True)
    assert [t.id for t in camel] == [t.id for t in snake]
    assert camel[0].file_path == "Tasks.md"
    assert camel[-1].file_path == "projects/Work.md"


def test_sort_unknown_column(sample_vault):
    with pytest.raises(InvalidInputError):
        service.list_tasks(sort_by="colour")


# --- Lookup ---

def test_get_task(sample_vault):
    task = service.get_task("Tasks.md-1")
    assert task.description == "Buy milk"
    assert task.due_date == "2025-03-01"


def test_get_task_not_found(sample_vault):
    with pytest.raises(TaskNotFoundError):
        service.get_task("Tasks.md-0")
    with pytest.raises(TaskNotFoundError):
        service.get_task("Nope.md-1")


# --- Create ---

def test_create_task_default_file(temp_vault, read_note):
    """Test that new tasks land in Tasks.md by default."""
    task = service.create_task("Buy milk", priority=1, due_date=" 2025-01-31 ")

    assert task.id == "Tasks.md-0"
    assert task.priority == 1
    assert task.due_date == "2025-01-31"
    assert read_note(temp_vault / "Tasks.md") == (
        '- [ ] Buy milk %%task-plugin:{"priority":1,"dueDate":"2025-01-31"}%%\n'
    )


def test_create_task_in_existing_file(write_note):
    write_note("projects/Work.md", "# Work\n")

    task = service.create_task(
        "Plan sprint",
        file_path="projects/Work.md",
        detailed_description="Review backlog\nPick goals",
        hidden=True,
    )

    assert task.id == "projects/Work.md-1"
    assert task.hidden is True
    assert task.detailed_description == "Review backlog\nPick goals"
    assert service.get_task(task.id).description == "Plan sprint"


def test_create_task_empty_description():
    with pytest.raises(InvalidInputError):
        service.create_task("   ")


def test_create_task_invalid_due_date(temp_vault):
    with pytest.raises(InvalidInputError, match="YYYY-MM-DD"):
        service.create_task("Task", due_date="31/01/2025")
    assert not (temp_vault / "Tasks.md").exists()


@pytest.mark.parametrize("priority", [0, 4, -1])
def test_create_task_invalid_priority(priority):
    with pytest.raises(InvalidInputError):
        service.create_task("Task", priority=priority)


# --- Update ---

def test_complete_and_reopen(sample_vault):
    task = service.complete_task("Tasks.md-1")
    assert task.is_completed is True
    assert service.get_task("Tasks.md-1").is_completed is True

    task = service.reopen_task("Tasks.md-1")
    assert task.is_completed is False


def test_update_description(sample_vault, temp_vault, read_note):
    """Test that a new description keeps checkbox and metadata."""
    task = service.update_description("Tasks.md-2", "  Water all plants ")

    assert task.description == "Water all plants"
    assert task.is_completed is True
    assert task.priority == 3
    text = read_note(temp_vault / "Tasks.md")
    assert '- [x] Water all plants %%task-plugin:{"priority":3}%%' in text


def test_update_description_empty(sample_vault):
    with pytest.raises(InvalidInputError):
        service.update_description("Tasks.md-1", "  ")


def test_set_and_clear_due_date(sample_vault):
    task = service.set_due_date("projects/Work.md-1", "2025-04-04")
    assert task.due_date == "2025-04-04"

    task = service.set_due_date("projects/Work.md-1", None)
    assert task.due_date is None
    assert "dueDate" not in task.raw_line


def test_set_due_date_rejects_bad_format(sample_vault):
    with pytest.raises(InvalidInputError):
        service.set_due_date("Tasks.md-1", "next week")


def test_set_priority(sample_vault):
    task = service.set_priority("Tasks.md-2", 1)
    assert task.priority == 1
    assert task.priority_label == "High"


def test_set_priority_out_of_range(sample_vault):
    with pytest.raises(InvalidInputError):
        service.set_priority("Tasks.md-2", 5)


def test_hide_and_unhide(sample_vault):
    """Test that unhiding removes the key so the line goes back to before."""
    before = service.get_task("Tasks.md-1").raw_line

    service.set_hidden("Tasks.md-1", True)
    assert "Tasks.md-1" not in [t.id for t in service.list_tasks()]

    task = service.set_hidden("Tasks.md-1", False)
    assert task.raw_line == before


def test_set_and_clear_detailed_description(sample_vault):
    task = service.set_detailed_description("Tasks.md-1", "Oat milk\n2 litres")
    assert task.detailed_description == "Oat milk\n2 litres"

    task = service.set_detailed_description("Tasks.md-1", "")
    assert task.detailed_description == ""
    assert "detailedDescription" not in task.raw_line


def test_update_unknown_task(sample_vault):
    with pytest.raises(TaskNotFoundError):
        service.complete_task("Tasks.md-42")


def test_update_keeps_external_edits(write_note, read_note):
    """Test that text changed in an editor since the scan is preserved."""
    write_note("Tasks.md", '- [ ] One %%task-plugin:{"priority":2}%%\n')
    task = service.get_task("Tasks.md-0")

    path = write_note("Tasks.md", '- [ ] One %%task-plugin:{"priority":2}%% edited\nmore notes\n')
    service.set_priority(task.id, 1)

    assert read_note(path) == '- [ ] One %%task-plugin:{"priority":1}%% edited\nmore notes\n'


def test_ids_follow_line_shifts(write_note):
    """Test that inserting a line above a task changes its id."""
    write_note("Tasks.md", '- [ ] One %%task-plugin:{}%%\n')
    old_id = service.get_task("Tasks.md-0").id

    write_note("Tasks.md", '# New heading\n- [ ] One %%task-plugin:{}%%\n')

    with pytest.raises(TaskNotFoundError):
        service.complete_task(old_id)
    assert service.complete_task("Tasks.md-1").is_completed is True


def test_complete_without_checkbox_task(write_note):
    """Checkbox-less lines never become tasks, so they can't be completed."""
    write_note("Tasks.md", 'Loose %%task-plugin:{}%%\n')
    with pytest.raises(TaskNotFoundError):
        service.complete_task("Tasks.md-0")


def test_update_task_unknown_field(sample_vault):
    with pytest.raises(InvalidInputError):
        service.update_task("Tasks.md-1", "colour", "red")


# --- Malformed lines ---

def test_find_malformed(write_note):
    write_note("Good.md", '- [ ] Fine %%task-plugin:{}%%\n')
    write_note("Bad.md", 'intro\n- [ ] Broken %%task-plugin:{"priority":}%%\n')

    malformed = service.find_malformed()

    assert len(malformed) == 1
    assert malformed[0].file_path == "Bad.md"
    assert malformed[0].line_number == 1
    assert [t.id for t in service.list_tasks()] == ["Good.md-0"]


def test_find_malformed_clean_vault(sample_vault):
    assert service.find_malformed() == []


def test_update_with_escaped_surrogate_keeps_file(write_note, read_note):
    """Test that metadata holding a lone \\ud800 escape is patched, not lost."""
    path = write_note(
        "Tasks.md",
        '# keep me\n- [ ] A %%task-plugin:{"priority":2,"detailedDescription":"\\ud800"}%%\nother line\n',
    )

    task = service.set_hidden("Tasks.md-1", True)

    assert task.hidden is True
    assert read_note(path) == (
        '# keep me\n'
        '- [ ] A %%task-plugin:{"priority":2,"detailedDescription":"\\ud800","hidden":true}%%\n'
        'other line\n'
    )
