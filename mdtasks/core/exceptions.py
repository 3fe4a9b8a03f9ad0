"""
FILE: mdtasks/core/exceptions.py
PURPOSE: Custom exception classes for error handling
EXPORTS:
  - MdtasksError (base exception)
  - TaskNotFoundError
  - TaskFileNotFoundError
  - LineIndexOutOfBoundsError
  - MarkerNotFoundError
  - MalformedMetadataError
  - CheckboxNotFoundError
  - InvalidInputError
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - All exceptions inherit from MdtasksError for easy catching
  - Exceptions include context (paths, line numbers) for helpful error messages
  - "Not a task" is not an error: decode_line() returns None for it
  - Codec/vault/service layers raise these, the CLI catches and displays
"""


class MdtasksError(Exception):
    """Base exception for all mdtasks errors."""
    pass


class TaskNotFoundError(MdtasksError):
    """Task with given ID doesn't exist in the current scan."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class TaskFileNotFoundError(MdtasksError):
    """Markdown file that should hold a task doesn't exist."""

    def __init__(self, file_path: str):
        self.file_path = file_path
        super().__init__(f"Source file not found: {file_path}")


class LineIndexOutOfBoundsError(MdtasksError):
    """Line number no longer exists in the file (file changed since scan)."""

    def __init__(self, line_number: int, line_count: int):
        self.line_number = line_number
        self.line_count = line_count
        super().__init__(
            f"Task line {line_number} not found, file has {line_count} line(s) "
            "(file may have changed)"
        )


class MarkerNotFoundError(MdtasksError):
    """Line has no complete metadata block."""

    def __init__(self, line: str):
        self.line = line
        super().__init__(f"Task marker not found in line: {line!r}")


class MalformedMetadataError(MdtasksError):
    """Metadata block is not a valid JSON object."""

    def __init__(self, json_text: str, reason: str):
        self.json_text = json_text
        self.reason = reason
        super().__init__(f"Could not parse task metadata {json_text!r}: {reason}")


class CheckboxNotFoundError(MdtasksError):
    """Line has no markdown checkbox prefix."""

    def __init__(self, line: str):
        self.line = line
        super().__init__(f"Task checkbox not found in line: {line!r}")


class InvalidInputError(MdtasksError):
    """Input validation failed."""

    def __init__(self, message: str):
        super().__init__(message)
