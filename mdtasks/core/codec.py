"""
FILE: mdtasks/core/codec.py
PURPOSE: Encode and decode task lines (checkbox + description + metadata block)
EXPORTS:
  - find_metadata_span(line) -> Optional[Tuple[int, int]]
  - is_task_line(line) -> bool
  - parse_metadata(line) -> dict
  - decode_line(line, file_path, line_number) -> TaskRecord | None
  - encode_update(line, field, value) -> str
  - encode_task(description, ...) -> str
  - encode_record(record) -> str
DEPENDENCIES:
  - json (stdlib)
  - mdtasks.core.models (TaskRecord, TaskMetadata)
  - mdtasks.core.exceptions (MarkerNotFoundError, MalformedMetadataError, ...)
NOTES:
  - Pure functions, no file access and no state
  - Line shape: "- [ ] <description> %%task-plugin:{...}%%"
  - decode_line returns None for lines that are not tasks
  - Malformed JSON raises MalformedMetadataError (never treated as "not a task")
  - encode_update keeps text outside the changed part byte-identical
"""

import json
import math
from typing import Any, Dict, Optional, Tuple

from .constants import (
    TASK_MARKER,
    TASK_MARKER_END,
    CHECKBOX_PATTERN,
    CHECKBOX_PARTS_PATTERN,
    DEFAULT_CHECKBOX,
    DEFAULT_PRIORITY,
    FIELD_IS_COMPLETED,
    FIELD_DESCRIPTION,
    FIELD_DUE_DATE,
    FIELD_PRIORITY,
    FIELD_HIDDEN,
    FIELD_DETAILED_DESCRIPTION,
    UPDATABLE_FIELDS,
)
from .models import TaskMetadata, TaskRecord
from .exceptions import (
    MarkerNotFoundError,
    MalformedMetadataError,
    CheckboxNotFoundError,
    InvalidInputError,
)


def find_metadata_span(line: str) -> Optional[Tuple[int, int]]:
    """
    Locate the metadata block in a line.

    Returns:
        (open_index, close_index) where open_index is the start of the open
        delimiter and close_index the start of the close delimiter, or None
        when either delimiter is missing.

    Notes:
        - The close delimiter is searched strictly after the open delimiter,
          since the open delimiter itself starts with the close delimiter
    """
    open_index = line.find(TASK_MARKER)
    if open_index == -1:
        return None
    close_index = line.find(TASK_MARKER_END, open_index + len(TASK_MARKER))
    if close_index == -1:
        return None
    return open_index, close_index


def is_task_line(line: str) -> bool:
    """True if the line carries a complete metadata block."""
    return find_metadata_span(line) is not None


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def _parse_float(text: str) -> float:
    # 1e400 overflows to inf, which would be dumped back as Infinity
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"{text} is out of range")
    return value


def _load_json(json_text: str) -> Dict[str, Any]:
    try:
        data = json.loads(json_text, parse_constant=_reject_constant, parse_float=_parse_float)
    except ValueError as e:
        raise MalformedMetadataError(json_text, str(e)) from e
    if not isinstance(data, dict):
        raise MalformedMetadataError(json_text, "metadata is not a JSON object")
    return data


def _dump_json(data: Dict[str, Any]) -> str:
    text = json.dumps(data, separators=(",", ":"), ensure_ascii=False)
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        # Lone surrogates decoded from \ud800-style escapes only survive as escapes
        text = json.dumps(data, separators=(",", ":"))
    # "%" only occurs inside JSON strings; escape it if it would close the block
    if TASK_MARKER_END in text:
        text = text.replace("%", "\\u0025")
    return text


def parse_metadata(line: str) -> Dict[str, Any]:
    """
    Parse the JSON object between the metadata delimiters.

    Raises:
        MarkerNotFoundError: If the line has no complete metadata block
        MalformedMetadataError: If the block is not a valid JSON object
    """
    span = find_metadata_span(line)
    if span is None:
        raise MarkerNotFoundError(line)
    open_index, close_index = span
    return _load_json(line[open_index + len(TASK_MARKER):close_index])


def decode_line(line: str, file_path: str = "", line_number: int = 0) -> Optional[TaskRecord]:
    """
    Decode one markdown line into a TaskRecord.

    Args:
        line: Full line text (without the line break)
        file_path: Path of the owning file, used for the record id
        line_number: Zero-based index of the line in its file

    Returns:
        TaskRecord, or None if the line is not a task (no metadata block,
        or a metadata block without a checkbox prefix)

    Raises:
        MalformedMetadataError: If the metadata block holds invalid JSON
    """
    span = find_metadata_span(line)
    if span is None:
        return None
    open_index, close_index = span

    data = _load_json(line[open_index + len(TASK_MARKER):close_index])

    checkbox = CHECKBOX_PATTERN.match(line)
    if not checkbox:
        return None

    metadata = TaskMetadata.from_dict(data)
    return TaskRecord(
        id=f"{file_path}-{line_number}",
        description=line[checkbox.end():open_index].strip(),
        is_completed=checkbox.group(1).lower() == "x",
        due_date=metadata.due_date,
        priority=metadata.priority,
        hidden=metadata.hidden,
        detailed_description=metadata.detailed_description,
        file_path=file_path,
        line_number=line_number,
        raw_line=line,
    )


def _validate_description(description: Any) -> str:
    text = "" if description is None else str(description).strip()
    if not text:
        raise InvalidInputError("Description cannot be empty")
    if "\n" in text or "\r" in text:
        raise InvalidInputError("Description must be a single line")
    if TASK_MARKER in text:
        raise InvalidInputError(f"Description cannot contain '{TASK_MARKER}'")
    return text


def _update_metadata(data: Dict[str, Any], field: str, value: Any) -> None:
    """Apply a single-field change to a parsed metadata object in place."""
    if field == FIELD_DUE_DATE:
        if value is None or value == "":
            data.pop("dueDate", None)
        else:
            data["dueDate"] = value
    elif field == FIELD_PRIORITY:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidInputError(f"Priority must be an integer, got {value!r}")
        data["priority"] = value
    elif field == FIELD_HIDDEN:
        if value:
            data["hidden"] = True
        else:
            data.pop("hidden", None)
    elif field == FIELD_DETAILED_DESCRIPTION:
        if value is None or value == "":
            data.pop("detailedDescription", None)
        elif isinstance(value, str):
            data["detailedDescription"] = value
        else:
            raise InvalidInputError(
                f"Detailed description must be text, got {type(value).__name__}"
            )


def encode_update(line: str, field: str, value: Any) -> str:
    """
    Rewrite a single field of an existing task line.

    Args:
        line: Current full line text
        field: One of UPDATABLE_FIELDS
        value: New value for the field

    Returns:
        The new line text

    Raises:
        InvalidInputError: Unknown field, empty description, bad value type
        MarkerNotFoundError: Line has no metadata block
        MalformedMetadataError: Metadata block is not valid JSON
        CheckboxNotFoundError: Updating isCompleted on a line without checkbox

    Notes:
        - isCompleted swaps only the status character inside "[ ]"
        - description keeps the checkbox prefix and the metadata block verbatim
        - JSON fields splice a re-serialized object between the delimiters;
          text before and after the block is untouched
        - Clearing dueDate / detailedDescription or un-hiding removes the key
        - A change that leaves the metadata equal returns the line unchanged
    """
    if field not in UPDATABLE_FIELDS:
        raise InvalidInputError(
            f"Invalid field '{field}'. Must be one of: {', '.join(UPDATABLE_FIELDS)}"
        )

    data = parse_metadata(line)
    open_index, close_index = find_metadata_span(line)

    if field == FIELD_IS_COMPLETED:
        match = CHECKBOX_PARTS_PATTERN.match(line)
        if not match:
            raise CheckboxNotFoundError(line)
        current = match.group(2)
        if value:
            status = current if current in "xX" else "x"
        else:
            status = " "
        return f"{match.group(1)}{status}{match.group(3)}{line[match.end():]}"

    if field == FIELD_DESCRIPTION:
        description = _validate_description(value)
        checkbox = CHECKBOX_PATTERN.match(line)
        prefix = checkbox.group(0) if checkbox else DEFAULT_CHECKBOX
        return f"{prefix}{description} {line[open_index:]}"

    before = _dump_json(data)
    _update_metadata(data, field, value)
    after = _dump_json(data)
    if after == before:
        return line

    json_start = open_index + len(TASK_MARKER)
    return f"{line[:json_start]}{after}{line[close_index:]}"


def _build_line(completed: bool, description: str, metadata: Dict[str, Any]) -> str:
    status = "x" if completed else " "
    return f"- [{status}] {description} {TASK_MARKER}{_dump_json(metadata)}{TASK_MARKER_END}"


def encode_task(
    description: str,
    priority: int = DEFAULT_PRIORITY,
    due_date: Optional[str] = None,
    detailed_description: str = "",
    hidden: bool = False,
    completed: bool = False,
) -> str:
    """
    Build a new task line.

    Only priority is always written; dueDate, detailedDescription and
    hidden are added when they carry a value.

    Raises:
        InvalidInputError: If the description is empty or spans lines
    """
    metadata = TaskMetadata(
        priority=priority,
        due_date=due_date or None,
        hidden=hidden,
        detailed_description=detailed_description or "",
    )
    return _build_line(completed, _validate_description(description), metadata.to_dict())


def encode_record(record: TaskRecord) -> str:
    """Re-encode a decoded record as a canonical task line."""
    return _build_line(record.is_completed, record.description, record.metadata.to_dict())
