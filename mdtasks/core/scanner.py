"""
FILE: mdtasks/core/scanner.py
PURPOSE: Decode every task line of a file's text, and patch single lines
EXPORTS:
  - split_lines(full_text) -> List[str]
  - join_lines(lines) -> str
  - scan_text(full_text, file_path) -> ScanResult
  - scan_file(full_text, file_path) -> List[TaskRecord]
  - patch_line(full_text, line_number, field, value) -> str
DEPENDENCIES:
  - logging (stdlib)
  - mdtasks.core.codec (decode_line, encode_update)
  - mdtasks.core.models (TaskRecord, ScanResult, MalformedLine)
NOTES:
  - Works on text only; reading/writing files is the vault layer's job
  - Lines are split on "\\n"; a CRLF "\\r" stays on its line so joins are lossless
  - One malformed line never aborts a scan: it is logged and reported aside
"""

import logging
from typing import Any, List

from . import codec
from .models import TaskRecord, ScanResult, MalformedLine
from .exceptions import MalformedMetadataError, LineIndexOutOfBoundsError

logger = logging.getLogger(__name__)


def split_lines(full_text: str) -> List[str]:
    return full_text.split("\n")


def join_lines(lines: List[str]) -> str:
    return "\n".join(lines)


def scan_text(full_text: str, file_path: str) -> ScanResult:
    """
    Decode all task lines in a file's text.

    Args:
        full_text: Complete file content
        file_path: Path used to tag each record (and build its id)

    Returns:
        ScanResult with tasks in physical line order and any malformed lines
    """
    result = ScanResult(file_path=file_path)

    for line_number, line in enumerate(split_lines(full_text)):
        try:
            task = codec.decode_line(line, file_path, line_number)
        except MalformedMetadataError as e:
            logger.warning(
                "Skipping malformed task metadata at %s:%d: %s", file_path, line_number, e.reason
            )
            result.malformed.append(
                MalformedLine(
                    file_path=file_path,
                    line_number=line_number,
                    raw_line=line,
                    reason=e.reason,
                )
            )
            continue

        if task is not None:
            result.tasks.append(task)

    return result


def scan_file(full_text: str, file_path: str) -> List[TaskRecord]:
    """Tasks found in a file's text, in line order (malformed lines skipped)."""
    return scan_text(full_text, file_path).tasks


def patch_line(full_text: str, line_number: int, field: str, value: Any) -> str:
    """
    Rewrite one field of the task on a given line and return the new text.

    Args:
        full_text: Current file content (read fresh by the caller)
        line_number: Zero-based line index recorded at scan time
        field: Field to change (see constants.UPDATABLE_FIELDS)
        value: New value

    Returns:
        The complete new file content

    Raises:
        LineIndexOutOfBoundsError: If the line no longer exists
        MarkerNotFoundError, MalformedMetadataError, CheckboxNotFoundError,
        InvalidInputError: Propagated from codec.encode_update
    """
    lines = split_lines(full_text)
    if line_number < 0 or line_number >= len(lines):
        raise LineIndexOutOfBoundsError(line_number, len(lines))

    lines[line_number] = codec.encode_update(lines[line_number], field, value)
    return join_lines(lines)
