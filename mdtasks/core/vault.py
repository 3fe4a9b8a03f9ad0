"""
FILE: mdtasks/core/vault.py
PURPOSE: Markdown file access for the vault (folder of notes)
EXPORTS:
  - get_vault_dir() -> Path
  - resolve_path(file_path) -> Path
  - list_markdown_files() -> List[str]
  - read_file(file_path) -> str
  - write_file(file_path, text) -> None
  - load_scan_results() -> Dict[str, ScanResult]
  - load_tasks() -> List[TaskRecord]
  - update_task_line(file_path, line_number, field, value) -> str
  - append_task_line(file_path, line) -> int
DEPENDENCIES:
  - os, pathlib (stdlib)
  - logging (stdlib)
  - mdtasks.core.scanner (scan_text, patch_line)
  - mdtasks.core.exceptions (TaskFileNotFoundError, InvalidInputError)
NOTES:
  - Vault root: VAULT_DIR override, else $MDTASKS_VAULT, else current directory
  - File paths are vault-relative POSIX strings (they become part of task ids)
  - Hidden directories (.obsidian, .git, ...) are skipped
  - Whole-file read/rewrite, nothing cached between calls (last write wins)
  - Writes go to a hidden temp file that os.replace() swaps in atomically
  - Files are read and written as UTF-8 with newlines left untouched
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from .constants import VAULT_ENV_VAR, MARKDOWN_SUFFIX
from .models import TaskRecord, ScanResult
from .scanner import scan_text, patch_line, split_lines
from .exceptions import TaskFileNotFoundError, InvalidInputError

logger = logging.getLogger(__name__)

# Set by the CLI --vault option (and by tests); None means "look it up"
VAULT_DIR: Optional[Path] = None


def get_vault_dir() -> Path:
    """Vault root directory currently in effect."""
    if VAULT_DIR is not None:
        return Path(VAULT_DIR)
    env_dir = os.environ.get(VAULT_ENV_VAR)
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.cwd()


def resolve_path(file_path: str) -> Path:
    """
    Turn a vault-relative path into an absolute one.

    Raises:
        InvalidInputError: If the path points outside the vault
    """
    root = get_vault_dir().resolve()
    path = (root / file_path).resolve()
    if path != root and root not in path.parents:
        raise InvalidInputError(f"Path is outside the vault: {file_path}")
    return path


def list_markdown_files() -> List[str]:
    """All markdown files in the vault as sorted vault-relative paths."""
    root = get_vault_dir()
    if not root.is_dir():
        raise TaskFileNotFoundError(str(root))

    files = []
    for dirpath, dirnames, filenames in os.walk(root):
        # Prune hidden directories in place so os.walk skips them
        dirnames[:] = [d for d in dirnames if not d.startswith(".")]
        for name in filenames:
            if name.lower().endswith(MARKDOWN_SUFFIX):
                files.append((Path(dirpath) / name).relative_to(root).as_posix())

    return sorted(files)


def read_file(file_path: str) -> str:
    """
    Read a vault file.

    Raises:
        TaskFileNotFoundError: If the file doesn't exist
    """
    path = resolve_path(file_path)
    if not path.is_file():
        raise TaskFileNotFoundError(file_path)
    logger.debug("Reading %s", path)
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_file(file_path: str, text: str) -> None:
    """
    Replace a vault file's content.

    The text goes to a temporary file beside the target which is then
    swapped in, so the old content survives any failure.

    Raises:
        InvalidInputError: If the text can't be encoded as UTF-8
    """
    path = resolve_path(file_path)
    try:
        data = text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidInputError(f"Can't write {file_path} as UTF-8: {e.reason}") from e

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        tmp_path.write_bytes(data)
        os.replace(tmp_path, path)
    except OSError:
        if tmp_path.exists():
            tmp_path.unlink()
        raise
    logger.info("Wrote %s", file_path)


def load_scan_results() -> Dict[str, ScanResult]:
    """Scan every markdown file in the vault, keyed by file path (sorted)."""
    return {
        file_path: scan_text(read_file(file_path), file_path)
        for file_path in list_markdown_files()
    }


def load_tasks() -> List[TaskRecord]:
    """
    All tasks in the vault.

    Returns:
        Tasks ordered by file path, then by line within each file
    """
    tasks: List[TaskRecord] = []
    for result in load_scan_results().values():
        tasks.extend(result.tasks)
    return tasks


def update_task_line(file_path: str, line_number: int, field: str, value: Any) -> str:
    """
    Patch one field of the task on a line and write the file back.

    Reads the file fresh so edits made since the last scan are kept.

    Returns:
        The new text of the patched line

    Raises:
        TaskFileNotFoundError: If the file is gone
        LineIndexOutOfBoundsError, MarkerNotFoundError, MalformedMetadataError,
        CheckboxNotFoundError, InvalidInputError: From scanner.patch_line
    """
    new_text = patch_line(read_file(file_path), line_number, field, value)
    write_file(file_path, new_text)
    return split_lines(new_text)[line_number]


def append_task_line(file_path: str, line: str) -> int:
    """
    Append a task line to a file, creating the file if needed.

    The new line uses the file's line ending (CRLF if the file has any).

    Returns:
        Zero-based line index of the appended line
    """
    path = resolve_path(file_path)
    text = read_file(file_path) if path.exists() else ""
    newline = "\r\n" if "\r\n" in text else "\n"

    if text and not text.endswith("\n"):
        text += newline
    text += line + newline

    write_file(file_path, text)
    # The trailing newline leaves an empty last element after splitting
    return len(split_lines(text)) - 2
