"""Shared pytest configuration and fixtures for tests."""

import sys
import io
from pathlib import Path

import pytest

# Fix Windows console encoding
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from mdtasks.core import vault  # noqa: E402


@pytest.fixture(autouse=True)
def temp_vault(monkeypatch, tmp_path):
    """Use a temporary vault directory for all tests."""
    vault_dir = tmp_path / "vault"
    vault_dir.mkdir()
    monkeypatch.setattr(vault, "VAULT_DIR", vault_dir)
    monkeypatch.delenv("MDTASKS_VAULT", raising=False)
    yield vault_dir


@pytest.fixture
def write_note(temp_vault):
    """Write a markdown file into the temp vault and return its path."""

    def _write(relative_path: str, text: str) -> Path:
        path = temp_vault / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(text.encode("utf-8"))
        return path

    return _write


@pytest.fixture
def read_note():
    """Read a file exactly as stored (no newline translation)."""

    def _read(path: Path) -> str:
        return path.read_bytes().decode("utf-8")

    return _read
