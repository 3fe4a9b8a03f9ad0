"""
FILE: mdtasks/core/models.py
PURPOSE: Domain models for decoded task lines and scan results
EXPORTS:
  - TaskRecord (dataclass)
  - TaskMetadata (dataclass)
  - MalformedLine (dataclass)
  - ScanResult (dataclass)
DEPENDENCIES:
  - dataclasses (stdlib)
  - datetime (stdlib, overdue check)
  - json (stdlib)
  - typing (stdlib)
NOTES:
  - Records are created fresh on every scan and never mutated by updates
  - to_dict() uses the camelCase names of the metadata wire format
  - Optional fields use None as default
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional
import json

from .constants import DEFAULT_PRIORITY, PRIORITY_LABELS


def _is_number(value: Any) -> bool:
    # JSON true/false are not numbers even though bool subclasses int
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class TaskMetadata:
    """Structured view of the JSON object inside a metadata block."""

    priority: int = DEFAULT_PRIORITY
    due_date: Optional[str] = None
    hidden: bool = False
    detailed_description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaskMetadata":
        """Apply the per-field defaulting rules to a parsed metadata object."""
        priority = data.get("priority")
        detailed = data.get("detailedDescription")
        return cls(
            priority=priority if _is_number(priority) else DEFAULT_PRIORITY,
            due_date=data.get("dueDate"),
            hidden=data.get("hidden") is True,
            detailed_description=detailed if isinstance(detailed, str) else "",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Minimal metadata object: optional keys only when they carry a value."""
        data: Dict[str, Any] = {"priority": self.priority}
        if self.due_date is not None:
            data["dueDate"] = self.due_date
        if self.detailed_description:
            data["detailedDescription"] = self.detailed_description
        if self.hidden:
            data["hidden"] = True
        return data


@dataclass
class TaskRecord:
    """A task decoded from one markdown line."""

    id: str
    description: str
    file_path: str
    line_number: int
    raw_line: str
    is_completed: bool = False
    priority: int = DEFAULT_PRIORITY
    due_date: Optional[str] = None
    hidden: bool = False
    detailed_description: str = ""

    @property
    def metadata(self) -> TaskMetadata:
        return TaskMetadata(
            priority=self.priority,
            due_date=self.due_date,
            hidden=self.hidden,
            detailed_description=self.detailed_description,
        )

    @property
    def priority_label(self) -> str:
        """Human name for the priority (High/Medium/Low), or the raw number."""
        return PRIORITY_LABELS.get(self.priority, str(self.priority))

    def is_overdue(self, today: Optional[date] = None) -> bool:
        """
        True for an open task whose due date is before today.

        Due dates that aren't YYYY-MM-DD never count as overdue.
        """
        if self.is_completed or not self.due_date:
            return False
        try:
            due = datetime.strptime(str(self.due_date), "%Y-%m-%d").date()
        except ValueError:
            return False
        return due < (today or date.today())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary using the wire-format field names."""
        return {
            "id": self.id,
            "description": self.description,
            "detailedDescription": self.detailed_description,
            "isCompleted": self.is_completed,
            "dueDate": self.due_date,
            "priority": self.priority,
            "hidden": self.hidden,
            "filePath": self.file_path,
            "lineNumber": self.line_number,
            "rawLine": self.raw_line,
        }

    def to_json(self) -> str:
        """Serialize task to JSON string."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


@dataclass
class MalformedLine:
    """A line that carries a metadata block the scanner could not decode."""

    file_path: str
    line_number: int
    raw_line: str
    reason: str


@dataclass
class ScanResult:
    """Tasks found in one file, plus the lines that failed to decode."""

    file_path: str
    tasks: List[TaskRecord] = field(default_factory=list)
    malformed: List[MalformedLine] = field(default_factory=list)
