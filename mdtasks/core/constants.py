"""
FILE: mdtasks/core/constants.py
PURPOSE: Constants used throughout the application
EXPORTS:
  - TASK_MARKER / TASK_MARKER_END: Metadata block delimiters
  - CHECKBOX_PATTERN: Markdown checkbox prefix regex
  - PRIORITY_*: Priority values and labels
  - FIELD_*: Names of updatable task fields
  - VAULT_ENV_VAR / DEFAULT_TASK_FILE: Vault configuration
DEPENDENCIES:
  - re (stdlib)
NOTES:
  - Field names match the keys written into the metadata JSON
  - Single source of truth for the wire format
"""

import re

# Metadata block delimiters
TASK_MARKER = "%%task-plugin:"
TASK_MARKER_END = "%%"

# "- [ ] ", "  -[x]", "- [X]  " ... group 1 is the status character
CHECKBOX_PATTERN = re.compile(r"^\s*-\s*\[([xX ])\]\s*")
# Same prefix split into (before status)(status)(after status)
CHECKBOX_PARTS_PATTERN = re.compile(r"^(\s*-\s*\[)([xX ])(\]\s*)")
DEFAULT_CHECKBOX = "- [ ] "

# Priority constants
PRIORITY_HIGH = 1
PRIORITY_MEDIUM = 2
PRIORITY_LOW = 3
DEFAULT_PRIORITY = PRIORITY_MEDIUM
VALID_PRIORITIES = (PRIORITY_HIGH, PRIORITY_MEDIUM, PRIORITY_LOW)
PRIORITY_LABELS = {
    PRIORITY_HIGH: "High",
    PRIORITY_MEDIUM: "Medium",
    PRIORITY_LOW: "Low",
}

# Task field names (as stored in the metadata JSON / TaskRecord.to_dict)
FIELD_IS_COMPLETED = "isCompleted"
FIELD_DESCRIPTION = "description"
FIELD_DUE_DATE = "dueDate"
FIELD_PRIORITY = "priority"
FIELD_HIDDEN = "hidden"
FIELD_DETAILED_DESCRIPTION = "detailedDescription"
UPDATABLE_FIELDS = (
    FIELD_IS_COMPLETED,
    FIELD_DESCRIPTION,
    FIELD_DUE_DATE,
    FIELD_PRIORITY,
    FIELD_HIDDEN,
    FIELD_DETAILED_DESCRIPTION,
)

# Due dates entered by users must look like this
DUE_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Vault configuration
VAULT_ENV_VAR = "MDTASKS_VAULT"
DEFAULT_TASK_FILE = "Tasks.md"
MARKDOWN_SUFFIX = ".md"
