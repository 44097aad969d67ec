"""Contracts for the MPP Parser Service.

Raw contracts describe what a source adapter produces; project contracts
describe what the parse operation returns.
"""

from .errors import (
    PlanImportError,
    ValidationError,
    ParseError,
    UnexpectedError,
)

from .raw_contracts import (
    normalize_datetime,
    RawDuration,
    RawTask,
    RawProject,
)

from .project import (
    TaskStatus,
    TaskPriority,
    TaskRecord,
    ProjectRecord,
)

__all__ = [
    # Errors
    "PlanImportError",
    "ValidationError",
    "ParseError",
    "UnexpectedError",
    # Raw
    "normalize_datetime",
    "RawDuration",
    "RawTask",
    "RawProject",
    # Project
    "TaskStatus",
    "TaskPriority",
    "TaskRecord",
    "ProjectRecord",
]
