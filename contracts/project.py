"""Project record contracts returned by the parse operation.

Field names follow Python conventions; aliases carry the camelCase names the
JSON consumers already read (startDate, parentTaskName, ...).
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

from config import settings


class TaskStatus(str, Enum):
    """Lifecycle state derived for a task."""
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    # Declared for consumers; no derivation rule produces it.
    BLOCKED = "blocked"


class TaskPriority(str, Enum):
    """Priority bucket derived from the raw 0-1000 score."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskRecord(BaseModel):
    """One flattened task with its parent denormalized to (name, order)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(..., min_length=1, description="Task name as written in the plan")
    description: Optional[str] = Field(default=None, description="Task notes")
    start: Optional[datetime] = Field(default=None, alias="startDate")
    finish: Optional[datetime] = Field(default=None, alias="finishDate")
    duration_days: Optional[float] = Field(default=None, alias="duration", description="Duration in days")
    progress: int = Field(default=0, ge=0, le=100, description="Percent complete")
    status: TaskStatus = Field(default=TaskStatus.TODO)
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    order: int = Field(..., ge=0, description="Zero-based position among valid tasks")
    outline_level: int = Field(default=1, alias="outlineLevel", description="1 = top level")
    parent_name: Optional[str] = Field(default=None, alias="parentTaskName")
    parent_order: Optional[int] = Field(default=None, ge=0, alias="parentOrder")

    @model_validator(mode="after")
    def validate_parent_link(self) -> "TaskRecord":
        """A parent order without a parent name cannot come from the linker."""
        if self.parent_order is not None and self.parent_name is None:
            raise ValueError("parent_order requires parent_name")
        return self

    @field_serializer("start", "finish")
    def serialize_datetime(self, value: Optional[datetime]) -> Optional[str]:
        return value.strftime(settings.datetime_format) if value else None

    @property
    def is_root(self) -> bool:
        return self.parent_order is None


class ProjectRecord(BaseModel):
    """Project summary plus its tasks, in document order."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(..., description="Project title, or the file name without extension")
    start: Optional[datetime] = Field(default=None, alias="startDate")
    finish: Optional[datetime] = Field(default=None, alias="finishDate")
    tasks: Tuple[TaskRecord, ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def validate_dense_order(self) -> "ProjectRecord":
        """Orders must be exactly 0..N-1 in sequence."""
        orders = [task.order for task in self.tasks]
        if orders != list(range(len(orders))):
            raise ValueError(f"task orders must be 0..{len(orders) - 1} in sequence, got {orders}")
        return self

    @field_serializer("start", "finish")
    def serialize_datetime(self, value: Optional[datetime]) -> Optional[str]:
        return value.strftime(settings.datetime_format) if value else None

    def to_wire(self) -> Dict[str, Any]:
        """JSON-ready dict with the camelCase field names."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, indent: Optional[int] = None) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)
