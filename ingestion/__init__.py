"""Ingestion module: raw plan to ProjectRecord."""

from .linker import LinkedTask, index_tasks, link_hierarchy
from .deriver import (
    build_task_record,
    derive_duration_days,
    derive_priority,
    derive_progress,
    derive_status,
)
from .summarizer import ProjectSummary, project_name, summarize_project
from .assembler import PlanImporter, parse_plan, transform, validate_upload
from .hierarchy import TaskNode, build_task_tree, flatten_task_tree

__all__ = [
    "LinkedTask",
    "index_tasks",
    "link_hierarchy",
    "build_task_record",
    "derive_duration_days",
    "derive_priority",
    "derive_progress",
    "derive_status",
    "ProjectSummary",
    "project_name",
    "summarize_project",
    "PlanImporter",
    "parse_plan",
    "transform",
    "validate_upload",
    "TaskNode",
    "build_task_tree",
    "flatten_task_tree",
]
