"""Field Deriver - business fields computed from raw task data.

Each rule is a small pure function so it can be tested on its own.
"""

import math
from typing import Optional

from contracts import RawDuration, TaskPriority, TaskRecord, TaskStatus
from ingestion.linker import LinkedTask


# Checked top-down; first threshold the score reaches wins.
PRIORITY_THRESHOLDS = (
    (900, TaskPriority.URGENT),
    (700, TaskPriority.HIGH),
    (500, TaskPriority.MEDIUM),
)


def _percent_as_int(percent_complete: Optional[float]) -> Optional[int]:
    """Truncate toward zero; None (or NaN) means no completion was recorded."""
    if percent_complete is None or math.isnan(percent_complete):
        return None
    return int(percent_complete)


def derive_duration_days(duration: Optional[RawDuration]) -> Optional[float]:
    if duration is None:
        return None
    return duration.to_days()


def derive_progress(percent_complete: Optional[float]) -> int:
    """Completion as an integer in 0..100; 0 when absent."""
    percent = _percent_as_int(percent_complete)
    if percent is None:
        return 0
    return max(0, min(100, percent))


def derive_status(percent_complete: Optional[float], has_actual_start: bool) -> TaskStatus:
    """Completed beats in-progress beats todo. Never returns BLOCKED."""
    percent = _percent_as_int(percent_complete)
    if percent is not None and percent >= 100:
        return TaskStatus.COMPLETED
    if has_actual_start:
        return TaskStatus.IN_PROGRESS
    return TaskStatus.TODO


def derive_priority(score: Optional[int]) -> TaskPriority:
    """Bucket a 0-1000 priority score; an absent score is MEDIUM, not LOW."""
    if score is None:
        return TaskPriority.MEDIUM
    for threshold, priority in PRIORITY_THRESHOLDS:
        if score >= threshold:
            return priority
    return TaskPriority.LOW


def build_task_record(linked: LinkedTask) -> TaskRecord:
    """Combine the linker's output with the derived fields into a TaskRecord."""
    raw = linked.task
    return TaskRecord(
        name=raw.name,
        description=raw.notes,
        start=raw.start,
        finish=raw.finish,
        duration_days=derive_duration_days(raw.duration),
        progress=derive_progress(raw.percent_complete),
        status=derive_status(raw.percent_complete, raw.has_actual_start),
        priority=derive_priority(raw.priority),
        order=linked.order,
        outline_level=linked.outline_level,
        parent_name=linked.parent_name,
        parent_order=linked.parent_order,
    )
