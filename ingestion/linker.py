"""Hierarchy Linker - orders valid tasks and denormalizes their parents.

Task names are not unique within a plan, so parents are resolved through an
identity-keyed index (RawTask hashes by identity), never by name.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from contracts import RawTask


logger = logging.getLogger(__name__)


@dataclass
class LinkedTask:
    """A retained raw task with its order and resolved parent link."""
    task: RawTask
    order: int
    outline_level: int = 1
    parent_name: Optional[str] = None
    parent_order: Optional[int] = None


def index_tasks(raw_tasks: Iterable[Optional[RawTask]]) -> Dict[RawTask, int]:
    """Indexing pass: map each named task to its zero-based order.

    Tasks with a null or blank name are skipped and do not consume an order
    value. The returned dict preserves document order.
    """
    order_by_task: Dict[RawTask, int] = {}
    skipped = 0
    for task in raw_tasks:
        if task is None or not task.has_name:
            skipped += 1
            continue
        if task not in order_by_task:
            order_by_task[task] = len(order_by_task)
    if skipped:
        logger.debug("Skipped %d task(s) without a name", skipped)
    return order_by_task


def resolve_parent(
    task: RawTask,
    order_by_task: Dict[RawTask, int],
) -> Tuple[Optional[str], Optional[int]]:
    """Return (parent_name, parent_order), or (None, None) when there is no usable parent."""
    parent = task.parent
    if parent is None or not parent.has_name:
        return None, None

    parent_order = order_by_task.get(parent)
    if parent_order is None:
        logger.debug("Parent %r of task %r is not in the plan; linking as root", parent.name, task.name)
        return None, None
    return parent.name, parent_order


def link_hierarchy(raw_tasks: Iterable[Optional[RawTask]]) -> List[LinkedTask]:
    """Order the named tasks and attach each one's parent (name, order).

    Materialization walks the index built by the indexing pass, so the order
    is computed exactly once per task.
    """
    order_by_task = index_tasks(raw_tasks)

    linked: List[LinkedTask] = []
    for task, order in order_by_task.items():
        parent_name, parent_order = resolve_parent(task, order_by_task)
        linked.append(
            LinkedTask(
                task=task,
                order=order,
                outline_level=task.outline_level if task.outline_level is not None else 1,
                parent_name=parent_name,
                parent_order=parent_order,
            )
        )
    return linked
