"""Consumer-side helpers for the flat task list.

The wire format is flat on purpose; these rebuild the tree by joining
parent_order to order, and flatten it back with a depth for indented display.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from contracts import TaskRecord


@dataclass
class TaskNode:
    record: TaskRecord
    children: List["TaskNode"] = field(default_factory=list)


def build_task_tree(tasks: Iterable[TaskRecord]) -> List[TaskNode]:
    """Nest tasks under their parents; tasks whose parent is missing become roots."""
    tasks = list(tasks)
    nodes: Dict[int, TaskNode] = {task.order: TaskNode(record=task) for task in tasks}

    roots: List[TaskNode] = []
    for task in tasks:
        node = nodes[task.order]
        parent = None if task.is_root else nodes.get(task.parent_order)
        if parent is None or parent is node:
            roots.append(node)
        else:
            parent.children.append(node)
    return roots


def flatten_task_tree(nodes: Iterable[TaskNode], level: int = 0) -> List[Tuple[int, TaskRecord]]:
    """Depth-first (depth, record) pairs."""
    result: List[Tuple[int, TaskRecord]] = []
    for node in nodes:
        result.append((level, node.record))
        result.extend(flatten_task_tree(node.children, level + 1))
    return result
