"""Microsoft Project XML (MSPDI) adapter.

MS Project can save any plan as XML; this reader needs nothing beyond the
standard library. MSPDI has no explicit parent reference, so the structural
parent is rebuilt from the OutlineLevel sequence. The project summary task
(OutlineLevel 0) is exposed like any other task, matching the MPXJ reader.
"""

import logging
import re
import xml.etree.ElementTree as ET
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from config import settings
from contracts import ParseError, RawDuration, RawProject, RawTask

from .base import SourceAdapter


logger = logging.getLogger(__name__)

# MSPDI writes durations as PTnHnMnS (work time).
DURATION_RE = re.compile(
    r"^PT(?:(?P<hours>\d+(?:\.\d+)?)H)?(?:(?P<minutes>\d+(?:\.\d+)?)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?$"
)


def _qualifier(root: ET.Element) -> Callable[[str], str]:
    """Build a tag qualifier for the document's namespace (if any)."""
    ns = None
    if root.tag.startswith("{"):
        ns = root.tag[1:root.tag.index("}")]

    def q(tag: str) -> str:
        return f"{{{ns}}}{tag}" if ns else tag

    return q


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _text(element: ET.Element, tag: str) -> Optional[str]:
    value = element.findtext(tag)
    if value is None or value == "":
        return None
    return value


def parse_datetime(value: Optional[str]):
    """ISO date-time text to datetime; None when absent or malformed.

    A trailing Z (or any offset) yields an aware datetime, which the raw
    contracts treat as an instant and localize.
    """
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Ignoring malformed date-time %r", value)
        return None


def parse_duration_minutes(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    match = DURATION_RE.match(value.strip())
    if not match or not any(match.groupdict().values()):
        logger.debug("Ignoring malformed duration %r", value)
        return None
    hours = float(match.group("hours") or 0)
    minutes = float(match.group("minutes") or 0)
    seconds = float(match.group("seconds") or 0)
    return hours * 60 + minutes + seconds / 60


def _int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _float(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class MspdiAdapter(SourceAdapter):
    """Reads MS Project XML (the MSPDI schema, any version)."""

    def __init__(self, default_minutes_per_day: Optional[int] = None):
        """Initialize the adapter.

        Args:
            default_minutes_per_day: Working minutes per day when the document
                omits MinutesPerDay. Defaults to config setting.
        """
        self.default_minutes_per_day = default_minutes_per_day or settings.default_minutes_per_day

    @property
    def name(self) -> str:
        return "mspdi"

    @property
    def extensions(self) -> Tuple[str, ...]:
        return (".xml",)

    def read(self, data: bytes) -> RawProject:
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise ParseError(f"Invalid MS Project XML: {e}") from e

        if _local_name(root.tag) != "Project":
            raise ParseError(
                f"Not an MS Project XML document: root element is <{_local_name(root.tag)}>, expected <Project>"
            )

        q = _qualifier(root)
        minutes_per_day = _int(_text(root, q("MinutesPerDay"))) or self.default_minutes_per_day

        return RawProject(
            title=_text(root, q("Title")),
            start=parse_datetime(_text(root, q("StartDate"))),
            finish=parse_datetime(_text(root, q("FinishDate"))),
            tasks=self._read_tasks(root, q, minutes_per_day),
        )

    def _read_tasks(
        self,
        root: ET.Element,
        q: Callable[[str], str],
        minutes_per_day: int,
    ) -> List[RawTask]:
        """Read <Task> elements in document order, linking each to its outline parent."""
        tasks: List[RawTask] = []
        tasks_el = root.find(q("Tasks"))
        if tasks_el is None:
            return tasks

        # Most recent task seen at each outline level.
        latest_at_level: Dict[int, RawTask] = {}

        for task_el in tasks_el.findall(q("Task")):
            outline_level = _int(_text(task_el, q("OutlineLevel")))
            # The project summary task (level 0) is kept, as MPXJ returns it
            # from getTasks(); top-level tasks become its children.
            level = outline_level if outline_level is not None else 1
            task = self._read_task(task_el, q, minutes_per_day)
            task.outline_level = outline_level
            # Nearest shallower task; tolerates skipped levels.
            parent_level = max((lvl for lvl in latest_at_level if lvl < level), default=None)
            task.parent = latest_at_level[parent_level] if parent_level is not None else None

            latest_at_level[level] = task
            for deeper in [lvl for lvl in latest_at_level if lvl > level]:
                del latest_at_level[deeper]

            tasks.append(task)
        return tasks

    def _read_task(self, task_el: ET.Element, q: Callable[[str], str], minutes_per_day: int) -> RawTask:
        duration = None
        minutes = parse_duration_minutes(_text(task_el, q("Duration")))
        if minutes is not None:
            duration = RawDuration(magnitude=minutes, units_per_day=float(minutes_per_day))

        return RawTask(
            name=_text(task_el, q("Name")),
            notes=_text(task_el, q("Notes")),
            start=parse_datetime(_text(task_el, q("Start"))),
            finish=parse_datetime(_text(task_el, q("Finish"))),
            percent_complete=_float(_text(task_el, q("PercentComplete"))),
            actual_start=parse_datetime(_text(task_el, q("ActualStart"))),
            duration=duration,
            priority=_int(_text(task_el, q("Priority"))),
        )
