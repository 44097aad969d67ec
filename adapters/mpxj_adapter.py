"""MPXJ adapter for binary MS Project files (.mpp, .mpx, .mpt).

Uses the `mpxj` package, which runs the MPXJ Java library through JPype.
Install with `pip install '.[mpp]'`; a Java runtime must be on the PATH.
"""

from __future__ import annotations

import importlib.util
import logging
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from config import settings
from contracts import ParseError, RawDuration, RawProject, RawTask

from .base import SourceAdapter


logger = logging.getLogger(__name__)

# Calendar-independent conversions for the elapsed TimeUnits.
ELAPSED_UNITS_PER_DAY: Dict[str, float] = {
    "ELAPSED_MINUTES": 24 * 60,
    "ELAPSED_HOURS": 24,
    "ELAPSED_DAYS": 1,
    "ELAPSED_WEEKS": 1 / 7,
    "ELAPSED_MONTHS": 1 / 30,
    "ELAPSED_YEARS": 1 / 365,
}


def units_per_day(
    unit_name: str,
    minutes_per_day: float,
    minutes_per_week: float,
    days_per_month: float,
) -> Optional[float]:
    """How many of `unit_name` make one working day; None for percent units."""
    if unit_name in ELAPSED_UNITS_PER_DAY:
        return ELAPSED_UNITS_PER_DAY[unit_name]
    if unit_name == "MINUTES":
        return minutes_per_day
    if unit_name == "HOURS":
        return minutes_per_day / 60
    if unit_name == "DAYS":
        return 1.0
    if unit_name == "WEEKS":
        return minutes_per_day / minutes_per_week
    if unit_name == "MONTHS":
        return 1 / days_per_month
    if unit_name == "YEARS":
        return 1 / (days_per_month * 12)
    return None


def java_datetime(value: Any) -> Any:
    """Map MPXJ date values to the raw contract's two representations.

    java.time.LocalDateTime (MPXJ 12+) becomes a naive datetime; java.util.Date
    (older MPXJ) becomes epoch seconds. Anything else passes through and is
    discarded by normalize_datetime.
    """
    if value is None:
        return None
    if hasattr(value, "getMonthValue"):
        return datetime(
            int(value.getYear()),
            int(value.getMonthValue()),
            int(value.getDayOfMonth()),
            int(value.getHour()),
            int(value.getMinute()),
            int(value.getSecond()),
        )
    if hasattr(value, "getTime"):
        return int(value.getTime()) / 1000.0
    return value


def _str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _number(value: Any) -> Optional[float]:
    return None if value is None else float(value)


class ProjectFileConverter:
    """Converts an MPXJ ProjectFile into a RawProject.

    Works on anything exposing the MPXJ getter names, which keeps it testable
    without a JVM.
    """

    def __init__(self, project_file: Any):
        self.project_file = project_file
        props = project_file.getProjectProperties()
        self.properties = props
        self.minutes_per_day = _number(props.getMinutesPerDay()) or float(settings.default_minutes_per_day)
        self.minutes_per_week = _number(props.getMinutesPerWeek()) or self.minutes_per_day * 5
        self.days_per_month = _number(props.getDaysPerMonth()) or 20.0

    def convert(self) -> RawProject:
        raw_by_source: Dict[Any, RawTask] = {}
        for source in self.project_file.getTasks():
            if source is None:
                continue
            raw_by_source[source] = self._convert_task(source)

        # Parents are linked once every task exists, so forward references resolve.
        for source, raw in raw_by_source.items():
            parent = source.getParentTask()
            if parent is not None:
                raw.parent = raw_by_source.get(parent)

        return RawProject(
            title=_str(self.properties.getProjectTitle()),
            start=java_datetime(self.properties.getStartDate()),
            finish=java_datetime(self.properties.getFinishDate()),
            tasks=list(raw_by_source.values()),
        )

    def _convert_task(self, source: Any) -> RawTask:
        outline_level = source.getOutlineLevel()
        priority = source.getPriority()
        return RawTask(
            name=_str(source.getName()),
            notes=_str(source.getNotes()),
            start=java_datetime(source.getStart()),
            finish=java_datetime(source.getFinish()),
            outline_level=None if outline_level is None else int(outline_level),
            percent_complete=_number(source.getPercentageComplete()),
            actual_start=java_datetime(source.getActualStart()),
            duration=self._convert_duration(source.getDuration()),
            priority=None if priority is None else int(priority.getValue()),
        )

    def _convert_duration(self, duration: Any) -> Optional[RawDuration]:
        if duration is None:
            return None
        unit_name = str(duration.getUnits().name())
        factor = units_per_day(unit_name, self.minutes_per_day, self.minutes_per_week, self.days_per_month)
        if factor is None:
            logger.debug("Ignoring duration in unsupported unit %s", unit_name)
            return None
        return RawDuration(magnitude=float(duration.getDuration()), units_per_day=factor)


class MpxjAdapter(SourceAdapter):
    """Reads binary MS Project files with MPXJ's UniversalProjectReader."""

    @property
    def name(self) -> str:
        return "mpxj"

    @property
    def extensions(self) -> Tuple[str, ...]:
        return (".mpp", ".mpx", ".mpt")

    def is_available(self) -> bool:
        return importlib.util.find_spec("mpxj") is not None and importlib.util.find_spec("jpype") is not None

    def read(self, data: bytes) -> RawProject:
        reader_class, input_stream_class = self._load_java_classes()
        try:
            project_file = reader_class().read(input_stream_class(data))
        except Exception as e:
            raise ParseError(f"Could not read MS Project file: {e}") from e
        if project_file is None:
            raise ParseError("Unrecognized MS Project file format")
        return ProjectFileConverter(project_file).convert()

    def _load_java_classes(self):
        """Start the JVM on first use and return (UniversalProjectReader, ByteArrayInputStream)."""
        try:
            import jpype
            import jpype.imports  # noqa: F401  enables `from java... import`
            import mpxj  # noqa: F401  puts the MPXJ jars on the classpath
        except ImportError as e:
            raise ParseError(
                "Reading .mpp files requires the 'mpxj' package (pip install '.[mpp]')"
            ) from e

        if not jpype.isJVMStarted():
            logger.info("Starting JVM for MPXJ")
            jpype.startJVM()

        from java.io import ByteArrayInputStream

        # MPXJ 14 moved from net.sf.mpxj to org.mpxj.
        try:
            from org.mpxj.reader import UniversalProjectReader
        except ImportError:
            from net.sf.mpxj.reader import UniversalProjectReader
        return UniversalProjectReader, ByteArrayInputStream
