"""Raw plan contracts: what a source adapter hands to the transformation.

These are dataclasses rather than pydantic models because task identity matters:
``eq=False`` keeps the default identity ``__hash__``, so a dict keyed by
``RawTask`` never confuses two tasks that happen to share a name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional

from config import settings


def normalize_datetime(value: Any) -> Optional[datetime]:
    """Collapse the two date-time representations a parser may emit into one.

    - calendar timestamp (epoch seconds, or an aware datetime): an instant,
      converted to wall-clock time in the local zone (the system zone unless
      settings.local_timezone names one)
    - structured date-time (naive datetime): already wall-clock, used as-is
    - anything else, including None: unset
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=settings.get_local_timezone()).replace(tzinfo=None)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value
        # astimezone(None) converts to the system zone at that instant.
        return value.astimezone(settings.get_local_timezone()).replace(tzinfo=None)
    return None


@dataclass(frozen=True)
class RawDuration:
    """A duration in the parser's native units plus the factor to reach days."""

    magnitude: float
    units_per_day: float

    def __post_init__(self):
        if self.units_per_day <= 0:
            raise ValueError(f"units_per_day must be positive, got {self.units_per_day}")

    def to_days(self) -> float:
        return self.magnitude / self.units_per_day


@dataclass(eq=False)
class RawTask:
    """A task as exposed by the document parser, before transformation."""

    name: Optional[str] = None
    notes: Optional[str] = None
    start: Optional[datetime] = None
    finish: Optional[datetime] = None
    outline_level: Optional[int] = None
    parent: Optional[RawTask] = None
    percent_complete: Optional[float] = None
    actual_start: Any = None
    duration: Optional[RawDuration] = None
    priority: Optional[int] = None

    def __post_init__(self):
        self.start = normalize_datetime(self.start)
        self.finish = normalize_datetime(self.finish)

    @property
    def has_name(self) -> bool:
        """True when the name is non-null and not blank after trimming."""
        return bool(self.name and self.name.strip())

    @property
    def has_actual_start(self) -> bool:
        # Presence-only marker; the value itself is never read.
        return self.actual_start is not None


@dataclass(eq=False)
class RawProject:
    """Project-level properties plus the tasks in document order."""

    title: Optional[str] = None
    start: Optional[datetime] = None
    finish: Optional[datetime] = None
    tasks: List[RawTask] = field(default_factory=list)

    def __post_init__(self):
        self.start = normalize_datetime(self.start)
        self.finish = normalize_datetime(self.finish)
