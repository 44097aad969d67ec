"""Tests for the raw and project contracts.

Verifies date normalization at ingestion, identity semantics of raw tasks,
and the wire shape of the project record.
"""

import json
import time
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from pydantic import ValidationError as PydanticValidationError

from config import settings
from contracts import (
    normalize_datetime,
    RawDuration,
    RawTask,
    RawProject,
    TaskStatus,
    TaskPriority,
    TaskRecord,
    ProjectRecord,
    ParseError,
    PlanImportError,
    UnexpectedError,
    ValidationError,
)


class TestNormalizeDatetime:
    """Test the single date-time normalization rule."""

    def test_naive_datetime_used_as_is(self):
        value = datetime(2026, 3, 2, 8, 30)
        assert normalize_datetime(value) == value

    def test_epoch_timestamp_localized(self):
        with patch.object(settings, "local_timezone", "UTC"):
            assert normalize_datetime(0) == datetime(1970, 1, 1, 0, 0)

    def test_epoch_timestamp_in_configured_zone(self):
        with patch.object(settings, "local_timezone", "Asia/Tokyo"):
            assert normalize_datetime(0.0) == datetime(1970, 1, 1, 9, 0)

    def test_aware_datetime_converted_to_local_wall_clock(self):
        value = datetime(2026, 3, 2, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        with patch.object(settings, "local_timezone", "UTC"):
            result = normalize_datetime(value)
        assert result == datetime(2026, 3, 2, 10, 0)
        assert result.tzinfo is None

    def test_unrecognized_representation_is_unset(self):
        assert normalize_datetime("2026-03-02T08:00:00") is None
        assert normalize_datetime(object()) is None
        assert normalize_datetime(True) is None

    def test_none_is_unset(self):
        assert normalize_datetime(None) is None


# 2024-01-15T12:00Z and 2024-07-14T12:00Z, either side of the EU DST switch.
WINTER_INSTANT = 1705320000
SUMMER_INSTANT = 1720958400


class TestSystemZoneNormalization:
    """With no configured zone, the system zone's rules apply per instant."""

    @pytest.fixture(autouse=True)
    def unset_configured_zone(self):
        with patch.object(settings, "local_timezone", None):
            yield

    def test_configured_zone_absent(self):
        assert settings.get_local_timezone() is None

    @pytest.mark.parametrize("instant,expected", [
        (WINTER_INSTANT, datetime(2024, 1, 15, 13, 0)),
        (SUMMER_INSTANT, datetime(2024, 7, 14, 14, 0)),
    ])
    def test_epoch_uses_offset_in_effect_at_instant(self, system_zone, instant, expected):
        system_zone("Europe/Madrid")
        assert normalize_datetime(instant) == expected

    @pytest.mark.parametrize("instant", [WINTER_INSTANT, SUMMER_INSTANT])
    def test_epoch_matches_localtime(self, system_zone, instant):
        system_zone("America/New_York")
        assert normalize_datetime(instant) == datetime(*time.localtime(instant)[:6])

    def test_aware_datetime_winter_and_summer(self, system_zone):
        system_zone("Europe/Madrid")
        winter = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        summer = datetime(2024, 7, 14, 12, 0, tzinfo=timezone.utc)
        assert normalize_datetime(winter) == datetime(2024, 1, 15, 13, 0)
        assert normalize_datetime(summer) == datetime(2024, 7, 14, 14, 0)


class TestRawContracts:
    """Test raw task/project dataclasses."""

    def test_raw_task_normalizes_dates_on_construction(self):
        with patch.object(settings, "local_timezone", "UTC"):
            task = RawTask(name="A", start=0, finish="not a date")
        assert task.start == datetime(1970, 1, 1)
        assert task.finish is None

    def test_raw_project_normalizes_dates_on_construction(self):
        project = RawProject(start=datetime(2026, 1, 5, 8), finish=[2026, 1, 9])
        assert project.start == datetime(2026, 1, 5, 8)
        assert project.finish is None

    def test_raw_tasks_hash_by_identity(self):
        """Two tasks with identical fields stay distinct dict keys."""
        first = RawTask(name="Design")
        second = RawTask(name="Design")
        index = {first: 0, second: 1}
        assert first != second
        assert index[first] == 0
        assert index[second] == 1

    @pytest.mark.parametrize("name,expected", [
        ("Task", True),
        ("  padded  ", True),
        ("", False),
        ("   ", False),
        (None, False),
    ])
    def test_has_name(self, name, expected):
        assert RawTask(name=name).has_name is expected

    def test_actual_start_is_presence_only(self):
        assert RawTask(name="A", actual_start="anything").has_actual_start is True
        assert RawTask(name="A").has_actual_start is False

    def test_duration_to_days(self):
        assert RawDuration(magnitude=2400, units_per_day=480).to_days() == 5.0

    def test_duration_rejects_non_positive_factor(self):
        with pytest.raises(ValueError):
            RawDuration(magnitude=1, units_per_day=0)


class TestTaskRecord:
    """Test the TaskRecord contract."""

    def test_defaults(self):
        task = TaskRecord(name="Build", order=0)
        assert task.progress == 0
        assert task.status == TaskStatus.TODO
        assert task.priority == TaskPriority.MEDIUM
        assert task.outline_level == 1
        assert task.parent_name is None
        assert task.parent_order is None
        assert task.is_root

    def test_empty_name_rejected(self):
        with pytest.raises(PydanticValidationError):
            TaskRecord(name="", order=0)

    def test_progress_bounds(self):
        with pytest.raises(PydanticValidationError):
            TaskRecord(name="Build", order=0, progress=101)
        with pytest.raises(PydanticValidationError):
            TaskRecord(name="Build", order=0, progress=-1)

    def test_parent_order_requires_parent_name(self):
        with pytest.raises(PydanticValidationError):
            TaskRecord(name="Build", order=1, parent_order=0)

    def test_record_is_frozen(self):
        task = TaskRecord(name="Build", order=0)
        with pytest.raises(PydanticValidationError):
            task.progress = 50

    def test_accepts_wire_names(self):
        task = TaskRecord.model_validate({
            "name": "Build",
            "order": 1,
            "outlineLevel": 2,
            "parentTaskName": "Phase",
            "parentOrder": 0,
            "duration": 1.5,
        })
        assert task.outline_level == 2
        assert task.parent_name == "Phase"
        assert task.parent_order == 0
        assert task.duration_days == 1.5


class TestProjectRecord:
    """Test the ProjectRecord contract and its JSON shape."""

    def _record(self) -> ProjectRecord:
        return ProjectRecord(
            name="Plan",
            start=datetime(2026, 1, 5, 8, 0, 0),
            finish=None,
            tasks=(
                TaskRecord(name="Phase 1", order=0, start=datetime(2026, 1, 5, 8, 0, 0)),
                TaskRecord(
                    name="Task A",
                    order=1,
                    outline_level=2,
                    parent_name="Phase 1",
                    parent_order=0,
                    status=TaskStatus.IN_PROGRESS,
                    priority=TaskPriority.HIGH,
                    duration_days=2.5,
                    progress=40,
                ),
            ),
        )

    def test_wire_uses_camel_case_names(self):
        wire = self._record().to_wire()
        assert set(wire.keys()) == {"name", "startDate", "finishDate", "tasks"}
        task = wire["tasks"][1]
        assert set(task.keys()) == {
            "name", "description", "startDate", "finishDate", "duration", "progress",
            "status", "priority", "order", "outlineLevel", "parentTaskName", "parentOrder",
        }
        assert task["parentTaskName"] == "Phase 1"
        assert task["parentOrder"] == 0
        assert task["status"] == "in_progress"
        assert task["priority"] == "high"

    def test_datetimes_formatted_without_offset(self):
        wire = self._record().to_wire()
        assert wire["startDate"] == "2026-01-05T08:00:00"
        assert wire["finishDate"] is None
        assert wire["tasks"][0]["startDate"] == "2026-01-05T08:00:00"

    def test_to_json_round_trips_through_wire_names(self):
        record = self._record()
        data = json.loads(record.to_json())
        assert data["tasks"][1]["outlineLevel"] == 2
        reloaded = ProjectRecord.model_validate(data)
        assert reloaded == record

    def test_orders_must_be_dense(self):
        with pytest.raises(PydanticValidationError):
            ProjectRecord(name="Plan", tasks=(TaskRecord(name="A", order=1),))

    def test_empty_project(self):
        record = ProjectRecord(name="Empty")
        assert record.tasks == ()
        assert record.to_wire()["tasks"] == []


class TestErrors:
    """Test the error taxonomy."""

    def test_all_errors_share_a_base(self):
        for error_cls in (ValidationError, ParseError, UnexpectedError):
            assert issubclass(error_cls, PlanImportError)

    def test_message_attribute(self):
        assert ParseError("truncated").message == "truncated"

    def test_unexpected_error_defaults_to_generic_message(self):
        assert UnexpectedError().message == UnexpectedError.GENERIC_MESSAGE
