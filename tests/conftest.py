"""Shared fixtures: a small MS Project XML plan."""

import time

import pytest

from adapters import SourceAdapter
from contracts import RawProject


SAMPLE_MSPDI = b"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Project xmlns="http://schemas.microsoft.com/project">
  <Name>relaunch.xml</Name>
  <Title>Website Relaunch</Title>
  <StartDate>2026-01-05T08:00:00</StartDate>
  <FinishDate>2026-02-27T17:00:00</FinishDate>
  <MinutesPerDay>480</MinutesPerDay>
  <Tasks>
    <Task>
      <UID>0</UID>
      <Name>Website Relaunch</Name>
      <OutlineLevel>0</OutlineLevel>
    </Task>
    <Task>
      <UID>1</UID>
      <Name>Phase 1</Name>
      <OutlineLevel>1</OutlineLevel>
      <Start>2026-01-05T08:00:00</Start>
      <Finish>2026-01-16T17:00:00</Finish>
      <Duration>PT80H0M0S</Duration>
      <PercentComplete>100</PercentComplete>
      <Priority>950</Priority>
    </Task>
    <Task>
      <UID>2</UID>
      <Name>Task A</Name>
      <OutlineLevel>2</OutlineLevel>
      <Notes>Kickoff workshop</Notes>
      <Duration>PT40H0M0S</Duration>
      <PercentComplete>40</PercentComplete>
      <ActualStart>2026-01-05T08:00:00</ActualStart>
      <Priority>750</Priority>
    </Task>
    <Task>
      <UID>3</UID>
      <IsNull>1</IsNull>
      <OutlineLevel>2</OutlineLevel>
    </Task>
    <Task>
      <UID>4</UID>
      <Name>Task B</Name>
      <OutlineLevel>2</OutlineLevel>
      <PercentComplete>0</PercentComplete>
    </Task>
    <Task>
      <UID>5</UID>
      <Name>Phase 2</Name>
      <OutlineLevel>1</OutlineLevel>
      <Priority>200</Priority>
    </Task>
  </Tasks>
</Project>
"""


@pytest.fixture
def mspdi_bytes() -> bytes:
    return SAMPLE_MSPDI


class StubAdapter(SourceAdapter):
    """Adapter returning a fixed RawProject, or raising a given error."""

    def __init__(self, project=None, error=None):
        self.project = project
        self.error = error

    @property
    def name(self) -> str:
        return "stub"

    @property
    def extensions(self):
        return (".mpp",)

    def read(self, data: bytes) -> RawProject:
        if self.error:
            raise self.error
        return self.project


@pytest.fixture
def stub_adapter():
    """Factory: stub_adapter(project=...) or stub_adapter(error=...)."""
    return StubAdapter


@pytest.fixture
def system_zone(monkeypatch):
    """Switch the process time zone (TZ + tzset); restored afterwards."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")

    def use(name: str):
        monkeypatch.setenv("TZ", name)
        time.tzset()

    yield use
    monkeypatch.undo()
    time.tzset()
