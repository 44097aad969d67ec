"""Project Summarizer - project name and date range."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import PureWindowsPath
from typing import Optional

from contracts import RawProject


@dataclass(frozen=True)
class ProjectSummary:
    name: str
    start: Optional[datetime] = None
    finish: Optional[datetime] = None


def project_name(title: Optional[str], file_name: str) -> str:
    """Title when it is non-blank, else the file's base name without extension.

    PureWindowsPath splits on both "/" and "\\", which covers upload names
    sent with a client-side directory.
    """
    if title and title.strip():
        return title
    return PureWindowsPath(file_name).stem


def summarize_project(raw_project: RawProject, file_name: str) -> ProjectSummary:
    # Dates were normalized when the RawProject was built.
    return ProjectSummary(
        name=project_name(raw_project.title, file_name),
        start=raw_project.start,
        finish=raw_project.finish,
    )
