"""Response Assembler - composes the ProjectRecord and classifies failures.

The PlanImporter is the main entry point that:
1. Validates the upload (name, emptiness, extension)
2. Selects a source adapter and reads the bytes into a RawProject
3. Links the hierarchy and derives per-task fields
4. Returns a complete ProjectRecord, or raises a classified error
"""

import logging
from typing import Optional

from adapters import SourceAdapter, get_adapter
from config import settings
from contracts import (
    PlanImportError,
    ProjectRecord,
    RawProject,
    UnexpectedError,
    ValidationError,
)
from ingestion.deriver import build_task_record
from ingestion.linker import link_hierarchy
from ingestion.summarizer import summarize_project


logger = logging.getLogger(__name__)


def transform(raw_project: RawProject, file_name: str) -> ProjectRecord:
    """Turn a RawProject into the flat, ordered ProjectRecord.

    Pure and deterministic: the same RawProject always yields an equal record.
    """
    summary = summarize_project(raw_project, file_name)
    tasks = tuple(build_task_record(linked) for linked in link_hierarchy(raw_project.tasks))
    return ProjectRecord(
        name=summary.name,
        start=summary.start,
        finish=summary.finish,
        tasks=tasks,
    )


def validate_upload(data: Optional[bytes], file_name: Optional[str]) -> None:
    """Reject uploads the core should never see.

    Raises:
        ValidationError: On a missing name, empty data, or disallowed extension
    """
    if not file_name:
        raise ValidationError("No file was provided")
    if not data:
        raise ValidationError(f"File is empty: {file_name}")
    if not settings.is_allowed_extension(file_name):
        raise ValidationError(
            f"File must be one of {', '.join(settings.allowed_extensions)}: {file_name}"
        )


class PlanImporter:
    """Runs one parse request end to end.

    Holds no per-request state, so one instance may serve concurrent requests.
    """

    def __init__(self, adapter: Optional[SourceAdapter] = None):
        """Initialize the importer.

        Args:
            adapter: Force a specific adapter; by default one is chosen per
                file from its extension.
        """
        self.adapter = adapter

    def run(self, data: bytes, file_name: str) -> ProjectRecord:
        """Validate, parse and transform one uploaded plan.

        Raises:
            ValidationError: Upload rejected before parsing
            ParseError: The adapter could not read the file
            UnexpectedError: Anything else; the original exception is chained
        """
        validate_upload(data, file_name)
        adapter = self.adapter or get_adapter(file_name)

        try:
            raw_project = adapter.read(data)
            record = transform(raw_project, file_name)
        except PlanImportError as e:
            logger.warning("Could not parse %s with %s: %s", file_name, adapter.name, e.message)
            raise
        except Exception as e:
            logger.exception("Unexpected failure while processing %s", file_name)
            raise UnexpectedError() from e

        logger.info(
            "Parsed %s with %s: project %r, %d task(s)",
            file_name, adapter.name, record.name, len(record.tasks),
        )
        return record


def parse_plan(
    data: bytes,
    file_name: str,
    adapter: Optional[SourceAdapter] = None,
) -> ProjectRecord:
    """Convenience function to run a single parse request.

    Args:
        data: Uploaded file contents
        file_name: Uploaded file name (drives validation and adapter choice)
        adapter: Optional adapter override

    Returns:
        ProjectRecord
    """
    return PlanImporter(adapter=adapter).run(data, file_name)
