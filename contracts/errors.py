"""Error taxonomy for plan ingestion.

Every failure that leaves the service is one of these three kinds.
"""


class PlanImportError(Exception):
    """Base class for classified ingestion failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PlanImportError):
    """Upload rejected before parsing: missing, empty, or disallowed file type."""


class ParseError(PlanImportError):
    """The source adapter could not interpret the byte stream."""


class UnexpectedError(PlanImportError):
    """Any other failure during transformation; reported generically."""

    GENERIC_MESSAGE = "Unexpected error while processing the file"

    def __init__(self, message: str = GENERIC_MESSAGE):
        super().__init__(message)
