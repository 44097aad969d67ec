"""Base source adapter interface."""

from abc import ABC, abstractmethod
from typing import Tuple

from contracts import RawProject


class SourceAdapter(ABC):
    """Abstract base class for project-plan readers.

    An adapter turns raw file bytes into a RawProject. It raises ParseError
    when the bytes cannot be interpreted; it never applies business rules.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Adapter name (mspdi, mpxj)."""
        pass

    @property
    @abstractmethod
    def extensions(self) -> Tuple[str, ...]:
        """Lower-case file suffixes this adapter reads, with the leading dot."""
        pass

    @abstractmethod
    def read(self, data: bytes) -> RawProject:
        """Parse a plan document.

        Args:
            data: Raw file contents

        Returns:
            RawProject with tasks in document order

        Raises:
            ParseError: If the bytes are not a readable plan
        """
        pass

    def is_available(self) -> bool:
        """Check if this adapter can run (optional dependencies installed, etc.)."""
        return True
