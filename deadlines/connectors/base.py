"""Source abstraction, errors, and helpers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List

from deadlines.models.domain import SourceFile
from deadlines.utils.logging import get_logger


class SourceError(Exception):
    """Base source error."""


class TransientError(SourceError):
    """Retryable error (e.g., rate limit, network hiccup)."""


class PermanentError(SourceError):
    """Non-retryable error (e.g., 4xx semantics, missing root)."""


class BaseSource(ABC):
    """Enumerates category groupings and the data files inside each.

    ``list_files`` raises ``SourceError`` only when the root itself cannot be
    listed. A category that fails is logged, recorded in ``errors`` and skipped.
    """

    name: str

    def __init__(self, extension: str = ".yml") -> None:
        self.extension = extension
        self.errors: Dict[str, str] = {}
        self._logger = get_logger(f"deadlines.source.{self.name}")

    def matches(self, filename: str) -> bool:
        return filename.endswith(self.extension)

    def _skip(self, unit: str, exc: Exception) -> None:
        self.errors[unit] = str(exc)
        self._logger.warning(
            "source.unit_skipped",
            extra={"source": self.name, "unit": unit, "error": str(exc)},
        )

    @abstractmethod
    async def list_files(self) -> List[SourceFile]:
        """Return file handles for every category, in listing order."""

    @abstractmethod
    async def read(self, file: SourceFile) -> str:
        """Return the raw text of one file."""

    async def aclose(self) -> None:
        """Release held resources (HTTP clients); no-op by default."""
