"""ProgressPort — abstract interface for reporting pipeline progress."""

from abc import ABC, abstractmethod

from domain.models import ProgressUpdate


class ProgressPort(ABC):
    @abstractmethod
    def report(self, update: ProgressUpdate) -> None:
        """Report a planning, dispatch or merge step."""

    @abstractmethod
    def segment_complete(self, segment_number: int, total_segments: int) -> None:
        """Called after each segment dispatch resolves (success or failure)."""
