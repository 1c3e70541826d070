"""Media ports — duration probing and segment materialization."""

from abc import ABC, abstractmethod
from typing import Optional

from domain.models import Segment, SegmentPayload


class MediaProbePort(ABC):
    @abstractmethod
    def probe_duration(self, path: str) -> Optional[float]:
        """Return media duration in seconds, or None if it cannot be determined."""


class SegmentMaterializerPort(ABC):
    @abstractmethod
    def materialize(self, segment: Segment) -> SegmentPayload:
        """Encode the bytes for a segment into a transferable payload."""
