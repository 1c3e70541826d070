"""Framework-agnostic domain models for the video analysis pipeline.

Pydantic DTOs in models.py describe the wire format of the inference
service and the HTTP API; mappers.py converts at the boundary.
"""

from dataclasses import dataclass, field, replace
from typing import Optional


@dataclass(frozen=True)
class MediaItem:
    """The original input video. Never mutated once accepted."""
    path: str
    size_bytes: int
    mime_type: str
    duration: Optional[float] = None

    @property
    def size_mb(self) -> float:
        return self.size_bytes / (1024 * 1024)


@dataclass
class Segment:
    """A contiguous time-bounded slice of a MediaItem."""
    index: int
    start: float
    end: float
    media: MediaItem

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass
class SegmentPayload:
    """Transferable encoding of a segment, ready for the inference call."""
    data: str
    mime_type: str
    segment_index: int


@dataclass
class TranscriptEntry:
    """One utterance. Timestamp is MM:SS relative to the media start."""
    timestamp: str
    speaker: str
    text: str
    tone: str = ""
    intent: str = ""


@dataclass
class Metadata:
    title: str
    speaker_name: str
    category: str
    language: str = ""
    tags: list[str] = field(default_factory=list)
    summary: str = ""


@dataclass
class AnalysisResult:
    """Metadata plus an ordered transcript."""
    metadata: Metadata
    transcript: list[TranscriptEntry] = field(default_factory=list)


@dataclass(frozen=True)
class AnalysisHints:
    """Caller-supplied context sent alongside the media."""
    title: str
    speaker_name: str
    category: str

    def for_segment(self, index: int, total: int) -> "AnalysisHints":
        """Hints for a single segment, labelled '(Segment i/N)' with 1-based i."""
        return replace(self, title=f"{self.title} (Segment {index + 1}/{total})")


@dataclass
class SegmentOutcome:
    """Result of dispatching one segment: either a result or a failure reason."""
    segment: Segment
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, segment: Segment, result: AnalysisResult) -> "SegmentOutcome":
        return cls(segment=segment, result=result)

    @classmethod
    def failed(cls, segment: Segment, reason: str) -> "SegmentOutcome":
        return cls(segment=segment, error=reason)

    @property
    def succeeded(self) -> bool:
        return self.result is not None


@dataclass
class ProgressUpdate:
    current_segment: int
    total_segments: int
    percent: float
    status: str
