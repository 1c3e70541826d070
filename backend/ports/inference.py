"""InferencePort — abstract interface for the multimodal analysis service."""

from abc import ABC, abstractmethod

from domain.models import AnalysisHints, AnalysisResult, SegmentPayload


class InferencePort(ABC):
    @abstractmethod
    def analyze(self, payload: SegmentPayload, hints: AnalysisHints) -> AnalysisResult:
        """Analyze a media payload. Raises InferenceError on any service-side problem."""

    @abstractmethod
    def model_name(self) -> str:
        """Return the model identifier used for analysis."""
