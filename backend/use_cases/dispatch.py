"""SegmentDispatcher — sends planned segments to the inference service one at a time.

Calls are strictly sequential and paced by a cool-down between segments.
A failing segment is replaced by a placeholder result that still carries
the segment's real duration, so later timestamps stay correctly offset.
"""

import time
import logging
from typing import Callable, Sequence

from domain.models import (
    AnalysisHints, AnalysisResult, Metadata, ProgressUpdate, Segment, SegmentOutcome,
)
from errors import ConfigurationError
from ports.inference import InferencePort
from ports.media import SegmentMaterializerPort
from ports.progress import ProgressPort

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_SECONDS = 1.0


def placeholder_result(hints: AnalysisHints, segment_number: int) -> AnalysisResult:
    """Well-formed empty result standing in for a failed segment (1-based number)."""
    return AnalysisResult(
        metadata=Metadata(
            title=hints.title,
            speaker_name=hints.speaker_name,
            category=hints.category,
            language="Unknown",
            tags=[],
            summary=f"Chunk {segment_number} processing failed",
        ),
        transcript=[],
    )


class SegmentDispatcher:
    def __init__(
        self,
        inference: InferencePort,
        materializer: SegmentMaterializerPort,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._inference = inference
        self._materializer = materializer
        self._cooldown = cooldown_seconds
        self._sleep = sleep

    def dispatch(self, segment: Segment, total: int, hints: AnalysisHints) -> SegmentOutcome:
        """Materialize and analyze one segment. Only ConfigurationError escapes."""
        try:
            payload = self._materializer.materialize(segment)
            result = self._inference.analyze(payload, hints.for_segment(segment.index, total))
            return SegmentOutcome.ok(segment, result)
        except ConfigurationError:
            raise
        except Exception as e:
            logger.error(f"Error processing segment {segment.index + 1}/{total}: {e}")
            return SegmentOutcome.failed(segment, str(e))

    def run_all(
        self,
        segments: Sequence[Segment],
        hints: AnalysisHints,
        progress: ProgressPort,
    ) -> list[tuple[AnalysisResult, float]]:
        """Dispatch every segment in index order.

        Returns:
            One (result, segment_duration) pair per segment, in order. Failed
            segments contribute a placeholder result.
        """
        total = len(segments)
        results: list[tuple[AnalysisResult, float]] = []
        failures = 0

        for i, segment in enumerate(segments):
            progress.report(ProgressUpdate(
                current_segment=i + 1,
                total_segments=total,
                percent=i / total * 100,
                status=f"Processing segment {i + 1} of {total}...",
            ))
            logger.info(f"Dispatching segment {i + 1}/{total} [{segment.start:.1f}s-{segment.end:.1f}s]")

            outcome = self.dispatch(segment, total, hints)
            if outcome.succeeded:
                results.append((outcome.result, segment.duration))
            else:
                failures += 1
                results.append((placeholder_result(hints, i + 1), segment.duration))

            progress.report(ProgressUpdate(
                current_segment=i + 1,
                total_segments=total,
                percent=(i + 1) / total * 100,
                status=f"Segment {i + 1} of {total} complete",
            ))
            progress.segment_complete(i + 1, total)

            if i < total - 1 and self._cooldown > 0:
                self._sleep(self._cooldown)

        if failures:
            logger.warning(f"{failures}/{total} segments failed and were replaced by placeholders")
        return results
