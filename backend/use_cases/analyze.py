"""AnalyzeVideoUseCase — orchestrates the full video analysis pipeline.

Accepts all ports via dependency injection. Small videos go to the
inference service in one call; large or long ones are planned into
segments, dispatched sequentially, merged onto one timeline and cleaned
of boundary duplicates.
"""

import os
import json
import logging
import uuid
from dataclasses import dataclass, replace
from typing import Optional

from domain.models import AnalysisHints, AnalysisResult, MediaItem, ProgressUpdate, Segment
from errors import NothingToProcessError
from ports.inference import InferencePort
from ports.media import MediaProbePort, SegmentMaterializerPort
from ports.progress import ProgressPort
from adapters.local.log_progress import LogProgressAdapter
from planning import (
    should_partition, plan_segments,
    DEFAULT_MAX_SIZE_MB, DEFAULT_MAX_DURATION_MINUTES,
    DEFAULT_FALLBACK_SIZE_MB, DEFAULT_SEGMENT_MINUTES,
)
from timeline import adjust_timestamp, merge_results
from post_processing import remove_boundary_duplicates, find_and_replace, apply_speaker_labels
from use_cases.dispatch import SegmentDispatcher, DEFAULT_COOLDOWN_SECONDS

logger = logging.getLogger(__name__)


@dataclass
class AnalyzeRequest:
    """All parameters for an analysis request."""
    video_path: str
    mime_type: str
    title: str
    speaker_name: str
    category: str
    duration: Optional[float] = None
    segment_minutes: float = DEFAULT_SEGMENT_MINUTES
    max_size_mb: float = DEFAULT_MAX_SIZE_MB
    max_duration_minutes: float = DEFAULT_MAX_DURATION_MINUTES
    fallback_size_mb: float = DEFAULT_FALLBACK_SIZE_MB
    speaker_labels: Optional[str] = None
    find_replace: Optional[str] = None


class AnalyzeVideoUseCase:
    def __init__(
        self,
        inference: InferencePort,
        materializer: SegmentMaterializerPort,
        probe: Optional[MediaProbePort] = None,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        dispatcher: Optional[SegmentDispatcher] = None,
    ):
        self._inference = inference
        self._materializer = materializer
        self._probe = probe
        self._dispatcher = dispatcher or SegmentDispatcher(
            inference, materializer, cooldown_seconds=cooldown_seconds
        )

    def execute(self, req: AnalyzeRequest, progress: Optional[ProgressPort] = None) -> AnalysisResult:
        """Run the full pipeline and return the merged analysis."""
        job_id = uuid.uuid4().hex[:12]
        progress = progress or LogProgressAdapter(job_id)
        hints = AnalysisHints(title=req.title, speaker_name=req.speaker_name, category=req.category)

        # 1. Describe the media
        duration = req.duration
        if duration is None and self._probe is not None:
            duration = self._probe.probe_duration(req.video_path)
        item = MediaItem(
            path=req.video_path,
            size_bytes=os.path.getsize(req.video_path),
            mime_type=req.mime_type,
            duration=duration,
        )
        logger.info(
            f"[{job_id}] {item.path}: {item.size_mb:.1f} MB, "
            f"duration={'unknown' if duration is None else f'{duration:.1f}s'}"
            f", model={self._inference.model_name()}"
        )

        # 2. Single call for media within service limits
        if not should_partition(item, req.max_size_mb, req.max_duration_minutes, req.fallback_size_mb):
            result = self._analyze_whole(item, hints, progress)
        else:
            result = self._analyze_segmented(item, hints, req.segment_minutes, progress)

        # 3. Optional transcript post-processing
        if req.speaker_labels:
            try:
                result.transcript = apply_speaker_labels(result.transcript, json.loads(req.speaker_labels))
            except ValueError as e:
                logger.warning(f"[{job_id}] Invalid speaker_labels, skipping: {e}")

        if req.find_replace:
            try:
                result.transcript = find_and_replace(result.transcript, json.loads(req.find_replace))
            except ValueError as e:
                logger.warning(f"[{job_id}] Invalid find_replace, skipping: {e}")

        logger.info(f"[{job_id}] Analysis complete: {len(result.transcript)} transcript entries")
        return result

    def _analyze_whole(self, item: MediaItem, hints: AnalysisHints, progress: ProgressPort) -> AnalysisResult:
        progress.report(ProgressUpdate(
            current_segment=1, total_segments=1, percent=0, status="Analyzing video...",
        ))
        segment = Segment(index=0, start=0.0, end=item.duration or 0.0, media=item)
        payload = self._materializer.materialize(segment)
        result = self._inference.analyze(payload, hints)
        result.transcript = [
            replace(entry, timestamp=adjust_timestamp(entry.timestamp, 0))
            for entry in result.transcript
        ]
        progress.report(ProgressUpdate(
            current_segment=1, total_segments=1, percent=100, status="Analysis complete",
        ))
        return result

    def _analyze_segmented(
        self,
        item: MediaItem,
        hints: AnalysisHints,
        segment_minutes: float,
        progress: ProgressPort,
    ) -> AnalysisResult:
        logger.info("Video is large, processing in segments")
        progress.report(ProgressUpdate(
            current_segment=0, total_segments=0, percent=0, status="Preparing video segments...",
        ))

        segments = plan_segments(item, segment_minutes, progress)
        if not segments:
            raise NothingToProcessError(f"{item.path} has zero duration")

        results = self._dispatcher.run_all(segments, hints, progress)

        progress.report(ProgressUpdate(
            current_segment=len(segments),
            total_segments=len(segments),
            percent=100,
            status="Merging transcripts...",
        ))
        merged = merge_results(results)
        merged.transcript = remove_boundary_duplicates(merged.transcript)
        return merged
