"""Segment planning: decide whether a video needs partitioning and compute its segments."""

import math
import logging
from typing import Optional

from domain.models import MediaItem, Segment, ProgressUpdate
from errors import MediaProbeError
from ports.progress import ProgressPort

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE_MB = 100
DEFAULT_MAX_DURATION_MINUTES = 60
# Used when duration is unknown; kept below DEFAULT_MAX_SIZE_MB so that
# unprobeable media is partitioned sooner rather than later.
DEFAULT_FALLBACK_SIZE_MB = 50
DEFAULT_SEGMENT_MINUTES = 15


def should_partition(
    item: MediaItem,
    max_size_mb: float = DEFAULT_MAX_SIZE_MB,
    max_duration_minutes: float = DEFAULT_MAX_DURATION_MINUTES,
    fallback_size_mb: float = DEFAULT_FALLBACK_SIZE_MB,
) -> bool:
    """Return True if the item is too large or too long for a single inference call.

    Size is checked first. If the duration is unknown, the decision falls
    back to the smaller fallback_size_mb threshold.
    """
    size_mb = item.size_mb
    if size_mb > max_size_mb:
        logger.info(f"Partitioning: {size_mb:.1f} MB exceeds {max_size_mb} MB")
        return True

    if item.duration is None:
        needed = size_mb > fallback_size_mb
        logger.info(
            f"Duration unknown, size {size_mb:.1f} MB vs fallback {fallback_size_mb} MB "
            f"-> partition={needed}"
        )
        return needed

    return item.duration / 60 > max_duration_minutes


def plan_segments(
    item: MediaItem,
    segment_minutes: float = DEFAULT_SEGMENT_MINUTES,
    progress: Optional[ProgressPort] = None,
) -> list[Segment]:
    """Split the item's timeline into contiguous segments of segment_minutes.

    The last segment ends exactly at the item's duration. A zero-duration
    item yields an empty list.

    Raises:
        MediaProbeError: the item has no known duration.
        ValueError: segment_minutes is not positive or the duration is negative.
    """
    if segment_minutes <= 0:
        raise ValueError(f"segment_minutes must be positive, got {segment_minutes}")
    if item.duration is None:
        raise MediaProbeError(f"Cannot plan segments for {item.path}: duration unknown")
    if item.duration < 0:
        raise ValueError(f"Media duration cannot be negative: {item.duration}")

    total = item.duration
    segment_seconds = segment_minutes * 60
    num_segments = math.ceil(total / segment_seconds)

    segments: list[Segment] = []
    for i in range(num_segments):
        start = i * segment_seconds
        end = min((i + 1) * segment_seconds, total)
        if progress:
            progress.report(ProgressUpdate(
                current_segment=i + 1,
                total_segments=num_segments,
                percent=(i + 1) / num_segments * 100,
                status=f"Creating segment {i + 1} of {num_segments}...",
            ))
        segments.append(Segment(index=i, start=start, end=end, media=item))

    logger.info(f"Planned {num_segments} segments of {segment_minutes} min for {total:.1f}s of media")
    return segments
