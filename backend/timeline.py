"""Timeline merging of per-segment analysis results.

Each segment is analyzed independently, so its transcript timestamps start
at 00:00. Merging shifts every timestamp by the cumulative duration of the
preceding segments and folds the per-segment metadata together.
"""

import re
import math
import logging
from dataclasses import replace
from typing import Iterable, Sequence

from domain.models import AnalysisResult, Metadata, TranscriptEntry
from errors import EmptyMergeError, MalformedTimestampError

logger = logging.getLogger(__name__)

MAX_TAGS = 15

# Seconds are two digits, 00-59, optionally fractional. Minutes are unbounded.
_TIMESTAMP = re.compile(r"^\s*(\d+):([0-5]\d(?:\.\d+)?)\s*$")


def parse_timestamp(timestamp: str) -> float:
    """Parse MM:SS (minutes unbounded) into seconds."""
    match = _TIMESTAMP.match(timestamp or "")
    if not match:
        raise MalformedTimestampError(timestamp)
    minutes, seconds = match.groups()
    return int(minutes) * 60 + float(seconds)


def format_timestamp(total_seconds: float) -> str:
    """Format seconds as MM:SS. Minutes are not wrapped into hours."""
    minutes = math.floor(total_seconds / 60)
    seconds = math.floor(total_seconds % 60)
    return f"{minutes:02d}:{seconds:02d}"


def adjust_timestamp(timestamp: str, offset_seconds: float) -> str:
    return format_timestamp(parse_timestamp(timestamp) + offset_seconds)


def merge_tags(tag_lists: Iterable[list[str]], limit: int = MAX_TAGS) -> list[str]:
    """Lower-cased union of all tags in first-seen order, capped at limit."""
    merged: dict[str, None] = {}
    for tags in tag_lists:
        for tag in tags:
            merged.setdefault(tag.lower(), None)
    return list(merged)[:limit]


def merge_languages(languages: Iterable[str]) -> str:
    """Union of comma-separated language names, trimmed, first-seen order.

    Distinctness is case-sensitive: "Spanish" and "spanish" are both kept.
    """
    merged: dict[str, None] = {}
    for language in languages:
        for name in (language or "").split(","):
            name = name.strip()
            if name:
                merged.setdefault(name, None)
    return ", ".join(merged)


def merge_summaries(summaries: Iterable[str]) -> str:
    """Distinct summaries joined with a single space, first-seen order."""
    return " ".join(dict.fromkeys(summaries))


def merge_results(results: Sequence[tuple[AnalysisResult, float]]) -> AnalysisResult:
    """Merge (result, segment_duration) pairs into one result on a single timeline.

    Offsets come from the durations supplied alongside each result, never
    from the transcript contents, so empty placeholder results still
    advance the timeline.

    Raises:
        EmptyMergeError: no results were supplied.
        MalformedTimestampError: a transcript entry has a non MM:SS timestamp.
    """
    if not results:
        raise EmptyMergeError("No segment results to merge")

    base = results[0][0].metadata
    transcript: list[TranscriptEntry] = []
    offset = 0.0

    for result, duration in results:
        for entry in result.transcript:
            transcript.append(replace(entry, timestamp=adjust_timestamp(entry.timestamp, offset)))
        offset += duration

    metadata = Metadata(
        title=base.title,
        speaker_name=base.speaker_name,
        category=base.category,
        language=merge_languages(r.metadata.language for r, _ in results),
        tags=merge_tags(r.metadata.tags for r, _ in results),
        summary=merge_summaries(r.metadata.summary for r, _ in results),
    )

    logger.info(
        f"Merged {len(results)} segment results: {len(transcript)} entries, "
        f"{offset:.1f}s total"
    )
    return AnalysisResult(metadata=metadata, transcript=transcript)
