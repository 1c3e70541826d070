"""Post-processing for merged transcripts.

Functions for boundary deduplication, speaker label mapping and
find/replace on transcript entries.
"""

import re
import logging
from typing import List, Dict

from domain.models import TranscriptEntry

logger = logging.getLogger(__name__)

# Characters of text that go into a dedup fingerprint.
FINGERPRINT_CHARS = 20


def remove_boundary_duplicates(transcript: List[TranscriptEntry]) -> List[TranscriptEntry]:
    """Drop verbatim repeats introduced at segment boundaries.

    Each entry is fingerprinted by (timestamp, lower-cased first 20 chars of
    text). A repeated fingerprint only causes a drop when the immediately
    preceding entry in the input has the same timestamp and the same full
    text (case-insensitive). Two distinct utterances that merely start the
    same way are kept, so this does not guarantee zero duplicates.

    Args:
        transcript: Merged transcript entries in timeline order.

    Returns:
        A new list with boundary duplicates removed.
    """
    cleaned: List[TranscriptEntry] = []
    seen: set = set()
    dropped = 0

    for i, entry in enumerate(transcript):
        key = (entry.timestamp, entry.text[:FINGERPRINT_CHARS].lower())
        if key not in seen:
            seen.add(key)
            cleaned.append(entry)
            continue

        prev = transcript[i - 1] if i > 0 else None
        if (
            prev is not None
            and prev.timestamp == entry.timestamp
            and prev.text.lower() == entry.text.lower()
        ):
            dropped += 1
            continue
        cleaned.append(entry)

    if dropped:
        logger.info(f"Boundary dedup: dropped {dropped} duplicate entries")
    return cleaned


def _check_rules(rules) -> None:
    if not isinstance(rules, list):
        raise ValueError(f"find/replace rules must be a list, got {type(rules).__name__}")
    for i, rule in enumerate(rules):
        if not isinstance(rule, dict):
            raise ValueError(f"rule {i} must be an object, got {type(rule).__name__}")
        for key in ("find", "replace"):
            if not isinstance(rule.get(key, ""), str):
                raise ValueError(f"rule {i}: {key!r} must be a string")


def _check_labels(labels) -> None:
    if not isinstance(labels, dict):
        raise ValueError(f"speaker labels must be an object, got {type(labels).__name__}")
    for speaker, name in labels.items():
        if not isinstance(name, str):
            raise ValueError(f"label for {speaker!r} must be a string")


def find_and_replace(transcript: List[TranscriptEntry], rules: List[Dict[str, str]]) -> List[TranscriptEntry]:
    """Apply user-defined find/replace rules to entry text.

    Each rule is {"find": "pattern", "replace": "replacement"}.
    Find patterns are escaped for regex safety, then matched as whole words,
    case-insensitive.

    Raises:
        ValueError: rules are not a list of objects with string values.
            Nothing is modified in that case.

    Returns:
        The same entries with text modified in-place.
    """
    _check_rules(rules)
    compiled_rules = []
    for rule in rules:
        find = rule.get("find", "")
        replace = rule.get("replace", "")
        if find:
            pattern = re.compile(r"\b" + re.escape(find) + r"\b", re.IGNORECASE)
            # Callable replacement so backslashes in user text stay literal
            compiled_rules.append((pattern, lambda _m, r=replace: r))

    for entry in transcript:
        for pattern, replacement in compiled_rules:
            entry.text = pattern.sub(replacement, entry.text)

    return transcript


def apply_speaker_labels(transcript: List[TranscriptEntry], labels: Dict[str, str]) -> List[TranscriptEntry]:
    """Rename speakers using a user-supplied mapping, e.g. {"Speaker 1": "Alice"}.

    Raises ValueError, before touching any entry, if a label is not a string.
    """
    _check_labels(labels)
    for entry in transcript:
        if entry.speaker and entry.speaker in labels:
            entry.speaker = labels[entry.speaker]
    return transcript
