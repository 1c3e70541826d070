"""Exception hierarchy for the video analysis pipeline."""


class VideoAnalysisError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(VideoAnalysisError):
    """Missing or invalid service configuration (e.g. no API key). Fatal."""


class InferenceError(VideoAnalysisError):
    """The inference service could not produce a usable result."""


class MediaProbeError(VideoAnalysisError):
    """Media duration could not be determined where it is required."""


class NothingToProcessError(VideoAnalysisError):
    """The media item has zero duration, so there are no segments to dispatch."""


class EmptyMergeError(VideoAnalysisError, ValueError):
    """merge_results() was called with no per-segment results."""


class MalformedTimestampError(VideoAnalysisError, ValueError):
    """A transcript timestamp does not match MM:SS."""

    def __init__(self, timestamp: str):
        super().__init__(f"Malformed timestamp: {timestamp!r} (expected MM:SS)")
        self.timestamp = timestamp
