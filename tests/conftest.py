"""Shared fakes for the pipeline ports."""

import pytest

from domain.models import AnalysisResult, Metadata, TranscriptEntry, SegmentPayload
from errors import InferenceError
from ports.inference import InferencePort
from ports.media import MediaProbePort, SegmentMaterializerPort
from ports.progress import ProgressPort


def make_result(*entries, language="English", tags=None, summary="A talk.", title="Talk"):
    """Build an AnalysisResult from (timestamp, text) pairs."""
    return AnalysisResult(
        metadata=Metadata(
            title=title,
            speaker_name="Ada",
            category="Education",
            language=language,
            tags=list(tags or []),
            summary=summary,
        ),
        transcript=[
            TranscriptEntry(timestamp=ts, speaker="Speaker 1", text=text, tone="calm", intent="inform")
            for ts, text in entries
        ],
    )


class FakeInference(InferencePort):
    """Returns scripted results per segment index; an Exception entry is raised."""

    def __init__(self, responses=None, default=None):
        self.responses = responses or {}
        self.default = default
        self.calls = []

    def analyze(self, payload, hints):
        self.calls.append((payload, hints))
        response = self.responses.get(payload.segment_index, self.default)
        if isinstance(response, Exception):
            raise response
        if response is None:
            raise InferenceError("no scripted response")
        return response

    def model_name(self):
        return "fake-model"


class FakeMaterializer(SegmentMaterializerPort):
    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.materialized = []

    def materialize(self, segment):
        if segment.index in self.fail_on:
            raise OSError(f"cannot read segment {segment.index}")
        self.materialized.append(segment.index)
        return SegmentPayload(data="ZmFrZQ==", mime_type=segment.media.mime_type, segment_index=segment.index)


class FakeProbe(MediaProbePort):
    def __init__(self, duration):
        self.duration = duration
        self.probed = []

    def probe_duration(self, path):
        self.probed.append(path)
        return self.duration


class RecordingProgress(ProgressPort):
    def __init__(self):
        self.updates = []
        self.completed = []

    def report(self, update):
        self.updates.append(update)

    def segment_complete(self, segment_number, total_segments):
        self.completed.append((segment_number, total_segments))

    @property
    def statuses(self):
        return [u.status for u in self.updates]


@pytest.fixture
def progress():
    return RecordingProgress()


@pytest.fixture
def video_file(tmp_path):
    path = tmp_path / "talk.mp4"
    path.write_bytes(b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 1024)
    return path
