import pytest

from errors import InferenceError, MalformedTimestampError, NothingToProcessError
from use_cases.analyze import AnalyzeRequest, AnalyzeVideoUseCase
from conftest import FakeInference, FakeMaterializer, FakeProbe, make_result


def _request(video_file, **kwargs):
    params = dict(
        video_path=str(video_file),
        mime_type="video/mp4",
        title="Keynote",
        speaker_name="Ada",
        category="Tech",
        segment_minutes=10,
        max_duration_minutes=20,
    )
    params.update(kwargs)
    return AnalyzeRequest(**params)


def _use_case(inference, probe=None):
    return AnalyzeVideoUseCase(inference, FakeMaterializer(), probe=probe, cooldown_seconds=0)


def test_segmented_run_produces_continuous_timeline(video_file, progress):
    inference = FakeInference({
        0: make_result(("00:05", "first"), tags=["A"], summary="One."),
        1: make_result(("00:05", "second"), tags=["b"], summary="Two."),
        2: make_result(("00:05", "third"), tags=["B", "c"], summary="Three."),
    })
    result = _use_case(inference).execute(_request(video_file, duration=1500), progress)

    assert [e.timestamp for e in result.transcript] == ["00:05", "10:05", "20:05"]
    assert [e.text for e in result.transcript] == ["first", "second", "third"]
    assert result.metadata.tags == ["a", "b", "c"]
    assert result.metadata.summary == "One. Two. Three."
    assert result.metadata.title == "Talk"


def test_failed_segment_keeps_offsets(video_file, progress):
    inference = FakeInference({1: InferenceError("503")}, default=make_result(("00:05", "ok")))
    result = _use_case(inference).execute(_request(video_file, duration=1500), progress)

    assert [e.timestamp for e in result.transcript] == ["00:05", "20:05"]
    assert "Chunk 2 processing failed" in result.metadata.summary
    assert result.metadata.language == "English, Unknown"


def test_boundary_duplicates_removed_after_merge(video_file, progress):
    # The last line of segment 1 is reported again at the start of segment 2
    # and lands on the same merged timestamp.
    inference = FakeInference({
        0: make_result(("10:00", "Thanks for coming.")),
        1: make_result(("00:00", "Thanks for coming."), ("00:30", "Next topic.")),
        2: make_result(),
    })
    result = _use_case(inference).execute(_request(video_file, duration=1500), progress)
    assert [e.text for e in result.transcript] == ["Thanks for coming.", "Next topic."]
    assert [e.timestamp for e in result.transcript] == ["10:00", "10:30"]


def test_progress_sequence_for_segmented_run(video_file, progress):
    inference = FakeInference(default=make_result())
    _use_case(inference).execute(_request(video_file, duration=1500), progress)

    assert progress.statuses[0] == "Preparing video segments..."
    assert progress.statuses[1:4] == [f"Creating segment {i} of 3..." for i in (1, 2, 3)]
    assert progress.statuses[4:10] == [
        status
        for i in (1, 2, 3)
        for status in (f"Processing segment {i} of 3...", f"Segment {i} of 3 complete")
    ]
    assert progress.statuses[-1] == "Merging transcripts..."
    assert progress.updates[-1].percent == 100
    assert progress.completed == [(1, 3), (2, 3), (3, 3)]


def test_small_video_uses_single_call(video_file, progress):
    expected = make_result(("00:05", "hello"), ("00:05", "hello"))
    inference = FakeInference({0: expected})
    result = _use_case(inference).execute(_request(video_file, duration=120), progress)

    assert len(inference.calls) == 1
    assert inference.calls[0][1].title == "Keynote"
    # Single-call results skip merge and dedup.
    assert result is expected
    assert len(result.transcript) == 2


def test_single_call_failure_propagates(video_file, progress):
    inference = FakeInference({0: InferenceError("bad gateway")})
    with pytest.raises(InferenceError):
        _use_case(inference).execute(_request(video_file, duration=120), progress)


def test_single_call_timestamps_normalized(video_file, progress):
    inference = FakeInference({0: make_result(("0:05", "hi"), ("1:02.7", "there"), ("12:30", "bye"))})
    result = _use_case(inference).execute(_request(video_file, duration=120), progress)
    assert [e.timestamp for e in result.transcript] == ["00:05", "01:02", "12:30"]


def test_single_call_malformed_timestamp_raises(video_file, progress):
    inference = FakeInference({0: make_result(("00:75", "hi"))})
    with pytest.raises(MalformedTimestampError):
        _use_case(inference).execute(_request(video_file, duration=120), progress)


def test_duration_probed_when_unknown(video_file, progress):
    probe = FakeProbe(1500)
    inference = FakeInference(default=make_result())
    _use_case(inference, probe).execute(_request(video_file), progress)

    assert probe.probed == [str(video_file)]
    assert len(inference.calls) == 3


def test_zero_duration_has_nothing_to_process(video_file, progress):
    inference = FakeInference(default=make_result())
    req = _request(video_file, duration=0, max_size_mb=0)
    with pytest.raises(NothingToProcessError):
        _use_case(inference).execute(req, progress)
    assert inference.calls == []


def test_post_processing_options(video_file, progress):
    inference = FakeInference({0: make_result(("00:01", "Welcome to jemini day"))})
    req = _request(
        video_file,
        duration=60,
        speaker_labels='{"Speaker 1": "Ada"}',
        find_replace='[{"find": "jemini", "replace": "Gemini"}]',
    )
    result = _use_case(inference).execute(req, progress)

    assert result.transcript[0].speaker == "Ada"
    assert result.transcript[0].text == "Welcome to Gemini day"


def test_invalid_post_processing_json_is_skipped(video_file, progress):
    inference = FakeInference({0: make_result(("00:01", "Hi"))})
    req = _request(video_file, duration=60, speaker_labels="{not json", find_replace="[")
    result = _use_case(inference).execute(req, progress)
    assert result.transcript[0].speaker == "Speaker 1"


@pytest.mark.parametrize("options", [
    {"find_replace": '["jemini"]'},
    {"find_replace": '[{"find": "Hi", "replace": 5}]'},
    {"find_replace": '{"find": "Hi", "replace": "Hello"}'},
    {"speaker_labels": '{"Speaker 1": 5}'},
    {"speaker_labels": '["Ada"]'},
])
def test_wrongly_shaped_post_processing_is_skipped(video_file, progress, caplog, options):
    inference = FakeInference({0: make_result(("00:01", "Hi"))})
    req = _request(video_file, duration=60, **options)
    with caplog.at_level("WARNING"):
        result = _use_case(inference).execute(req, progress)

    assert result.transcript[0].speaker == "Speaker 1"
    assert result.transcript[0].text == "Hi"
    assert "skipping" in caplog.text


def test_valid_option_applied_when_other_is_malformed(video_file, progress):
    inference = FakeInference({0: make_result(("00:01", "Hi"))})
    req = _request(
        video_file,
        duration=60,
        speaker_labels='{"Speaker 1": 5}',
        find_replace='[{"find": "Hi", "replace": "Hello"}]',
    )
    result = _use_case(inference).execute(req, progress)
    assert result.transcript[0].speaker == "Speaker 1"
    assert result.transcript[0].text == "Hello"


def test_default_progress_is_logged(video_file, caplog):
    inference = FakeInference(default=make_result())
    with caplog.at_level("INFO"):
        _use_case(inference).execute(_request(video_file, duration=1500))
    assert "Merging transcripts..." in caplog.text


def test_model_name_is_logged(video_file, progress, caplog):
    inference = FakeInference(default=make_result())
    with caplog.at_level("INFO"):
        _use_case(inference).execute(_request(video_file, duration=120), progress)
    assert "model=fake-model" in caplog.text
