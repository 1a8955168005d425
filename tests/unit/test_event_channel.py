"""Unit tests for event sinks and wire framing."""

import json
import threading

import pytest

from orchestrator.channel import CallbackSink, EventChannel, encode_ndjson, encode_sse
from orchestrator.exceptions import ChannelClosedError
from orchestrator.models import CompleteEvent, FailureEvent, ProgressEvent


def _progress(n):
    return ProgressEvent(message=f"step {n}", step=n, total_steps=10, tools_used=["analyze_job"])


@pytest.mark.unit
def test_progress_frame_is_flat_camel_case():
    frame = json.loads(encode_ndjson(_progress(1)))

    assert frame == {
        "type": "progress",
        "message": "step 1",
        "step": 1,
        "totalSteps": 10,
        "toolsUsed": ["analyze_job"],
    }


@pytest.mark.unit
def test_terminal_frames():
    complete = json.loads(encode_ndjson(CompleteEvent(payload={"a": 1}, execution_time_ms=12)))
    error = json.loads(encode_ndjson(FailureEvent(error="quota exceeded", execution_time_ms=3)))

    assert complete["type"] == "complete" and complete["success"] is True
    assert complete["executionTimeMs"] == 12
    assert error == {"type": "error", "success": False, "error": "quota exceeded",
                     "executionTimeMs": 3, "toolsUsed": []}


@pytest.mark.unit
def test_frame_encodings_are_one_line_each():
    event = _progress(2)

    assert encode_ndjson(event).count("\n") == 1
    sse = encode_sse(event)
    assert sse.startswith("data: {") and sse.endswith("\n\n")


@pytest.mark.unit
def test_channel_preserves_order_and_stops_after_terminal():
    channel = EventChannel()
    for n in range(3):
        channel.emit(_progress(n))
    channel.emit(CompleteEvent(execution_time_ms=1))

    events = list(channel)

    assert [e.type for e in events] == ["progress"] * 3 + ["complete"]
    assert [e.step for e in events[:3]] == [0, 1, 2]
    assert channel.closed


@pytest.mark.unit
def test_emit_after_terminal_raises():
    channel = EventChannel()
    channel.emit(FailureEvent(error="x", execution_time_ms=0))

    with pytest.raises(ChannelClosedError):
        channel.emit(_progress(1))


@pytest.mark.unit
def test_channel_across_threads():
    channel = EventChannel()

    def produce():
        for n in range(5):
            channel.emit(_progress(n))
        channel.emit(CompleteEvent(execution_time_ms=1))

    t = threading.Thread(target=produce)
    t.start()
    events = list(channel)
    t.join()

    assert [e.type for e in events][-1] == "complete"
    assert len(events) == 6


@pytest.mark.unit
def test_callback_sink():
    got = []
    CallbackSink(got.append).emit(_progress(1))

    assert got[0].step == 1
