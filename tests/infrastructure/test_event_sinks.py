"""Event sink tests — outbox buffering, fan-out isolation and log records."""

import logging

from voting.infrastructure.event_sinks import (
    CompositeEventSink, LoggingEventSink, RecordingEventSink,
)


class _FailingSink:
    def emit(self, event_name, payload):
        raise ConnectionError("broker unreachable")


def test_recording_sink_keeps_order():
    sink = RecordingEventSink()
    sink.emit("VoterRegistered", {"principal": "alice"})
    sink.emit("VoterRegistered", {"principal": "bob"})
    assert [e.payload["principal"] for e in sink.pending] == ["alice", "bob"]


def test_recording_sink_copies_payload():
    sink = RecordingEventSink()
    payload = {"proposal_id": 0}
    sink.emit("ProposalRegistered", payload)
    payload["proposal_id"] = 9
    assert sink.pending[0].payload == {"proposal_id": 0}


def test_partial_clear_keeps_later_events():
    sink = RecordingEventSink()
    for i in range(3):
        sink.emit("VoteCast", {"proposal_id": i})
    sink.clear(2)
    assert [e.payload["proposal_id"] for e in sink.pending] == [2]
    sink.clear()
    assert sink.pending == []


def test_composite_delivers_past_failing_sink(caplog):
    recorder = RecordingEventSink()
    composite = CompositeEventSink(_FailingSink(), recorder)
    with caplog.at_level(logging.WARNING):
        composite.emit("VoteCast", {"voter": "alice", "proposal_id": 0})
    assert len(recorder.pending) == 1
    assert "_FailingSink failed on VoteCast" in caplog.text


def test_logging_sink_writes_structured_record(caplog):
    sink = LoggingEventSink("election-1")
    with caplog.at_level(logging.INFO, logger="voting.infrastructure.event_sinks"):
        sink.emit("WorkflowStatusChanged", {"previous": "a", "next": "b"})
    record = caplog.records[-1]
    assert record.event == "WorkflowStatusChanged"
    assert record.election_id == "election-1"
    assert record.payload == {"previous": "a", "next": "b"}
