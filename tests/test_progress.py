"""Tests for the simulated draft progress stream."""

from __future__ import annotations

import threading

import pytest

from newsbloggen.progress import ProgressStream, draft_steps


@pytest.mark.unit
class TestProgressStream:
    def test_steps_then_completion(self) -> None:
        events = []
        all_steps = threading.Event()

        def collect(event) -> None:
            events.append(event)
            if event.percent == 70:
                all_steps.set()

        stream = ProgressStream(draft_steps("AI"), [collect], interval=0.0)
        stream.start()
        assert all_steps.wait(timeout=5)
        stream.finish(success=True)

        assert [e.percent for e in events] == [10, 30, 50, 70, 100]
        assert events[1].message == 'Searching for "AI"...'
        assert events[-1].done is True

    def test_finish_stops_pending_steps(self) -> None:
        events = []
        stream = ProgressStream(draft_steps("AI"), [events.append], interval=60.0)
        stream.start()
        stream.finish(success=False, message="boom")

        assert len(events) == 1
        assert events[0].failed is True
        assert events[0].message == "boom"

    def test_finish_is_idempotent(self) -> None:
        events = []
        stream = ProgressStream(draft_steps("AI"), [events.append], interval=60.0)
        stream.finish(success=True)
        stream.finish(success=False)
        assert [e.percent for e in events] == [100]

    def test_broken_subscriber_does_not_block_others(self) -> None:
        events = []

        def broken(_event) -> None:
            raise RuntimeError("subscriber bug")

        stream = ProgressStream(draft_steps("AI"), [broken, events.append], interval=60.0)
        stream.finish(success=True)
        assert len(events) == 1
