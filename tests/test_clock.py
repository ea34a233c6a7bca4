"""
Clock, Turn Id and Observability Tests
"""

from datetime import datetime, timezone
import re

import pytest

from fractal_journal.contracts.base import ErrorCode, FractalJournalError
from fractal_journal.contracts.events import AuditEventType
from fractal_journal.observability import MetricType, ObservabilityLayer
from fractal_journal.temporal.clock import (
    ClockExhausted, LogicalClock, random_turn_id, sequential_turn_ids,
)
from tests.fixtures import EPOCH, EPOCH_ISO, make_engine


class TestLogicalClock:

    def test_replay_returns_ticks_in_order(self):
        later = datetime(2026, 1, 1, 12, 30, 5, tzinfo=timezone.utc)
        clock = LogicalClock.replay([EPOCH, later])
        assert clock.timestamp() == EPOCH_ISO
        assert clock.timestamp() == "2026-01-01T12:30:05Z"
        assert clock.tick_count() == 2
        assert not clock.is_live()

    def test_replay_exhaustion(self):
        clock = LogicalClock.replay([EPOCH])
        clock.now()
        with pytest.raises(ClockExhausted):
            clock.now()

    def test_live_timestamp_format(self):
        clock = LogicalClock.live()
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z", clock.timestamp())
        assert clock.is_live()

    def test_live_ticks_replay(self):
        live = LogicalClock.live()
        recorded = [live.now(), live.now()]

        replay = LogicalClock.replay(live.ticks)
        assert [replay.now(), replay.now()] == recorded

    def test_exhaustion_is_a_coded_error(self):
        with pytest.raises(FractalJournalError) as exc:
            LogicalClock.replay([]).now()
        assert exc.value.code == ErrorCode.CLOCK_EXHAUSTED


class TestTurnIds:

    def test_sequential(self):
        next_id = sequential_turn_ids(prefix="t", start=41)
        assert [next_id(), next_id()] == ["t-000041", "t-000042"]

    def test_random_ids_are_unique_uuids(self):
        first, second = random_turn_id(), random_turn_id()
        assert first != second
        assert re.fullmatch(r"[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[0-9a-f]{4}-[0-9a-f]{12}", first)


class TestObservability:

    def test_aggregates(self):
        layer = ObservabilityLayer()
        for value in (1.0, 2.0, 6.0):
            layer.metrics.record("turn_entropy", value, {"timeline": "1"})

        aggregates = layer.metrics.compute_aggregates("turn_entropy")
        assert aggregates["count"] == 3
        assert aggregates["max"] == 6.0
        assert aggregates["avg"] == pytest.approx(3.0)
        assert layer.metrics.compute_aggregates("power_law_alpha") == {}
        assert layer.metrics.definition("turn_entropy").metric_type == MetricType.HISTOGRAM

    def test_collector_filtering(self):
        layer = ObservabilityLayer()
        journal = layer.collector("journal")
        journal.record(AuditEventType.TURN, "turn_journaled", entity_id="turn-000000")
        journal.record(AuditEventType.ERROR, "journal_write_failed", metadata={"error": "x"})

        assert layer.collector("journal") is journal
        assert [e.action for e in journal.get_entries(AuditEventType.ERROR)] == ["journal_write_failed"]
        assert journal.get_entries()[0].entry_id == "journal-000000"
        assert len(layer.all_entries()) == 2

    def test_engine_records_startup(self):
        engine = make_engine()
        actions = [e.action for e in engine.observability.collector("engine").get_entries()]
        assert actions == ["engine_started"]
