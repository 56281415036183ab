"""Tests for ProgressTracker — recording, retries, ordering and progress queries."""

from __future__ import annotations

import threading
from datetime import date, datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest

from assessment_engine.exceptions import NoDataError, StoreUnavailableError
from assessment_engine.models.enums import Timeframe
from assessment_engine.models.result import CalculationResult
from assessment_engine.tracking.dispatcher import OrderedWriteDispatcher
from assessment_engine.tracking.store import InMemoryHistoryStore
from assessment_engine.tracking.tracker import ProgressTracker


def _result(value: float) -> CalculationResult:
    return CalculationResult(value=value, unit="ml/kg/min", interpretation="", category="good")


@pytest.fixture
def failing_store() -> MagicMock:
    store = MagicMock()
    store.query.return_value = []
    return store


class _StallingDispatcher(OrderedWriteDispatcher):
    """Holds the first submit until released."""

    def __init__(self) -> None:
        super().__init__(max_workers=2)
        self.entered = threading.Event()
        self.release = threading.Event()
        self._stalled = False

    def submit(self, key, fn, *args):
        if not self._stalled:
            self._stalled = True
            self.entered.set()
            self.release.wait(timeout=5)
        return super().submit(key, fn, *args)


# ---------------------------------------------------------------------------
# record
# ---------------------------------------------------------------------------


class TestRecord:
    def test_persists_with_clock_timestamp(
        self, tracker: ProgressTracker, store: InMemoryHistoryStore, clock
    ) -> None:
        record = tracker.record("u1", "cooper_test", _result(42.4), {"distance": 2400})
        assert record.timestamp == clock.now
        assert record.inputs_snapshot["distance"] == 2400
        assert store.query("u1", "cooper_test") == [record]

    def test_timestamps_strictly_increase_on_same_instant(
        self, tracker: ProgressTracker, clock
    ) -> None:
        first = tracker.record("u1", "cooper_test", _result(42.0))
        second = tracker.record("u1", "cooper_test", _result(43.0))
        assert second.timestamp > first.timestamp
        assert second.timestamp - first.timestamp == timedelta(microseconds=1)

    def test_clock_going_backwards_still_increases(self, tracker: ProgressTracker, clock) -> None:
        first = tracker.record("u1", "cooper_test", _result(42.0))
        clock.advance(hours=-1)
        second = tracker.record("u1", "cooper_test", _result(43.0))
        assert second.timestamp > first.timestamp

    def test_keys_are_independent(self, tracker: ProgressTracker, clock) -> None:
        a = tracker.record("u1", "cooper_test", _result(42.0))
        b = tracker.record("u2", "cooper_test", _result(43.0))
        assert a.timestamp == b.timestamp == clock.now

    def test_seeds_last_timestamp_from_store(
        self, store: InMemoryHistoryStore, clock
    ) -> None:
        earlier = ProgressTracker(store, clock=clock)
        existing = earlier.record("u1", "cooper_test", _result(42.0))
        clock.advance(days=-2)

        fresh = ProgressTracker(store, clock=clock)
        record = fresh.record("u1", "cooper_test", _result(43.0))
        assert record.timestamp > existing.timestamp


class TestRetries:
    def test_retries_rejected_write(self, failing_store: MagicMock, clock) -> None:
        failing_store.append.side_effect = [False, False, True]
        tracker = ProgressTracker(failing_store, clock=clock, max_retries=2, backoff_s=0.5)
        with patch("assessment_engine.tracking.tracker.time.sleep") as mock_sleep:
            tracker.record("u1", "cooper_test", _result(42.0))
        assert failing_store.append.call_count == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [0.5, 1.0]

    def test_gives_up_and_attaches_record(self, failing_store: MagicMock, clock) -> None:
        failing_store.append.return_value = False
        tracker = ProgressTracker(failing_store, clock=clock, max_retries=2)
        with patch("assessment_engine.tracking.tracker.time.sleep"):
            with pytest.raises(StoreUnavailableError, match="after 3 attempt") as excinfo:
                tracker.record("u1", "cooper_test", _result(42.0))
        assert excinfo.value.record is not None
        assert excinfo.value.record.value == 42.0

    def test_store_unavailable_is_retried(self, failing_store: MagicMock, clock) -> None:
        failing_store.append.side_effect = [StoreUnavailableError("busy"), True]
        tracker = ProgressTracker(failing_store, clock=clock)
        with patch("assessment_engine.tracking.tracker.time.sleep"):
            tracker.record("u1", "cooper_test", _result(42.0))
        assert failing_store.append.call_count == 2

    def test_unexpected_error_is_not_retried(self, failing_store: MagicMock, clock) -> None:
        failing_store.append.side_effect = RuntimeError("schema mismatch")
        tracker = ProgressTracker(failing_store, clock=clock)
        with patch("assessment_engine.tracking.tracker.time.sleep") as mock_sleep:
            with pytest.raises(StoreUnavailableError, match="schema mismatch") as excinfo:
                tracker.record("u1", "cooper_test", _result(42.0))
        assert failing_store.append.call_count == 1
        mock_sleep.assert_not_called()
        assert excinfo.value.record is not None


class TestBackgroundWrites:
    def test_writes_land_in_order(self, store: InMemoryHistoryStore, clock) -> None:
        dispatcher = OrderedWriteDispatcher(max_workers=2)
        tracker = ProgressTracker(store, clock=clock, dispatcher=dispatcher)
        try:
            records = []
            for i in range(10):
                records.append(tracker.record("u1", "cooper_test", _result(40.0 + i)))
                clock.advance(minutes=1)
            assert dispatcher.flush(timeout=5)
        finally:
            dispatcher.shutdown()
        assert store.query("u1", "cooper_test") == records

    def test_interleaved_records_reach_store_in_timestamp_order(
        self, store: InMemoryHistoryStore, clock
    ) -> None:
        dispatcher = _StallingDispatcher()
        tracker = ProgressTracker(store, clock=clock, dispatcher=dispatcher)
        issued = {}

        def record(value: float) -> None:
            issued[value] = tracker.record("u1", "cooper_test", _result(value))

        first = threading.Thread(target=record, args=(1.0,))
        second = threading.Thread(target=record, args=(2.0,))
        try:
            first.start()
            assert dispatcher.entered.wait(timeout=5)
            second.start()
            # The second record must wait for the first to be queued
            second.join(timeout=0.2)
            assert second.is_alive()
            dispatcher.release.set()
            first.join(timeout=5)
            second.join(timeout=5)
            assert dispatcher.flush(timeout=5)
        finally:
            dispatcher.release.set()
            dispatcher.shutdown()

        assert issued[1.0].timestamp < issued[2.0].timestamp
        assert [r.value for r in store.query("u1", "cooper_test")] == [1.0, 2.0]

    def test_failure_reaches_callback_and_future(self, failing_store: MagicMock, clock) -> None:
        failing_store.append.return_value = False
        errors: list[StoreUnavailableError] = []
        dispatcher = OrderedWriteDispatcher(max_workers=1)
        tracker = ProgressTracker(
            failing_store,
            clock=clock,
            max_retries=0,
            dispatcher=dispatcher,
            on_error=errors.append,
        )
        try:
            record, future = tracker.record_async("u1", "cooper_test", _result(42.0))
            with pytest.raises(StoreUnavailableError):
                future.result(timeout=2)
        finally:
            dispatcher.shutdown()
        assert len(errors) == 1
        assert errors[0].record == record

    def test_sync_mode_future_is_resolved(self, tracker: ProgressTracker) -> None:
        record, future = tracker.record_async("u1", "cooper_test", _result(42.0))
        assert future.done()
        assert future.result() == record

    def test_abandon_without_dispatcher(self, tracker: ProgressTracker) -> None:
        assert tracker.abandon_pending("u1", "cooper_test") == 0


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class TestGetProgress:
    def test_timeframe_window(self, tracker: ProgressTracker, clock) -> None:
        old = tracker.record("u1", "cooper_test", _result(40.0))
        clock.advance(days=5)
        mid = tracker.record("u1", "cooper_test", _result(41.0))
        clock.advance(days=3)
        new = tracker.record("u1", "cooper_test", _result(42.0))

        assert tracker.get_progress("u1", "cooper_test", Timeframe.WEEK) == [mid, new]
        assert tracker.get_progress("u1", "cooper_test", "month") == [old, mid, new]

    def test_other_protocols_excluded(self, tracker: ProgressTracker) -> None:
        tracker.record("u1", "one_rep_max", _result(110.0))
        assert tracker.get_progress("u1", "cooper_test", "year") == []

    def test_unknown_timeframe(self, tracker: ProgressTracker) -> None:
        with pytest.raises(ValueError):
            tracker.get_progress("u1", "cooper_test", "decade")

    def test_trend(self, tracker: ProgressTracker, clock) -> None:
        for value in (40.0, 41.0, 42.0):
            tracker.record("u1", "cooper_test", _result(value))
            clock.advance(days=7)
        clock.advance(days=-7)
        trend = tracker.get_trend("u1", "cooper_test", "month")
        assert trend.count == 3
        assert trend.slope_per_week == pytest.approx(1.0)
        assert trend.improving is True


class TestCompareResults:
    @pytest.fixture
    def history(self, tracker: ProgressTracker, clock):
        """Records on 1 Mar (40.0), 8 Mar (43.0) and 15 Mar (43.0)."""
        records = []
        for value in (40.0, 43.0, 43.0):
            records.append(tracker.record("u1", "cooper_test", _result(value)))
            clock.advance(days=7)
        return records

    def test_delta_between_dates(self, tracker: ProgressTracker, history) -> None:
        comparison = tracker.compare_results(
            "u1", "cooper_test", date(2026, 3, 1), date(2026, 3, 9)
        )
        assert comparison.record1 == history[0]
        assert comparison.record2 == history[1]
        assert comparison.delta == pytest.approx(3.0)
        assert comparison.improved is True

    def test_uses_latest_record_at_or_before(self, tracker: ProgressTracker, history) -> None:
        comparison = tracker.compare_results(
            "u1", "cooper_test", date(2026, 3, 7), date(2026, 3, 20)
        )
        assert comparison.record1 == history[0]
        assert comparison.record2 == history[2]

    def test_reversed_dates_give_negative_delta(self, tracker: ProgressTracker, history) -> None:
        comparison = tracker.compare_results(
            "u1", "cooper_test", date(2026, 3, 9), date(2026, 3, 1)
        )
        assert comparison.delta == pytest.approx(-3.0)
        assert comparison.improved is False

    def test_lower_is_better(self, tracker: ProgressTracker, history) -> None:
        comparison = tracker.compare_results(
            "u1", "cooper_test", date(2026, 3, 9), date(2026, 3, 1), higher_is_better=False
        )
        assert comparison.improved is True

    def test_unchanged_value(self, tracker: ProgressTracker, history) -> None:
        comparison = tracker.compare_results(
            "u1", "cooper_test", date(2026, 3, 9), date(2026, 3, 16)
        )
        assert comparison.delta == 0
        assert comparison.improved is None

    def test_naive_datetime_treated_as_utc(self, tracker: ProgressTracker, history) -> None:
        comparison = tracker.compare_results(
            "u1", "cooper_test", datetime(2026, 3, 1, 9, 0), datetime(2026, 3, 8, 9, 0)
        )
        assert comparison.record1 == history[0]
        assert comparison.record2 == history[1]

    def test_aware_datetime_converted(self, tracker: ProgressTracker, history) -> None:
        plus_two = timezone(timedelta(hours=2))
        comparison = tracker.compare_results(
            "u1",
            "cooper_test",
            datetime(2026, 3, 1, 11, 0, tzinfo=plus_two),
            datetime(2026, 3, 1, 12, 0, tzinfo=plus_two),
        )
        assert comparison.record1 == comparison.record2 == history[0]

    def test_no_record_before_date(self, tracker: ProgressTracker, history) -> None:
        with pytest.raises(NoDataError):
            tracker.compare_results("u1", "cooper_test", date(2026, 2, 28), date(2026, 3, 9))

    def test_no_history(self, tracker: ProgressTracker) -> None:
        with pytest.raises(NoDataError):
            tracker.compare_results("u9", "cooper_test", date(2026, 3, 1), date(2026, 3, 9))
