"""ProgressTracker — records results and answers progress/comparison queries.

Persistence goes through an externally supplied HistoryStore. The tracker
keeps only the last timestamp issued per (user, protocol) key so it can
guarantee strictly increasing timestamps.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future
from datetime import date, datetime, time as dt_time, timedelta, timezone
from typing import Any, Callable, Mapping

from assessment_engine.exceptions import NoDataError, StoreUnavailableError
from assessment_engine.models.enums import TIMEFRAME_DAYS, Timeframe
from assessment_engine.models.record import AssessmentRecord, ProgressComparison, TrendSummary
from assessment_engine.models.result import CalculationResult
from assessment_engine.tracking.dispatcher import OrderedWriteDispatcher
from assessment_engine.tracking.store import HistoryStore
from assessment_engine.tracking.trend import summarize_trend

logger = logging.getLogger(__name__)

_MAX_RETRIES = 2
_BASE_BACKOFF_S = 0.5
_TIMESTAMP_STEP = timedelta(microseconds=1)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProgressTracker:
    """Append-only progress tracking over an external history store.

    Usage:
        tracker = ProgressTracker(InMemoryHistoryStore())
        record = tracker.record("u1", "cooper_test", result, inputs_snapshot)
        history = tracker.get_progress("u1", "cooper_test", Timeframe.MONTH)

    With ``dispatcher`` set, writes happen in the background, serialized per
    (user, protocol) key; failures reach ``on_error`` and the returned future.
    Records for one key reach the store in timestamp order in both modes.
    """

    def __init__(
        self,
        store: HistoryStore,
        clock: Callable[[], datetime] = _utc_now,
        max_retries: int = _MAX_RETRIES,
        backoff_s: float = _BASE_BACKOFF_S,
        dispatcher: OrderedWriteDispatcher | None = None,
        on_error: Callable[[StoreUnavailableError], None] | None = None,
    ) -> None:
        self.store = store
        self._clock = clock
        self._max_retries = max_retries
        self._backoff_s = backoff_s
        self._dispatcher = dispatcher
        self._on_error = on_error
        self._last_timestamps: dict[tuple[str, str], datetime] = {}
        self._key_locks: dict[tuple[str, str], threading.Lock] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record(
        self,
        user_id: str,
        protocol_id: str,
        result: CalculationResult,
        inputs_snapshot: Mapping[str, Any] | None = None,
    ) -> AssessmentRecord:
        """Create a record with a fresh timestamp and persist it.

        Returns the record immediately in background mode; use
        :meth:`record_async` to also get the write's future.

        Raises:
            StoreUnavailableError: Synchronous mode only, when the store
                rejects the write after retries. ``exc.record`` holds the
                record so the result is not lost.
        """
        record, _ = self._record(user_id, protocol_id, result, inputs_snapshot)
        return record

    def record_async(
        self,
        user_id: str,
        protocol_id: str,
        result: CalculationResult,
        inputs_snapshot: Mapping[str, Any] | None = None,
    ) -> tuple[AssessmentRecord, Future]:
        """Like :meth:`record` but also returns the persistence future.

        In synchronous mode the future is already resolved.
        """
        return self._record(user_id, protocol_id, result, inputs_snapshot)

    def abandon_pending(self, user_id: str, protocol_id: str) -> int:
        """Cancel background writes for the key that have not reached the store."""
        if self._dispatcher is None:
            return 0
        return self._dispatcher.abandon((user_id, protocol_id))

    def _record(
        self,
        user_id: str,
        protocol_id: str,
        result: CalculationResult,
        inputs_snapshot: Mapping[str, Any] | None,
    ) -> tuple[AssessmentRecord, Future]:
        key = (user_id, protocol_id)
        # Timestamp order must match store order for the key
        with self._key_lock(key):
            record = AssessmentRecord(
                protocol_id=protocol_id,
                timestamp=self._next_timestamp(user_id, protocol_id),
                inputs_snapshot=dict(inputs_snapshot or {}),
                result=result,
            )

            if self._dispatcher is not None:
                future = self._dispatcher.submit(
                    key, self._persist_reporting, user_id, record
                )
                return record, future

            self._persist(user_id, record)
        done: Future = Future()
        done.set_result(record)
        return record, done

    def _key_lock(self, key: tuple[str, str]) -> threading.Lock:
        with self._lock:
            return self._key_locks.setdefault(key, threading.Lock())

    def _next_timestamp(self, user_id: str, protocol_id: str) -> datetime:
        key = (user_id, protocol_id)
        with self._lock:
            last = self._last_timestamps.get(key)
            if last is None:
                existing = self.store.query(user_id, protocol_id)
                if existing:
                    last = existing[-1].timestamp
            now = self._clock()
            if last is not None and now <= last:
                now = last + _TIMESTAMP_STEP
            self._last_timestamps[key] = now
            return now

    def _persist(self, user_id: str, record: AssessmentRecord) -> AssessmentRecord:
        """Append with retry + exponential backoff; raise StoreUnavailableError on failure."""
        last_exc: Exception | None = None
        for attempt in range(self._max_retries + 1):
            try:
                if self.store.append(user_id, record):
                    logger.info(
                        "Recorded %s for user %s at %s",
                        record.protocol_id,
                        user_id,
                        record.timestamp.isoformat(),
                    )
                    return record
                last_exc = None
            except StoreUnavailableError as exc:
                last_exc = exc
            except Exception as exc:
                # Non-retryable store failure
                raise StoreUnavailableError(
                    f"History store failed: {exc}", record=record
                ) from exc

            if attempt < self._max_retries:
                wait = self._backoff_s * (2 ** attempt)
                logger.warning(
                    "History store rejected write (attempt %d/%d), retrying in %.1fs",
                    attempt + 1,
                    self._max_retries + 1,
                    wait,
                )
                time.sleep(wait)

        message = f"History store rejected write after {self._max_retries + 1} attempt(s)"
        if last_exc is not None:
            raise StoreUnavailableError(f"{message}: {last_exc}", record=record) from last_exc
        raise StoreUnavailableError(message, record=record)

    def _persist_reporting(self, user_id: str, record: AssessmentRecord) -> AssessmentRecord:
        try:
            return self._persist(user_id, record)
        except StoreUnavailableError as exc:
            logger.error("Background write for user %s failed: %s", user_id, exc)
            if self._on_error is not None:
                self._on_error(exc)
            raise

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_progress(
        self, user_id: str, protocol_id: str, timeframe: Timeframe | str
    ) -> list[AssessmentRecord]:
        """Records within the trailing window ending now, earliest first.

        The window is open at the top: records issued in the same clock tick
        carry timestamps nudged just past ``now`` and still belong to it.
        """
        start = self._clock() - timedelta(days=TIMEFRAME_DAYS[Timeframe(timeframe)])
        return self.store.query(user_id, protocol_id, from_timestamp=start)

    def compare_results(
        self,
        user_id: str,
        protocol_id: str,
        date1: date | datetime,
        date2: date | datetime,
        higher_is_better: bool = True,
    ) -> ProgressComparison:
        """Compare the nearest records at-or-before two instants.

        A bare ``date`` means the end of that day (UTC).

        Raises:
            NoDataError: If either instant has no record at or before it.
        """
        record1 = self._latest_at_or_before(user_id, protocol_id, _as_instant(date1))
        record2 = self._latest_at_or_before(user_id, protocol_id, _as_instant(date2))
        delta = record2.value - record1.value
        improved = None if delta == 0 else (delta > 0) == higher_is_better
        return ProgressComparison(
            delta=delta, record1=record1, record2=record2, improved=improved
        )

    def get_trend(
        self,
        user_id: str,
        protocol_id: str,
        timeframe: Timeframe | str,
        higher_is_better: bool = True,
    ) -> TrendSummary:
        records = self.get_progress(user_id, protocol_id, timeframe)
        return summarize_trend(records, higher_is_better=higher_is_better)

    def _latest_at_or_before(
        self, user_id: str, protocol_id: str, instant: datetime
    ) -> AssessmentRecord:
        records = self.store.query(user_id, protocol_id, to_timestamp=instant)
        if not records:
            raise NoDataError(
                f"No {protocol_id} record for user {user_id} at or before {instant.isoformat()}"
            )
        return records[-1]


def _as_instant(value: date | datetime) -> datetime:
    """Normalize to a tz-aware UTC datetime; dates become end of day."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return datetime.combine(value, dt_time.max, tzinfo=timezone.utc)
