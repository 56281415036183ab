"""History store port and an in-memory adapter.

The tracker never owns storage; it talks to any object satisfying
:class:`HistoryStore`. Retention and eviction are the store's business.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from datetime import datetime
from typing import Protocol

from assessment_engine.models.record import AssessmentRecord


class HistoryStore(Protocol):
    """Append-only per-user assessment history."""

    def append(self, user_id: str, record: AssessmentRecord) -> bool:
        """Persist *record* for *user_id*. Return False if the write was rejected."""
        ...

    def query(
        self,
        user_id: str,
        protocol_id: str,
        from_timestamp: datetime | None = None,
        to_timestamp: datetime | None = None,
    ) -> list[AssessmentRecord]:
        """Records for the user and protocol within the inclusive bounds, oldest first."""
        ...


def filter_records(
    records: list[AssessmentRecord],
    protocol_id: str,
    from_timestamp: datetime | None = None,
    to_timestamp: datetime | None = None,
) -> list[AssessmentRecord]:
    """Shared query semantics for store adapters."""
    selected = [
        r
        for r in records
        if r.protocol_id == protocol_id
        and (from_timestamp is None or r.timestamp >= from_timestamp)
        and (to_timestamp is None or r.timestamp <= to_timestamp)
    ]
    selected.sort(key=lambda r: r.timestamp)
    return selected


class InMemoryHistoryStore:
    """Process-local store. Useful for tests and single-session callers."""

    def __init__(self) -> None:
        self._records: dict[str, list[AssessmentRecord]] = defaultdict(list)
        self._lock = threading.Lock()

    def append(self, user_id: str, record: AssessmentRecord) -> bool:
        with self._lock:
            self._records[user_id].append(record)
        return True

    def query(
        self,
        user_id: str,
        protocol_id: str,
        from_timestamp: datetime | None = None,
        to_timestamp: datetime | None = None,
    ) -> list[AssessmentRecord]:
        with self._lock:
            records = list(self._records.get(user_id, ()))
        return filter_records(records, protocol_id, from_timestamp, to_timestamp)

    def reset(self) -> None:
        """Clear all stored data."""
        with self._lock:
            self._records.clear()
