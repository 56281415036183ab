"""JSON-file history store.

One file holds every user's history as ``{user_id: [record, ...]}``.
Writes go to a temporary file that atomically replaces the original, so a
crash mid-write never leaves a truncated history behind.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from datetime import datetime
from pathlib import Path
from typing import Any

from assessment_engine.exceptions import StoreUnavailableError
from assessment_engine.models.record import AssessmentRecord
from assessment_engine.serialization.records import record_from_dict, record_to_dict
from assessment_engine.tracking.store import filter_records

logger = logging.getLogger(__name__)


class JsonFileHistoryStore:
    """File-backed store suitable for a single process (e.g. the CLI)."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()

    def append(self, user_id: str, record: AssessmentRecord) -> bool:
        with self._lock:
            try:
                data = self._load()
                data.setdefault(user_id, []).append(record_to_dict(record))
                self._write(data)
            except (OSError, ValueError) as exc:
                logger.warning("Failed to append record to %s: %s", self.path, exc)
                return False
        logger.debug("Appended %s record for user %s", record.protocol_id, user_id)
        return True

    def query(
        self,
        user_id: str,
        protocol_id: str,
        from_timestamp: datetime | None = None,
        to_timestamp: datetime | None = None,
    ) -> list[AssessmentRecord]:
        with self._lock:
            try:
                data = self._load()
                records = [record_from_dict(d) for d in data.get(user_id, [])]
            except (OSError, ValueError, KeyError, TypeError) as exc:
                raise StoreUnavailableError(
                    f"Cannot read history file {self.path}: {exc}"
                ) from exc
        return filter_records(records, protocol_id, from_timestamp, to_timestamp)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load(self) -> dict[str, list[dict[str, Any]]]:
        if not self.path.exists():
            return {}
        with open(self.path) as f:
            return json.load(f)

    def _write(self, data: dict[str, list[dict[str, Any]]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".history-", suffix=".json")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
