"""Environment-variable-based configuration for the assessment CLI."""

from __future__ import annotations

import os
from pathlib import Path

HISTORY_PATH: Path = Path(
    os.environ.get("ASSESSMENT_HISTORY_PATH", "~/.assessment_engine/history.json")
).expanduser()
LOG_LEVEL: str = os.environ.get("ASSESSMENT_LOG_LEVEL", "INFO").upper()
STORE_RETRIES: int = int(os.environ.get("ASSESSMENT_STORE_RETRIES", "2"))
STORE_BACKOFF_S: float = float(os.environ.get("ASSESSMENT_STORE_BACKOFF_S", "0.5"))
NORMS_PATH: Path | None = (
    Path(os.environ["ASSESSMENT_NORMS_PATH"]).expanduser()
    if os.environ.get("ASSESSMENT_NORMS_PATH")
    else None
)
