"""Progress tracking over an external, append-only history store."""

from assessment_engine.tracking.dispatcher import OrderedWriteDispatcher
from assessment_engine.tracking.json_store import JsonFileHistoryStore
from assessment_engine.tracking.store import HistoryStore, InMemoryHistoryStore
from assessment_engine.tracking.tracker import ProgressTracker
from assessment_engine.tracking.trend import records_to_frame, summarize_trend

__all__ = [
    "HistoryStore",
    "InMemoryHistoryStore",
    "JsonFileHistoryStore",
    "OrderedWriteDispatcher",
    "ProgressTracker",
    "records_to_frame",
    "summarize_trend",
]
