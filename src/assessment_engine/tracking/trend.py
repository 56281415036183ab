"""Trend statistics over a window of assessment records.

Slope is an ordinary least-squares fit of value against elapsed days;
the smoothed value is an exponentially weighted moving average, matching
the EWMA approach used for training-load monitoring (Williams et al. 2017).
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd

from assessment_engine.models.enums import TREND_EWMA_SPAN, TREND_MIN_POINTS
from assessment_engine.models.record import AssessmentRecord, TrendSummary

_SECONDS_PER_DAY = 86_400.0
# Slopes smaller than this (units per week) count as flat
_FLAT_SLOPE_PER_WEEK = 1e-9


def records_to_frame(records: Sequence[AssessmentRecord]) -> pd.DataFrame:
    """Tabulate records as a timestamp-indexed frame with value and category columns."""
    frame = pd.DataFrame(
        {
            "timestamp": [r.timestamp for r in records],
            "value": [r.value for r in records],
            "category": [r.result.category for r in records],
        }
    )
    return frame.set_index("timestamp").sort_index()


def summarize_trend(
    records: Sequence[AssessmentRecord],
    higher_is_better: bool = True,
    ewma_span: int = TREND_EWMA_SPAN,
) -> TrendSummary:
    """Summarize an earliest-first sequence of records.

    Args:
        records: Records for one user and protocol, oldest first.
        higher_is_better: Direction of improvement for this protocol
            (False for body fat).
        ewma_span: Span of the smoothing average.

    Returns:
        TrendSummary. With fewer than TREND_MIN_POINTS records, or all
        records at the same instant, no slope is fitted.
    """
    if not records:
        return TrendSummary(count=0)

    frame = records_to_frame(records)
    values = frame["value"].to_numpy(dtype=np.float64)

    first_value = float(values[0])
    latest_value = float(values[-1])
    best_value = float(values.max() if higher_is_better else values.min())
    smoothed = float(frame["value"].ewm(span=ewma_span, adjust=False).mean().iloc[-1])

    slope_per_week = None
    if len(values) >= TREND_MIN_POINTS:
        t0 = frame.index[0]
        days = np.array(
            [(ts - t0).total_seconds() / _SECONDS_PER_DAY for ts in frame.index],
            dtype=np.float64,
        )
        if np.ptp(days) > 0:
            slope_per_day = float(np.polyfit(days, values, 1)[0])
            slope_per_week = slope_per_day * 7.0

    improving = None
    if slope_per_week is not None and abs(slope_per_week) > _FLAT_SLOPE_PER_WEEK:
        improving = (slope_per_week > 0) == higher_is_better

    return TrendSummary(
        count=len(values),
        first_value=first_value,
        latest_value=latest_value,
        change=latest_value - first_value,
        best_value=best_value,
        slope_per_week=slope_per_week,
        smoothed_latest=smoothed,
        improving=improving,
        records=tuple(records),
    )
