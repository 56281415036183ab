"""JSON-friendly serialization for AssessmentRecord and CalculationResult.

The logical fields (protocol id, timestamp, inputs snapshot, result) are the
contract every history store must round-trip losslessly. All functions are
pure (no I/O).
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from assessment_engine.models.protocol import ProtocolSummary
from assessment_engine.models.record import AssessmentRecord, ProgressComparison, TrendSummary
from assessment_engine.models.result import AssessmentOutcome, CalculationResult, ValidationError


def result_to_dict(result: CalculationResult) -> dict[str, Any]:
    return {
        "value": result.value,
        "unit": result.unit,
        "interpretation": result.interpretation,
        "category": result.category,
        "recommendations": list(result.recommendations),
        "details": dict(result.details),
    }


def result_from_dict(data: dict[str, Any]) -> CalculationResult:
    return CalculationResult(
        value=float(data["value"]),
        unit=data.get("unit", ""),
        interpretation=data.get("interpretation", ""),
        category=data.get("category"),
        recommendations=tuple(data.get("recommendations", ())),
        details={k: float(v) for k, v in data.get("details", {}).items()},
    )


def record_to_dict(record: AssessmentRecord) -> dict[str, Any]:
    return {
        "protocol_id": record.protocol_id,
        "timestamp": record.timestamp.isoformat(),
        "inputs_snapshot": dict(record.inputs_snapshot),
        "result": result_to_dict(record.result),
    }


def record_from_dict(data: dict[str, Any]) -> AssessmentRecord:
    timestamp = datetime.fromisoformat(data["timestamp"])
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return AssessmentRecord(
        protocol_id=data["protocol_id"],
        timestamp=timestamp,
        inputs_snapshot=data.get("inputs_snapshot", {}),
        result=result_from_dict(data["result"]),
    )


def record_to_json_string(record: AssessmentRecord, indent: int = 2) -> str:
    return json.dumps(record_to_dict(record), indent=indent)


# ---------------------------------------------------------------------------
# Caller-facing views
# ---------------------------------------------------------------------------


def validation_error_to_dict(error: ValidationError) -> dict[str, str]:
    return {"field": error.field, "code": error.code, "message": error.message}


def outcome_to_dict(outcome: AssessmentOutcome) -> dict[str, Any]:
    """Flatten an AssessmentOutcome for JSON output."""
    data: dict[str, Any] = {
        "protocol_id": outcome.protocol_id,
        "succeeded": outcome.succeeded,
    }
    if outcome.result is not None:
        data["result"] = result_to_dict(outcome.result)
    if outcome.errors:
        data["errors"] = [validation_error_to_dict(e) for e in outcome.errors]
    if outcome.calculation_error is not None:
        data["calculation_error"] = {
            "type": type(outcome.calculation_error).__name__,
            "message": str(outcome.calculation_error),
        }
    if outcome.record is not None:
        data["recorded_at"] = outcome.record.timestamp.isoformat()
    if outcome.persistence_error is not None:
        data["persistence_error"] = str(outcome.persistence_error)
    return data


def summary_to_dict(summary: ProtocolSummary) -> dict[str, Any]:
    return {
        "id": summary.id,
        "name": summary.name,
        "category": summary.category.value,
        "difficulty": summary.difficulty.value,
        "unit": summary.unit,
        "description": summary.description,
        "required_fields": list(summary.required_fields),
        "optional_fields": list(summary.optional_fields),
    }


def comparison_to_dict(comparison: ProgressComparison) -> dict[str, Any]:
    return {
        "delta": comparison.delta,
        "improved": comparison.improved,
        "record1": record_to_dict(comparison.record1),
        "record2": record_to_dict(comparison.record2),
    }


def trend_to_dict(trend: TrendSummary) -> dict[str, Any]:
    return {
        "count": trend.count,
        "first_value": trend.first_value,
        "latest_value": trend.latest_value,
        "change": trend.change,
        "best_value": trend.best_value,
        "slope_per_week": trend.slope_per_week,
        "smoothed_latest": trend.smoothed_latest,
        "improving": trend.improving,
    }
