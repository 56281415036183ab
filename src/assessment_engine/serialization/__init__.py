"""Serialization module — JSON-friendly views of records and results."""

from assessment_engine.serialization.records import (
    comparison_to_dict,
    outcome_to_dict,
    record_from_dict,
    record_to_dict,
    record_to_json_string,
    result_from_dict,
    result_to_dict,
    summary_to_dict,
    trend_to_dict,
    validation_error_to_dict,
)

__all__ = [
    "comparison_to_dict",
    "outcome_to_dict",
    "record_from_dict",
    "record_to_dict",
    "record_to_json_string",
    "result_from_dict",
    "result_to_dict",
    "summary_to_dict",
    "trend_to_dict",
    "validation_error_to_dict",
]
