"""Data models for the assessment engine."""

from assessment_engine.models.enums import (
    BodyFatMethod,
    Difficulty,
    Exercise,
    Experience,
    FieldType,
    Gender,
    ProtocolCategory,
    ProtocolFamily,
    Timeframe,
)
from assessment_engine.models.inputs import (
    BodyFatInput,
    CooperInput,
    OneRepMaxInput,
    ValidatedInput,
)
from assessment_engine.models.protocol import FieldSpec, ProtocolDefinition, ProtocolSummary
from assessment_engine.models.record import AssessmentRecord, ProgressComparison, TrendSummary
from assessment_engine.models.result import (
    AssessmentOutcome,
    CalculationResult,
    Measurement,
    ValidationError,
    ValidationOutcome,
)

__all__ = [
    "AssessmentOutcome",
    "AssessmentRecord",
    "BodyFatInput",
    "BodyFatMethod",
    "CalculationResult",
    "CooperInput",
    "Difficulty",
    "Exercise",
    "Experience",
    "FieldSpec",
    "FieldType",
    "Gender",
    "Measurement",
    "OneRepMaxInput",
    "ProgressComparison",
    "ProtocolCategory",
    "ProtocolDefinition",
    "ProtocolFamily",
    "ProtocolSummary",
    "Timeframe",
    "TrendSummary",
    "ValidatedInput",
    "ValidationError",
    "ValidationOutcome",
]
