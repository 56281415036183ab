"""Calculation outputs and the value types errors are returned as."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from assessment_engine.exceptions import CalculationError, StoreUnavailableError

if TYPE_CHECKING:
    from assessment_engine.models.inputs import ValidatedInput
    from assessment_engine.models.record import AssessmentRecord


def _frozen_mapping(values: Mapping[str, float] | None = None) -> Mapping[str, float]:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True)
class Measurement:
    """Raw calculator output before interpretation.

    ``value`` is rounded for display; ``raw_value`` keeps full precision
    for band classification.
    """

    value: float
    unit: str
    details: Mapping[str, float] = field(default_factory=_frozen_mapping)
    raw_value: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "details", _frozen_mapping(self.details))

    @property
    def exact_value(self) -> float:
        return self.value if self.raw_value is None else self.raw_value


@dataclass(frozen=True)
class CalculationResult:
    """Final, interpreted result of one assessment."""

    value: float
    unit: str
    interpretation: str
    category: str | None = None
    recommendations: tuple[str, ...] = field(default_factory=tuple)
    details: Mapping[str, float] = field(default_factory=_frozen_mapping)

    def __post_init__(self) -> None:
        object.__setattr__(self, "recommendations", tuple(self.recommendations))
        object.__setattr__(self, "details", _frozen_mapping(self.details))


@dataclass(frozen=True)
class ValidationError:
    """One problem with one input field. Collected, never raised."""

    field: str
    code: str
    message: str


@dataclass(frozen=True)
class ValidationOutcome:
    """Either a typed input or the full list of problems found."""

    inputs: ValidatedInput | None = None
    errors: tuple[ValidationError, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not self.errors and self.inputs is not None


@dataclass(frozen=True)
class AssessmentOutcome:
    """What :meth:`AssessmentEngine.run_assessment` returns.

    Exactly one of ``result``, ``errors`` or ``calculation_error`` is set.
    ``record`` and ``persistence_error`` are only populated when the result
    was handed to the progress tracker.
    """

    protocol_id: str
    result: CalculationResult | None = None
    errors: tuple[ValidationError, ...] = field(default_factory=tuple)
    calculation_error: CalculationError | None = None
    record: AssessmentRecord | None = None
    persistence_error: StoreUnavailableError | None = None

    @property
    def succeeded(self) -> bool:
        return self.result is not None
