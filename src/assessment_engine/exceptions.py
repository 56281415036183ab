"""Exception hierarchy for the assessment engine.

Registry errors are raised and expected to fail fast at composition time.
Calculation errors are raised by the pure formulas and converted into
returned values by :class:`assessment_engine.engine.AssessmentEngine`.
History errors come from the progress tracker and its store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from assessment_engine.models.record import AssessmentRecord


class AssessmentError(Exception):
    """Base exception for all assessment_engine errors."""


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class RegistryError(AssessmentError):
    """Protocol catalog misconfiguration."""


class NotFoundError(RegistryError):
    """No protocol is registered under the requested id."""

    def __init__(self, protocol_id: str) -> None:
        super().__init__(f"Unknown protocol: {protocol_id!r}")
        self.protocol_id = protocol_id


class DuplicateProtocolError(RegistryError):
    """A protocol with the same id is already registered."""

    def __init__(self, protocol_id: str) -> None:
        super().__init__(f"Protocol already registered: {protocol_id!r}")
        self.protocol_id = protocol_id


class RegistryFrozenError(RegistryError):
    """register() was called after the registry was frozen."""


# ---------------------------------------------------------------------------
# Calculation
# ---------------------------------------------------------------------------


class CalculationError(AssessmentError):
    """Input passed validation but is mathematically degenerate."""


class DivisionByZeroError(CalculationError):
    """A formula denominator evaluated to zero."""


class InvalidInputError(CalculationError):
    """A formula term is outside its domain (e.g. log of a non-positive value)."""


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


class HistoryError(AssessmentError):
    """Base class for progress-tracking failures."""


class StoreUnavailableError(HistoryError):
    """The history store rejected or failed a write.

    The record that could not be persisted is attached so the caller keeps
    the computed result.
    """

    def __init__(self, message: str, record: AssessmentRecord | None = None) -> None:
        super().__init__(message)
        self.record = record


class NoDataError(HistoryError):
    """No eligible record exists for a comparison point."""
