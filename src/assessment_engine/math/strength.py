"""One-repetition maximum (1RM) estimation from a sub-maximal set.

Three published prediction equations are computed and averaged. Each is
most accurate below ~10 repetitions; accuracy degrades as reps increase.

References:
    Epley (1985). Poundage chart. Boyd Epley Workout.
    Brzycki (1993). Strength testing: predicting a one-rep max from
        reps-to-fatigue. J Phys Educ Recreat Dance 64(1):88-90.
    Lander (1985). Maximum based on reps. NSCA Journal 6(6):60-61.
    LeSuer et al. (1997). The accuracy of prediction equations for
        estimating 1-RM performance. J Strength Cond Res 11(4):211-213.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from assessment_engine.exceptions import DivisionByZeroError, InvalidInputError
from assessment_engine.models.enums import (
    BRZYCKI_NUMERATOR,
    BRZYCKI_REPS_CEILING,
    DENOMINATOR_EPSILON,
    EPLEY_REPS_DIVISOR,
    LANDER_INTERCEPT,
    LANDER_NUMERATOR,
    LANDER_SLOPE,
)


@dataclass(frozen=True)
class OneRepMaxEstimate:
    """Individual equation outputs and their unweighted mean, all in kg."""

    epley: float
    brzycki: float
    lander: float
    mean: float


def epley_1rm(weight: float, reps: float) -> float:
    """Epley: 1RM = weight × (1 + reps / 30)."""
    return weight * (1.0 + reps / EPLEY_REPS_DIVISOR)


def brzycki_1rm(weight: float, reps: float) -> float:
    """Brzycki: 1RM = weight × 36 / (37 − reps).

    Raises:
        DivisionByZeroError: If reps == 37.
        InvalidInputError: If reps > 37 (negative denominator).
    """
    denominator = BRZYCKI_REPS_CEILING - reps
    _check_denominator(denominator, "Brzycki", reps)
    return weight * (BRZYCKI_NUMERATOR / denominator)


def lander_1rm(weight: float, reps: float) -> float:
    """Lander: 1RM = 100 × weight / (101.3 − 2.67123 × reps).

    Raises:
        DivisionByZeroError: If reps ≈ 37.92.
        InvalidInputError: If the denominator is negative.
    """
    denominator = LANDER_INTERCEPT - LANDER_SLOPE * reps
    _check_denominator(denominator, "Lander", reps)
    return weight * (LANDER_NUMERATOR / denominator)


def estimate_one_rep_max(weight: float, reps: float) -> OneRepMaxEstimate:
    """Average the Epley, Brzycki and Lander estimates.

    Args:
        weight: Load lifted in kg.
        reps: Repetitions completed with that load (≥ 1).

    Returns:
        OneRepMaxEstimate with each equation's result and their mean.

    Raises:
        DivisionByZeroError / InvalidInputError: Propagated from the
            individual equations for degenerate repetition counts.
    """
    # Zero denominators take precedence over negative ones
    _check_zero(BRZYCKI_REPS_CEILING - reps, "Brzycki", reps)
    _check_zero(LANDER_INTERCEPT - LANDER_SLOPE * reps, "Lander", reps)
    epley = epley_1rm(weight, reps)
    brzycki = brzycki_1rm(weight, reps)
    lander = lander_1rm(weight, reps)
    mean = float(np.mean([epley, brzycki, lander]))
    return OneRepMaxEstimate(epley=epley, brzycki=brzycki, lander=lander, mean=mean)


def relative_strength(one_rep_max: float, bodyweight: float) -> float:
    """1RM expressed as a multiple of bodyweight."""
    if bodyweight <= 0:
        raise InvalidInputError(f"Bodyweight must be positive, got {bodyweight}")
    return one_rep_max / bodyweight


def _check_zero(denominator: float, formula: str, reps: float) -> None:
    if abs(denominator) < DENOMINATOR_EPSILON:
        raise DivisionByZeroError(
            f"{formula} denominator is zero at reps={reps:g}"
        )


def _check_denominator(denominator: float, formula: str, reps: float) -> None:
    _check_zero(denominator, formula, reps)
    if denominator < 0:
        raise InvalidInputError(
            f"{formula} denominator is negative at reps={reps:g}"
        )
