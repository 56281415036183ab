"""Aerobic capacity from the Cooper 12-minute run.

Reference:
    Cooper (1968). A means of assessing maximal oxygen intake: correlation
    between field and treadmill testing. JAMA 203(3):201-204.
"""

from __future__ import annotations

from assessment_engine.models.enums import (
    COOPER_DISTANCE_DIVISOR,
    COOPER_DISTANCE_OFFSET_M,
)


def vo2max_from_cooper(distance_m: float) -> float:
    """Estimate VO2max (ml/kg/min) from the distance covered in 12 minutes.

    VO2max = (distance_m - 504.9) / 44.73

    Args:
        distance_m: Distance run in metres.

    Returns:
        Estimated VO2max in ml/kg/min. Distances below ~505 m give a
        non-physiological negative estimate; the validator bounds the input.
    """
    return (distance_m - COOPER_DISTANCE_OFFSET_M) / COOPER_DISTANCE_DIVISOR


def cooper_distance_for_vo2max(vo2max: float) -> float:
    """Invert the Cooper equation: the 12-minute distance that yields *vo2max*.

    Useful for turning a target fitness level into a field-test goal.
    """
    return vo2max * COOPER_DISTANCE_DIVISOR + COOPER_DISTANCE_OFFSET_M
