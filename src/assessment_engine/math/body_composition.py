"""Body-fat percentage estimation: circumference, BMI and skinfold methods.

All lengths are metric: heights and girths in cm, skinfolds in mm,
weight in kg.

References:
    Hodgdon & Beckett (1984). Prediction of percent body fat for U.S. Navy
        men and women from body circumferences and height. NHRC 84-11/84-29.
    Deurenberg, Weststrate & Seidell (1991). Body mass index as a measure of
        body fatness: age- and sex-specific prediction formulas.
        Br J Nutr 65(2):105-114.
    Jackson & Pollock (1978). Generalized equations for predicting body
        density of men. Br J Nutr 40(3):497-504.
    Jackson, Pollock & Ward (1980). Generalized equations for predicting
        body density of women. Med Sci Sports Exerc 12(3):175-181.
    Siri (1961). Body composition from fluid spaces and density.
"""

from __future__ import annotations

import math
from typing import Sequence

from assessment_engine.exceptions import DivisionByZeroError, InvalidInputError
from assessment_engine.models.enums import (
    DENOMINATOR_EPSILON,
    DEURENBERG_AGE_COEF,
    DEURENBERG_BMI_COEF,
    DEURENBERG_INTERCEPT,
    DEURENBERG_SEX_COEF,
    JP7_FEMALE,
    JP7_MALE,
    NAVY_FEMALE_GIRTH_COEF,
    NAVY_FEMALE_HEIGHT_COEF,
    NAVY_FEMALE_INTERCEPT,
    NAVY_MALE_ABDOMEN_COEF,
    NAVY_MALE_HEIGHT_COEF,
    NAVY_MALE_INTERCEPT,
    SIRI_NUMERATOR,
    SIRI_OFFSET,
    SKINFOLD_SITES,
    Gender,
)


def siri_body_fat(density: float) -> float:
    """Convert body density (g/cm³) to body-fat percentage: 495/D − 450."""
    if abs(density) < DENOMINATOR_EPSILON:
        raise DivisionByZeroError("Body density is zero")
    if density < 0:
        raise InvalidInputError(f"Body density must be positive, got {density}")
    return SIRI_NUMERATOR / density - SIRI_OFFSET


def navy_density(
    gender: Gender,
    height_cm: float,
    waist_cm: float,
    neck_cm: float,
    hip_cm: float | None = None,
) -> float:
    """Body density from the U.S. Navy circumference equations.

    Men:   1.0324 − 0.19077·log10(waist − neck) + 0.15456·log10(height)
    Women: 1.29579 − 0.35004·log10(waist + hip − neck) + 0.22100·log10(height)

    Raises:
        InvalidInputError: If a logarithm argument is non-positive, or hip
            is missing for women.
    """
    _require_positive_log_arg(height_cm, "height")
    if gender == Gender.FEMALE:
        if hip_cm is None:
            raise InvalidInputError("Hip circumference is required for women")
        girth = waist_cm + hip_cm - neck_cm
        _require_positive_log_arg(girth, "waist + hip - neck")
        return (
            NAVY_FEMALE_INTERCEPT
            - NAVY_FEMALE_GIRTH_COEF * math.log10(girth)
            + NAVY_FEMALE_HEIGHT_COEF * math.log10(height_cm)
        )

    abdomen = waist_cm - neck_cm
    _require_positive_log_arg(abdomen, "waist - neck")
    return (
        NAVY_MALE_INTERCEPT
        - NAVY_MALE_ABDOMEN_COEF * math.log10(abdomen)
        + NAVY_MALE_HEIGHT_COEF * math.log10(height_cm)
    )


def navy_body_fat(
    gender: Gender,
    height_cm: float,
    waist_cm: float,
    neck_cm: float,
    hip_cm: float | None = None,
) -> float:
    """Body-fat percentage via the Navy circumference method."""
    return siri_body_fat(navy_density(gender, height_cm, waist_cm, neck_cm, hip_cm))


def body_mass_index(weight_kg: float, height_cm: float) -> float:
    """BMI = weight (kg) / height (m)²."""
    height_m = height_cm / 100.0
    if height_m <= 0:
        raise InvalidInputError(f"Height must be positive, got {height_cm}")
    return weight_kg / (height_m * height_m)


def bmi_body_fat(weight_kg: float, height_cm: float, age: int, gender: Gender) -> float:
    """Deurenberg estimate: 1.20·BMI + 0.23·age − 10.8·sex − 5.4 (sex: 1=M, 0=F).

    Population-level accuracy only (SEE ≈ 4 percentage points); it cannot
    separate muscular from overfat individuals of the same BMI.
    """
    sex = 1.0 if gender == Gender.MALE else 0.0
    bmi = body_mass_index(weight_kg, height_cm)
    return (
        DEURENBERG_BMI_COEF * bmi
        + DEURENBERG_AGE_COEF * age
        - DEURENBERG_SEX_COEF * sex
        - DEURENBERG_INTERCEPT
    )


def jackson_pollock_7_density(
    skinfolds_mm: Sequence[float], age: int, gender: Gender
) -> float:
    """Body density from the seven-site skinfold sum.

    D = a − b·S + c·S² − d·age, with gender-specific coefficients.

    Raises:
        InvalidInputError: If not exactly seven measurements are supplied.
    """
    if len(skinfolds_mm) != len(SKINFOLD_SITES):
        raise InvalidInputError(
            f"Expected {len(SKINFOLD_SITES)} skinfold sites, got {len(skinfolds_mm)}"
        )
    total = float(sum(skinfolds_mm))
    a, b, c, d = JP7_MALE if gender == Gender.MALE else JP7_FEMALE
    return a - b * total + c * total * total - d * age


def skinfold_body_fat(skinfolds_mm: Sequence[float], age: int, gender: Gender) -> float:
    """Body-fat percentage via Jackson-Pollock 7-site density and Siri."""
    return siri_body_fat(jackson_pollock_7_density(skinfolds_mm, age, gender))


def _require_positive_log_arg(value: float, label: str) -> None:
    if value <= 0:
        raise InvalidInputError(
            f"Logarithm argument {label} must be positive, got {value:g}"
        )
