"""Standard protocol catalog: Cooper run, 1RM estimate and body-fat percentage."""

from __future__ import annotations

from assessment_engine.models.enums import (
    SKINFOLD_SITES,
    BodyFatMethod,
    Difficulty,
    Exercise,
    Experience,
    FieldType,
    Gender,
    ProtocolCategory,
    ProtocolFamily,
)
from assessment_engine.models.protocol import FieldSpec, ProtocolDefinition
from assessment_engine.registry import ProtocolRegistry

COOPER_TEST_ID = "cooper_test"
ONE_REP_MAX_ID = "one_rep_max"
BODY_FAT_ID = "body_fat"

_GENDERS = tuple(g.value for g in Gender)


def _age_field(min_age: float, max_age: float = 100) -> FieldSpec:
    return FieldSpec(
        name="age",
        type=FieldType.INTEGER,
        min=min_age,
        max=max_age,
        unit="years",
    )


COOPER_TEST = ProtocolDefinition(
    id=COOPER_TEST_ID,
    name="Cooper 12-Minute Run",
    category=ProtocolCategory.CARDIO,
    difficulty=Difficulty.INTERMEDIATE,
    family=ProtocolFamily.COOPER,
    unit="ml/kg/min",
    description=(
        "Run as far as possible in 12 minutes on a measured track. "
        "The distance covered estimates maximal oxygen uptake (VO2max)."
    ),
    input_fields=(
        FieldSpec(
            name="distance",
            type=FieldType.NUMBER,
            min=800,
            max=5500,
            unit="m",
            description="Distance covered in 12 minutes.",
        ),
        _age_field(13),
        FieldSpec(name="gender", type=FieldType.CHOICE, allowed_values=_GENDERS),
    ),
)

ONE_REP_MAX = ProtocolDefinition(
    id=ONE_REP_MAX_ID,
    name="One-Repetition Maximum Estimate",
    category=ProtocolCategory.STRENGTH,
    difficulty=Difficulty.BASIC,
    family=ProtocolFamily.ONE_REP_MAX,
    unit="kg",
    description=(
        "Perform one set to technical failure with a sub-maximal load. "
        "The Epley, Brzycki and Lander equations are averaged to estimate "
        "the heaviest single repetition."
    ),
    input_fields=(
        FieldSpec(
            name="weight",
            type=FieldType.NUMBER,
            min=1,
            max=500,
            unit="kg",
            description="Load lifted.",
        ),
        FieldSpec(
            name="repetitions",
            type=FieldType.INTEGER,
            unit="reps",
            description="Repetitions completed with that load.",
        ),
        FieldSpec(
            name="exercise",
            type=FieldType.CHOICE,
            allowed_values=tuple(e.value for e in Exercise),
        ),
        FieldSpec(
            name="experience",
            type=FieldType.CHOICE,
            required=False,
            allowed_values=tuple(e.value for e in Experience),
            description="Training age; defaults to intermediate.",
        ),
        FieldSpec(
            name="bodyweight",
            type=FieldType.NUMBER,
            required=False,
            min=20,
            max=300,
            unit="kg",
            description="Enables a relative-strength category.",
        ),
        FieldSpec(
            name="gender",
            type=FieldType.CHOICE,
            required=False,
            allowed_values=_GENDERS,
        ),
    ),
)

BODY_FAT = ProtocolDefinition(
    id=BODY_FAT_ID,
    name="Body-Fat Percentage",
    category=ProtocolCategory.BODY_COMPOSITION,
    difficulty=Difficulty.ADVANCED,
    family=ProtocolFamily.BODY_FAT,
    unit="%",
    higher_is_better=False,
    description=(
        "Estimate body-fat percentage by skinfold calipers (7 sites), "
        "tape-measure circumferences (navy) or body-mass index."
    ),
    input_fields=(
        FieldSpec(
            name="method",
            type=FieldType.CHOICE,
            allowed_values=tuple(m.value for m in BodyFatMethod),
        ),
        FieldSpec(name="gender", type=FieldType.CHOICE, allowed_values=_GENDERS),
        _age_field(18),
        FieldSpec(name="height", type=FieldType.NUMBER, min=100, max=250, unit="cm"),
        FieldSpec(
            name="weight",
            type=FieldType.NUMBER,
            required=False,
            min=20,
            max=300,
            unit="kg",
        ),
        FieldSpec(
            name="waist",
            type=FieldType.NUMBER,
            required=False,
            min=40,
            max=200,
            unit="cm",
            description="At the navel for men, at the narrowest point for women.",
        ),
        FieldSpec(
            name="neck",
            type=FieldType.NUMBER,
            required=False,
            min=20,
            max=80,
            unit="cm",
        ),
        FieldSpec(
            name="hip",
            type=FieldType.NUMBER,
            required=False,
            min=50,
            max=200,
            unit="cm",
            description="Widest point of the buttocks; navy method, women only.",
        ),
    )
    + tuple(
        FieldSpec(
            name=site,
            type=FieldType.NUMBER,
            required=False,
            min=1,
            max=80,
            unit="mm",
        )
        for site in SKINFOLD_SITES
    ),
)

STANDARD_PROTOCOLS = (COOPER_TEST, ONE_REP_MAX, BODY_FAT)


def build_default_registry() -> ProtocolRegistry:
    """Build and freeze a registry holding the standard protocols."""
    registry = ProtocolRegistry()
    for definition in STANDARD_PROTOCOLS:
        registry.register(definition)
    registry.freeze()
    return registry
