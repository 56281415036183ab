"""Guidance text keyed by category (and, for strength, experience level).

Plain lookup tables: the same key always yields the same ordered list.

References:
    Garber et al. (2011). ACSM position stand: quantity and quality of
        exercise. Med Sci Sports Exerc 43(7):1334-1359.
    Kraemer & Ratamess (2004). Fundamentals of resistance training:
        progression and exercise prescription. Med Sci Sports Exerc
        36(4):674-688.
"""

from __future__ import annotations

from assessment_engine.models.enums import Experience

CARDIO_RECOMMENDATIONS: dict[str, tuple[str, ...]] = {
    "poor": (
        "Build an aerobic base with 150 minutes per week of moderate-intensity activity.",
        "Start with 20-30 minute easy runs or brisk walks 3-4 times per week.",
        "Increase weekly volume by no more than 10% per week.",
        "Retest in 8 weeks to track progress.",
    ),
    "average": (
        "Keep 3-4 aerobic sessions per week, most of them at conversational pace.",
        "Add one tempo or interval session per week to raise VO2max.",
        "Retest in 6-8 weeks to track progress.",
    ),
    "good": (
        "Maintain 4-5 aerobic sessions per week with one long run.",
        "Include one VO2max interval session (e.g. 5 x 3 min hard) per week.",
        "Retest in 6-8 weeks to confirm the trend.",
    ),
    "excellent": (
        "Maintain current training; prioritise recovery between hard sessions.",
        "Use periodized blocks to target race-specific fitness.",
        "Retest every 3 months to monitor for plateaus.",
    ),
}

STRENGTH_RECOMMENDATIONS: dict[Experience, tuple[str, ...]] = {
    Experience.BEGINNER: (
        "Train each major lift 2-3 times per week with full-body sessions.",
        "Work in sets of 8-12 repetitions at about 60-70% of the estimated 1RM.",
        "Add load only when every set is completed with good technique.",
    ),
    Experience.INTERMEDIATE: (
        "Use a weekly undulating plan mixing 3-6 and 8-12 repetition days.",
        "Work at 70-85% of the estimated 1RM for most strength sets.",
        "Schedule a lighter deload week every 4-6 weeks.",
    ),
    Experience.ADVANCED: (
        "Periodize in 3-6 week blocks moving from volume to intensity.",
        "Include heavy singles or doubles at 85-95% of the estimated 1RM near block end.",
        "Monitor fatigue and deload before testing a true 1RM.",
    ),
}

STRENGTH_CATEGORY_RECOMMENDATIONS: dict[str, tuple[str, ...]] = {
    "poor": ("Relative strength is below standard for this lift; prioritise it in your program.",),
    "average": ("Relative strength is typical; steady progressive overload will move you up.",),
    "good": ("Relative strength is above average; focus on technique under heavier loads.",),
    "excellent": ("Relative strength is excellent; maintain and address weaker lifts.",),
}

BODY_FAT_RECOMMENDATIONS: dict[str, tuple[str, ...]] = {
    "underfat": (
        "Body fat is below the healthy range; consider a modest caloric surplus.",
        "Prioritise protein intake of 1.6-2.2 g/kg bodyweight per day.",
        "Consult a healthcare professional if the low value persists.",
    ),
    "healthy": (
        "Body fat is within the healthy range; maintain current habits.",
        "Combine resistance training 2-3 times per week with regular aerobic activity.",
    ),
    "overfat": (
        "Aim for a moderate caloric deficit of 300-500 kcal per day.",
        "Add 150-300 minutes per week of moderate aerobic activity.",
        "Keep resistance training to preserve lean mass while losing fat.",
    ),
    "obese": (
        "Discuss a weight-management plan with a healthcare professional.",
        "Start with low-impact activity such as walking, cycling or swimming.",
        "Target a gradual loss of 0.5-1% of body weight per week.",
    ),
}

UNCLASSIFIED_RECOMMENDATIONS: tuple[str, ...] = (
    "Repeat the assessment under the same conditions to establish a baseline.",
)


def cardio_recommendations(category: str) -> tuple[str, ...]:
    return CARDIO_RECOMMENDATIONS.get(category, UNCLASSIFIED_RECOMMENDATIONS)


def strength_recommendations(category: str | None, experience: Experience) -> tuple[str, ...]:
    """Category-specific note first (when classified), then experience guidance."""
    lead = STRENGTH_CATEGORY_RECOMMENDATIONS.get(category, ()) if category else ()
    return lead + STRENGTH_RECOMMENDATIONS[experience]


def body_fat_recommendations(category: str) -> tuple[str, ...]:
    return BODY_FAT_RECOMMENDATIONS.get(category, UNCLASSIFIED_RECOMMENDATIONS)
