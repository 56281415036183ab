"""Enumerations and physical constants for the assessment engine.

All formula coefficients cite their published research source.
"""

from enum import Enum, IntEnum, auto


class ProtocolCategory(str, Enum):
    """Broad physical quality a protocol measures."""

    CARDIO = "cardio"
    STRENGTH = "strength"
    BODY_COMPOSITION = "body-composition"


class Difficulty(str, Enum):
    """How demanding a protocol is to administer or perform."""

    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ProtocolFamily(IntEnum):
    """Closed set of calculation families.

    Every family must have exactly one calculator and one interpretation
    path; adding a member here without both fails at import time.
    """

    COOPER = auto()
    ONE_REP_MAX = auto()
    BODY_FAT = auto()


class FieldType(IntEnum):
    """Declared type of a protocol input field."""

    NUMBER = auto()   # Any finite float
    INTEGER = auto()  # Finite whole number
    CHOICE = auto()   # One of allowed_values


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class BodyFatMethod(str, Enum):
    """Body-fat estimation method, in decreasing order of field accuracy."""

    SKINFOLD = "skinfold"
    NAVY = "navy"
    BMI = "bmi"


class Experience(str, Enum):
    """Lifter training age, used to tailor strength recommendations."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Exercise(str, Enum):
    """Lifts with published relative-strength standards."""

    BENCH_PRESS = "bench_press"
    SQUAT = "squat"
    DEADLIFT = "deadlift"
    OVERHEAD_PRESS = "overhead_press"


class Timeframe(str, Enum):
    """Trailing windows for progress queries."""

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


# Trailing window lengths in days
TIMEFRAME_DAYS = {
    Timeframe.WEEK: 7,
    Timeframe.MONTH: 30,
    Timeframe.YEAR: 365,
}


# ---------------------------------------------------------------------------
# Cooper 12-minute run: Cooper (1968), JAMA 203(3):201-204
# ---------------------------------------------------------------------------
COOPER_DISTANCE_OFFSET_M = 504.9
COOPER_DISTANCE_DIVISOR = 44.73

# ---------------------------------------------------------------------------
# One-repetition maximum estimation
# ---------------------------------------------------------------------------
# Epley (1985), Boyd Epley Workout
EPLEY_REPS_DIVISOR = 30.0

# Brzycki (1993), J Phys Educ Recreat Dance 64(1):88-90
BRZYCKI_NUMERATOR = 36.0
BRZYCKI_REPS_CEILING = 37.0

# Lander (1985), NSCA Journal 6(6):60-61
LANDER_NUMERATOR = 100.0
LANDER_INTERCEPT = 101.3
LANDER_SLOPE = 2.67123

# Denominators closer to zero than this are treated as zero
DENOMINATOR_EPSILON = 1e-9

# ---------------------------------------------------------------------------
# Body composition
# ---------------------------------------------------------------------------
# Siri (1961) two-compartment density-to-fat conversion
SIRI_NUMERATOR = 495.0
SIRI_OFFSET = 450.0

# U.S. Navy circumference method, metric: Hodgdon & Beckett (1984),
# Naval Health Research Center reports 84-11 / 84-29
NAVY_MALE_INTERCEPT = 1.0324
NAVY_MALE_ABDOMEN_COEF = 0.19077
NAVY_MALE_HEIGHT_COEF = 0.15456
NAVY_FEMALE_INTERCEPT = 1.29579
NAVY_FEMALE_GIRTH_COEF = 0.35004
NAVY_FEMALE_HEIGHT_COEF = 0.22100

# BMI-derived body fat: Deurenberg et al. (1991), Br J Nutr 65(2):105-114
DEURENBERG_BMI_COEF = 1.20
DEURENBERG_AGE_COEF = 0.23
DEURENBERG_SEX_COEF = 10.8
DEURENBERG_INTERCEPT = 5.4

# Typical standard error of the BMI-based estimate (percentage points)
DEURENBERG_SEE_PCT = 4.1

# Jackson-Pollock 7-site body density
# Jackson & Pollock (1978), Br J Nutr 40(3):497-504 (men)
# Jackson, Pollock & Ward (1980), Med Sci Sports Exerc 12(3):175-181 (women)
JP7_MALE = (1.112, 0.00043499, 0.00000055, 0.00028826)
JP7_FEMALE = (1.097, 0.00046971, 0.00000056, 0.00012828)

SKINFOLD_SITES = (
    "chest",
    "abdominal",
    "thigh",
    "triceps",
    "subscapular",
    "suprailiac",
    "midaxillary",
)

# ---------------------------------------------------------------------------
# Progress tracking
# ---------------------------------------------------------------------------
# EWMA span used to smooth assessment series for trend display
TREND_EWMA_SPAN = 3

# Minimum number of records before a slope is fitted
TREND_MIN_POINTS = 2
