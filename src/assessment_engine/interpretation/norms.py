"""Reference band tables used to classify assessment values.

Band edges are data, not logic: the interpreter receives a ``ReferenceNorms``
instance and never hard-codes a threshold. Replace the defaults by loading
a JSON file with :func:`load_norms`.

Every band includes its lower edge and excludes its upper edge; the first
band is unbounded below and the last is unbounded above.

Sources:
    Cooper: The Cooper Institute (2013) aerobic fitness norms as tabulated
        in Heyward & Gibson, Advanced Fitness Assessment and Exercise
        Prescription, 7th ed. Collapsed to four categories.
    Body fat: Gallagher et al. (2000). Healthy percentage body fat ranges.
        Am J Clin Nutr 72(3):694-701.
    Strength: Relative-strength standards (1RM / bodyweight) adapted from
        the NSCA Essentials of Strength Training and Conditioning, 4th ed.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from assessment_engine.models.enums import Exercise, Gender

FITNESS_LABELS = ("poor", "average", "good", "excellent")
BODY_FAT_LABELS = ("underfat", "healthy", "overfat", "obese")


@dataclass(frozen=True)
class Band:
    """A category starting at ``lower`` (inclusive)."""

    label: str
    lower: float


@dataclass(frozen=True)
class BandTable:
    """Ordered bands mapping a continuous value to a label."""

    bands: tuple[Band, ...]

    def __post_init__(self) -> None:
        if not self.bands:
            raise ValueError("BandTable needs at least one band")
        lowers = [b.lower for b in self.bands]
        if any(a >= b for a, b in zip(lowers, lowers[1:])):
            raise ValueError(f"Band edges must be strictly ascending: {lowers}")

    @classmethod
    def from_edges(cls, labels: tuple[str, ...], edges: list[float] | tuple[float, ...]) -> BandTable:
        """Build from n labels and the n-1 edges between them."""
        if len(edges) != len(labels) - 1:
            raise ValueError(
                f"{len(labels)} labels need {len(labels) - 1} edges, got {len(edges)}"
            )
        lowers = (-math.inf, *edges)
        return cls(
            bands=tuple(
                Band(label=label, lower=float(lower)) for label, lower in zip(labels, lowers)
            )
        )

    def classify(self, value: float) -> str:
        label = self.bands[0].label
        for band in self.bands[1:]:
            if value < band.lower:
                break
            label = band.label
        return label

    @property
    def edges(self) -> tuple[float, ...]:
        return tuple(b.lower for b in self.bands[1:])


@dataclass(frozen=True)
class AgeBandedTable:
    """Band tables keyed by the minimum age they apply from (inclusive)."""

    by_min_age: tuple[tuple[int, BandTable], ...]

    def __post_init__(self) -> None:
        ages = [a for a, _ in self.by_min_age]
        if not ages or any(a >= b for a, b in zip(ages, ages[1:])):
            raise ValueError(f"Age bands must be non-empty and ascending: {ages}")

    def table_for(self, age: float) -> BandTable:
        """Table for *age*; ages below the first band use the first table."""
        selected = self.by_min_age[0][1]
        for min_age, table in self.by_min_age:
            if age < min_age:
                break
            selected = table
        return selected

    def classify(self, value: float, age: float) -> str:
        return self.table_for(age).classify(value)


@dataclass(frozen=True)
class ReferenceNorms:
    """All classification tables the interpreter consults."""

    cooper: Mapping[Gender, AgeBandedTable]
    body_fat: Mapping[Gender, AgeBandedTable]
    strength: Mapping[tuple[Exercise, Gender], BandTable] = field(default_factory=dict)


def _age_banded(labels: tuple[str, ...], rows: list[tuple[int, list[float]]]) -> AgeBandedTable:
    return AgeBandedTable(
        by_min_age=tuple((age, BandTable.from_edges(labels, edges)) for age, edges in rows)
    )


# VO2max (ml/kg/min) lower edges of average / good / excellent
_COOPER_ROWS = {
    Gender.MALE: [
        (0, [42.5, 46.5, 52.5]),
        (30, [41.0, 45.0, 49.5]),
        (40, [38.5, 43.0, 48.0]),
        (50, [35.5, 39.5, 45.5]),
        (60, [32.5, 36.5, 44.0]),
    ],
    Gender.FEMALE: [
        (0, [37.0, 41.0, 49.0]),
        (30, [35.0, 39.0, 45.0]),
        (40, [33.0, 37.0, 42.0]),
        (50, [30.0, 34.0, 38.0]),
        (60, [27.5, 31.5, 35.5]),
    ],
}

# Body fat (%) lower edges of healthy / overfat / obese
_BODY_FAT_ROWS = {
    Gender.MALE: [
        (0, [8.0, 20.0, 25.0]),
        (40, [11.0, 22.0, 28.0]),
        (60, [13.0, 25.0, 30.0]),
    ],
    Gender.FEMALE: [
        (0, [21.0, 33.0, 39.0]),
        (40, [23.0, 34.0, 40.0]),
        (60, [24.0, 36.0, 42.0]),
    ],
}

# 1RM / bodyweight lower edges of average / good / excellent
_STRENGTH_ROWS = {
    (Exercise.BENCH_PRESS, Gender.MALE): [0.75, 1.0, 1.25],
    (Exercise.BENCH_PRESS, Gender.FEMALE): [0.5, 0.65, 0.85],
    (Exercise.SQUAT, Gender.MALE): [1.0, 1.5, 1.75],
    (Exercise.SQUAT, Gender.FEMALE): [0.75, 1.0, 1.25],
    (Exercise.DEADLIFT, Gender.MALE): [1.25, 1.75, 2.0],
    (Exercise.DEADLIFT, Gender.FEMALE): [1.0, 1.25, 1.5],
    (Exercise.OVERHEAD_PRESS, Gender.MALE): [0.5, 0.65, 0.8],
    (Exercise.OVERHEAD_PRESS, Gender.FEMALE): [0.35, 0.45, 0.55],
}


def _build(
    cooper_rows: Mapping[Gender, list[tuple[int, list[float]]]],
    body_fat_rows: Mapping[Gender, list[tuple[int, list[float]]]],
    strength_rows: Mapping[tuple[Exercise, Gender], list[float]],
) -> ReferenceNorms:
    return ReferenceNorms(
        cooper={g: _age_banded(FITNESS_LABELS, rows) for g, rows in cooper_rows.items()},
        body_fat={g: _age_banded(BODY_FAT_LABELS, rows) for g, rows in body_fat_rows.items()},
        strength={
            key: BandTable.from_edges(FITNESS_LABELS, edges)
            for key, edges in strength_rows.items()
        },
    )


DEFAULT_NORMS = _build(_COOPER_ROWS, _BODY_FAT_ROWS, _STRENGTH_ROWS)


def load_norms(path: Path | str) -> ReferenceNorms:
    """Load replacement band edges from a JSON file.

    Expected shape (any top-level key may be omitted to keep the default)::

        {
          "cooper":   {"male": [{"min_age": 0, "edges": [42.5, 46.5, 52.5]}, ...],
                       "female": [...]},
          "body_fat": {"male": [{"min_age": 0, "edges": [8, 20, 25]}, ...], ...},
          "strength": {"squat": {"male": [1.0, 1.5, 1.75], "female": [...]}, ...}
        }

    Raises:
        ValueError: If the file contents do not describe valid tables.
    """
    with open(path) as f:
        raw: dict[str, Any] = json.load(f)

    try:
        cooper = {**_COOPER_ROWS, **_parse_age_rows(raw.get("cooper", {}))}
        body_fat = {**_BODY_FAT_ROWS, **_parse_age_rows(raw.get("body_fat", {}))}
        strength = dict(_STRENGTH_ROWS)
        for exercise, by_gender in raw.get("strength", {}).items():
            for gender, edges in by_gender.items():
                strength[(Exercise(exercise), Gender(gender))] = list(edges)
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed norms file {path}: {exc}") from exc

    return _build(cooper, body_fat, strength)


def _parse_age_rows(section: Mapping[str, Any]) -> dict[Gender, list[tuple[int, list[float]]]]:
    return {
        Gender(gender): [(int(row["min_age"]), list(row["edges"])) for row in rows]
        for gender, rows in section.items()
    }
