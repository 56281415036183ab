"""Protocol definitions — immutable catalog entries describing each test."""

from __future__ import annotations

from dataclasses import dataclass, field

from assessment_engine.models.enums import (
    Difficulty,
    FieldType,
    ProtocolCategory,
    ProtocolFamily,
)


@dataclass(frozen=True)
class FieldSpec:
    """Declared shape of a single protocol input."""

    name: str
    type: FieldType
    required: bool = True
    min: float | None = None
    max: float | None = None
    allowed_values: tuple[str, ...] = field(default_factory=tuple)
    unit: str = ""
    description: str = ""

    def __post_init__(self) -> None:
        if self.type == FieldType.CHOICE and not self.allowed_values:
            raise ValueError(f"Choice field {self.name!r} needs allowed_values")
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(
                f"Field {self.name!r}: min={self.min} exceeds max={self.max}"
            )

    @property
    def is_numeric(self) -> bool:
        return self.type in (FieldType.NUMBER, FieldType.INTEGER)


@dataclass(frozen=True)
class ProtocolDefinition:
    """A registered assessment protocol.

    The calculation is selected by ``family`` rather than stored as a
    function, so the set of calculators stays closed and checkable.
    """

    id: str
    name: str
    category: ProtocolCategory
    difficulty: Difficulty
    family: ProtocolFamily
    unit: str
    input_fields: tuple[FieldSpec, ...]
    description: str = ""
    higher_is_better: bool = True

    def __post_init__(self) -> None:
        names = [f.name for f in self.input_fields]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(
                f"Protocol {self.id!r} has duplicate input fields: {duplicates}"
            )

    def get_field(self, name: str) -> FieldSpec | None:
        """Return the spec for *name*, or None if the protocol has no such field."""
        for spec in self.input_fields:
            if spec.name == name:
                return spec
        return None

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.input_fields)

    def summary(self) -> ProtocolSummary:
        return ProtocolSummary(
            id=self.id,
            name=self.name,
            category=self.category,
            difficulty=self.difficulty,
            unit=self.unit,
            description=self.description,
            required_fields=tuple(f.name for f in self.input_fields if f.required),
            optional_fields=tuple(f.name for f in self.input_fields if not f.required),
        )


@dataclass(frozen=True)
class ProtocolSummary:
    """Catalog entry handed to presentation layers."""

    id: str
    name: str
    category: ProtocolCategory
    difficulty: Difficulty
    unit: str
    description: str
    required_fields: tuple[str, ...]
    optional_fields: tuple[str, ...]
