"""InputValidator — turns raw caller values into a typed ValidatedInput.

Checks run in three passes and every violation is collected, so a form can
show all problems at once:

1. required fields present; present fields parse to their declared type
2. numeric fields within their inclusive [min, max]
3. protocol-specific cross-field rules (see ``validation.rules``)

Unknown fields are ignored.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Any, Mapping

from assessment_engine.models.enums import FieldType
from assessment_engine.models.protocol import FieldSpec, ProtocolDefinition
from assessment_engine.models.result import ValidationError, ValidationOutcome
from assessment_engine.validation.rules import CROSS_FIELD_RULES, INPUT_BUILDERS

logger = logging.getLogger(__name__)


class InputValidator:
    """Validates raw inputs against a protocol's field specs and rules."""

    def validate(
        self, definition: ProtocolDefinition, raw_inputs: Mapping[str, Any]
    ) -> ValidationOutcome:
        """Validate *raw_inputs* for *definition*.

        Args:
            definition: The protocol being run.
            raw_inputs: Field name → raw value (numbers, numeric strings,
                or choice strings). Blank strings and None count as missing.

        Returns:
            ValidationOutcome holding either the typed input or every error.
        """
        errors: list[ValidationError] = []
        values: dict[str, Any] = {}
        provided: set[str] = set()

        # Pass 1: presence and type
        for spec in definition.input_fields:
            raw = raw_inputs.get(spec.name)
            if _is_missing(raw):
                if spec.required:
                    errors.append(
                        ValidationError(
                            field=spec.name,
                            code="required",
                            message=f"{spec.name} is required",
                        )
                    )
                continue
            provided.add(spec.name)
            parsed, error = _parse(spec, raw)
            if error is not None:
                errors.append(error)
            else:
                values[spec.name] = parsed

        # Pass 2: ranges
        for spec in definition.input_fields:
            if spec.name not in values or not spec.is_numeric:
                continue
            error = _check_range(spec, values[spec.name])
            if error is not None:
                errors.append(error)
                del values[spec.name]

        # Pass 3: cross-field rules
        rule = CROSS_FIELD_RULES[definition.family]
        errors.extend(rule(values, frozenset(provided)))

        if errors:
            logger.debug(
                "Validation of %s failed on fields %s",
                definition.id,
                [e.field for e in errors],
            )
            return ValidationOutcome(errors=tuple(errors))

        return ValidationOutcome(inputs=INPUT_BUILDERS[definition.family](values))


def _is_missing(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and raw.strip() == "")


def _parse(spec: FieldSpec, raw: Any) -> tuple[Any, ValidationError | None]:
    """Parse one raw value according to its spec."""
    if spec.type == FieldType.CHOICE:
        text = raw.value if isinstance(raw, Enum) else raw
        choice = str(text).strip().lower()
        if choice not in spec.allowed_values:
            return None, ValidationError(
                field=spec.name,
                code="choice",
                message=(
                    f"{spec.name} must be one of {', '.join(spec.allowed_values)}; "
                    f"got {raw!r}"
                ),
            )
        return choice, None

    # bool is an int subclass but never a measurement
    if isinstance(raw, bool):
        return None, _type_error(spec, raw)
    try:
        number = float(raw.strip() if isinstance(raw, str) else raw)
    except (TypeError, ValueError):
        return None, _type_error(spec, raw)
    if not math.isfinite(number):
        return None, ValidationError(
            field=spec.name,
            code="not_finite",
            message=f"{spec.name} must be a finite number",
        )

    if spec.type == FieldType.INTEGER:
        if not number.is_integer():
            return None, ValidationError(
                field=spec.name,
                code="type",
                message=f"{spec.name} must be a whole number; got {raw!r}",
            )
        return int(number), None
    return number, None


def _type_error(spec: FieldSpec, raw: Any) -> ValidationError:
    return ValidationError(
        field=spec.name,
        code="type",
        message=f"{spec.name} must be a number; got {raw!r}",
    )


def _check_range(spec: FieldSpec, value: float) -> ValidationError | None:
    if spec.min is not None and value < spec.min:
        return ValidationError(
            field=spec.name,
            code="min",
            message=f"{spec.name} must be at least {spec.min:g}{_unit(spec)}",
        )
    if spec.max is not None and value > spec.max:
        return ValidationError(
            field=spec.name,
            code="max",
            message=f"{spec.name} must be at most {spec.max:g}{_unit(spec)}",
        )
    return None


def _unit(spec: FieldSpec) -> str:
    return f" {spec.unit}" if spec.unit else ""
