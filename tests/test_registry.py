"""Tests for ProtocolRegistry — registration, lookup, filtering and freezing."""

from __future__ import annotations

import pytest

from assessment_engine.exceptions import (
    DuplicateProtocolError,
    NotFoundError,
    RegistryFrozenError,
)
from assessment_engine.models.enums import (
    Difficulty,
    FieldType,
    ProtocolCategory,
    ProtocolFamily,
)
from assessment_engine.models.protocol import FieldSpec, ProtocolDefinition
from assessment_engine.protocols import STANDARD_PROTOCOLS
from assessment_engine.registry import ProtocolRegistry


def _definition(protocol_id: str = "custom_run", **overrides) -> ProtocolDefinition:
    defaults = {
        "id": protocol_id,
        "name": "Custom Run",
        "category": ProtocolCategory.CARDIO,
        "difficulty": Difficulty.BASIC,
        "family": ProtocolFamily.COOPER,
        "unit": "ml/kg/min",
        "input_fields": (FieldSpec(name="distance", type=FieldType.NUMBER),),
    }
    defaults.update(overrides)
    return ProtocolDefinition(**defaults)


class TestDefaultRegistry:
    def test_holds_standard_protocols(self, registry: ProtocolRegistry) -> None:
        assert registry.protocol_ids == ["cooper_test", "one_rep_max", "body_fat"]
        assert len(registry) == 3

    def test_is_frozen(self, registry: ProtocolRegistry) -> None:
        assert registry.is_frozen
        with pytest.raises(RegistryFrozenError):
            registry.register(_definition())

    def test_get_unknown(self, registry: ProtocolRegistry) -> None:
        with pytest.raises(NotFoundError) as excinfo:
            registry.get("plank_hold")
        assert excinfo.value.protocol_id == "plank_hold"

    def test_contains(self, registry: ProtocolRegistry) -> None:
        assert "cooper_test" in registry
        assert "plank_hold" not in registry

    def test_body_fat_lower_is_better(self, registry: ProtocolRegistry) -> None:
        assert registry.get("body_fat").higher_is_better is False
        assert registry.get("cooper_test").higher_is_better is True


class TestListing:
    def test_filter_by_category(self, registry: ProtocolRegistry) -> None:
        ids = [d.id for d in registry.list(category=ProtocolCategory.STRENGTH)]
        assert ids == ["one_rep_max"]

    def test_filter_by_difficulty(self, registry: ProtocolRegistry) -> None:
        ids = [d.id for d in registry.list(difficulty=Difficulty.ADVANCED)]
        assert ids == ["body_fat"]

    def test_combined_filters_can_be_empty(self, registry: ProtocolRegistry) -> None:
        listing = registry.list(category=ProtocolCategory.CARDIO, difficulty=Difficulty.ADVANCED)
        assert list(listing) == []
        assert len(listing) == 0

    def test_listing_is_restartable(self, registry: ProtocolRegistry) -> None:
        listing = registry.list()
        assert [d.id for d in listing] == [d.id for d in listing]

    def test_listing_sees_later_registrations(self) -> None:
        registry = ProtocolRegistry()
        listing = registry.list()
        assert len(listing) == 0
        registry.register(_definition())
        assert [d.id for d in listing] == ["custom_run"]

    def test_summaries_split_required_and_optional(self, registry: ProtocolRegistry) -> None:
        (summary,) = registry.summaries(category=ProtocolCategory.STRENGTH)
        assert summary.required_fields == ("weight", "repetitions", "exercise")
        assert summary.optional_fields == ("experience", "bodyweight", "gender")


class TestRegistration:
    def test_register_and_get(self) -> None:
        registry = ProtocolRegistry()
        definition = _definition()
        registry.register(definition)
        assert registry.get("custom_run") is definition

    def test_duplicate_id(self) -> None:
        registry = ProtocolRegistry()
        registry.register(_definition())
        with pytest.raises(DuplicateProtocolError):
            registry.register(_definition(name="Another"))

    def test_standard_definitions_have_unique_field_names(self) -> None:
        for definition in STANDARD_PROTOCOLS:
            assert len(set(definition.field_names)) == len(definition.field_names)

    def test_duplicate_field_names_rejected(self) -> None:
        with pytest.raises(ValueError, match="duplicate input fields"):
            _definition(
                input_fields=(
                    FieldSpec(name="distance", type=FieldType.NUMBER),
                    FieldSpec(name="distance", type=FieldType.INTEGER),
                )
            )

    def test_choice_field_needs_values(self) -> None:
        with pytest.raises(ValueError, match="allowed_values"):
            FieldSpec(name="gender", type=FieldType.CHOICE)

    def test_get_field(self) -> None:
        definition = _definition()
        assert definition.get_field("distance").type == FieldType.NUMBER
        assert definition.get_field("pace") is None
