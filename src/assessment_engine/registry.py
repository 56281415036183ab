"""Protocol registry — read-only catalog of assessment protocols."""

from __future__ import annotations

from typing import Iterator

from assessment_engine.exceptions import (
    DuplicateProtocolError,
    NotFoundError,
    RegistryFrozenError,
)
from assessment_engine.models.enums import Difficulty, ProtocolCategory
from assessment_engine.models.protocol import ProtocolDefinition, ProtocolSummary


class ProtocolListing:
    """Lazy, restartable view over a registry filtered by category/difficulty.

    Each iteration walks the registry afresh in registration order.
    """

    def __init__(
        self,
        protocols: dict[str, ProtocolDefinition],
        category: ProtocolCategory | None = None,
        difficulty: Difficulty | None = None,
    ) -> None:
        self._protocols = protocols
        self._category = category
        self._difficulty = difficulty

    def __iter__(self) -> Iterator[ProtocolDefinition]:
        for definition in self._protocols.values():
            if self._category is not None and definition.category != self._category:
                continue
            if self._difficulty is not None and definition.difficulty != self._difficulty:
                continue
            yield definition

    def __len__(self) -> int:
        return sum(1 for _ in self)


class ProtocolRegistry:
    """Holds every ProtocolDefinition for the process lifetime.

    Built once at the composition root (see
    :func:`assessment_engine.protocols.build_default_registry`) and then
    frozen. After freezing the registry is read-only and safe to share
    between threads without locking.
    """

    def __init__(self) -> None:
        self._protocols: dict[str, ProtocolDefinition] = {}
        self._frozen = False

    def register(self, definition: ProtocolDefinition) -> None:
        """Register a protocol under its id.

        Raises:
            DuplicateProtocolError: If the id is already registered.
            RegistryFrozenError: If the registry has been frozen.
        """
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register {definition.id!r}: registry is frozen"
            )
        if definition.id in self._protocols:
            raise DuplicateProtocolError(definition.id)
        self._protocols[definition.id] = definition

    def freeze(self) -> None:
        """Disallow further registration."""
        self._frozen = True

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def get(self, protocol_id: str) -> ProtocolDefinition:
        """Retrieve a protocol by id.

        Raises:
            NotFoundError: If no protocol has that id.
        """
        try:
            return self._protocols[protocol_id]
        except KeyError:
            raise NotFoundError(protocol_id) from None

    def list(
        self,
        category: ProtocolCategory | None = None,
        difficulty: Difficulty | None = None,
    ) -> ProtocolListing:
        """Protocols matching the optional filters, in registration order."""
        return ProtocolListing(self._protocols, category=category, difficulty=difficulty)

    def summaries(
        self,
        category: ProtocolCategory | None = None,
        difficulty: Difficulty | None = None,
    ) -> list[ProtocolSummary]:
        return [d.summary() for d in self.list(category=category, difficulty=difficulty)]

    @property
    def protocol_ids(self) -> list[str]:
        """List all registered protocol ids."""
        return list(self._protocols.keys())

    def __contains__(self, protocol_id: object) -> bool:
        return protocol_id in self._protocols

    def __len__(self) -> int:
        return len(self._protocols)
