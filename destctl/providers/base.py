"""Enumeration provider interfaces."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Generic, Protocol, TypeVar

LOGGER = logging.getLogger(__name__)

EntityT = TypeVar("EntityT")
EntityT_co = TypeVar("EntityT_co", covariant=True)


class DestinationProvider(Protocol[EntityT_co]):
    async def refresh(self) -> None:
        """Re-enumerate and cache entities; raise ProviderError on failure."""

    async def get_entities(self) -> Sequence[EntityT_co]:
        """Return the last cached entities, empty when never populated."""

    def on_updated(self, listener: Callable[[], None]) -> None:
        """Register a callback fired whenever the cached entities change."""


class CachedProvider(Generic[EntityT]):
    """Shared cache and change notification for concrete providers."""

    def __init__(self) -> None:
        self._entities: list[EntityT] = []
        self._listeners: list[Callable[[], None]] = []

    async def get_entities(self) -> list[EntityT]:
        return list(self._entities)

    def on_updated(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def _store(self, entities: Sequence[EntityT]) -> bool:
        updated = list(entities)
        if updated == self._entities:
            return False
        self._entities = updated
        LOGGER.debug("%s cached %d entities", type(self).__name__, len(updated))
        for listener in list(self._listeners):
            listener()
        return True
