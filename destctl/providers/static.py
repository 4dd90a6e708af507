"""Provider over a caller-supplied list of destinations."""

from __future__ import annotations

from collections.abc import Sequence

from destctl.providers.base import CachedProvider, EntityT


class StaticProvider(CachedProvider[EntityT]):
    def __init__(self, entities: Sequence[EntityT] = ()) -> None:
        super().__init__()
        self._pending = list(entities)
        self._entities = list(entities)
        self.refresh_count = 0

    async def refresh(self) -> None:
        self.refresh_count += 1
        self._store(self._pending)

    def set_entities(self, entities: Sequence[EntityT]) -> None:
        self._pending = list(entities)
        self._store(self._pending)
