"""Per-destination selection counters kept in workspace storage."""

from __future__ import annotations

import logging
from typing import Any

from destctl.storage.base import WorkspaceStorage

USAGE_STATS_KEY = "build.xcodeDestinationsUsageStatistics"
LOGGER = logging.getLogger(__name__)


class UsageLedger:
    """Counts how often each destination id has been selected.

    Counts only grow: one increment per explicit selection. Entries for
    destinations that no longer exist are kept so their history still ranks
    them if they come back.
    """

    def __init__(self, storage: WorkspaceStorage, *, key: str = USAGE_STATS_KEY) -> None:
        self._storage = storage
        self._key = key

    def exists(self) -> bool:
        return self._storage.get(self._key) is not None

    def snapshot(self) -> dict[str, int]:
        return _clean_counts(self._storage.get(self._key))

    def get(self, destination_id: str) -> int:
        return self.snapshot().get(destination_id, 0)

    def increment(self, destination_id: str) -> int:
        # Read, bump, and replace the whole mapping with no suspension point in between.
        counts = self.snapshot()
        counts[destination_id] = counts.get(destination_id, 0) + 1
        self._storage.set(self._key, counts)
        LOGGER.debug("Usage for %s is now %d", destination_id, counts[destination_id])
        return counts[destination_id]

    def most_used_order(self) -> list[str]:
        """Ids by descending count; equal counts keep their stored insertion order."""
        counts = self.snapshot()
        return sorted(counts, key=lambda destination_id: -counts[destination_id])


def _clean_counts(raw: Any) -> dict[str, int]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        LOGGER.warning("Ignoring usage statistics of type %s", type(raw).__name__)
        return {}

    counts: dict[str, int] = {}
    for destination_id, count in raw.items():
        if not isinstance(destination_id, str) or isinstance(count, bool) or not isinstance(count, int) or count < 0:
            LOGGER.warning("Ignoring malformed usage entry %r -> %r", destination_id, count)
            continue
        counts[destination_id] = count
    return counts
