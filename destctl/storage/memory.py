"""In-process workspace storage."""

from __future__ import annotations

import copy
from typing import Any


class MemoryStorage:
    """Keeps workspace state in a dict; values are copied in and out like a persisted store."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._values.get(key))

    def set(self, key: str, value: Any | None) -> None:
        if value is None:
            self._values.pop(key, None)
            return
        self._values[key] = copy.deepcopy(value)
