"""Workspace storage interfaces."""

from __future__ import annotations

from typing import Any, Protocol


class WorkspaceStorage(Protocol):
    def get(self, key: str) -> Any | None:
        """Return the stored value for key, or None when nothing is stored."""

    def set(self, key: str, value: Any | None) -> None:
        """Replace the stored value for key; None removes it."""
