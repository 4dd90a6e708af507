"""Workspace storage persisted as a single JSON object on disk."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from destctl.core.errors import StorageReadError, StorageWriteError

LOGGER = logging.getLogger(__name__)


class JsonFileStorage:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def get(self, key: str) -> Any | None:
        return self._read().get(key)

    def set(self, key: str, value: Any | None) -> None:
        state = self._read()
        if value is None:
            state.pop(key, None)
        else:
            state[key] = value
        self._write(state)

    def _read(self) -> dict[str, Any]:
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise StorageReadError(f"Could not read workspace state {self.path}: {exc}") from exc

        if not content.strip():
            return {}
        try:
            loaded = json.loads(content)
        except json.JSONDecodeError as exc:
            raise StorageReadError(f"Invalid JSON in workspace state {self.path}: {exc}") from exc

        if not isinstance(loaded, dict):
            raise StorageReadError(f"Workspace state {self.path} must contain an object at root")
        return loaded

    def _write(self, state: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                dir=self.path.parent,
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(state, handle, indent=2)
                    handle.write("\n")
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageWriteError(f"Could not write workspace state {self.path}: {exc}") from exc
        LOGGER.debug("Wrote workspace state to %s", self.path)
