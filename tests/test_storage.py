from __future__ import annotations

import json
from pathlib import Path

import pytest

from destctl.core.errors import StorageReadError
from destctl.storage.json_file import JsonFileStorage
from destctl.storage.memory import MemoryStorage


def test_json_storage_missing_file_is_empty(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "state" / "workspace-state.json")
    assert storage.get("build.xcodeDestination") is None


def test_json_storage_round_trip_and_delete(tmp_path: Path) -> None:
    path = tmp_path / "state" / "workspace-state.json"
    storage = JsonFileStorage(path)

    storage.set("build.xcodeDestination", {"id": "macos-arm64", "type": "macOS", "name": "My Mac"})
    storage.set("build.xcodeDestinationsUsageStatistics", {"macos-arm64": 1})

    reopened = JsonFileStorage(path)
    assert reopened.get("build.xcodeDestination")["id"] == "macos-arm64"
    assert reopened.get("build.xcodeDestinationsUsageStatistics") == {"macos-arm64": 1}

    reopened.set("build.xcodeDestination", None)
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "build.xcodeDestinationsUsageStatistics": {"macos-arm64": 1}
    }
    assert [p.name for p in path.parent.iterdir()] == ["workspace-state.json"]


def test_json_storage_keeps_mapping_order(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "state.json")
    storage.set("counts", {"z": 1, "a": 1})
    assert list(JsonFileStorage(tmp_path / "state.json").get("counts")) == ["z", "a"]


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_json_storage_rejects_bad_content(tmp_path: Path, content: str) -> None:
    path = tmp_path / "state.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(StorageReadError):
        JsonFileStorage(path).get("anything")


def test_memory_storage_copies_values() -> None:
    storage = MemoryStorage()
    value = {"a": 1}
    storage.set("counts", value)
    value["a"] = 99
    fetched = storage.get("counts")
    fetched["b"] = 2
    assert storage.get("counts") == {"a": 1}
