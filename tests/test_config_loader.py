from __future__ import annotations

from pathlib import Path

import pytest

from destctl.core.config_loader import load_config
from destctl.core.errors import ConfigLoadError, ConfigValidationError
from destctl.core.model import DestinationPlatform, DestinationType, SimulatorType
from destctl.core.ranking import DESTINATION_TYPE_PRIORITY


def _write_config(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_missing_config_uses_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))

    config = load_config()
    assert config.type_priority == DESTINATION_TYPE_PRIORITY
    assert config.default_arch == "arm64"
    assert config.state_file == tmp_path / "state" / "destctl" / "workspace-state.json"
    assert config.supported_platforms[0] == DestinationPlatform.IPHONE_SIMULATOR


def test_user_config_overrides_tables(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))

    _write_config(
        tmp_path / "cfg" / "destctl" / "config.yaml",
        f"""
destination_type_priority: [macOS, iOSSimulator]
simulator_type_priority: [iPad, iPhone]
supported_platforms: [iphonesimulator, macosx]
default_arch: x86_64
state_file: {tmp_path / "custom.json"}
""",
    )

    config = load_config()
    assert config.type_priority == (DestinationType.MACOS, DestinationType.IOS_SIMULATOR)
    assert config.simulator_type_priority == (SimulatorType.IPAD, SimulatorType.IPHONE)
    assert config.supported_platforms == (DestinationPlatform.IPHONE_SIMULATOR, DestinationPlatform.MACOSX)
    assert config.default_arch == "x86_64"
    assert config.state_file == tmp_path / "custom.json"


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    _write_config(path, "")
    config = load_config(path)
    assert config.type_priority == DESTINATION_TYPE_PRIORITY
    assert config.default_arch == "arm64"


def test_unknown_destination_type_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    _write_config(path, "destination_type_priority: [tvOSSimulator]\n")
    with pytest.raises(ConfigValidationError):
        load_config(path)


def test_unknown_key_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    _write_config(path, "sort_by_name: true\n")
    with pytest.raises(ConfigValidationError):
        load_config(path)


def test_duplicate_yaml_keys_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    _write_config(path, "default_arch: arm64\ndefault_arch: x86_64\n")
    with pytest.raises(ConfigValidationError):
        load_config(path)


@pytest.mark.parametrize("value", ['"   "', r'"\t"', '""'])
def test_blank_default_arch_rejected(tmp_path: Path, value: str) -> None:
    path = tmp_path / "config.yaml"
    _write_config(path, f"default_arch: {value}\n")
    with pytest.raises(ConfigValidationError, match="default_arch"):
        load_config(path)


def test_default_arch_is_stripped(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    _write_config(path, "default_arch: \"  x86_64 \"\n")
    assert load_config(path).default_arch == "x86_64"


def test_non_mapping_root_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    _write_config(path, "- macOS\n")
    with pytest.raises(ConfigValidationError):
        load_config(path)


def test_explicit_missing_path_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError):
        load_config(tmp_path / "nope.yaml")
