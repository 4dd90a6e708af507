"""Loading and validation of the YAML destctl configuration file."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from destctl.core.errors import ConfigLoadError, ConfigValidationError
from destctl.core.model import DestinationPlatform, DestinationType, SimulatorType
from destctl.core.ranking import DESTINATION_TYPE_PRIORITY, SIMULATOR_TYPE_PRIORITY

LOGGER = logging.getLogger(__name__)

DEFAULT_ARCH = "arm64"

# Order in which destination categories are concatenated before sorting.
SUPPORTED_DESTINATION_PLATFORMS: tuple[DestinationPlatform, ...] = (
    DestinationPlatform.IPHONE_SIMULATOR,
    DestinationPlatform.WATCH_SIMULATOR,
    DestinationPlatform.IPHONE_OS,
    DestinationPlatform.MACOSX,
    DestinationPlatform.XR_SIMULATOR,
)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


def _default_state_file() -> Path:
    xdg_state = Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local/state"))
    return xdg_state / "destctl/workspace-state.json"


@dataclass(frozen=True)
class DestinationsConfig:
    type_priority: tuple[DestinationType, ...] = DESTINATION_TYPE_PRIORITY
    simulator_type_priority: tuple[SimulatorType, ...] = SIMULATOR_TYPE_PRIORITY
    supported_platforms: tuple[DestinationPlatform, ...] = SUPPORTED_DESTINATION_PLATFORMS
    default_arch: str = DEFAULT_ARCH
    state_file: Path = field(default_factory=_default_state_file)


def config_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "destctl/config.yaml"


def _load_schema_validator() -> Any:
    schema_text = resources.files("destctl.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping at root")
    return loaded


def _build_config(doc: dict[str, Any], source: Path) -> DestinationsConfig:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    defaults = DestinationsConfig()
    type_priority = defaults.type_priority
    if "destination_type_priority" in doc:
        type_priority = tuple(DestinationType(v) for v in doc["destination_type_priority"])
        missing = [t.value for t in DestinationType if t not in type_priority]
        if missing:
            LOGGER.warning(
                "Destination types missing from destination_type_priority sort last: %s",
                ", ".join(missing),
            )

    simulator_type_priority = defaults.simulator_type_priority
    if "simulator_type_priority" in doc:
        simulator_type_priority = tuple(SimulatorType(v) for v in doc["simulator_type_priority"])

    supported_platforms = defaults.supported_platforms
    if "supported_platforms" in doc:
        supported_platforms = tuple(DestinationPlatform(v) for v in doc["supported_platforms"])

    state_file = defaults.state_file
    if "state_file" in doc:
        state_file = Path(doc["state_file"]).expanduser()

    return DestinationsConfig(
        type_priority=type_priority,
        simulator_type_priority=simulator_type_priority,
        supported_platforms=supported_platforms,
        default_arch=doc.get("default_arch", defaults.default_arch).strip(),
        state_file=state_file,
    )


def load_config(path: Path | None = None) -> DestinationsConfig:
    source = path or config_path()
    if not source.exists():
        if path is not None:
            raise ConfigLoadError(f"Config file {source} does not exist")
        return DestinationsConfig()

    doc = _read_yaml(source)
    config = _build_config(doc, source)
    LOGGER.debug("Loaded config from %s", source)
    return config
