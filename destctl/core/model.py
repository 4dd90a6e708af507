"""Core data models used across providers, ranking, manager, and CLI."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union

LOGGER = logging.getLogger(__name__)


class DestinationType(str, Enum):
    IOS_SIMULATOR = "iOSSimulator"
    WATCHOS_SIMULATOR = "watchOSSimulator"
    VISIONOS_SIMULATOR = "visionOSSimulator"
    IOS_DEVICE = "iOSDevice"
    MACOS = "macOS"


class DestinationPlatform(str, Enum):
    IPHONE_SIMULATOR = "iphonesimulator"
    WATCH_SIMULATOR = "watchsimulator"
    XR_SIMULATOR = "xrsimulator"
    IPHONE_OS = "iphoneos"
    MACOSX = "macosx"


class SimulatorType(str, Enum):
    IPHONE = "iPhone"
    IPAD = "iPad"
    IPOD = "iPod"
    APPLE_TV = "AppleTV"
    APPLE_WATCH = "AppleWatch"
    APPLE_VISION = "AppleVision"


class SimulatorState(str, Enum):
    BOOTED = "Booted"
    SHUTDOWN = "Shutdown"


class DeviceConnectionState(str, Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    UNAVAILABLE = "unavailable"


ALL_DESTINATION_TYPES: tuple[DestinationType, ...] = tuple(DestinationType)


@dataclass(frozen=True)
class _SimulatorFields:
    udid: str
    name: str
    is_available: bool
    state: SimulatorState
    os_version: str
    raw_device_type_identifier: str = ""
    raw_runtime: str = ""

    id_prefix: ClassVar[str] = ""
    type_label: ClassVar[str] = ""

    @property
    def id(self) -> str:
        return f"{self.id_prefix}-{self.udid}"

    @property
    def is_booted(self) -> bool:
        return self.state == SimulatorState.BOOTED

    @property
    def label(self) -> str:
        # iPhone 15 Pro (17.0)
        return f"{self.name} ({self.os_version})"

    @property
    def quick_pick_details(self) -> str:
        return f"Type: {self.type_label}, Version: {self.os_version}, ID: {self.udid.lower()}"


@dataclass(frozen=True)
class IOSSimulatorDestination(_SimulatorFields):
    simulator_type: SimulatorType = SimulatorType.IPHONE

    type: ClassVar[DestinationType] = DestinationType.IOS_SIMULATOR
    platform: ClassVar[DestinationPlatform] = DestinationPlatform.IPHONE_SIMULATOR
    id_prefix: ClassVar[str] = "iossimulator"
    type_label: ClassVar[str] = "iOS Simulator"


@dataclass(frozen=True)
class WatchOSSimulatorDestination(_SimulatorFields):
    type: ClassVar[DestinationType] = DestinationType.WATCHOS_SIMULATOR
    platform: ClassVar[DestinationPlatform] = DestinationPlatform.WATCH_SIMULATOR
    id_prefix: ClassVar[str] = "watchossimulator"
    type_label: ClassVar[str] = "watchOS Simulator"


@dataclass(frozen=True)
class VisionOSSimulatorDestination(_SimulatorFields):
    simulator_type: SimulatorType = SimulatorType.APPLE_VISION

    type: ClassVar[DestinationType] = DestinationType.VISIONOS_SIMULATOR
    platform: ClassVar[DestinationPlatform] = DestinationPlatform.XR_SIMULATOR
    id_prefix: ClassVar[str] = "visionossimulator"
    type_label: ClassVar[str] = "visionOS Simulator"


@dataclass(frozen=True)
class IOSDeviceDestination:
    udid: str
    name: str
    model: str = ""
    os_version: str = ""
    connection_state: DeviceConnectionState = DeviceConnectionState.CONNECTED

    type: ClassVar[DestinationType] = DestinationType.IOS_DEVICE
    platform: ClassVar[DestinationPlatform] = DestinationPlatform.IPHONE_OS
    type_label: ClassVar[str] = "iOS Device"

    @property
    def id(self) -> str:
        return f"iosdevice-{self.udid}"

    @property
    def is_connected(self) -> bool:
        return self.connection_state == DeviceConnectionState.CONNECTED

    @property
    def is_available(self) -> bool:
        return self.connection_state != DeviceConnectionState.UNAVAILABLE

    @property
    def label(self) -> str:
        return self.name

    @property
    def quick_pick_details(self) -> str:
        version = self.os_version or "unknown"
        return f"Type: {self.type_label}, Version: {version}, ID: {self.udid.lower()}"


@dataclass(frozen=True)
class MacOSDestination:
    arch: str
    name: str = "My Mac"

    type: ClassVar[DestinationType] = DestinationType.MACOS
    platform: ClassVar[DestinationPlatform] = DestinationPlatform.MACOSX
    type_label: ClassVar[str] = "macOS"

    @property
    def id(self) -> str:
        return f"macos-{self.arch}"

    @property
    def label(self) -> str:
        return self.name

    @property
    def quick_pick_details(self) -> str:
        return f"Type: {self.type_label}, Arch: {self.arch}"


SimulatorDestination = Union[
    IOSSimulatorDestination,
    WatchOSSimulatorDestination,
    VisionOSSimulatorDestination,
]

Destination = Union[
    IOSSimulatorDestination,
    WatchOSSimulatorDestination,
    VisionOSSimulatorDestination,
    IOSDeviceDestination,
    MacOSDestination,
]


@dataclass(frozen=True)
class SelectedDestination:
    """Minimal pointer to the chosen destination, as kept in workspace state."""

    id: str
    type: DestinationType
    name: str

    @classmethod
    def from_destination(cls, destination: Destination) -> SelectedDestination:
        return cls(id=destination.id, type=destination.type, name=destination.name)

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "type": self.type.value, "name": self.name}

    @classmethod
    def from_dict(cls, raw: Any) -> SelectedDestination | None:
        """Rebuild a pointer from stored state; malformed data reads as no selection."""
        if not isinstance(raw, dict):
            LOGGER.warning("Ignoring stored destination selection of type %s", type(raw).__name__)
            return None
        try:
            return cls(
                id=str(raw["id"]),
                type=DestinationType(raw["type"]),
                name=str(raw.get("name", "")),
            )
        except (KeyError, ValueError) as exc:
            LOGGER.warning("Ignoring malformed stored destination selection: %s", exc)
            return None
