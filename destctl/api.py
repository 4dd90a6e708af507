"""Stable public API for building tooling on top of destctl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from collections.abc import Sequence

from destctl.core.config_loader import DestinationsConfig
from destctl.core.errors import (
    ConfigLoadError,
    ConfigValidationError,
    ContextUnsetError,
    DestctlError,
    DestinationSelectionError,
    ProviderError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from destctl.core.manager import DestinationsManager
from destctl.core.model import (
    Destination,
    DestinationPlatform,
    DestinationType,
    IOSDeviceDestination,
    IOSSimulatorDestination,
    MacOSDestination,
    SelectedDestination,
    SimulatorType,
    VisionOSSimulatorDestination,
    WatchOSSimulatorDestination,
)
from destctl.core.ranking import compare_destinations
from destctl.core.service import DestinationService

__all__ = [
    "DestctlError",
    "ConfigLoadError",
    "ConfigValidationError",
    "ContextUnsetError",
    "DestinationSelectionError",
    "ProviderError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "Destination",
    "DestinationPlatform",
    "DestinationType",
    "DestinationsConfig",
    "DestinationsManager",
    "IOSDeviceDestination",
    "IOSSimulatorDestination",
    "MacOSDestination",
    "SelectedDestination",
    "SimulatorType",
    "VisionOSSimulatorDestination",
    "WatchOSSimulatorDestination",
    "compare_destinations",
    "Client",
]


class Client:
    """Public client for interacting with destctl core capabilities.

    A `Client` instance wraps provider refreshes, destination ranking, and
    selection bookkeeping behind a synchronous API intended for third-party
    tools (editors/TUIs/scripts). Pass a prepared `DestinationsManager` to
    control providers and storage; otherwise the Xcode tools and the state
    file from the config are used.
    """

    def __init__(
        self,
        *,
        manager: DestinationsManager | None = None,
        config: DestinationsConfig | None = None,
    ) -> None:
        self._service = DestinationService(manager=manager, config=config)

    @property
    def refresh_warnings(self) -> tuple[str, ...]:
        return self._service.refresh_warnings

    def refresh(self) -> tuple[str, ...]:
        return self._service.refresh()

    def list_destinations(
        self,
        *,
        platforms: Sequence[DestinationPlatform] | None = None,
        most_used: bool = False,
    ) -> list[Destination]:
        return self._service.list_destinations(platforms=platforms, most_used=most_used)

    def find_destination(
        self,
        destination_id: str,
        *,
        destination_type: DestinationType | None = None,
    ) -> Destination | None:
        return self._service.find(destination_id, destination_type)

    def select_destination(
        self,
        destination_id: str,
        *,
        destination_type: DestinationType | None = None,
    ) -> SelectedDestination:
        return self._service.select(destination_id, destination_type)

    def clear_selection(self) -> None:
        self._service.clear_selection()

    def get_selected_destination(self) -> SelectedDestination | None:
        return self._service.selected()

    def most_used_destinations(self) -> list[tuple[Destination, int]]:
        return self._service.most_used()
