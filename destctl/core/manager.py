"""Aggregation, ranking, and selection of build destinations."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence

from destctl.core.config_loader import SUPPORTED_DESTINATION_PLATFORMS, DestinationsConfig
from destctl.core.errors import ContextUnsetError, ProviderError
from destctl.core.events import EventEmitter, Listener
from destctl.core.host import detect_host_arch
from destctl.core.model import (
    ALL_DESTINATION_TYPES,
    Destination,
    DestinationPlatform,
    DestinationType,
    IOSDeviceDestination,
    IOSSimulatorDestination,
    MacOSDestination,
    SelectedDestination,
    SimulatorDestination,
    VisionOSSimulatorDestination,
    WatchOSSimulatorDestination,
)
from destctl.core.ranking import destination_sort_key
from destctl.core.usage import UsageLedger
from destctl.providers.base import DestinationProvider
from destctl.storage.base import WorkspaceStorage

SELECTED_DESTINATION_KEY = "build.xcodeDestination"

SIMULATORS_UPDATED = "simulators_updated"
DEVICES_UPDATED = "devices_updated"
XCODE_DESTINATION_UPDATED = "xcode_destination_updated"

LOGGER = logging.getLogger(__name__)


class DestinationsManager:
    def __init__(
        self,
        *,
        simulators_provider: DestinationProvider[SimulatorDestination],
        devices_provider: DestinationProvider[IOSDeviceDestination],
        storage: WorkspaceStorage | None,
        config: DestinationsConfig | None = None,
        arch_detector: Callable[[], str | None] = detect_host_arch,
    ) -> None:
        if storage is None:
            raise ContextUnsetError("Workspace storage must be provided before destinations can be managed.")
        self.simulators_provider = simulators_provider
        self.devices_provider = devices_provider
        self.storage = storage
        self.config = config or DestinationsConfig()
        self.usage = UsageLedger(storage)
        self._arch_detector = arch_detector
        self._emitter = EventEmitter((SIMULATORS_UPDATED, DEVICES_UPDATED, XCODE_DESTINATION_UPDATED))

        self.simulators_provider.on_updated(lambda: self._emitter.emit(SIMULATORS_UPDATED))
        self.devices_provider.on_updated(lambda: self._emitter.emit(DEVICES_UPDATED))

    def on(self, event: str, listener: Listener) -> None:
        self._emitter.on(event, listener)

    def off(self, event: str, listener: Listener) -> None:
        self._emitter.off(event, listener)

    async def refresh_simulators(self) -> None:
        await self.simulators_provider.refresh()

    async def refresh_ios_devices(self) -> None:
        await self.devices_provider.refresh()

    async def refresh(self) -> None:
        """Refresh simulators and devices; both are attempted even if one fails."""
        errors: list[ProviderError] = []
        for source, refresh in (
            ("simulators", self.refresh_simulators),
            ("devices", self.refresh_ios_devices),
        ):
            try:
                await refresh()
            except ProviderError as exc:
                LOGGER.warning("Refreshing %s failed: %s", source, exc)
                errors.append(exc)

        if len(errors) == 1:
            raise errors[0]
        if errors:
            details = "; ".join(str(error) for error in errors)
            raise ProviderError(f"Refreshing simulators and devices failed: {details}") from errors[0]

    def is_usage_stats_exist(self) -> bool:
        return self.usage.exists()

    async def get_most_used_destinations(self) -> list[Destination]:
        destinations: list[Destination] = []
        for destination_id in self.usage.most_used_order():
            destination = await self.find_destination(destination_id)
            if destination is not None:
                destinations.append(destination)
        return destinations

    async def get_simulators(self, *, sort: bool = False) -> list[SimulatorDestination]:
        simulators = list(await self.simulators_provider.get_entities())
        if sort:
            simulators = self._sorted(simulators)
        return simulators

    async def get_ios_simulators(self, *, sort: bool = False) -> list[IOSSimulatorDestination]:
        simulators = await self.get_simulators(sort=sort)
        return [s for s in simulators if s.type == DestinationType.IOS_SIMULATOR]

    async def get_visionos_simulators(self) -> list[VisionOSSimulatorDestination]:
        simulators = await self.get_simulators()
        return [s for s in simulators if s.type == DestinationType.VISIONOS_SIMULATOR]

    async def get_watchos_simulators(self) -> list[WatchOSSimulatorDestination]:
        simulators = await self.get_simulators()
        return [s for s in simulators if s.type == DestinationType.WATCHOS_SIMULATOR]

    async def get_ios_devices(self) -> list[IOSDeviceDestination]:
        devices = await self.devices_provider.get_entities()
        return [d for d in devices if d.type == DestinationType.IOS_DEVICE]

    async def get_macos_devices(self) -> list[MacOSDestination]:
        try:
            arch = self._arch_detector()
        except Exception as exc:
            LOGGER.debug("Host architecture detection failed: %s", exc)
            arch = None
        return [MacOSDestination(arch=arch or self.config.default_arch)]

    async def get_destinations(
        self,
        *,
        platform_filter: Iterable[DestinationPlatform] | None = None,
        most_used_sort: bool = False,
    ) -> list[Destination]:
        if platform_filter is None:
            platforms = set(self.config.supported_platforms)
        else:
            platforms = {DestinationPlatform(p) for p in platform_filter}
        fetchers = self._platform_fetchers()

        # Configured categories first, then any explicitly requested platform the config leaves out.
        order = self.config.supported_platforms + tuple(
            p for p in SUPPORTED_DESTINATION_PLATFORMS if p not in self.config.supported_platforms
        )
        destinations: list[Destination] = []
        for platform in order:
            if platform in platforms:
                destinations.extend(await fetchers[platform]())

        if most_used_sort:
            # Most used destinations go on top, ties fall back to regular ranking.
            counts = self.usage.snapshot()
            return sorted(
                destinations,
                key=lambda d: (-counts.get(d.id, 0), self._sort_key(d)),
            )
        return self._sorted(destinations)

    async def find_destination(
        self,
        destination_id: str,
        type: DestinationType | None = None,
    ) -> Destination | None:
        """Find a destination by id, optionally only among one destination type."""
        types = (DestinationType(type),) if type is not None else ALL_DESTINATION_TYPES
        for destination_type, fetch in self._type_fetchers():
            if destination_type not in types:
                continue
            for destination in await fetch():
                if destination.id == destination_id:
                    return destination
        return None

    def set_workspace_destination(self, destination: Destination | None) -> None:
        if destination is None:
            self.storage.set(SELECTED_DESTINATION_KEY, None)
            LOGGER.debug("Cleared selected destination")
            self._emitter.emit(XCODE_DESTINATION_UPDATED, None)
            return

        selected = SelectedDestination.from_destination(destination)
        self.storage.set(SELECTED_DESTINATION_KEY, selected.to_dict())
        self.usage.increment(destination.id)
        LOGGER.debug("Selected destination %s (%s)", selected.id, selected.name)
        self._emitter.emit(XCODE_DESTINATION_UPDATED, selected)

    def get_selected_destination(self) -> SelectedDestination | None:
        raw = self.storage.get(SELECTED_DESTINATION_KEY)
        if raw is None:
            return None
        return SelectedDestination.from_dict(raw)

    async def find_workspace_selected_destination(self) -> Destination | None:
        selected = self.get_selected_destination()
        if selected is None:
            return None
        return await self.find_destination(selected.id, type=selected.type)

    def _sort_key(self, destination: Destination) -> tuple[int, int, tuple[str, str, str]]:
        return destination_sort_key(
            destination,
            type_priority=self.config.type_priority,
            simulator_type_priority=self.config.simulator_type_priority,
        )

    def _sorted(self, destinations: Sequence[Destination]) -> list:
        return sorted(destinations, key=self._sort_key)

    def _platform_fetchers(self) -> dict[DestinationPlatform, Callable[[], Awaitable[Sequence[Destination]]]]:
        return {
            DestinationPlatform.IPHONE_SIMULATOR: self.get_ios_simulators,
            DestinationPlatform.WATCH_SIMULATOR: self.get_watchos_simulators,
            DestinationPlatform.IPHONE_OS: self.get_ios_devices,
            DestinationPlatform.MACOSX: self.get_macos_devices,
            DestinationPlatform.XR_SIMULATOR: self.get_visionos_simulators,
        }

    def _type_fetchers(self) -> tuple[tuple[DestinationType, Callable[[], Awaitable[Sequence[Destination]]]], ...]:
        # Simulators first, then devices, then the host machine.
        return (
            (DestinationType.IOS_SIMULATOR, self.get_ios_simulators),
            (DestinationType.WATCHOS_SIMULATOR, self.get_watchos_simulators),
            (DestinationType.VISIONOS_SIMULATOR, self.get_visionos_simulators),
            (DestinationType.IOS_DEVICE, self.get_ios_devices),
            (DestinationType.MACOS, self.get_macos_devices),
        )
