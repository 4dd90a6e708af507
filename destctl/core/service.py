"""Service layer used by CLI and future UI frontends."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from destctl.core.config_loader import DestinationsConfig, load_config
from destctl.core.errors import DestinationSelectionError, ProviderError
from destctl.core.manager import DestinationsManager
from destctl.core.model import Destination, DestinationPlatform, DestinationType, SelectedDestination
from destctl.providers.devicectl import DevicectlDeviceProvider
from destctl.providers.simctl import SimctlSimulatorProvider
from destctl.storage.json_file import JsonFileStorage


class DestinationService:
    def __init__(
        self,
        *,
        manager: DestinationsManager | None = None,
        config: DestinationsConfig | None = None,
    ) -> None:
        self.config = config or (manager.config if manager else load_config())
        self.manager = manager or DestinationsManager(
            simulators_provider=SimctlSimulatorProvider(),
            devices_provider=DevicectlDeviceProvider(),
            storage=JsonFileStorage(self.config.state_file),
            config=self.config,
        )
        self.refresh_warnings: tuple[str, ...] = ()

    def refresh(self) -> tuple[str, ...]:
        """Refresh providers; enumeration failures become warnings so the host stays listable."""
        try:
            asyncio.run(self.manager.refresh())
        except ProviderError as exc:
            self.refresh_warnings = (str(exc),)
        else:
            self.refresh_warnings = ()
        return self.refresh_warnings

    def list_destinations(
        self,
        platforms: Sequence[DestinationPlatform] | None = None,
        most_used: bool = False,
    ) -> list[Destination]:
        return asyncio.run(
            self.manager.get_destinations(
                platform_filter=platforms or None,
                most_used_sort=most_used,
            )
        )

    def list_simulators(self, sort: bool = False) -> list[Destination]:
        return asyncio.run(self.manager.get_simulators(sort=sort))

    def find(self, destination_id: str, destination_type: DestinationType | None = None) -> Destination | None:
        return asyncio.run(self.manager.find_destination(destination_id, type=destination_type))

    def select(
        self,
        destination_id: str,
        destination_type: DestinationType | None = None,
    ) -> SelectedDestination:
        destination = self.find(destination_id, destination_type)
        if destination is None:
            raise DestinationSelectionError(
                f"No destination found with id '{destination_id}'. Use 'destctl list' to inspect available destinations."
            )
        self.manager.set_workspace_destination(destination)
        return SelectedDestination.from_destination(destination)

    def clear_selection(self) -> None:
        self.manager.set_workspace_destination(None)

    def selected(self) -> SelectedDestination | None:
        return self.manager.get_selected_destination()

    def resolve_selected(self) -> Destination | None:
        return asyncio.run(self.manager.find_workspace_selected_destination())

    def most_used(self) -> list[tuple[Destination, int]]:
        destinations = asyncio.run(self.manager.get_most_used_destinations())
        return [(d, self.manager.usage.get(d.id)) for d in destinations]

    def usage_count(self, destination_id: str) -> int:
        return self.manager.usage.get(destination_id)
