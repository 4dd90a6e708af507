"""Simulator enumeration backed by `xcrun simctl`."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from destctl.core.errors import ProviderError
from destctl.core.model import (
    IOSSimulatorDestination,
    SimulatorDestination,
    SimulatorState,
    SimulatorType,
    VisionOSSimulatorDestination,
    WatchOSSimulatorDestination,
)
from destctl.providers.base import CachedProvider
from destctl.providers.xcrun import CommandRunner, run_xcrun

LOGGER = logging.getLogger(__name__)

_RUNTIME_RE = re.compile(r"SimRuntime\.(?P<os>[A-Za-z]+)-(?P<version>[0-9]+(?:-[0-9]+)*)$")
_SIMULATOR_TYPE_MARKERS: tuple[tuple[str, SimulatorType], ...] = (
    ("iphone", SimulatorType.IPHONE),
    ("ipad", SimulatorType.IPAD),
    ("ipod", SimulatorType.IPOD),
    ("apple-tv", SimulatorType.APPLE_TV),
    ("apple-watch", SimulatorType.APPLE_WATCH),
    ("apple-vision", SimulatorType.APPLE_VISION),
)


class SimctlSimulatorProvider(CachedProvider[SimulatorDestination]):
    def __init__(self, *, runner: CommandRunner | None = None) -> None:
        super().__init__()
        self._runner = runner or run_xcrun

    async def refresh(self) -> None:
        output = await self._runner(["simctl", "list", "devices", "--json"])
        self._store(parse_simctl_devices(output))


def parse_simctl_devices(output: str) -> list[SimulatorDestination]:
    try:
        payload = json.loads(output)
    except json.JSONDecodeError as exc:
        raise ProviderError(f"Could not parse simctl output: {exc}") from exc

    devices_by_runtime = payload.get("devices") if isinstance(payload, dict) else None
    if not isinstance(devices_by_runtime, dict):
        raise ProviderError("simctl output is missing the 'devices' mapping")

    simulators: list[SimulatorDestination] = []
    for runtime, devices in devices_by_runtime.items():
        match = _RUNTIME_RE.search(runtime)
        if not match:
            LOGGER.debug("Skipping unrecognised runtime '%s'", runtime)
            continue
        os_name = match.group("os")
        os_version = match.group("version").replace("-", ".")
        for raw in devices:
            simulator = _build_simulator(raw, os_name=os_name, os_version=os_version, runtime=runtime)
            if simulator is not None:
                simulators.append(simulator)
    return simulators


def _simulator_type(device_type_identifier: str, name: str) -> SimulatorType | None:
    haystacks = (device_type_identifier.rsplit(".", 1)[-1].lower(), name.lower().replace(" ", "-"))
    for haystack in haystacks:
        for marker, simulator_type in _SIMULATOR_TYPE_MARKERS:
            if haystack.startswith(marker):
                return simulator_type
    return None


def _build_simulator(
    raw: dict[str, Any],
    *,
    os_name: str,
    os_version: str,
    runtime: str,
) -> SimulatorDestination | None:
    udid = raw.get("udid")
    name = raw.get("name")
    if not udid or not name:
        LOGGER.debug("Skipping simulator entry without udid/name in %s", runtime)
        return None

    device_type_identifier = raw.get("deviceTypeIdentifier", "")
    common: dict[str, Any] = {
        "udid": udid,
        "name": name,
        "is_available": bool(raw.get("isAvailable", False)),
        "state": SimulatorState.BOOTED if raw.get("state") == "Booted" else SimulatorState.SHUTDOWN,
        "os_version": os_version,
        "raw_device_type_identifier": device_type_identifier,
        "raw_runtime": runtime,
    }

    if os_name == "iOS":
        simulator_type = _simulator_type(device_type_identifier, name)
        if simulator_type is None:
            LOGGER.debug("Skipping iOS simulator '%s' with unknown device type", name)
            return None
        return IOSSimulatorDestination(simulator_type=simulator_type, **common)
    if os_name == "watchOS":
        return WatchOSSimulatorDestination(**common)
    if os_name in {"xrOS", "visionOS"}:
        return VisionOSSimulatorDestination(**common)

    LOGGER.debug("Skipping simulator '%s' on unsupported OS %s", name, os_name)
    return None
