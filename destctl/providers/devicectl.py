"""Physical device enumeration backed by `xcrun devicectl`."""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
from typing import Any

from destctl.core.errors import ProviderError
from destctl.core.model import DeviceConnectionState, IOSDeviceDestination
from destctl.providers.base import CachedProvider
from destctl.providers.xcrun import CommandRunner, run_xcrun

LOGGER = logging.getLogger(__name__)

_IOS_DEVICE_TYPES = {"iPhone", "iPad", "iPod"}


class DevicectlDeviceProvider(CachedProvider[IOSDeviceDestination]):
    def __init__(self, *, runner: CommandRunner | None = None) -> None:
        super().__init__()
        self._runner = runner or run_xcrun

    async def refresh(self) -> None:
        with tempfile.TemporaryDirectory(prefix="destctl-") as tmp_dir:
            output_path = Path(tmp_dir) / "devices.json"
            await self._runner(["devicectl", "list", "devices", "--json-output", str(output_path)])
            try:
                content = output_path.read_text(encoding="utf-8")
            except OSError as exc:
                raise ProviderError(f"devicectl did not produce JSON output: {exc}") from exc
        self._store(parse_devicectl_devices(content))


def parse_devicectl_devices(content: str) -> list[IOSDeviceDestination]:
    try:
        payload = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ProviderError(f"Could not parse devicectl output: {exc}") from exc

    result = payload.get("result") if isinstance(payload, dict) else None
    raw_devices = result.get("devices") if isinstance(result, dict) else None
    if not isinstance(raw_devices, list):
        raise ProviderError("devicectl output is missing 'result.devices'")

    devices: list[IOSDeviceDestination] = []
    for raw in raw_devices:
        device = _build_device(raw)
        if device is not None:
            devices.append(device)
    return devices


def _connection_state(tunnel_state: Any) -> DeviceConnectionState:
    if tunnel_state == "connected":
        return DeviceConnectionState.CONNECTED
    if tunnel_state == "unavailable":
        return DeviceConnectionState.UNAVAILABLE
    return DeviceConnectionState.DISCONNECTED


def _build_device(raw: dict[str, Any]) -> IOSDeviceDestination | None:
    hardware = raw.get("hardwareProperties") or {}
    properties = raw.get("deviceProperties") or {}
    connection = raw.get("connectionProperties") or {}

    device_type = hardware.get("deviceType")
    if device_type not in _IOS_DEVICE_TYPES:
        LOGGER.debug("Skipping device of type %s", device_type)
        return None

    udid = hardware.get("udid") or raw.get("identifier")
    if not udid:
        LOGGER.debug("Skipping device without identifier")
        return None

    return IOSDeviceDestination(
        udid=udid,
        name=properties.get("name") or hardware.get("marketingName") or device_type,
        model=hardware.get("marketingName", ""),
        os_version=properties.get("osVersionNumber", ""),
        connection_state=_connection_state(connection.get("tunnelState")),
    )
