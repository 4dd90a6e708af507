"""Host machine architecture detection."""

from __future__ import annotations

import logging
import platform

LOGGER = logging.getLogger(__name__)

_ARCH_ALIASES = {
    "arm64": "arm64",
    "aarch64": "arm64",
    "x86_64": "x86_64",
    "amd64": "x86_64",
}


def detect_host_arch() -> str | None:
    machine = platform.machine().strip().lower()
    if not machine:
        return None
    arch = _ARCH_ALIASES.get(machine)
    if arch is None:
        LOGGER.debug("Unrecognised host machine '%s'", machine)
    return arch
