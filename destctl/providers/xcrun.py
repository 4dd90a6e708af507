"""Async runner for Xcode command line tools."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from destctl.core.errors import ProviderError

LOGGER = logging.getLogger(__name__)

CommandRunner = Callable[[Sequence[str]], Awaitable[str]]


async def run_xcrun(args: Sequence[str]) -> str:
    cmd = ["xcrun", *args]
    LOGGER.debug("Running %s", " ".join(cmd))
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as exc:
        raise ProviderError(
            "xcrun not found. Install Xcode command line tools and retry."
        ) from exc

    stdout, stderr = await process.communicate()
    if process.returncode != 0:
        details = stderr.decode("utf-8", errors="replace").strip() or f"exit code {process.returncode}"
        raise ProviderError(f"{' '.join(cmd)} failed: {details}")
    return stdout.decode("utf-8", errors="replace")
