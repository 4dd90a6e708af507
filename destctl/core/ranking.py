"""Deterministic ordering of destinations by type, simulator kind, and name."""

from __future__ import annotations

import unicodedata
from collections.abc import Sequence

from destctl.core.model import ALL_DESTINATION_TYPES, Destination, DestinationType, SimulatorType

ALL_SIMULATOR_TYPES: tuple[SimulatorType, ...] = tuple(SimulatorType)

DESTINATION_TYPE_PRIORITY: tuple[DestinationType, ...] = (
    DestinationType.IOS_DEVICE,
    DestinationType.IOS_SIMULATOR,
    DestinationType.WATCHOS_SIMULATOR,
    DestinationType.VISIONOS_SIMULATOR,
    DestinationType.MACOS,
)

SIMULATOR_TYPE_PRIORITY: tuple[SimulatorType, ...] = (
    SimulatorType.IPHONE,
    SimulatorType.IPAD,
    SimulatorType.IPOD,
    SimulatorType.APPLE_TV,
    SimulatorType.APPLE_WATCH,
    SimulatorType.APPLE_VISION,
)


def _priority_index(value: object, table: Sequence[object], universe: Sequence[object]) -> int:
    # Values missing from the table sort after every listed value, each at its own rank.
    try:
        return table.index(value)
    except ValueError:
        return len(table) + universe.index(value)


def name_collation_key(name: str) -> tuple[str, str, str]:
    """Collation key approximating a locale-aware comparison of display names.

    Accents and case are ignored at the primary level; lowercase sorts before
    uppercase when names differ only in case; raw code points break the rest.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    primary = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return primary, name.casefold(), name.swapcase()


def destination_sort_key(
    destination: Destination,
    *,
    type_priority: Sequence[DestinationType] = DESTINATION_TYPE_PRIORITY,
    simulator_type_priority: Sequence[SimulatorType] = SIMULATOR_TYPE_PRIORITY,
) -> tuple[int, int, tuple[str, str, str]]:
    if destination.type == DestinationType.IOS_SIMULATOR:
        simulator_rank = _priority_index(destination.simulator_type, simulator_type_priority, ALL_SIMULATOR_TYPES)
    else:
        simulator_rank = 0
    return (
        _priority_index(destination.type, type_priority, ALL_DESTINATION_TYPES),
        simulator_rank,
        name_collation_key(destination.name),
    )


def compare_destinations(
    a: Destination,
    b: Destination,
    *,
    type_priority: Sequence[DestinationType] = DESTINATION_TYPE_PRIORITY,
    simulator_type_priority: Sequence[SimulatorType] = SIMULATOR_TYPE_PRIORITY,
) -> int:
    """Compare two destinations without taking usage statistics into account."""
    a_priority = _priority_index(a.type, type_priority, ALL_DESTINATION_TYPES)
    b_priority = _priority_index(b.type, type_priority, ALL_DESTINATION_TYPES)
    if a_priority != b_priority:
        return a_priority - b_priority

    if a.type == DestinationType.IOS_SIMULATOR and b.type == DestinationType.IOS_SIMULATOR:
        a_sim = _priority_index(a.simulator_type, simulator_type_priority, ALL_SIMULATOR_TYPES)
        b_sim = _priority_index(b.simulator_type, simulator_type_priority, ALL_SIMULATOR_TYPES)
        if a_sim != b_sim:
            return a_sim - b_sim

    a_name = name_collation_key(a.name)
    b_name = name_collation_key(b.name)
    if a_name == b_name:
        return 0
    return -1 if a_name < b_name else 1
