"""
Groundwork Estimator - Material Capacity Table

Static carrier data: how fast a carrier of a given size travels and how
much of each material it carries per trip.
"""

from typing import Dict

from .lookup import Lookup, Ok, fallback


DEFAULT_CARRIER_SPEED = 4000.0  # m/h
DEFAULT_CAPACITY = 1.0

# Carrier size (tonnes) -> travel speed (m/h)
CARRIER_SPEEDS: Dict[float, float] = {
    0.1: 1500,
    0.125: 1500,
    0.15: 1500,
    0.3: 2500,
    0.5: 1000,
    1: 4000,
    3: 6000,
    5: 7000,
    10: 8000,
}

CARRIER_SIZES = (0.1, 0.125, 0.15, 0.3, 0.5, 1, 3, 5, 10)


def _per_size(*capacities: float) -> Dict[float, float]:
    return dict(zip(CARRIER_SIZES, capacities))


def _bulk() -> Dict[float, float]:
    # Bulk materials in tonnes: a carrier moves its own size per trip
    return {size: float(size) for size in CARRIER_SIZES}


# Material -> carrier size -> units per trip
MATERIAL_CAPACITY: Dict[str, Dict[float, float]] = {
    "monoblocks": _per_size(33, 41, 50, 100, 166, 333, 666, 1000, 1000),
    "bricks": _per_size(33, 41, 50, 100, 166, 333, 666, 1000, 1000),
    "blocks": _per_size(6, 8, 10, 20, 33, 66, 133, 200, 200),
    "slabs": _per_size(2, 2.5, 3, 6, 10, 20, 40, 60, 60),
    "kerbsSmall": _per_size(20, 25, 30, 60, 100, 200, 400, 600, 600),
    "kerbsLarge": _per_size(4, 5, 6, 12, 20, 40, 80, 120, 120),
    "sets": _per_size(50, 62, 75, 150, 250, 500, 1000, 1500, 1500),
    "cement": _per_size(4, 5, 6, 12, 20, 40, 80, 120, 120),
    "sand": _bulk(),
    "type1": _bulk(),
    "tape1": _bulk(),
    "gritSand": _bulk(),
    "soil": _bulk(),
}


def lookup_carrier_speed(carrier_size: float) -> Lookup:
    """Exact match on carrier size; no interpolation."""
    speed = CARRIER_SPEEDS.get(carrier_size)
    if speed is None:
        return fallback(
            DEFAULT_CARRIER_SPEED,
            f"Carrier size {carrier_size} not found, using default speed {DEFAULT_CARRIER_SPEED:g} m/h",
        )
    return Ok(float(speed))


def find_carrier_speed(carrier_size: float) -> float:
    """Travel speed in m/h for a carrier size, 4000 when unknown."""
    return lookup_carrier_speed(carrier_size).value


def lookup_material_capacity(material: str, carrier_size: float) -> Lookup:
    """
    Units of ``material`` one trip of a ``carrier_size`` carrier moves.

    Unknown materials fall back to 1. A known material with an
    unlisted size uses the numerically closest listed size; on a tie the
    smaller (first-seen) size wins.
    """
    table = MATERIAL_CAPACITY.get(material)
    if table is None:
        return fallback(DEFAULT_CAPACITY, f"Material {material} not found in capacity data")

    if carrier_size in table:
        return Ok(float(table[carrier_size]))

    closest = None
    for size in sorted(table):
        if closest is None or abs(size - carrier_size) < abs(closest - carrier_size):
            closest = size
    capacity = table.get(closest, DEFAULT_CAPACITY)
    return fallback(
        float(capacity),
        f"Carrier size {carrier_size} not found for {material}, using closest size {closest}",
    )


def get_material_capacity(material: str, carrier_size: float) -> float:
    """Units per trip; never raises."""
    return lookup_material_capacity(material, carrier_size).value
