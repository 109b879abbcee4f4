"""
Groundwork Estimator - Transport Time Model

Converts a material quantity, a carrier and a one-way distance into the
hours spent fetching that material. Every calculator shares this one
model.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional

from .dimensions import parse_distance
from .lookup import Lookup
from .material_capacity import lookup_carrier_speed, lookup_material_capacity
from .models import DEFAULT_CARRIER_SIZE_T, DEFAULT_TRANSPORT_DISTANCE_M, EstimationCatalog, TransportOptions

logger = logging.getLogger(__name__)

ON_FOOT_SPEED = 1500.0  # m/h, one item carried by hand


@dataclass
class TransportEstimate:
    """Round trips and elapsed hours for moving one material."""
    trips: int
    time_per_trip: float
    total_hours: float
    normalized_hours: float
    lookups: List[Lookup] = field(default_factory=list)

    @property
    def warnings(self) -> List[str]:
        return [item.reason for item in self.lookups if item.is_fallback]


def normalize_to_reference(total_hours: float, distance: float) -> float:
    """
    Rescale transport hours as if the distance were the 30 m reference.

    A zero distance has no meaningful rescaling: the result is NaN for
    zero hours and infinity otherwise, matching float division.
    """
    if distance == 0:
        logger.warning("Transport distance is 0; normalized transport time is undefined")
        if total_hours == 0:
            return math.nan
        return math.copysign(math.inf, total_hours)
    return (total_hours * DEFAULT_TRANSPORT_DISTANCE_M) / distance


def estimate_transport(quantity: float, carrier_size: float, material: str,
                       distance: float) -> TransportEstimate:
    """
    Hours needed to move ``quantity`` of ``material`` over ``distance`` metres.

    Args:
        quantity: Units (pieces, bags or tonnes) to move
        carrier_size: Carrier size in tonnes
        material: Key into the material capacity table
        distance: One-way distance in metres

    Returns:
        TransportEstimate with trips, total and 30 m-normalized hours
    """
    speed = lookup_carrier_speed(carrier_size)
    capacity = lookup_material_capacity(material, carrier_size)

    trips = math.ceil(quantity / capacity.value)
    time_per_trip = (distance * 2) / speed.value
    total = trips * time_per_trip

    return TransportEstimate(
        trips=trips,
        time_per_trip=time_per_trip,
        total_hours=total,
        normalized_hours=normalize_to_reference(total, distance),
        lookups=[speed, capacity],
    )


def estimate_carry_on_foot(count: float, distance: float, per_trip: int = 1,
                           speed: float = ON_FOOT_SPEED) -> TransportEstimate:
    """Hand-carried items such as sleepers and posts."""
    trips = math.ceil(count / per_trip)
    time_per_trip = (distance * 2) / speed
    total = trips * time_per_trip
    return TransportEstimate(
        trips=trips,
        time_per_trip=time_per_trip,
        total_hours=total,
        normalized_hours=normalize_to_reference(total, distance),
    )


def resolve_transport(options: TransportOptions, catalog: Optional[EstimationCatalog] = None):
    """
    Return (carrier_size, distance) for the options, applying defaults.

    A ``carrier_id`` is looked up in the catalog carriers; an unknown id
    falls back to ``carrier_size`` or the wheelbarrow.
    """
    carrier_size = DEFAULT_CARRIER_SIZE_T
    carrier = catalog.find_carrier(options.carrier_id) if catalog is not None else None
    if carrier is not None and carrier.size_t > 0:
        carrier_size = carrier.size_t
    else:
        if options.carrier_id:
            logger.warning("Carrier %s not found, using carrier size", options.carrier_id)
        if options.carrier_size:
            carrier_size = float(options.carrier_size)
    return carrier_size, parse_distance(options.distance)
