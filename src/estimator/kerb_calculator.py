"""
Groundwork Estimator - Kerbs, Edges and Sets Calculator

Kerbs, flat edges and 10x10 sets bedded on a mortar base with a haunch
on either side.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .dimensions import DimensionValue, parse_dimension
from .labour import TaskBreakdown
from .models import CalculationResult, EstimationCatalog, MaterialUsage, TransportOptions
from .task_matcher import TaskMatcher
from .transport import estimate_transport, resolve_transport

logger = logging.getLogger(__name__)


class KerbType(Enum):
    KL = "kl"
    RUMBLED = "rumbled"
    FLAT = "flat"
    SETS = "sets"


class HaunchType(Enum):
    FULL_BOTH = "full-both"
    HALF_BOTH = "half-both"
    SMALL_BOTH = "small-both"
    FULL_HALF = "full-half"
    FULL_SMALL = "full-small"
    HALF_SMALL = "half-small"


@dataclass(frozen=True)
class KerbSize:
    """Unit size in cm."""
    length: float
    height: float
    width: float


@dataclass
class KerbInput:
    length: DimensionValue  # m
    base_height_cm: DimensionValue
    kerb_type: KerbType = KerbType.KL
    haunch: HaunchType = HaunchType.FULL_BOTH
    rumbled_standing: bool = False
    transport: Optional[TransportOptions] = None


class KerbCalculator:
    """Units, bedding mortar and labour for a run of kerbs or sets."""

    NAMES = {
        KerbType.KL: "KL kerbs",
        KerbType.RUMBLED: "Rumbled kerbs",
        KerbType.FLAT: "Flat edges",
        KerbType.SETS: "10x10 sets",
    }
    SIZES = {
        KerbType.KL: KerbSize(10, 20, 10),
        KerbType.FLAT: KerbSize(100, 15, 5),
        KerbType.SETS: KerbSize(10, 5, 10),
    }
    RUMBLED_FLAT = KerbSize(20, 15, 8)
    RUMBLED_STANDING = KerbSize(15, 20, 8)

    # (left, right) haunch height as a share of the unit height
    HAUNCHES = {
        HaunchType.FULL_BOTH: (0.8, 0.8),
        HaunchType.HALF_BOTH: (0.5, 0.5),
        HaunchType.SMALL_BOTH: (0.2, 0.2),
        HaunchType.FULL_HALF: (0.8, 0.5),
        HaunchType.FULL_SMALL: (0.8, 0.2),
        HaunchType.HALF_SMALL: (0.5, 0.2),
    }
    HAUNCH_WIDTH_CM = 15

    # Per m³ of mortar
    CEMENT_KG_PER_M3 = 350
    SAND_T_PER_M3 = 1.6
    CEMENT_BAG_KG = 25

    TRANSPORT_MATERIAL = {
        KerbType.KL: "kerbsSmall",
        KerbType.RUMBLED: "kerbsLarge",
        KerbType.FLAT: "kerbsSmall",
        KerbType.SETS: "kerbsSmall",
    }

    LEVELING_TASK = "preparing for the wall (leveling)"

    def __init__(self, catalog: EstimationCatalog):
        self.catalog = catalog
        self.tasks = TaskMatcher(catalog.templates)

    def size(self, request: KerbInput) -> KerbSize:
        if request.kerb_type == KerbType.RUMBLED:
            return self.RUMBLED_STANDING if request.rumbled_standing else self.RUMBLED_FLAT
        return self.SIZES[request.kerb_type]

    def units(self, request: KerbInput, length_m: float) -> Tuple[float, str]:
        """Number of kerbs, edges or sets along ``length_m``."""
        if request.kerb_type == KerbType.RUMBLED:
            if request.rumbled_standing:
                return math.ceil(length_m * 6.67), "kerbs"
            return length_m * 5, "kerbs"
        if request.kerb_type == KerbType.FLAT:
            return length_m, "pieces"
        if request.kerb_type == KerbType.SETS:
            return length_m * 10, "sets"
        return length_m * 10, "kerbs"

    def mortar_volume(self, request: KerbInput, length_m: float, base_height_cm: float) -> float:
        """Bed under the units plus a triangular haunch on each side, in m³."""
        size = self.size(request)
        length_cm = length_m * 100
        volume = length_cm * size.width * base_height_cm / 1000000
        for share in self.HAUNCHES[request.haunch]:
            if share:
                volume += length_cm * self.HAUNCH_WIDTH_CM * size.height * share / (2 * 1000000)
        return volume

    def validate(self, request: KerbInput) -> List[str]:
        length = parse_dimension(request.length)
        base = parse_dimension(request.base_height_cm)
        if length is None or base is None:
            return ["Enter a valid length and base height"]
        errors = []
        if length <= 0 or base <= 0:
            errors.append("Length and base height must be positive")
        if self.tasks.find_containing(self.NAMES[request.kerb_type]) is None:
            errors.append(f"Task template not found for {self.NAMES[request.kerb_type]}")
        return errors

    def calculate(self, request: KerbInput) -> Optional[CalculationResult]:
        errors = self.validate(request)
        if errors:
            logger.info("Kerb calculation skipped: %s", "; ".join(errors))
            return None

        length = parse_dimension(request.length)
        volume = self.mortar_volume(request, length, parse_dimension(request.base_height_cm))
        cement_bags = math.ceil(volume * self.CEMENT_KG_PER_M3 / self.CEMENT_BAG_KG)
        sand_tonnes = round(volume * self.SAND_T_PER_M3, 2)
        units, unit = self.units(request, length)
        name = self.NAMES[request.kerb_type]

        breakdown = TaskBreakdown()
        template = self.tasks.find_containing(name)
        breakdown.add(template.name, (template.estimated_hours or 0) * length, length, "metres",
                      template=template)

        if request.transport is not None:
            carrier_size, distance = resolve_transport(request.transport, self.catalog)
            material = self.TRANSPORT_MATERIAL[request.kerb_type]
            if units > 0:
                breakdown.add_transport("transport kerbs",
                                        estimate_transport(units, carrier_size, material, distance),
                                        units, unit)
            if sand_tonnes > 0:
                breakdown.add_transport("transport sand",
                                        estimate_transport(sand_tonnes, carrier_size, "sand", distance),
                                        sand_tonnes, "tonnes")
            if cement_bags > 0:
                breakdown.add_transport("transport cement",
                                        estimate_transport(cement_bags, carrier_size, "cement", distance),
                                        cement_bags, "bags")

        leveling = self.tasks.find_exact(self.LEVELING_TASK)
        if leveling is not None and leveling.has_rate:
            breakdown.add_template(leveling, length, "metres",
                                   task="Preparing for kerbs/edges (leveling)")

        if request.kerb_type == KerbType.SETS:
            title = "SETS Installation"
        else:
            title = f"{request.kerb_type.value.upper()} Kerbs Installation"

        return breakdown.build(
            name=title,
            amount=length,
            unit="metres",
            materials=[
                MaterialUsage(name, units, unit),
                MaterialUsage("Cement", cement_bags, "bags"),
                MaterialUsage("Sand", sand_tonnes, "tonnes"),
            ],
            details={"mortar_volume_m3": volume},
        )
