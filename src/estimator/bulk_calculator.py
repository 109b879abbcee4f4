"""
Groundwork Estimator - Bulk Material Calculators

Volumetric calculators for loose materials: sand and aggregate
deliveries, mortar mixing, and type 1 sub-base installation.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .compacting import CompactedMaterial, compacting_time, get_compactor
from .dimensions import DimensionValue, parse_dimension
from .equipment import digger_loading_rate
from .labour import TaskBreakdown
from .models import Carrier, CalculationResult, EstimationCatalog, MaterialUsage, TransportOptions
from .task_matcher import TaskMatcher
from .transport import estimate_transport, resolve_transport
from .wall_calculator import mortar_batches

logger = logging.getLogger(__name__)

# t/m³
MATERIAL_DENSITIES: Dict[str, float] = {
    "Type 1 Aggregate": 2.1,
    "Grid Sand": 1.6,
    "Soil": 1.5,
    "Gravel": 1.6,
    "Crushed Stone": 2.4,
}


def _validate_material(material: str) -> List[str]:
    if material not in MATERIAL_DENSITIES:
        return [f"Unknown material: {material}"]
    return []


def _validate_numbers(**values) -> List[str]:
    errors = []
    for label, value in values.items():
        if parse_dimension(value) is None:
            errors.append(f"{label.replace('_', ' ').capitalize()} must be a number")
    return errors


# ==================== SAND DELIVERY ====================

@dataclass
class SandInput:
    length: DimensionValue  # m
    width: DimensionValue  # m
    height_mm: DimensionValue
    material: str = "Grid Sand"
    transport: Optional[TransportOptions] = None


class SandCalculator:
    """Mass of a delivered loose material, with optional wheeling time."""

    def __init__(self, catalog: EstimationCatalog):
        self.catalog = catalog

    def validate(self, request: SandInput) -> List[str]:
        return (_validate_numbers(length=request.length, width=request.width,
                                  height=request.height_mm)
                + _validate_material(request.material))

    def calculate(self, request: SandInput) -> Optional[CalculationResult]:
        errors = self.validate(request)
        if errors:
            logger.info("Sand calculation skipped: %s", "; ".join(errors))
            return None

        volume = (parse_dimension(request.length) * parse_dimension(request.width)
                  * parse_dimension(request.height_mm) / 1000)
        tonnes = volume * MATERIAL_DENSITIES[request.material]

        breakdown = TaskBreakdown()
        if request.transport is not None and tonnes > 0:
            carrier_size, distance = resolve_transport(request.transport, self.catalog)
            breakdown.add_transport(f"transport {request.material.lower()}",
                                    estimate_transport(tonnes, carrier_size, "sand", distance),
                                    round(tonnes, 2), "tonnes")

        return breakdown.build(
            name="Sand Delivery",
            amount=round(volume, 2),
            unit="cubic meters",
            materials=[MaterialUsage(request.material, round(tonnes, 2), "tonnes")],
            details={"volume_m3": volume, "mass_t": tonnes},
        )


# ==================== AGGREGATE ====================

@dataclass
class AggregateInput:
    length: DimensionValue  # m
    width: DimensionValue  # m
    depth_cm: DimensionValue
    material: str = "Type 1 Aggregate"


class AggregateCalculator:
    """Tonnes of aggregate to cover an area to a depth."""

    def __init__(self, catalog: EstimationCatalog):
        self.catalog = catalog

    def validate(self, request: AggregateInput) -> List[str]:
        return (_validate_numbers(length=request.length, width=request.width,
                                  depth=request.depth_cm)
                + _validate_material(request.material))

    def calculate(self, request: AggregateInput) -> Optional[CalculationResult]:
        errors = self.validate(request)
        if errors:
            logger.info("Aggregate calculation skipped: %s", "; ".join(errors))
            return None

        area = parse_dimension(request.length) * parse_dimension(request.width)
        volume = area * parse_dimension(request.depth_cm) / 100
        tonnes = volume * MATERIAL_DENSITIES[request.material]

        return TaskBreakdown().build(
            name="Aggregate Installation",
            amount=area,
            unit="square meters",
            materials=[MaterialUsage(request.material, round(tonnes, 2), "tonnes")],
            details={"volume_m3": volume, "mass_t": tonnes},
        )


# ==================== MORTAR ====================

class MortarMode(Enum):
    SLAB = "slab"
    GENERAL = "general"


@dataclass
class MortarInput:
    mode: MortarMode = MortarMode.GENERAL
    area: DimensionValue = None  # m², slab mode
    length: DimensionValue = None  # m, general mode
    width: DimensionValue = None  # m, general mode
    thickness_cm: DimensionValue = None  # general mode


class MortarCalculator:
    """Cement bags and sand for a volume of mortar."""

    SLAB_BED_M = 0.03
    # kg per m³ of mortar: (cement, sand)
    MIX_KG_PER_M3 = {
        MortarMode.SLAB: (350, 1200),
        MortarMode.GENERAL: (400, 1350),
    }
    CEMENT_BAG_KG = 25
    MIXING_TASK = "mixing mortar"

    def __init__(self, catalog: EstimationCatalog):
        self.catalog = catalog
        self.tasks = TaskMatcher(catalog.templates)

    def validate(self, request: MortarInput) -> List[str]:
        if request.mode == MortarMode.SLAB:
            values = {"area": request.area}
        else:
            values = {"length": request.length, "width": request.width,
                      "thickness": request.thickness_cm}
        errors = []
        for label, value in values.items():
            number = parse_dimension(value)
            if number is None or number <= 0:
                errors.append(f"{label.capitalize()} must be a positive number")
        return errors

    def calculate(self, request: MortarInput) -> Optional[CalculationResult]:
        errors = self.validate(request)
        if errors:
            logger.info("Mortar calculation skipped: %s", "; ".join(errors))
            return None

        if request.mode == MortarMode.SLAB:
            volume = parse_dimension(request.area) * self.SLAB_BED_M
        else:
            volume = (parse_dimension(request.length) * parse_dimension(request.width)
                      * parse_dimension(request.thickness_cm) / 100)
        cement_rate, sand_rate = self.MIX_KG_PER_M3[request.mode]
        cement_kg = volume * cement_rate
        sand_kg = volume * sand_rate
        cement_bags = math.ceil(cement_kg / self.CEMENT_BAG_KG)

        breakdown = TaskBreakdown()
        mixing = self.tasks.find_exact(self.MIXING_TASK)
        if mixing is not None and mixing.has_rate:
            batches = mortar_batches(cement_bags, sand_kg / 1000)
            if batches > 0:
                breakdown.add_template(mixing, batches, "batch", task=self.MIXING_TASK)

        return breakdown.build(
            name="Mortar Mixing",
            amount=round(volume, 3),
            unit="cubic meters",
            materials=[
                MaterialUsage("Cement", cement_bags, "bags"),
                MaterialUsage("Sand", round(sand_kg, 1), "kg"),
            ],
            details={"volume_m3": volume, "cement_kg": cement_kg, "sand_kg": sand_kg},
        )


# ==================== TYPE 1 ====================

@dataclass
class Type1Input:
    depth_cm: DimensionValue
    tons: DimensionValue = None  # direct tonnage, otherwise from dimensions
    length: DimensionValue = None  # m
    width: DimensionValue = None  # m
    excavator: Optional[Carrier] = None
    excavator_id: Optional[str] = None  # catalog excavator, when no inline one
    compactor_id: Optional[str] = None
    transport: Optional[TransportOptions] = None


class Type1Calculator:
    """Loading, wheeling and compacting a type 1 sub-base."""

    TYPE1_DENSITY = 2.3  # t/m³ compacted

    def __init__(self, catalog: EstimationCatalog):
        self.catalog = catalog

    def excavator(self, request: Type1Input) -> Optional[Carrier]:
        if request.excavator is not None:
            return request.excavator
        return self.catalog.find_excavator(request.excavator_id)

    def tonnes(self, request: Type1Input) -> float:
        direct = parse_dimension(request.tons)
        if direct is not None:
            return direct
        length = parse_dimension(request.length) or 0
        width = parse_dimension(request.width) or 0
        depth = parse_dimension(request.depth_cm) or 0
        return length * width * depth / 100 * self.TYPE1_DENSITY

    def validate(self, request: Type1Input) -> List[str]:
        errors = []
        if self.excavator(request) is None:
            if request.excavator_id:
                errors.append(f"Selected excavator not found (ID: {request.excavator_id})")
            else:
                errors.append("Select an excavator")
        if not request.compactor_id:
            errors.append("Select a compactor")
        elif get_compactor(request.compactor_id) is None:
            errors.append(f"Unknown compactor: {request.compactor_id}")
        if not self.tonnes(request) > 0:
            errors.append("Enter a tonnage or valid dimensions")
        depth = parse_dimension(request.depth_cm)
        if depth is None or depth <= 0:
            errors.append("Depth must be a positive number")
        return errors

    def calculate(self, request: Type1Input) -> Optional[CalculationResult]:
        errors = self.validate(request)
        if errors:
            logger.info("Type 1 calculation skipped: %s", "; ".join(errors))
            return None

        tonnes = self.tonnes(request)
        depth_cm = parse_dimension(request.depth_cm)
        area = (parse_dimension(request.length) or 0) * (parse_dimension(request.width) or 0)

        breakdown = TaskBreakdown()
        loading_rate = digger_loading_rate(self.excavator(request).size_t)
        breakdown.add("Preparation", tonnes / loading_rate, tonnes, "tonnes")

        if request.transport is not None:
            carrier_size, distance = resolve_transport(request.transport, self.catalog)
            breakdown.add_transport("Transport",
                                    estimate_transport(tonnes, carrier_size, "type1", distance),
                                    tonnes, "tonnes")

        compacting = compacting_time(get_compactor(request.compactor_id), depth_cm,
                                     CompactedMaterial.TYPE1)
        hours = compacting.hours_for(area)
        if hours > 0:
            breakdown.add(compacting.task_name, hours, area, "square meters")

        return breakdown.build(
            name="Type 1 Aggregate Installation",
            amount=tonnes,
            unit="tonnes",
            materials=[MaterialUsage("Type 1 Aggregate", round(tonnes, 2), "tonnes")],
            details={
                "loading_rate_t_per_h": loading_rate,
                "compacting_layers": compacting.layers,
                "compacting_passes": compacting.passes,
            },
        )
