"""
Groundwork Estimator - Machine Dig-Out

Shared excavation tasks for the surface calculators (slabs, paving) and
the standalone soil excavation calculator: digging soil, loading type 1
and sand with an excavator, and hauling spoil and base with a carrier.

Equipment is chosen either inline or by id from the catalog's
excavators and carriers.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .dimensions import DimensionValue, parse_dimension
from .equipment import loading_sand_hours_per_tonne
from .labour import TaskBreakdown
from .material_capacity import get_material_capacity
from .models import Carrier, CalculationResult, EstimationCatalog, MaterialUsage
from .task_matcher import TaskMatcher

logger = logging.getLogger(__name__)


@dataclass
class Excavation:
    """Excavator, optional carrier and haul distances for a dig-out."""
    excavator: Optional[Carrier] = None
    carrier: Optional[Carrier] = None
    excavator_id: Optional[str] = None
    carrier_id: Optional[str] = None
    soil_distance: DimensionValue = None
    tape1_distance: DimensionValue = None


def resolve_equipment(excavation: Excavation,
                      catalog: EstimationCatalog) -> Tuple[Optional[Carrier], Optional[Carrier]]:
    """(excavator, carrier), inline records first, then catalog ids."""
    excavator = excavation.excavator
    if excavator is None and excavation.excavator_id:
        excavator = catalog.find_excavator(excavation.excavator_id)
    carrier = excavation.carrier
    if carrier is None and excavation.carrier_id:
        carrier = catalog.find_carrier(excavation.carrier_id)
    return excavator, carrier


def validate_equipment(excavation: Excavation, catalog: EstimationCatalog) -> List[str]:
    errors = []
    excavator, carrier = resolve_equipment(excavation, catalog)
    if excavator is None:
        if excavation.excavator_id:
            errors.append(f"Selected excavator not found (ID: {excavation.excavator_id})")
        else:
            errors.append("Select an excavator")
    if carrier is None and excavation.carrier_id:
        errors.append(f"Selected carrier not found (ID: {excavation.carrier_id})")
    return errors


def excavator_template(tasks: TaskMatcher, task: str, excavator: Carrier):
    """Template named like "Excavation soil with Digger (3t)"."""
    return tasks.find_containing(task, excavator.name, f"({excavator.size_t:g}t)")


def haul_hours(tonnes: float, material: str, carrier: Carrier, distance: float) -> float:
    """Round trips of a catalog carrier at its own speed."""
    trips = math.ceil(tonnes / get_material_capacity(material, carrier.size_t))
    return trips * distance * 2 / carrier.speed_m_per_hour


def add_dig_out(breakdown: TaskBreakdown, tasks: TaskMatcher, excavation: Excavation,
                catalog: EstimationCatalog, soil_tonnes: float, type1_tonnes: float,
                sand_tonnes: float):
    """
    Append dig-out tasks for a surface build-up.

    Soil excavation is always listed (0 hours without a template); type 1
    loading needs a matching template; sand loading uses the bracketed
    excavator rate. Hauls need a carrier with a speed and a distance.
    """
    excavator, carrier = resolve_equipment(excavation, catalog)
    if excavator is None:
        return

    soil_template = excavator_template(tasks, "excavation soil", excavator)
    soil_hours = 0.0
    if soil_template is not None and soil_template.estimated_hours:
        soil_hours = soil_template.estimated_hours * soil_tonnes
    else:
        breakdown.warn(f"Soil excavation template not found for: "
                       f"Excavation soil with {excavator.name} ({excavator.size_t:g}t)")
    breakdown.add("Soil excavation", soil_hours, soil_tonnes, "tonnes", template=soil_template)

    type1_template = excavator_template(tasks, "loading tape1", excavator)
    if type1_template is not None and type1_template.estimated_hours:
        breakdown.add("Loading tape1", type1_template.estimated_hours * type1_tonnes,
                      type1_tonnes, "tonnes", template=type1_template)
    else:
        breakdown.warn(f"Tape1 loading template not found for: "
                       f"Loading tape1 with {excavator.name} ({excavator.size_t:g}t)")

    if sand_tonnes > 0:
        hours = loading_sand_hours_per_tonne(excavator.size_t) * sand_tonnes
        breakdown.add("Loading sand", hours, sand_tonnes, "tonnes")

    if carrier is None or not carrier.speed_m_per_hour:
        return
    soil_distance = parse_dimension(excavation.soil_distance) or 0
    type1_distance = parse_dimension(excavation.tape1_distance) or 0
    if soil_distance > 0 and soil_tonnes > 0:
        breakdown.add(f"Transporting soil ({soil_distance:g}m)",
                      haul_hours(soil_tonnes, "soil", carrier, soil_distance),
                      soil_tonnes, "tonnes")
    if type1_distance > 0 and type1_tonnes > 0:
        breakdown.add(f"Transporting tape1 ({type1_distance:g}m)",
                      haul_hours(type1_tonnes, "tape1", carrier, type1_distance),
                      type1_tonnes, "tonnes")


# ==================== STANDALONE SOIL EXCAVATION ====================

@dataclass
class SoilExcavationInput:
    excavation: Excavation
    tons: DimensionValue = None  # direct tonnage, otherwise from dimensions
    length: DimensionValue = None  # m
    width: DimensionValue = None  # m
    depth_cm: DimensionValue = None
    distance: DimensionValue = None  # m, carrier haul


class SoilExcavationCalculator:
    """Digging out soil with an excavator and hauling it away."""

    SOIL_DENSITY = 1.5  # t/m³

    def __init__(self, catalog: EstimationCatalog):
        self.catalog = catalog
        self.tasks = TaskMatcher(catalog.templates)

    def tonnes(self, request: SoilExcavationInput) -> float:
        direct = parse_dimension(request.tons)
        if direct is not None:
            return direct
        length = parse_dimension(request.length) or 0
        width = parse_dimension(request.width) or 0
        depth = parse_dimension(request.depth_cm) or 0
        return length * width * depth / 100 * self.SOIL_DENSITY

    def validate(self, request: SoilExcavationInput) -> List[str]:
        errors = validate_equipment(request.excavation, self.catalog)
        if not self.tonnes(request) > 0:
            errors.append("Enter a tonnage or valid dimensions")
        excavator, _ = resolve_equipment(request.excavation, self.catalog)
        if excavator is not None and not errors:
            template = excavator_template(self.tasks, "excavation soil", excavator)
            if template is None or not template.estimated_hours:
                errors.append(f"Excavation template not found for {excavator.name} "
                              f"({excavator.size_t:g}t)")
        return errors

    def calculate(self, request: SoilExcavationInput) -> Optional[CalculationResult]:
        errors = self.validate(request)
        if errors:
            logger.info("Soil excavation skipped: %s", "; ".join(errors))
            return None

        tonnes = self.tonnes(request)
        excavator, carrier = resolve_equipment(request.excavation, self.catalog)
        template = excavator_template(self.tasks, "excavation soil", excavator)

        breakdown = TaskBreakdown()
        breakdown.add("Excavation", template.estimated_hours * tonnes, tonnes, "tonnes",
                      template=template)

        distance = parse_dimension(request.distance) or 0
        if carrier is not None and carrier.speed_m_per_hour and carrier.size_t > 0 and distance > 0:
            # Trips by carrier size, not the capacity table
            trips = math.ceil(tonnes / carrier.size_t)
            breakdown.add("Transport", trips * distance * 2 / carrier.speed_m_per_hour,
                          tonnes, "tonnes")

        return breakdown.build(
            name="Soil Excavation",
            amount=tonnes,
            unit="tonnes",
            materials=[MaterialUsage("Soil", tonnes, "tons")],
            details={"excavator": excavator.name, "carrier": carrier.name if carrier else None},
        )
