"""
Groundwork Estimator - Foundation Excavation Calculator

Estimates digging time and spoil for a strip foundation, either on its
own or as an option of the wall calculator.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .dimensions import DimensionValue, parse_dimension
from .labour import TaskBreakdown
from .models import CalculationResult, EstimationCatalog, MaterialUsage
from .task_matcher import TaskMatcher, template_of

logger = logging.getLogger(__name__)


class SoilType(Enum):
    CLAY = "clay"
    SAND = "sand"
    ROCK = "rock"


class DiggingMethod(Enum):
    SHOVEL = "shovel"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


@dataclass
class FoundationInput:
    length: DimensionValue
    width: DimensionValue
    depth_cm: DimensionValue
    soil_type: SoilType = SoilType.CLAY
    digging_method: DiggingMethod = DiggingMethod.SHOVEL


class FoundationCalculator:
    """Excavation hours, spoil tonnage and concrete aggregate for a foundation."""

    # Baseline trench the dimension weights are relative to (metres)
    STANDARD_EXCAVATION = {"length": 15.0, "width": 0.6, "depth": 0.6}
    MANUAL_DIGGING_RATE = 0.45  # m³/h
    DIMENSION_WEIGHT = {"length": 0.5, "width": 0.3, "depth": 0.2}

    SOIL_DENSITY = {SoilType.CLAY: 1.5, SoilType.SAND: 1.6, SoilType.ROCK: 2.2}
    LOOSE_VOLUME_COEFFICIENT = {SoilType.CLAY: 1.2, SoilType.SAND: 1.025, SoilType.ROCK: 1.075}
    CONCRETE_AGGREGATE_KG_PER_M3 = 1050

    TASK_NAMES = {
        DiggingMethod.SHOVEL: "Excavating foundation with shovel",
        DiggingMethod.SMALL: "Excavating foundation with with small excavator",
        DiggingMethod.MEDIUM: "Excavating foundation with with medium excavator",
        DiggingMethod.LARGE: "Excavating foundation with with big excavator",
    }
    # Used instead of the template rate when the template is missing
    MACHINE_MULTIPLIER = {
        DiggingMethod.SHOVEL: 1,
        DiggingMethod.SMALL: 6,
        DiggingMethod.MEDIUM: 12,
        DiggingMethod.LARGE: 25,
    }

    def __init__(self, catalog: EstimationCatalog):
        self.catalog = catalog
        self.tasks = TaskMatcher(catalog.templates)

    def validate(self, request: FoundationInput) -> List[str]:
        errors = []
        for label, value in (("length", request.length), ("width", request.width),
                             ("depth", request.depth_cm)):
            number = parse_dimension(value)
            if number is None or number <= 0:
                errors.append(f"Foundation {label} must be a positive number")
        return errors

    def calculate(self, request: FoundationInput) -> Optional[CalculationResult]:
        errors = self.validate(request)
        if errors:
            logger.info("Foundation calculation skipped: %s", "; ".join(errors))
            return None

        breakdown = TaskBreakdown()
        self._add_excavation(request, breakdown)
        length, width, depth = self._dimensions(request)
        volume = length * width * depth
        return breakdown.build(
            name="Foundation Excavation",
            amount=volume,
            unit="cubic meters",
            materials=self.materials(request),
            details={"volume_m3": volume},
        )

    def _dimensions(self, request: FoundationInput):
        return (
            parse_dimension(request.length),
            parse_dimension(request.width),
            parse_dimension(request.depth_cm) / 100,
        )

    def base_hours(self, request: FoundationInput) -> float:
        """Manual digging hours adjusted for the trench's proportions."""
        length, width, depth = self._dimensions(request)
        volume = length * width * depth
        std = self.STANDARD_EXCAVATION
        weight = self.DIMENSION_WEIGHT
        adjustment = (
            weight["length"] * (length / std["length"])
            + weight["width"] * (width / std["width"])
            + weight["depth"] * (depth / std["depth"])
        )
        return (volume / self.MANUAL_DIGGING_RATE) * adjustment

    def _add_excavation(self, request: FoundationInput, breakdown: TaskBreakdown):
        method = request.digging_method
        task_name = self.TASK_NAMES[method]
        base = self.base_hours(request)
        lookup = breakdown.note(self.tasks.rate(task_name))
        template = template_of(lookup)
        if template is not None and template.estimated_hours:
            hours = base * template.estimated_hours
        else:
            hours = base / self.MACHINE_MULTIPLIER[method]
        length, width, depth = self._dimensions(request)
        breakdown.add(task_name, hours, length * width * depth, "cubic meters", template=template)

    def add_to(self, request: FoundationInput, breakdown: TaskBreakdown) -> List[MaterialUsage]:
        """Append the excavation entry to another calculator's breakdown."""
        self._add_excavation(request, breakdown)
        return self.materials(request)

    def materials(self, request: FoundationInput) -> List[MaterialUsage]:
        length, width, depth = self._dimensions(request)
        volume = length * width * depth
        soil = request.soil_type
        loose_tonnes = volume * self.LOOSE_VOLUME_COEFFICIENT[soil] * self.SOIL_DENSITY[soil]
        return [
            MaterialUsage(f"Excavated {soil.value.capitalize()} Soil (loose volume)",
                          loose_tonnes, "tonnes"),
            MaterialUsage("Aggregate (for concrete)",
                          volume * self.CONCRETE_AGGREGATE_KG_PER_M3 / 1000, "tonnes"),
        ]
