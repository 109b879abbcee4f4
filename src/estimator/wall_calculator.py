"""
Groundwork Estimator - Masonry Wall Calculator

Brick and block walls: unit counts from rows × units per row, mortar
split into cement bags and sand tonnes, and the labour to lay, supply
and mix for the wall. Sleeper walls are handed to the sleeper wall
calculator.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .dimensions import DimensionValue, parse_dimension, parse_mix_ratio
from .foundation_calculator import FoundationCalculator, FoundationInput
from .labour import TaskBreakdown
from .models import CalculationResult, EstimationCatalog, MaterialUsage, TransportOptions
from .sleeper_wall_calculator import PostMethod, SleeperWallCalculator, SleeperWallInput
from .task_matcher import TaskMatcher
from .transport import estimate_transport, resolve_transport

logger = logging.getLogger(__name__)


class WallType(Enum):
    BRICK = "brick"
    BLOCK4 = "block4"
    BLOCK7 = "block7"
    SLEEPER = "sleeper"


class LayingMethod(Enum):
    STANDING = "standing"
    FLAT = "flat"


@dataclass
class WallInput:
    length: DimensionValue
    height: DimensionValue
    wall_type: WallType = WallType.BRICK
    laying_method: LayingMethod = LayingMethod.STANDING
    openings: DimensionValue = None  # m² of windows and doors
    transport: Optional[TransportOptions] = None
    foundation: Optional[FoundationInput] = None
    post_method: PostMethod = PostMethod.CONCRETE


@dataclass(frozen=True)
class UnitSize:
    """Face size of one masonry unit in metres."""
    length: float
    height: float


class WallCalculator:
    """Calculate units, mortar and labour for brick and block walls."""

    MORTAR_JOINT = 0.01
    BRICK = UnitSize(length=0.215, height=0.06)
    BLOCK_LENGTH = 0.44
    BLOCK_HEIGHT = 0.22
    BLOCK_WIDTH = {WallType.BLOCK4: 0.10, WallType.BLOCK7: 0.14}

    # Mortar per unit in m³, 20% waste already included
    MORTAR_PER_UNIT = {
        (WallType.BRICK, LayingMethod.STANDING): 0.000269,
        (WallType.BRICK, LayingMethod.FLAT): 0.000269,
        (WallType.BLOCK4, LayingMethod.STANDING): 0.000871,
        (WallType.BLOCK4, LayingMethod.FLAT): 0.001452,
        (WallType.BLOCK7, LayingMethod.STANDING): 0.001109,
        (WallType.BLOCK7, LayingMethod.FLAT): 0.001531,
    }

    CEMENT_DENSITY = 1500  # kg/m³
    SAND_DENSITY = 1600  # kg/m³
    CEMENT_BAG_KG = 25
    MORTAR_BATCH_KG = 125

    WALL_NAMES = {
        WallType.BRICK: "Brick Wall",
        WallType.BLOCK4: "4-inch Block Wall",
        WallType.BLOCK7: "7-inch Block Wall",
    }
    MATERIAL_NAMES = {
        WallType.BRICK: "Bricks",
        WallType.BLOCK4: "4-inch blocks",
        WallType.BLOCK7: "7-inch blocks",
    }
    BLOCK_TASK_FRAGMENT = {WallType.BLOCK4: "4-inch block", WallType.BLOCK7: "7-inch block"}

    LEVELING_TASK = "preparing for the wall (leveling)"
    MIXING_TASK = "mixing mortar"

    def __init__(self, catalog: EstimationCatalog):
        self.catalog = catalog
        self.tasks = TaskMatcher(catalog.templates)

    @classmethod
    def unit_size(cls, wall_type: WallType, laying_method: LayingMethod) -> UnitSize:
        if wall_type == WallType.BRICK:
            return cls.BRICK
        height = cls.BLOCK_HEIGHT
        if laying_method == LayingMethod.FLAT:
            height = cls.BLOCK_WIDTH[wall_type]
        return UnitSize(length=cls.BLOCK_LENGTH, height=height)

    def validate(self, request: WallInput) -> List[str]:
        errors = []
        if parse_dimension(request.length) is None:
            errors.append("Wall length must be a number")
        if parse_dimension(request.height) is None:
            errors.append("Wall height must be a number")
        if request.foundation is not None:
            errors.extend(FoundationCalculator(self.catalog).validate(request.foundation))
        return errors

    def calculate(self, request: WallInput) -> Optional[CalculationResult]:
        if request.wall_type == WallType.SLEEPER:
            return SleeperWallCalculator(self.catalog).calculate(SleeperWallInput(
                length=request.length,
                height=request.height,
                post_method=request.post_method,
                transport=request.transport,
            ))

        errors = self.validate(request)
        if errors:
            logger.info("Wall calculation skipped: %s", "; ".join(errors))
            return None

        length = parse_dimension(request.length)
        height = parse_dimension(request.height)
        openings = parse_dimension(request.openings) or 0.0
        wall_type = request.wall_type
        unit = self.unit_size(wall_type, request.laying_method)

        course = unit.height + self.MORTAR_JOINT
        rows = math.ceil(height / course)
        per_row = math.ceil(length / (unit.length + self.MORTAR_JOINT))
        units_per_m2 = 1 / (course * (unit.length + self.MORTAR_JOINT))
        # Round the deduction down so the remaining units still cover the wall
        deduction = math.floor(openings * units_per_m2)
        units = max(0, rows * per_row - deduction)

        breakdown = TaskBreakdown()
        mix = breakdown.note(parse_mix_ratio(self.catalog.mix_ratio("brick")))
        cement_share, sand_share = mix.value

        mortar_volume = units * self.MORTAR_PER_UNIT[(wall_type, request.laying_method)]
        cement_kg = mortar_volume * cement_share * self.CEMENT_DENSITY
        cement_bags = math.ceil(cement_kg / self.CEMENT_BAG_KG)
        sand_volume = mortar_volume * sand_share
        sand_tonnes = sand_volume * self.SAND_DENSITY / 1000

        main_task = self._laying_template(wall_type, request.laying_method)
        if main_task is not None and main_task.estimated_hours:
            breakdown.add_template(main_task, units, "pieces")
        else:
            breakdown.warn(f"No laying task template found for {wall_type.value} wall")

        if request.transport is not None:
            carrier_size, distance = resolve_transport(request.transport, self.catalog)
            is_brick = wall_type == WallType.BRICK
            if units > 0:
                breakdown.add_transport(
                    "transport bricks" if is_brick else "transport blocks",
                    estimate_transport(units, carrier_size, "bricks" if is_brick else "blocks", distance),
                    units, "pieces")
            if sand_tonnes > 0:
                breakdown.add_transport("transport sand",
                                        estimate_transport(sand_tonnes, carrier_size, "sand", distance),
                                        round(sand_tonnes, 2), "tonnes")
            if cement_bags > 0:
                breakdown.add_transport("transport cement",
                                        estimate_transport(cement_bags, carrier_size, "cement", distance),
                                        cement_bags, "bags")

        if request.foundation is None:
            leveling = self.tasks.find_exact(self.LEVELING_TASK)
            if leveling is not None and leveling.has_rate:
                breakdown.add_template(leveling, length, "running meters", task=self.LEVELING_TASK)

        mixing = self.tasks.find_exact(self.MIXING_TASK)
        if mixing is not None and mixing.has_rate:
            batches = mortar_batches(cement_bags, sand_tonnes, self.MORTAR_BATCH_KG)
            if batches > 0:
                breakdown.add_template(mixing, batches, "batch", task=self.MIXING_TASK)

        materials = [
            MaterialUsage("Cement", cement_bags, "bags"),
            MaterialUsage("Sand", round(sand_tonnes, 2), "tonnes"),
            MaterialUsage(self.MATERIAL_NAMES[wall_type], units, "pieces"),
        ]
        if request.foundation is not None:
            materials.extend(FoundationCalculator(self.catalog).add_to(request.foundation, breakdown))

        exact_rows = height / course
        return breakdown.build(
            name=self.WALL_NAMES[wall_type],
            amount=units,
            unit="pieces",
            materials=materials,
            details={
                "units": units,
                "rows": round(exact_rows, 2),
                "units_per_row": per_row,
                "opening_deduction": deduction,
                "cement_bags": cement_bags,
                "sand_volume": round(sand_volume, 3),
                "sand_tonnes": round(sand_tonnes, 2),
                "rounded_down_height": round(math.floor(exact_rows) * course, 2),
                "rounded_up_height": round(math.ceil(exact_rows) * course, 2),
            },
        )

    def _laying_template(self, wall_type: WallType, laying_method: LayingMethod):
        if wall_type == WallType.BRICK:
            return self.tasks.find_containing("bricklaying")
        fragment = self.BLOCK_TASK_FRAGMENT[wall_type]
        return (self.tasks.find_containing(fragment, laying_method.value)
                or self.tasks.find_containing(fragment))


def mortar_batches(cement_bags: float, sand_tonnes: float, batch_kg: float = 125) -> int:
    """Number of mixer batches for the given cement bags and sand tonnes."""
    total_kg = cement_bags * 25 + sand_tonnes * 1000
    return math.ceil(total_kg / batch_kg)
