"""
Groundwork Estimator - Monoblock Paving Calculator

Block paving laid on a screeded sand bed over a type 1 base. Works out
the dig-out, sand and type 1, and the labour for laying, screeding,
compacting, levelling and cutting blocks.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .compacting import CompactedMaterial, compacting_time, get_compactor
from .dimensions import DimensionValue, parse_count, parse_dimension
from .excavation import Excavation, add_dig_out, validate_equipment
from .labour import TaskBreakdown
from .models import CalculationResult, EstimationCatalog, MaterialUsage, TransportOptions
from .task_matcher import TaskMatcher
from .transport import estimate_transport, resolve_transport

logger = logging.getLogger(__name__)


@dataclass
class PavingInput:
    area: DimensionValue  # m²
    sand_thickness_cm: DimensionValue
    type1_thickness_cm: DimensionValue
    block_height_cm: DimensionValue
    cut_blocks: DimensionValue = None
    soil_excess_cm: DimensionValue = None
    compactor_id: Optional[str] = None
    sand_material: str = "Sand"
    transport: Optional[TransportOptions] = None
    excavation: Optional[Excavation] = None


class PavingCalculator:
    """Monoblocks, bedding sand, type 1 and the labour to lay them."""

    SOIL_DENSITY = 1.5  # t/m³
    SAND_DENSITY = 1.6  # t/m³
    TYPE1_DENSITY = 2.1  # t/m³
    BLOCKS_PER_M2 = 50
    CUT_MINUTES = 2

    LAYING_TASK = "laying monoblocks"
    SCREEDING_TASK = "sand screeding"
    COMPACTING_BLOCKS_TASK = "compacting monoblocks m2/h"
    LEVELING_TASK = "final leveling (sand)"

    def __init__(self, catalog: EstimationCatalog):
        self.catalog = catalog
        self.tasks = TaskMatcher(catalog.templates)

    def validate(self, request: PavingInput) -> List[str]:
        errors = []
        for label, value in (("area", request.area),
                             ("sand thickness", request.sand_thickness_cm),
                             ("type 1 thickness", request.type1_thickness_cm),
                             ("block height", request.block_height_cm)):
            if parse_dimension(value) is None:
                errors.append(f"Enter the {label}")
        if request.compactor_id and get_compactor(request.compactor_id) is None:
            errors.append(f"Unknown compactor: {request.compactor_id}")
        if request.excavation is not None:
            errors.extend(validate_equipment(request.excavation, self.catalog))
        return errors

    def calculate(self, request: PavingInput) -> Optional[CalculationResult]:
        errors = self.validate(request)
        if errors:
            logger.info("Paving calculation skipped: %s", "; ".join(errors))
            return None

        area = parse_dimension(request.area)
        sand_cm = parse_dimension(request.sand_thickness_cm)
        type1_cm = parse_dimension(request.type1_thickness_cm)
        block_m = parse_dimension(request.block_height_cm) / 100
        excess_m = (parse_dimension(request.soil_excess_cm) or 0) / 100
        cuts = parse_count(request.cut_blocks) or 0

        depth_m = sand_cm / 100 + type1_cm / 100 + block_m + excess_m
        soil_tonnes = area * depth_m * self.SOIL_DENSITY
        sand_tonnes = area * sand_cm / 100 * self.SAND_DENSITY
        type1_tonnes = area * type1_cm / 100 * self.TYPE1_DENSITY

        breakdown = TaskBreakdown()

        # Dig-out comes before the surface work
        if request.excavation is not None:
            add_dig_out(breakdown, self.tasks, request.excavation, self.catalog,
                        soil_tonnes, type1_tonnes, sand_tonnes)

        laying = self.tasks.find_exact(self.LAYING_TASK)
        if laying is not None and laying.has_rate:
            breakdown.add_template(laying, area, "square meters", task=self.LAYING_TASK)
        else:
            breakdown.warn(f"Task template '{self.LAYING_TASK}' not found")
            breakdown.add(self.LAYING_TASK, 0.0, area, "square meters")

        if request.transport is not None:
            carrier_size, distance = resolve_transport(request.transport, self.catalog)
            blocks = area * self.BLOCKS_PER_M2
            if blocks > 0:
                breakdown.add_transport("transport monoblocks",
                                        estimate_transport(blocks, carrier_size, "monoblocks", distance),
                                        round(blocks), "pieces")
            if sand_tonnes > 0:
                breakdown.add_transport("transport sand",
                                        estimate_transport(sand_tonnes, carrier_size, "sand", distance),
                                        round(sand_tonnes, 2), "tonnes")

        for name, task in ((self.SCREEDING_TASK, self.SCREEDING_TASK),
                           (self.COMPACTING_BLOCKS_TASK, "compacting monoblocks"),
                           (self.LEVELING_TASK, self.LEVELING_TASK)):
            template = self.tasks.find_exact(name)
            if template is not None and template.has_rate:
                breakdown.add_template(template, area, "square meters", task=task)

        if cuts > 0:
            breakdown.add("cutting blocks", cuts * self.CUT_MINUTES / 60, cuts, "blocks")

        # Sand bed and base are compacted together, rated as sand
        compactor = get_compactor(request.compactor_id)
        base_cm = sand_cm + type1_cm
        layers = 0
        if compactor is not None and base_cm > 0:
            estimate = compacting_time(compactor, base_cm, CompactedMaterial.SAND)
            layers = estimate.layers
            hours = estimate.hours_for(area)
            if hours > 0:
                breakdown.add(estimate.task_name, hours, area, "square meters")

        materials = [
            MaterialUsage("Soil excavation", round(soil_tonnes, 2), "tonnes"),
            MaterialUsage(request.sand_material or "Sand", round(sand_tonnes, 2), "tonnes"),
            MaterialUsage("tape1", round(type1_tonnes, 2), "tonnes"),
        ]
        return breakdown.build(
            name="Paving Installation",
            amount=area,
            unit="square meters",
            materials=materials,
            details={
                "soil_tonnes": soil_tonnes,
                "blocks": round(area * self.BLOCKS_PER_M2),
                "compacting_layers": layers,
            },
        )
