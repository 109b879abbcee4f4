"""
Groundwork Estimator - Paving Slab Calculator

Slabs laid on a mortar bed over a compacted type 1 base. Works out the
dig-out, the base and bedding materials, and the labour for laying,
cutting, grouting, priming, excavation, compacting and mixing.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from .compacting import CompactedMaterial, compacting_time, get_compactor
from .dimensions import DimensionParser, DimensionValue, parse_count, parse_dimension, parse_mix_ratio
from .excavation import Excavation, add_dig_out, validate_equipment
from .labour import TaskBreakdown, add_grouting, template_hours
from .models import CalculationResult, EstimationCatalog, MaterialUsage, TransportOptions
from .task_matcher import TaskMatcher
from .transport import estimate_transport, resolve_transport
from .wall_calculator import mortar_batches

logger = logging.getLogger(__name__)


@dataclass
class SlabInput:
    area: DimensionValue
    type1_thickness_cm: DimensionValue
    mortar_thickness_cm: DimensionValue
    slab_type_id: Optional[str] = None
    cut_slabs: DimensionValue = None
    soil_excess_cm: DimensionValue = None
    grouting_id: Optional[str] = None
    compactor_id: Optional[str] = None
    transport: Optional[TransportOptions] = None
    excavation: Optional[Excavation] = None


class SlabCalculator:
    """Calculate materials and labour for a paved slab area."""

    SLAB_THICKNESS_M = 0.02
    SOIL_DENSITY = 1.5  # t/m³
    TYPE1_DENSITY = 2.1  # t/m³
    SAND_DENSITY = 1.6  # t/m³
    CEMENT_EXTRA = 1.3
    SAND_EXTRA = 1.5
    CEMENT_BAG_M3 = 0.0167  # one 25 kg bag
    SLAB_PIECES_PER_M2 = 2

    # Minutes per cut when no cutting template exists
    FALLBACK_CUT_MINUTES = {"cutting porcelain": 6, "cutting sandstones": 4}

    PRIMER_TASK = "Primer coating (slab backs)"
    FINAL_LEVELING_TASK = "final leveling (type 1)"
    MIXING_TASK = "mixing mortar"

    def __init__(self, catalog: EstimationCatalog):
        self.catalog = catalog
        self.tasks = TaskMatcher(catalog.templates)

    def validate(self, request: SlabInput) -> List[str]:
        errors = []
        if parse_dimension(request.area) is None:
            errors.append("Enter the slab area")
        if parse_dimension(request.type1_thickness_cm) is None:
            errors.append("Enter the aggregate (type 1) thickness")
        if parse_dimension(request.mortar_thickness_cm) is None:
            errors.append("Enter the mortar thickness")
        if not request.slab_type_id:
            errors.append("Select a slab type")
        elif self.tasks.find_by_id(request.slab_type_id) is None:
            errors.append(f"Selected slab type not found (ID: {request.slab_type_id})")
        if request.compactor_id and get_compactor(request.compactor_id) is None:
            errors.append(f"Unknown compactor: {request.compactor_id}")
        if request.excavation is not None:
            errors.extend(validate_equipment(request.excavation, self.catalog))
        return errors

    def calculate(self, request: SlabInput) -> Optional[CalculationResult]:
        errors = self.validate(request)
        if errors:
            logger.info("Slab calculation skipped: %s", "; ".join(errors))
            return None

        slab_type = self.tasks.find_by_id(request.slab_type_id)
        area = parse_dimension(request.area)
        type1_cm = parse_dimension(request.type1_thickness_cm)
        type1_m = type1_cm / 100
        mortar_m = parse_dimension(request.mortar_thickness_cm) / 100
        excess_m = (parse_dimension(request.soil_excess_cm) or 0) / 100
        cuts = parse_count(request.cut_slabs) or 0

        breakdown = TaskBreakdown()

        # ==================== MATERIALS ====================
        soil_volume = area * (type1_m + mortar_m + self.SLAB_THICKNESS_M + excess_m)
        soil_tonnes = soil_volume * self.SOIL_DENSITY
        type1_tonnes = area * type1_m * self.TYPE1_DENSITY

        mortar_volume = area * mortar_m
        mix = breakdown.note(parse_mix_ratio(self.catalog.mix_ratio("slab")))
        cement_share, sand_share = mix.value
        cement_volume = mortar_volume * cement_share * self.CEMENT_EXTRA
        sand_tonnes = mortar_volume * sand_share * self.SAND_EXTRA * self.SAND_DENSITY
        cement_bags = cement_volume / self.CEMENT_BAG_M3

        # ==================== LABOUR ====================
        if slab_type.has_rate:
            main_hours = template_hours(slab_type, area)
            if main_hours > 0:
                breakdown.add(slab_type.name, main_hours, area, "square meters", template=slab_type)
        else:
            breakdown.warn(f"Slab type {slab_type.name} has no estimated hours")

        if request.transport is not None:
            carrier_size, distance = resolve_transport(request.transport, self.catalog)
            pieces = area * self.SLAB_PIECES_PER_M2
            if pieces > 0:
                breakdown.add_transport("transport slabs",
                                        estimate_transport(pieces, carrier_size, "slabs", distance),
                                        round(pieces), "pieces")
            if sand_tonnes > 0:
                breakdown.add_transport("transport sand",
                                        estimate_transport(sand_tonnes, carrier_size, "sand", distance),
                                        round(sand_tonnes, 2), "tonnes")
            if cement_bags > 0:
                breakdown.add_transport("transport cement",
                                        estimate_transport(cement_bags, carrier_size, "cement", distance),
                                        round(cement_bags), "bags")

        if cuts > 0:
            self._add_cutting(slab_type.name, cuts, breakdown)

        if request.grouting_id:
            add_grouting(breakdown, self.tasks.find_by_id(request.grouting_id), area,
                         request.grouting_id)

        slab_count = math.ceil(area / DimensionParser.parse_slab_area_m2(slab_type.name))
        if slab_count > 0:
            breakdown.add(self.PRIMER_TASK, slab_count / 60, slab_count, "slabs")

        if request.excavation is not None and type1_m > 0:
            add_dig_out(breakdown, self.tasks, request.excavation, self.catalog,
                        soil_tonnes, type1_tonnes, sand_tonnes)

        compactor = get_compactor(request.compactor_id)
        if compactor is not None and type1_cm > 0:
            estimate = compacting_time(compactor, type1_cm, CompactedMaterial.TYPE1)
            hours = estimate.hours_for(area)
            if hours > 0:
                breakdown.add(estimate.task_name, hours, area, "square meters")

        leveling = self.tasks.find_exact(self.FINAL_LEVELING_TASK)
        if leveling is not None and leveling.has_rate:
            breakdown.add_template(leveling, area, "square meters", task=self.FINAL_LEVELING_TASK)

        mixing = self.tasks.find_exact(self.MIXING_TASK)
        if mixing is not None and mixing.has_rate:
            batches = mortar_batches(cement_bags, sand_tonnes)
            if batches > 0:
                breakdown.add_template(mixing, batches, "batch", task=self.MIXING_TASK)

        materials = [
            MaterialUsage("Soil excavation", round(soil_tonnes, 2), "tonnes"),
            MaterialUsage("Sand", round(sand_tonnes, 2), "tonnes"),
            MaterialUsage("tape1", round(type1_tonnes, 2), "tonnes"),
            MaterialUsage("Cement", math.ceil(cement_bags), "bags"),
        ]
        return breakdown.build(
            name=slab_type.name,
            amount=area,
            unit="square meters",
            materials=materials,
            details={
                "soil_volume_m3": soil_volume,
                "mortar_volume_m3": mortar_volume,
                "cement_bags_exact": cement_bags,
                "slab_count": slab_count,
            },
        )

    @staticmethod
    def cutting_task_name(slab_name: str) -> str:
        """Porcelain slabs and sandstone use different cutting tasks."""
        name = (slab_name or "").lower()
        if "slab" in name and "sandstone" not in name:
            return "cutting porcelain"
        return "cutting sandstones"

    def _add_cutting(self, slab_name: str, cuts: int, breakdown: TaskBreakdown):
        task_name = self.cutting_task_name(slab_name)
        template = self.tasks.find_containing(task_name)
        if template is not None and template.has_rate:
            breakdown.add(task_name, cuts * template.estimated_hours, cuts, "slabs", template=template)
            return
        minutes = self.FALLBACK_CUT_MINUTES[task_name]
        breakdown.warn(f"Task template '{task_name}' not found, using {minutes} minutes per cut")
        breakdown.add(task_name, cuts * minutes / 60, cuts, "slabs")
