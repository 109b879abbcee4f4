"""
Groundwork Estimator - Coping Calculator

Coping stones along the top of a wall: pieces along the run, corner
cuts, adhesive bedding and the installation labour.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from .dimensions import DimensionParser, DimensionValue, parse_count, parse_dimension
from .labour import TaskBreakdown, add_grouting
from .lookup import Lookup, Ok, fallback
from .models import CalculationResult, EstimationCatalog, MaterialUsage, TransportOptions
from .task_matcher import TaskMatcher, rate_of, template_of
from .transport import estimate_transport, resolve_transport

logger = logging.getLogger(__name__)


@dataclass
class CopingInput:
    length: DimensionValue  # wall run, m
    slab_length_cm: DimensionValue = 90
    slab_width_cm: DimensionValue = 60
    gap_mm: int = 2
    adhesive_thickness_cm: DimensionValue = 0.5
    corners: DimensionValue = None
    mitre_45: bool = False
    grouting_id: Optional[str] = None
    transport: Optional[TransportOptions] = None


class CopingCalculator:
    """Copings, cuts, adhesive and labour for a coping run."""

    ADHESIVE_KG_PER_M2_CM = 12
    DEFAULT_CORNERS = 2
    DEFAULT_ADHESIVE_THICKNESS_CM = 0.5
    DEFAULT_ADHESIVE_NAME = "Tile adhesive"
    DEFAULT_BAG_KG = 20
    FALLBACK_HOURS = 0.5
    GAP_OPTIONS_MM = (2, 3, 4, 5)

    def __init__(self, catalog: EstimationCatalog):
        self.catalog = catalog
        self.tasks = TaskMatcher(catalog.templates)

    def validate(self, request: CopingInput) -> List[str]:
        errors = []
        if parse_dimension(request.length) is None:
            errors.append("Wall length must be a number")
        for label, value in (("length", request.slab_length_cm), ("width", request.slab_width_cm)):
            number = parse_dimension(value)
            if number is None or number <= 0:
                errors.append(f"Coping {label} must be a positive number")
        if request.gap_mm not in self.GAP_OPTIONS_MM:
            errors.append(f"Gap must be one of {', '.join(str(g) for g in self.GAP_OPTIONS_MM)} mm")
        return errors

    def installation_rate(self, slab_length: float, slab_width: float) -> Lookup:
        """
        Installation template for a coping size.

        Tries the exact "Tile Installation L × W" name, then the best
        scored tile installation template, then the fallback rate.
        """
        name = f"Tile Installation {slab_length:g} × {slab_width:g}"
        template = self.tasks.find_exact(name)
        if template is not None and template.has_rate:
            return Ok(template)
        match = self.tasks.best_dimension_match(slab_length, slab_width)
        if match is not None and match[0].has_rate:
            template, score = match
            logger.info("No exact template for %r, using %r (score %d)", name, template.name, score)
            return Ok(template)
        return fallback(self.FALLBACK_HOURS, f"Task template '{name}' not found")

    def calculate(self, request: CopingInput) -> Optional[CalculationResult]:
        errors = self.validate(request)
        if errors:
            logger.info("Coping calculation skipped: %s", "; ".join(errors))
            return None

        length = parse_dimension(request.length)
        length_cm = length * 100
        slab_length = parse_dimension(request.slab_length_cm)
        slab_width = parse_dimension(request.slab_width_cm)
        gap_cm = request.gap_mm / 10

        slabs = math.ceil(length_cm / (slab_length + gap_cm))
        corners = parse_count(request.corners) or self.DEFAULT_CORNERS
        cuts = corners * (2 if request.mitre_45 else 1)

        area = length_cm * slab_width / 10000
        thickness = parse_dimension(request.adhesive_thickness_cm) or self.DEFAULT_ADHESIVE_THICKNESS_CM
        adhesive_kg = area * thickness * self.ADHESIVE_KG_PER_M2_CM

        adhesive = self.catalog.find_material_containing("adhesive")
        adhesive_name = adhesive.name if adhesive is not None else self.DEFAULT_ADHESIVE_NAME
        adhesive_unit = adhesive.unit if adhesive is not None and adhesive.unit else "bags"
        bag_kg = DimensionParser.parse_bag_size(adhesive.unit if adhesive else None,
                                                self.DEFAULT_BAG_KG)
        adhesive_bags = max(1, math.ceil(adhesive_kg / bag_kg))

        breakdown = TaskBreakdown()

        install = breakdown.note(self.installation_rate(slab_length, slab_width))
        breakdown.add(f"Tile Installation {slab_length:g} × {slab_width:g}",
                      slabs * rate_of(install), slabs, "pieces", template=template_of(install))

        cutting = breakdown.note(self.tasks.rate("cutting porcelain", self.FALLBACK_HOURS))
        breakdown.add("cutting coping", cuts * rate_of(cutting), cuts, "pieces",
                      template=template_of(cutting))

        if request.grouting_id:
            add_grouting(breakdown, self.tasks.find_by_id(request.grouting_id), area,
                         request.grouting_id)

        if request.transport is not None:
            carrier_size, distance = resolve_transport(request.transport, self.catalog)
            if slabs > 0:
                breakdown.add_transport("transport coping",
                                        estimate_transport(slabs, carrier_size, "slabs", distance),
                                        slabs, "pieces")
            breakdown.add_transport("transport adhesive",
                                    estimate_transport(adhesive_bags, carrier_size, "cement", distance),
                                    adhesive_bags, "bags")

        materials = [
            MaterialUsage("Copings", slabs, "pieces"),
            MaterialUsage(adhesive_name, adhesive_bags, adhesive_unit),
        ]
        return breakdown.build(
            name="Coping Installation",
            amount=length,
            unit="meters",
            materials=materials,
            details={
                "copings": slabs,
                "cuts": cuts,
                "area_m2": area,
                "adhesive_kg": adhesive_kg,
            },
        )
