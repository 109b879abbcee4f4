"""
Groundwork Estimator - Compacting Time Model

Plate compactors and rollers compact a base in layers no thicker than
their maximum layer depth, with one extra pass on top.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class CompactedMaterial(Enum):
    SAND = "sand"
    TYPE1 = "type1"


@dataclass(frozen=True)
class Compactor:
    """Plate compactor or roller and its rated tempo."""
    id: str
    name: str
    weight_range: str
    width_m: float
    max_layer_cm: float
    normalized_tempo: float  # m²/h, half the average tempo
    task_name: str
    sand_coefficient: float = 1.0
    type1_coefficient: float = 1.2

    def coefficient(self, material: CompactedMaterial) -> float:
        if material == CompactedMaterial.TYPE1:
            return self.type1_coefficient
        return self.sand_coefficient


@dataclass(frozen=True)
class CompactingEstimate:
    layers: int
    passes: int
    hours_per_m2: float
    task_name: str

    def hours_for(self, area_m2: float) -> float:
        return area_m2 * self.hours_per_m2 * self.passes


COMPACTORS: Dict[str, Compactor] = {
    "small_compactor": Compactor(
        "small_compactor", "Small compactor", "60-90 kg", 0.40, 5, 27.5,
        "Compacting with small compactor"),
    "medium_compactor": Compactor(
        "medium_compactor", "Medium compactor", "90-150 kg", 0.50, 8, 45,
        "Compacting with medium compactor"),
    "large_compactor": Compactor(
        "large_compactor", "Large compactor", "180-250 kg", 0.60, 12, 65,
        "Compacting with large compactor"),
    "small_roller": Compactor(
        "small_roller", "Small roller", "600-1000 kg", 0.65, 15, 100,
        "Compacting with small roller"),
}


def get_compactor(compactor_id: Optional[str]) -> Optional[Compactor]:
    if not compactor_id:
        return None
    return COMPACTORS.get(compactor_id)


def compacting_time(compactor: Compactor, depth_cm: float,
                    material: CompactedMaterial) -> CompactingEstimate:
    """Layers, passes and hours per m² for compacting ``depth_cm`` of material."""
    layers = math.ceil(depth_cm / compactor.max_layer_cm)
    effective_tempo = compactor.normalized_tempo / compactor.coefficient(material)
    return CompactingEstimate(
        layers=layers,
        passes=layers + 1,
        hours_per_m2=1 / effective_tempo,
        task_name=compactor.task_name,
    )


def total_compacting_hours(area_m2: float, compactor: Compactor, depth_cm: float,
                           material: CompactedMaterial) -> float:
    return compacting_time(compactor, depth_cm, material).hours_for(area_m2)
