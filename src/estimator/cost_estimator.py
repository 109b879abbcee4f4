"""
Groundwork Estimator - Material Cost Enricher

Joins computed material quantities against a material price list and
attaches unit and total prices. Materials without a price keep ``None``
so that "no price available" never reads as "free".
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from .models import CalculationResult, MaterialPrice, MaterialUsage

logger = logging.getLogger(__name__)


@dataclass
class ProjectEstimate:
    """Priced view of one calculation result."""
    project_name: str
    timestamp: str
    calculation: CalculationResult
    materials: List[MaterialUsage] = field(default_factory=list)
    subtotal_materials: float = 0.0
    unpriced_materials: List[str] = field(default_factory=list)

    @property
    def total_hours(self) -> float:
        return self.calculation.total_hours


class CostEstimator:
    """
    Attach prices from a material price list to material usage records.
    """

    def __init__(self, prices: Iterable[MaterialPrice]):
        """
        Initialize the estimator.

        Args:
            prices: Price list entries; names are matched exactly, later
                duplicates replace earlier ones
        """
        self.price_map: Dict[str, Optional[float]] = {}
        for entry in prices:
            self.price_map[entry.name] = entry.price

    @classmethod
    def unavailable(cls) -> "CostEstimator":
        """Estimator for when the price list could not be fetched."""
        return cls([])

    def price_for(self, name: str) -> Optional[float]:
        return self.price_map.get(name)

    def estimate_material(self, usage: MaterialUsage) -> MaterialUsage:
        """Copy of ``usage`` with price_per_unit and total_price filled in."""
        price = self.price_for(usage.name)
        if price is None:
            logger.debug("No price for material %s", usage.name)
            return replace(usage, price_per_unit=None, total_price=None)
        return replace(usage, price_per_unit=price, total_price=price * usage.amount)

    def estimate_materials(self, materials: Iterable[MaterialUsage]) -> List[MaterialUsage]:
        return [self.estimate_material(m) for m in materials]

    def estimate_project(self, project_name: str, result: CalculationResult) -> ProjectEstimate:
        """
        Price every material of a calculation result.

        Returns:
            ProjectEstimate whose subtotal covers priced materials only
        """
        priced = self.estimate_materials(result.materials)
        subtotal = sum(m.total_price for m in priced if m.total_price is not None)
        return ProjectEstimate(
            project_name=project_name,
            timestamp=datetime.now().isoformat(),
            calculation=result,
            materials=priced,
            subtotal_materials=round(subtotal, 2),
            unpriced_materials=[m.name for m in priced if m.total_price is None],
        )


def format_price(value: Optional[float]) -> str:
    """Display form of a price, "N/A" when unknown."""
    if value is None:
        return "N/A"
    return f"{value:,.2f}"
