"""
Groundwork Estimator - Value Records

Plain records shared by every calculator: the external catalog rows the
engine reads (task templates, material prices, carriers) and the
records it produces (material usage, task breakdown entries and the
final calculation result).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

AREA_UNITS = ("m2", "m²", "square meters", "square metres", "sqm")

# Reference distance used when a transport distance cannot be parsed
DEFAULT_TRANSPORT_DISTANCE_M = 30.0
# Wheelbarrow, used when no carrier is selected
DEFAULT_CARRIER_SIZE_T = 0.125
DEFAULT_MIX_RATIO = "1:4"


# ==================== CATALOG RECORDS ====================

@dataclass(frozen=True)
class TaskTemplate:
    """Labour-hours-per-unit rate for a named construction task."""
    id: str
    name: str
    unit: str = ""
    estimated_hours: Optional[float] = None

    @property
    def has_rate(self) -> bool:
        return self.estimated_hours is not None

    @property
    def is_area_rate(self) -> bool:
        """True when the rate is declared per square metre."""
        return (self.unit or "").strip().lower() in AREA_UNITS

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "TaskTemplate":
        hours = row.get("estimated_hours")
        return cls(
            id=str(row.get("id", "")),
            name=row.get("name") or "",
            unit=row.get("unit") or "",
            estimated_hours=float(hours) if hours is not None else None,
        )


@dataclass(frozen=True)
class MaterialPrice:
    """Price list entry, joined to usage records by exact name."""
    name: str
    unit: str = ""
    price: Optional[float] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "MaterialPrice":
        price = row.get("price")
        return cls(
            name=row.get("name") or "",
            unit=row.get("unit") or "",
            price=float(price) if price is not None else None,
        )


@dataclass(frozen=True)
class Carrier:
    """Transport vehicle or excavator from the equipment catalog."""
    id: str
    name: str
    size_t: float
    speed_m_per_hour: Optional[float] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Carrier":
        speed = row.get("speed_m_per_hour")
        return cls(
            id=str(row.get("id", "")),
            name=row.get("name") or "",
            size_t=float(row.get("size (in tones)") or 0),
            speed_m_per_hour=float(speed) if speed is not None else None,
        )


@dataclass
class EstimationCatalog:
    """
    Read-only snapshot of the external catalogs for one calculation.

    The engine never fetches anything itself: callers load this once and
    pass it into each calculator.
    """
    templates: List[TaskTemplate] = field(default_factory=list)
    prices: List[MaterialPrice] = field(default_factory=list)
    carriers: List[Carrier] = field(default_factory=list)
    excavators: List[Carrier] = field(default_factory=list)
    mix_ratios: Dict[str, str] = field(default_factory=dict)

    def mix_ratio(self, kind: str) -> Optional[str]:
        return self.mix_ratios.get(kind)

    def find_carrier(self, carrier_id) -> Optional[Carrier]:
        return _find_by_id(self.carriers, carrier_id)

    def find_excavator(self, excavator_id) -> Optional[Carrier]:
        return _find_by_id(self.excavators, excavator_id)

    def find_material_containing(self, fragment: str) -> Optional[MaterialPrice]:
        fragment = fragment.lower()
        for entry in self.prices:
            if fragment in entry.name.lower():
                return entry
        return None


def _find_by_id(equipment: List[Carrier], equipment_id) -> Optional[Carrier]:
    if equipment_id is None:
        return None
    for item in equipment:
        if item.id == str(equipment_id):
            return item
    return None


# ==================== INPUT OPTIONS ====================

@dataclass
class TransportOptions:
    """
    Carrier and one-way distance used for material transport tasks.

    ``carrier_id`` picks a carrier from the catalog and wins over
    ``carrier_size``.
    """
    carrier_size: Optional[float] = None
    distance: Union[str, float, None] = None
    carrier_id: Optional[str] = None


# ==================== RESULT RECORDS ====================

@dataclass(frozen=True)
class MaterialUsage:
    """Computed quantity of one material, optionally priced."""
    name: str
    amount: float
    unit: str
    price_per_unit: Optional[float] = None
    total_price: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "quantity": self.amount, "unit": self.unit}


@dataclass(frozen=True)
class TaskEntry:
    """One line of the labour estimate."""
    task: str
    hours: float
    amount: Union[float, str]
    unit: str
    normalized_hours: Optional[float] = None
    event_task_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task": self.task,
            "hours": self.hours,
            "amount": self.amount,
            "unit": self.unit,
        }


@dataclass(frozen=True)
class CalculationResult:
    """
    Immutable output of one calculator run.

    ``total_hours`` is derived from the breakdown on every access, so it
    always equals the sum of the entries that were appended.
    """
    name: str
    amount: float
    unit: str
    materials: Tuple[MaterialUsage, ...] = ()
    task_breakdown: Tuple[TaskEntry, ...] = ()
    details: Dict[str, Any] = field(default_factory=dict)
    warnings: Tuple[str, ...] = ()

    @property
    def total_hours(self) -> float:
        return sum(entry.hours for entry in self.task_breakdown)

    def to_dict(self) -> Dict[str, Any]:
        """Output contract consumed by the presentation layer."""
        return {
            "name": self.name,
            "amount": self.amount,
            "unit": self.unit,
            "hours_worked": self.total_hours,
            "materials": [m.to_dict() for m in self.materials],
            "taskBreakdown": [t.to_dict() for t in self.task_breakdown],
        }
