"""
Groundwork Estimator - Dimension Input Parsing

User dimensions arrive as strings ("3,5", "12.4m", "") or numbers. This
module turns them into floats the calculators can trust, and parses the
small string formats found in catalogs (mix ratios, bag sizes, slab
sizes in template names).
"""

import math
import re
from typing import Optional, Tuple, Union

from .lookup import Lookup, Ok, fallback
from .models import DEFAULT_MIX_RATIO, DEFAULT_TRANSPORT_DISTANCE_M

DimensionValue = Union[str, int, float, None]


class DimensionParser:
    """Parse dimension strings into plain numbers."""

    # Leading number, decimal point or comma, optional exponent ("3.5 m", "3,5", ".5", "1e3")
    NUMBER_PATTERN = re.compile(r"^\s*([+-]?(?:\d+(?:[.,]\d*)?|[.,]\d+)(?:[eE][+-]?\d+)?)")
    INTEGER_PATTERN = re.compile(r"^\s*([+-]?\d+)")
    MIX_RATIO_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*:\s*(\d+(?:\.\d+)?)\s*$")
    BAG_SIZE_PATTERN = re.compile(r"(\d+\.?\d*)\s*kg", re.IGNORECASE)
    SLAB_SIZE_PATTERN = re.compile(r"(\d+)\s*x\s*(\d+)", re.IGNORECASE)

    @classmethod
    def parse(cls, value: DimensionValue) -> Optional[float]:
        """Finite, non-negative float or None."""
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            number = float(value)
        else:
            match = cls.NUMBER_PATTERN.match(str(value))
            if not match:
                return None
            number = float(match.group(1).replace(',', '.'))
        if not math.isfinite(number) or number < 0:
            return None
        return number

    @classmethod
    def parse_count(cls, value: DimensionValue) -> Optional[int]:
        """Whole count, truncating any fractional part."""
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            if not math.isfinite(value) or value < 0:
                return None
            return int(value)
        match = cls.INTEGER_PATTERN.match(str(value))
        if not match:
            return None
        count = int(match.group(1))
        return count if count >= 0 else None

    @classmethod
    def parse_distance(cls, value: DimensionValue) -> float:
        """One-way distance in metres; 30 when the input cannot be parsed."""
        distance = cls.parse(value)
        if distance is None:
            return DEFAULT_TRANSPORT_DISTANCE_M
        return distance

    @classmethod
    def parse_mix_ratio(cls, ratio: Optional[str]) -> Lookup:
        """
        Split a "cement:sand" ratio into proportions of the whole.

        Returns:
            Ok((cement, sand)) or a Fallback to the 1:4 proportions
        """
        if not ratio:
            return Ok(_proportions(1, 4))
        match = cls.MIX_RATIO_PATTERN.match(ratio)
        if match:
            cement, sand = float(match.group(1)), float(match.group(2))
            if cement + sand > 0:
                return Ok(_proportions(cement, sand))
        return fallback(
            _proportions(1, 4),
            f"Invalid mortar mix ratio {ratio!r}, using {DEFAULT_MIX_RATIO}",
        )

    @classmethod
    def parse_bag_size(cls, unit: Optional[str], default: float = 20.0) -> float:
        """Bag weight in kg from a unit such as "20 kg bag"."""
        match = cls.BAG_SIZE_PATTERN.search(unit or "")
        if match:
            return float(match.group(1))
        return default

    @classmethod
    def parse_slab_area_m2(cls, name: str, default: float = 0.36) -> float:
        """Face area of one slab from a name like "Porcelain 600x600" (mm)."""
        lowered = (name or "").lower()
        if "mix" in lowered:
            return 1 / 3
        match = cls.SLAB_SIZE_PATTERN.search(lowered)
        if match:
            area = (int(match.group(1)) / 1000) * (int(match.group(2)) / 1000)
            if area > 0:
                return area
        return default


def _proportions(cement: float, sand: float) -> Tuple[float, float]:
    total = cement + sand
    return cement / total, sand / total


parse_dimension = DimensionParser.parse
parse_count = DimensionParser.parse_count
parse_distance = DimensionParser.parse_distance
parse_mix_ratio = DimensionParser.parse_mix_ratio
