"""
Groundwork Estimator - Excavator Rate Tables

Loading rates for diggers by machine size. Sizes are bracketed: a
machine uses the rate of the largest listed size not above its own.
"""

from typing import Sequence, Tuple

# (size in tonnes, hours per tonne of sand loaded)
LOADING_SAND_HOURS_PER_TONNE: Tuple[Tuple[float, float], ...] = (
    (0.02, 0.5),    # shovel, one person
    (1, 0.18),
    (2, 0.12),
    (3, 0.08),
    (6, 0.05),
    (11, 0.03),
    (21, 0.02),
    (31, 0.01),
    (41, 0.005),
)

# (size in tonnes, tonnes of type 1 loaded per hour)
DIGGER_LOADING_TONNES_PER_HOUR: Tuple[Tuple[float, float], ...] = (
    (0.02, 2),      # shovel, one person
    (0.5, 4.35),
    (1, 5.56),
    (2, 6.67),
    (3, 8.33),
    (6, 12.5),
    (11, 20),
    (21, 33.33),
    (31, 50),
    (40, 100),
)


def bracketed_rate(table: Sequence[Tuple[float, float]], size: float) -> float:
    """Rate for ``size`` from an ascending (size, rate) table."""
    if size < table[0][0]:
        return table[0][1]
    for (lower, rate), (upper, _) in zip(table, table[1:]):
        if lower <= size < upper:
            return rate
    return table[-1][1]


def loading_sand_hours_per_tonne(excavator_size: float) -> float:
    return bracketed_rate(LOADING_SAND_HOURS_PER_TONNE, excavator_size)


def digger_loading_rate(excavator_size: float) -> float:
    return bracketed_rate(DIGGER_LOADING_TONNES_PER_HOUR, excavator_size)
