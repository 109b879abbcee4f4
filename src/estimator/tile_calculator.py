"""
Groundwork Estimator - Tile Installation Calculator

Wall finish in porcelain or sandstone tiles. Lays whole tiles along the
length and height of the wall, turns the leftover strips into cut
pieces at one or both ends, and adds adhesive by thickness.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .dimensions import DimensionParser, DimensionValue, parse_dimension
from .labour import TaskBreakdown, add_grouting
from .models import CalculationResult, EstimationCatalog, MaterialUsage, TransportOptions
from .task_matcher import TaskMatcher, rate_of, template_of
from .transport import estimate_transport, resolve_transport

logger = logging.getLogger(__name__)


class Orientation(Enum):
    LONG = "long"
    SIDE = "side"


class CutMode(Enum):
    ONE_CUT = "1cut"
    TWO_CUTS = "2cuts"


class TileMaterial(Enum):
    PORCELAIN = "porcelain"
    SANDSTONES = "sandstones"


@dataclass
class TileInput:
    length: DimensionValue  # m
    height: DimensionValue  # m
    slab_size: Tuple[int, int] = (120, 30)  # cm
    orientation: Orientation = Orientation.LONG
    gap_mm: int = 2
    adhesive_thickness_cm: float = 0.5
    length_cut: CutMode = CutMode.ONE_CUT
    height_cut: CutMode = CutMode.ONE_CUT
    material: TileMaterial = TileMaterial.PORCELAIN
    grouting_id: Optional[str] = None
    transport: Optional[TransportOptions] = None


@dataclass(frozen=True)
class CutPiece:
    """A group of identical cut tiles (cm)."""
    width: float
    height: float
    quantity: int


@dataclass(frozen=True)
class TileLayout:
    full_tiles: int
    cut_pieces: Tuple[CutPiece, ...]
    total_cuts: int

    @property
    def total_tiles(self) -> int:
        return self.full_tiles + sum(piece.quantity for piece in self.cut_pieces)


def tiles_along(span_cm: float, tile_cm: float, gap_cm: float) -> int:
    """Whole tiles (each with its joint) fitting along ``span_cm``."""
    return math.floor((span_cm + gap_cm) / (tile_cm + gap_cm))


def leftover_cm(span_cm: float, tile_cm: float, gap_cm: float, count: int) -> float:
    # Rounded so an exact fit is not reported as a sliver
    return round(span_cm - count * (tile_cm + gap_cm), 6)


class TileCalculator:
    """Tiles, cuts, adhesive and labour for a tiled wall."""

    SLAB_SIZES = ((120, 30), (80, 80), (90, 60), (80, 40), (60, 60), (60, 30), (30, 30))
    GAP_OPTIONS_MM = (2, 3, 4, 5)
    # Adhesive thickness (cm) -> consumption (kg/m²)
    ADHESIVE_CONSUMPTION = {0.5: 6, 1: 12}
    DEFAULT_ADHESIVE_NAME = "Tile adhesive"
    DEFAULT_BAG_KG = 20
    FALLBACK_HOURS = 0.5

    # (length 2 cuts, height 2 cuts) -> pieces at the corners
    CORNER_PIECES = {
        (True, True): 4,
        (True, False): 2,
        (False, True): 2,
        (False, False): 1,
    }

    def __init__(self, catalog: EstimationCatalog):
        self.catalog = catalog
        self.tasks = TaskMatcher(catalog.templates)

    def validate(self, request: TileInput) -> List[str]:
        errors = []
        if parse_dimension(request.length) is None:
            errors.append("Wall length must be a number")
        if parse_dimension(request.height) is None:
            errors.append("Wall height must be a number")
        if tuple(request.slab_size) not in self.SLAB_SIZES:
            errors.append(f"Unsupported tile size: {request.slab_size[0]}x{request.slab_size[1]}cm")
        if request.gap_mm not in self.GAP_OPTIONS_MM:
            errors.append(f"Gap must be one of {', '.join(str(g) for g in self.GAP_OPTIONS_MM)} mm")
        if request.adhesive_thickness_cm not in self.ADHESIVE_CONSUMPTION:
            errors.append("Adhesive thickness must be 0.5 or 1 cm")
        return errors

    @classmethod
    def layout(cls, length_cm: float, height_cm: float, slab_size: Tuple[int, int],
               orientation: Orientation, gap_cm: float,
               length_cut: CutMode, height_cut: CutMode) -> TileLayout:
        """
        Split the wall into whole tiles and cut pieces.

        Args:
            length_cm: Wall length
            height_cm: Wall height
            slab_size: Catalog tile size (width, height)
            orientation: LONG lays the tile as listed, SIDE turns it
            gap_cm: Joint width
            length_cut: Leftover along the length cut at one end or both
            height_cut: Leftover along the height cut at the top or both

        Returns:
            TileLayout with whole tiles, cut pieces and the cut count
        """
        if orientation == Orientation.LONG:
            tile_w, tile_h = slab_size
        else:
            tile_h, tile_w = slab_size

        in_length = tiles_along(length_cm, tile_w, gap_cm)
        in_height = tiles_along(height_cm, tile_h, gap_cm)
        rest_l = leftover_cm(length_cm, tile_w, gap_cm, in_length)
        rest_h = leftover_cm(height_cm, tile_h, gap_cm, in_height)

        two_l = rest_l > 0 and length_cut == CutMode.TWO_CUTS
        two_h = rest_h > 0 and height_cut == CutMode.TWO_CUTS

        # With two cuts one whole tile is traded for two wider end pieces
        full_l = max(0, in_length - 1) if two_l else in_length
        full_h = max(0, in_height - 1) if two_h else in_height
        end_w = (tile_w + rest_l) / 2 if two_l else rest_l
        end_h = (tile_h + rest_h) / 2 if two_h else rest_h

        pieces = []
        if rest_l > 0:
            pieces.append(CutPiece(end_w, tile_h, (2 if two_l else 1) * full_h))
        if rest_h > 0:
            pieces.append(CutPiece(tile_w, end_h, (2 if two_h else 1) * full_l))
        if rest_l > 0 and rest_h > 0:
            pieces.append(CutPiece(end_w, end_h, cls.CORNER_PIECES[(two_l, two_h)]))

        cuts = sum(piece.quantity for piece in pieces)
        # Second cut for pieces differing from the catalog size on both sides
        listed_w, listed_h = slab_size
        cuts += sum(p.quantity for p in pieces if p.width != listed_w and p.height != listed_h)

        return TileLayout(full_tiles=full_l * full_h, cut_pieces=tuple(pieces), total_cuts=cuts)

    def calculate(self, request: TileInput) -> Optional[CalculationResult]:
        errors = self.validate(request)
        if errors:
            logger.info("Tile calculation skipped: %s", "; ".join(errors))
            return None

        length_cm = parse_dimension(request.length) * 100
        height_cm = parse_dimension(request.height) * 100
        width, height = request.slab_size
        layout = self.layout(length_cm, height_cm, (width, height), request.orientation,
                             request.gap_mm / 10, request.length_cut, request.height_cut)
        area = length_cm * height_cm / 10000

        adhesive = self.catalog.find_material_containing("adhesive")
        adhesive_name = adhesive.name if adhesive is not None else self.DEFAULT_ADHESIVE_NAME
        adhesive_unit = adhesive.unit if adhesive is not None and adhesive.unit else "bags"
        bag_kg = DimensionParser.parse_bag_size(adhesive.unit if adhesive else None,
                                                self.DEFAULT_BAG_KG)
        adhesive_kg = area * self.ADHESIVE_CONSUMPTION[request.adhesive_thickness_cm]
        adhesive_bags = max(1, math.ceil(adhesive_kg / bag_kg))

        breakdown = TaskBreakdown()
        tiles = layout.total_tiles

        install = breakdown.note(self.tasks.rate(f"Tile Installation {width} × {height}",
                                                 self.FALLBACK_HOURS))
        breakdown.add(f"Tile Installation {width} x {height}", area * rate_of(install),
                      tiles, "pieces", template=template_of(install))

        cutting_name = f"cutting {request.material.value}"
        if layout.total_cuts > 0:
            cutting = breakdown.note(self.tasks.rate(cutting_name, self.FALLBACK_HOURS))
            breakdown.add(cutting_name, layout.total_cuts * rate_of(cutting),
                          layout.total_cuts, "pieces", template=template_of(cutting))

        if request.grouting_id:
            add_grouting(breakdown, self.tasks.find_by_id(request.grouting_id), area,
                         request.grouting_id)

        if request.transport is not None:
            carrier_size, distance = resolve_transport(request.transport, self.catalog)
            if tiles > 0:
                breakdown.add_transport("transport tiles",
                                        estimate_transport(tiles, carrier_size, "slabs", distance),
                                        tiles, "pieces")
            breakdown.add_transport("transport adhesive",
                                    estimate_transport(adhesive_bags, carrier_size, "cement", distance),
                                    adhesive_bags, "bags")

        materials = [
            MaterialUsage("Tiles", tiles, "pieces"),
            MaterialUsage(adhesive_name, adhesive_bags, adhesive_unit),
        ]
        return breakdown.build(
            name="Tile Installation",
            amount=area,
            unit="square meters",
            materials=materials,
            details={
                "full_tiles": layout.full_tiles,
                "cut_pieces": [
                    {"width": p.width, "height": p.height, "quantity": p.quantity}
                    for p in layout.cut_pieces
                ],
                "total_tiles": tiles,
                "total_cuts": layout.total_cuts,
                "adhesive_kg": adhesive_kg,
            },
        )
