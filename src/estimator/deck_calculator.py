"""
Groundwork Estimator - Decking Calculator

Timber decks on joists, bearers and posts. Boards are laid along the
length or at 45 degrees; frame boards and postmix are optional.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .dimensions import DimensionValue, parse_dimension
from .labour import TaskBreakdown
from .models import CalculationResult, EstimationCatalog, MaterialUsage, TransportOptions
from .task_matcher import TaskMatcher
from .transport import estimate_carry_on_foot, estimate_transport, resolve_transport

logger = logging.getLogger(__name__)


class DeckPattern(Enum):
    LENGTH = "length"
    DIAGONAL_45 = "45"


@dataclass
class DeckInput:
    length: DimensionValue  # m, along the boards
    width: DimensionValue  # m
    joist_length: DimensionValue  # m
    joist_spacing: DimensionValue  # m
    board_length: DimensionValue  # m
    board_width_cm: DimensionValue
    joint_gap_mm: DimensionValue
    pattern: DeckPattern = DeckPattern.LENGTH
    include_frame: bool = False
    half_shift: bool = False
    postmix_per_post: DimensionValue = None
    transport: Optional[TransportOptions] = None


@dataclass(frozen=True)
class DeckLayout:
    """Counts for one deck before the frame is added."""
    rows: int
    boards: int
    board_cuts: int
    bearers_per_row: int
    bearer_rows: int
    joists_per_row: int
    joist_rows: int
    posts_per_row: int
    post_rows: int

    @property
    def bearers(self) -> int:
        return self.bearers_per_row * self.bearer_rows

    @property
    def joists(self) -> int:
        return self.joists_per_row * self.joist_rows

    @property
    def posts(self) -> int:
        return self.posts_per_row * self.post_rows


def diagonal_rows(diagonal: float, row_width: float, board_length: float,
                  half_shift: bool = False):
    """
    Walk the 45 degree rows from the longest one down.

    Each row is shorter than the last by 1.414 × the row width. Boards
    are counted per row rather than from an average row.

    Returns:
        (rows, boards)
    """
    delta = 1.414 * row_width
    if delta <= 0:
        return 0, 0
    rows = 0
    boards = 0
    while True:
        offset = rows + 0.5 if half_shift else rows
        row_length = diagonal - offset * delta
        if row_length <= 0:
            break
        rows += 1
        if half_shift:
            boards += math.ceil((row_length + board_length / 2) / board_length)
        else:
            boards += math.ceil(row_length / board_length)
    return rows, boards


class DeckCalculator:
    """Boards, frame, posts, joists, bearers and the labour to build a deck."""

    SUPPORT_SPACING = 1.8  # m, bearers and posts
    LENGTH_PATTERN_CUTS_PER_ROW = 1.5  # alternating 1 and 2 cuts
    DIAGONAL_CUTS_PER_ROW = 2

    DIGGING_TASK = "digging holes for posts"
    POSTS_TASK = "setting up posts"
    BOARD_CUTS_TASK = "decking boards cuts"
    JOIST_CUTS_TASK = "cutting decking joists"
    FRAME_CUTS_TASK = "decking frame boards cuts"
    FIXING_FRAME_TASK = "fixing decking frame"
    FIXING_BOARDS_TASK = "fixing decking boards"

    REQUIRED = ("length", "width", "joist_length", "joist_spacing",
                "board_length", "board_width_cm", "joint_gap_mm")

    def __init__(self, catalog: EstimationCatalog):
        self.catalog = catalog
        self.tasks = TaskMatcher(catalog.templates)

    def validate(self, request: DeckInput) -> List[str]:
        errors = []
        for name in self.REQUIRED:
            value = parse_dimension(getattr(request, name))
            if value is None:
                errors.append(f"{name.replace('_', ' ').capitalize()} must be a number")
            elif value == 0 and name in ("joist_length", "joist_spacing", "board_length"):
                errors.append(f"{name.replace('_', ' ').capitalize()} must be greater than 0")
        if not errors and self._row_width(request) <= 0:
            errors.append("Board width must be greater than 0")
        return errors

    @staticmethod
    def _row_width(request: DeckInput) -> float:
        """Board width plus joint, in metres."""
        return parse_dimension(request.board_width_cm) / 100 + parse_dimension(request.joint_gap_mm) / 1000

    def layout(self, request: DeckInput) -> DeckLayout:
        length = parse_dimension(request.length)
        width = parse_dimension(request.width)
        joist_length = parse_dimension(request.joist_length)
        joist_spacing = parse_dimension(request.joist_spacing)
        board_length = parse_dimension(request.board_length)
        row_width = self._row_width(request)
        spacing = self.SUPPORT_SPACING

        if request.pattern == DeckPattern.DIAGONAL_45:
            diagonal = math.sqrt(length * length + width * width)
            run = (length + width) / math.sqrt(2)
            rows, boards = diagonal_rows(diagonal, row_width, board_length, request.half_shift)
            return DeckLayout(
                rows=rows,
                boards=boards,
                board_cuts=rows * self.DIAGONAL_CUTS_PER_ROW,
                bearers_per_row=math.ceil(run / joist_length),
                bearer_rows=math.ceil(diagonal / spacing) + 1,
                joists_per_row=math.ceil(run / joist_length),
                joist_rows=math.ceil(diagonal / joist_spacing) + 1,
                posts_per_row=math.ceil(run / spacing) + 1,
                post_rows=math.ceil(diagonal / spacing) + 1,
            )

        rows = math.ceil(width / row_width) if row_width > 0 else 0
        return DeckLayout(
            rows=rows,
            boards=math.ceil(length / board_length) * rows,
            board_cuts=math.ceil(rows * self.LENGTH_PATTERN_CUTS_PER_ROW),
            bearers_per_row=math.ceil(length / joist_length),
            bearer_rows=math.ceil(width / spacing) + 1,
            joists_per_row=math.ceil(width / joist_length),
            joist_rows=math.ceil(length / joist_spacing) + 1,
            posts_per_row=math.ceil(length / spacing) + 1,
            post_rows=math.ceil(width / spacing) + 1,
        )

    @staticmethod
    def frame_boards_exact(length: float, width: float, board_length: float,
                           board_width_m: float) -> float:
        """Perimeter frame in boards, before rounding up."""
        along_length = (length - board_width_m) / board_length
        along_width = (width - board_width_m) / board_length
        return 2 * along_length + 2 * along_width

    def calculate(self, request: DeckInput) -> Optional[CalculationResult]:
        errors = self.validate(request)
        if errors:
            logger.info("Deck calculation skipped: %s", "; ".join(errors))
            return None

        length = parse_dimension(request.length)
        width = parse_dimension(request.width)
        layout = self.layout(request)

        frame_exact = 0.0
        frame_boards = 0
        if request.include_frame:
            frame_exact = self.frame_boards_exact(
                length, width, parse_dimension(request.board_length),
                parse_dimension(request.board_width_cm) / 100)
            frame_boards = math.ceil(frame_exact)
        total_boards = layout.boards + frame_boards

        posts = layout.posts
        joists = layout.joists
        bearers = layout.bearers
        postmix = math.ceil(posts * (parse_dimension(request.postmix_per_post) or 0))
        joist_cuts = layout.joist_rows + layout.bearer_rows

        breakdown = TaskBreakdown()
        steps = [
            (self.DIGGING_TASK, posts, posts, "posts"),
            (self.POSTS_TASK, posts, posts, "posts"),
            (self.BOARD_CUTS_TASK, layout.board_cuts, layout.board_cuts, "cuts"),
            (self.JOIST_CUTS_TASK, joist_cuts, joist_cuts, "cuts"),
        ]
        if request.include_frame:
            steps.append((self.FRAME_CUTS_TASK, frame_exact, frame_boards, "boards"))
        steps.extend([
            (self.FIXING_FRAME_TASK, joists, joists, "joists"),
            (self.FIXING_BOARDS_TASK, total_boards, total_boards, "boards"),
        ])
        for name, quantity, amount, unit in steps:
            template = self.tasks.find_exact(name)
            if template is not None and template.estimated_hours:
                breakdown.add_template(template, quantity, unit, amount=amount)

        if request.transport is not None:
            carrier_size, distance = resolve_transport(request.transport, self.catalog)
            for task, count, unit in (("transport decking boards", total_boards, "boards"),
                                      ("transport joists", joists, "joists"),
                                      ("transport bearers", bearers, "bearers")):
                if count > 0:
                    breakdown.add_transport(task, estimate_transport(count, carrier_size, "timber", distance),
                                            count, unit)
            if posts > 0:
                breakdown.add_transport("transport posts", estimate_carry_on_foot(posts, distance),
                                        posts, "posts")
            if postmix > 0:
                breakdown.add_transport("transport postmix",
                                        estimate_transport(postmix, carrier_size, "cement", distance),
                                        postmix, "bags")

        materials = [
            MaterialUsage("Decking Boards", layout.boards, "boards"),
            MaterialUsage("Posts", posts, "posts"),
            MaterialUsage("Joists", joists, "joists"),
            MaterialUsage("Bearers", bearers, "bearers"),
            MaterialUsage("Postmix", postmix, "bags"),
        ]
        if frame_boards > 0:
            materials.append(MaterialUsage("Frame Boards", frame_boards, "boards"))

        return breakdown.build(
            name="Decking Standard Installation",
            amount=length,
            unit="meters",
            materials=materials,
            details={
                "pattern": request.pattern.value,
                "rows": layout.rows,
                "board_cuts": layout.board_cuts,
                "joist_cuts": joist_cuts,
                "frame_boards": frame_boards,
                "total_boards": total_boards,
            },
        )
