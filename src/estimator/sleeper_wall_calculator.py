"""
Groundwork Estimator - Sleeper Wall Calculator

Timber sleeper retaining walls: sleepers stacked in rows between posts,
with posts cut from standard 2.4 m lengths.
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


class PostMethod(Enum):
    CONCRETE = "concrete"
    DIRECT = "direct"


@dataclass
class SleeperWallInput:
    length: DimensionValue
    height: DimensionValue
    post_method: PostMethod = PostMethod.CONCRETE
    transport: Optional[TransportOptions] = None


class SleeperWallCalculator:
    """Sleeper, post and postmix quantities plus the labour to build the wall."""

    SLEEPER_LENGTH_MM = 2400
    SLEEPER_HEIGHT_MM = 200
    STANDARD_POST_MM = 2400
    POST_FOUNDATION_MM = 400
    POSTMIX_BAGS_PER_POST = 2
    LEVELING_TASK = "preparing for the wall (leveling)"

    def __init__(self, catalog: EstimationCatalog):
        self.catalog = catalog
        self.tasks = TaskMatcher(catalog.templates)

    def validate(self, request: SleeperWallInput) -> List[str]:
        errors = []
        if parse_dimension(request.length) is None:
            errors.append("Wall length must be a number")
        if parse_dimension(request.height) is None:
            errors.append("Wall height must be a number")
        return errors

    def calculate(self, request: SleeperWallInput) -> Optional[CalculationResult]:
        errors = self.validate(request)
        if errors:
            logger.info("Sleeper wall calculation skipped: %s", "; ".join(errors))
            return None

        length = parse_dimension(request.length)
        height = parse_dimension(request.height)
        length_mm = length * 1000
        height_mm = height * 1000

        per_row = math.ceil(length_mm / self.SLEEPER_LENGTH_MM)
        rows = math.ceil(height_mm / self.SLEEPER_HEIGHT_MM)
        sleepers = per_row * rows

        # One post at the start plus two per sleeper in the first row
        posts = 1 + per_row * 2
        post_height_mm = height_mm + self.POST_FOUNDATION_MM
        pieces_per_post = math.floor(self.STANDARD_POST_MM / post_height_mm)
        posts_to_buy = math.ceil(posts / max(1, pieces_per_post))

        concrete = request.post_method == PostMethod.CONCRETE
        postmix_bags = posts * self.POSTMIX_BAGS_PER_POST if concrete else 0

        breakdown = TaskBreakdown()

        first_layer = self.tasks.find_containing("sleeper wall", "1st layer")
        if first_layer is not None and first_layer.has_rate:
            breakdown.add_template(first_layer, per_row, "sleepers")

        if rows > 1:
            on_top = self.tasks.find_containing("sleeper wall", "on top")
            if on_top is not None and on_top.has_rate:
                breakdown.add_template(on_top, per_row * (rows - 1), "sleepers")
            else:
                breakdown.warn("No task template found for building sleeper wall on top of 1st layer")

        if concrete:
            digging = self.tasks.find_containing("digging holes")
            if digging is not None and digging.has_rate:
                breakdown.add_template(digging, posts, "holes")

        setting = self.tasks.find_containing("setting up posts")
        if setting is not None and setting.has_rate:
            breakdown.add_template(setting, posts, "posts")

        if request.transport is not None:
            carrier_size, distance = resolve_transport(request.transport, self.catalog)
            if sleepers > 0:
                breakdown.add_transport("transport sleepers",
                                        estimate_carry_on_foot(sleepers, distance),
                                        sleepers, "sleepers")
            breakdown.add_transport("transport posts",
                                    estimate_carry_on_foot(posts, distance),
                                    posts, "posts")
            if postmix_bags > 0:
                breakdown.add_transport("transport postmix",
                                        estimate_transport(postmix_bags, carrier_size, "cement", distance),
                                        postmix_bags, "bags")

        leveling = self.tasks.find_exact(self.LEVELING_TASK)
        if leveling is not None and leveling.has_rate:
            breakdown.add_template(leveling, length, "running meters", task=self.LEVELING_TASK)

        materials = [
            MaterialUsage("Sleeper", sleepers, "sleepers"),
            MaterialUsage("Post", posts_to_buy, "posts (2.4m)"),
        ]
        if concrete:
            materials.append(MaterialUsage("Postmix", postmix_bags, "bags"))

        return breakdown.build(
            name="Sleeper Wall",
            amount=length,
            unit="metres",
            materials=materials,
            details={
                "sleepers_per_row": per_row,
                "rows": rows,
                "rounded_up_height": rows * self.SLEEPER_HEIGHT_MM / 1000,
                "total_posts": posts,
                "post_height_m": post_height_mm / 1000,
                "pieces_per_post": pieces_per_post,
                "posts_to_buy": posts_to_buy,
            },
        )
