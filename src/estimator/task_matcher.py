"""
Groundwork Estimator - Task Template Matching

Finds the labour-rate template for a task in the externally supplied
catalog: exact case-insensitive names first, then substring or scored
dimension matches, and finally a hardcoded fallback rate.
"""

import re
from typing import Iterable, List, Optional, Tuple

from .lookup import Lookup, Ok, fallback
from .models import TaskTemplate

DIMENSION_TOKEN = re.compile(r"(\d+)\s*[×x]\s*(\d+)")

SCORE_BOTH = 100
SCORE_LENGTH = 50
SCORE_WIDTH = 30


def normalize_name(name: str) -> str:
    """Lower-case and collapse runs of whitespace."""
    return " ".join((name or "").lower().split())


def score_dimensions(candidate_name: str, target_length: float,
                     target_width: float) -> Optional[int]:
    """
    Score how well a "L × W" token in a task name fits the target size.

    Returns:
        100 when both dimensions match, 50 for length only, 30 for width
        only, 0 for neither, or None when the name has no dimension token
    """
    match = DIMENSION_TOKEN.search(candidate_name or "")
    if not match:
        return None
    length, width = int(match.group(1)), int(match.group(2))
    if length == target_length and width == target_width:
        return SCORE_BOTH
    if length == target_length:
        return SCORE_LENGTH
    if width == target_width:
        return SCORE_WIDTH
    return 0


class TaskMatcher:
    """Read-only view over a task template catalog."""

    def __init__(self, templates: Iterable[TaskTemplate]):
        self.templates: List[TaskTemplate] = list(templates)

    def find_exact(self, name: str) -> Optional[TaskTemplate]:
        target = normalize_name(name)
        for template in self.templates:
            if normalize_name(template.name) == target:
                return template
        return None

    def find_containing(self, *fragments: str) -> Optional[TaskTemplate]:
        """First template whose name contains every fragment."""
        wanted = [normalize_name(f) for f in fragments]
        for template in self.templates:
            name = normalize_name(template.name)
            if all(fragment in name for fragment in wanted):
                return template
        return None

    def filter_containing(self, *fragments: str) -> List[TaskTemplate]:
        wanted = [normalize_name(f) for f in fragments]
        return [
            t for t in self.templates
            if all(fragment in normalize_name(t.name) for fragment in wanted)
        ]

    def find_by_id(self, template_id) -> Optional[TaskTemplate]:
        if template_id is None:
            return None
        for template in self.templates:
            if template.id == str(template_id):
                return template
        return None

    def best_dimension_match(self, target_length: float, target_width: float,
                             required: Tuple[str, ...] = ("tile", "installation")
                             ) -> Optional[Tuple[TaskTemplate, int]]:
        """
        Highest scoring candidate among templates containing ``required``.

        Candidates without a dimension token are skipped. The first
        candidate reaching the highest score wins.
        """
        best = None
        best_score = -1
        for template in self.filter_containing(*required):
            score = score_dimensions(template.name, target_length, target_width)
            if score is None:
                continue
            if score > best_score:
                best, best_score = template, score
        if best is None:
            return None
        return best, best_score

    def rate(self, name: str, fallback_hours: Optional[float] = None) -> Lookup:
        """
        Hours per unit for an exactly named task.

        Returns:
            Ok(template) when the template exists with a rate, otherwise
            Fallback(fallback_hours) (which may be None, meaning omit)
        """
        template = self.find_exact(name)
        if template is not None and template.has_rate:
            return Ok(template)
        return fallback(fallback_hours, f"Task template '{name}' not found")


def rate_of(lookup: Lookup) -> Optional[float]:
    """Hours per unit from a rate lookup (template or fallback number)."""
    if isinstance(lookup.value, TaskTemplate):
        return lookup.value.estimated_hours
    return lookup.value


def template_of(lookup: Lookup) -> Optional[TaskTemplate]:
    if isinstance(lookup.value, TaskTemplate):
        return lookup.value
    return None
