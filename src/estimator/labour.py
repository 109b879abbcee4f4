"""
Groundwork Estimator - Labour Hour Aggregator

Turns counts produced by the geometric engines into task breakdown
entries and assembles the final calculation result.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from .lookup import Lookup
from .models import CalculationResult, MaterialUsage, TaskEntry, TaskTemplate
from .transport import TransportEstimate

logger = logging.getLogger(__name__)


def template_hours(template: TaskTemplate, quantity: float, area: Optional[float] = None) -> float:
    """
    Hours for ``quantity`` units of a template.

    When ``area`` is given, area-rated templates (m², square meters) are
    multiplied by the area and any other template counts once.
    """
    rate = template.estimated_hours or 0.0
    if area is not None:
        return area * rate if template.is_area_rate else rate
    return quantity * rate


class TaskBreakdown:
    """Ordered list of task entries plus the fallbacks hit on the way."""

    def __init__(self):
        self._entries: List[TaskEntry] = []
        self._warnings: List[str] = []

    @property
    def entries(self):
        return tuple(self._entries)

    @property
    def warnings(self):
        return tuple(self._warnings)

    @property
    def total_hours(self) -> float:
        return sum(entry.hours for entry in self._entries)

    def add(self, task: str, hours: float, amount: Union[float, str], unit: str,
            normalized_hours: Optional[float] = None,
            template: Optional[TaskTemplate] = None) -> TaskEntry:
        entry = TaskEntry(
            task=task,
            hours=hours,
            amount=amount,
            unit=unit,
            normalized_hours=normalized_hours,
            event_task_id=template.id if template is not None else None,
        )
        self._entries.append(entry)
        return entry

    def add_template(self, template: TaskTemplate, quantity: float, unit: str,
                     task: Optional[str] = None, amount: Union[float, str, None] = None
                     ) -> TaskEntry:
        """Entry of ``quantity`` × the template rate."""
        return self.add(
            task=task or template.name,
            hours=template_hours(template, quantity),
            amount=quantity if amount is None else amount,
            unit=unit,
            template=template,
        )

    def add_transport(self, task: str, estimate: TransportEstimate,
                      amount: Union[float, str], unit: str) -> Optional[TaskEntry]:
        """Transport entry, only when it takes any time."""
        for reason in estimate.warnings:
            self.warn(reason, log=False)
        if not estimate.total_hours > 0:
            return None
        return self.add(
            task=task,
            hours=estimate.total_hours,
            amount=amount,
            unit=unit,
            normalized_hours=estimate.normalized_hours,
        )

    def note(self, lookup: Lookup) -> Lookup:
        """Record a lookup's fallback reason, if any, and pass it through."""
        if lookup.is_fallback:
            self.warn(lookup.reason, log=False)
        return lookup

    def warn(self, reason: str, log: bool = True):
        if log:
            logger.warning(reason)
        if reason not in self._warnings:
            self._warnings.append(reason)

    def build(self, name: str, amount: float, unit: str,
              materials: Iterable[MaterialUsage],
              details: Optional[Dict[str, Any]] = None) -> CalculationResult:
        return CalculationResult(
            name=name,
            amount=amount,
            unit=unit,
            materials=tuple(materials),
            task_breakdown=self.entries,
            details=dict(details or {}),
            warnings=self.warnings,
        )


def add_grouting(breakdown: TaskBreakdown, template: Optional[TaskTemplate],
                 area: float, grouting_id: str) -> Optional[TaskEntry]:
    """Grouting entry for a selected grouting template over ``area`` m²."""
    if template is None or not template.has_rate:
        breakdown.warn(f"Grouting method {grouting_id} not found")
        return None
    return breakdown.add(
        task=template.name or "Grouting",
        hours=template_hours(template, 1, area=area),
        amount=area,
        unit="square meters",
        template=template,
    )
