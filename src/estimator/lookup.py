"""
Groundwork Estimator - Lookup Results

Every table or catalog lookup in the engine answers with either an
``Ok`` (the value came straight from the data) or a ``Fallback`` (a
documented default was used instead, with the reason attached).
"""

import logging
from dataclasses import dataclass
from typing import Any, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ok:
    """Value found in the table or catalog."""
    value: Any

    @property
    def is_fallback(self) -> bool:
        return False


@dataclass(frozen=True)
class Fallback:
    """Documented fallback value plus the reason it was needed."""
    value: Any
    reason: str

    @property
    def is_fallback(self) -> bool:
        return True


Lookup = Union[Ok, Fallback]


def fallback(value: Any, reason: str) -> Fallback:
    """Build a Fallback and emit the matching warning."""
    logger.warning(reason)
    return Fallback(value=value, reason=reason)
