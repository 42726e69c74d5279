"""Immutable matching criteria and per-call selection results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .errors import SelectionError
from .sort_rules import SortRule


@dataclass(frozen=True)
class OrderingCriteria:
    """Extraction regex plus sort rules; the last listed rule is the primary key."""

    regex: str = ""
    sort_by: Tuple[SortRule, ...] = ()


@dataclass(frozen=True)
class MatchingCriteria:
    include: Tuple[str, ...]
    exclude: Tuple[str, ...] = ()
    ordering_criteria: Optional[OrderingCriteria] = None


@dataclass
class OrderingResult:
    """Ordered paths plus every per-rule error collected on the way."""

    paths: List[str] = field(default_factory=list)
    errors: List[SelectionError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def error(self) -> Optional[ExceptionGroup]:
        """Return all collected errors as one exception group, or None."""
        if not self.errors:
            return None
        return ExceptionGroup("file ordering reported errors", list(self.errors))


@dataclass
class SelectionResult(OrderingResult):
    candidates: int = 0
