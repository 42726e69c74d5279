"""Cascade of stable sorts that narrows candidates to one winning file."""

from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

from .errors import RuleConfigurationError
from .models import OrderingCriteria, OrderingResult


LOGGER = logging.getLogger("file_finder.ordering")


def order_candidates(
    candidates: Sequence[str],
    criteria: Optional[OrderingCriteria],
    logger: Optional[logging.Logger] = None,
) -> OrderingResult:
    """
    Apply every sort rule, in listed order, as a full stable sort.

    Each pass re-sorts the output of the previous one, so the last listed rule
    decides the overall order and earlier rules only break its ties. A rule
    that cannot run leaves the order untouched; its error is collected and the
    remaining rules still run. With at least one rule configured only the
    front-most file is returned.
    """
    log = logger or LOGGER
    working = list(candidates)
    if criteria is None or not criteria.sort_by:
        return OrderingResult(paths=working)

    result = OrderingResult()
    if not working:
        return result

    # Compiled once per call; build_ordering_criteria already rejected bad patterns.
    regex = re.compile(criteria.regex)

    for position, rule in enumerate(criteria.sort_by, start=1):
        try:
            ordered, parse_errors = rule.sort(regex, working)
        except RuleConfigurationError as exc:
            log.warning("Sort rule %d skipped: %s", position, exc)
            result.errors.append(exc)
            continue

        for parse_error in parse_errors:
            log.warning("Sort rule %d: %s", position, parse_error)
        result.errors.extend(parse_errors)
        working = ordered

    result.paths = working[:1]
    return result
