"""Top-level selection workflow: discover candidates, then order them."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .config import build_matching_criteria
from .discovery import find_candidates
from .models import MatchingCriteria, SelectionResult
from .ordering import order_candidates
from .sort_rules import describe_rule


TOOL_NAME = "log-file-finder"
TOOL_VERSION = "1.0.0"

LOGGER = logging.getLogger("file_finder.selector")


def utc_now() -> str:
    """Return current UTC timestamp in ISO8601 format."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def select_files(
    criteria: MatchingCriteria,
    logger: Optional[logging.Logger] = None,
) -> SelectionResult:
    """
    Return the files a consumer should open for one collection cycle.

    Without sort rules this is every matching file in first-seen order. With
    sort rules it is at most one file, and ``errors`` carries any per-rule
    failures so the caller can decide whether they matter.
    """
    log = logger or LOGGER
    candidates = find_candidates(criteria.include, criteria.exclude, logger=log)
    ordered = order_candidates(candidates, criteria.ordering_criteria, logger=log)
    return SelectionResult(
        paths=ordered.paths,
        errors=ordered.errors,
        candidates=len(candidates),
    )


def describe_criteria(criteria: MatchingCriteria) -> Dict[str, Any]:
    described: Dict[str, Any] = {
        "include": list(criteria.include),
        "exclude": list(criteria.exclude),
    }
    if criteria.ordering_criteria is not None:
        described["ordering_criteria"] = {
            "regex": criteria.ordering_criteria.regex,
            "sort_by": [describe_rule(rule) for rule in criteria.ordering_criteria.sort_by],
        }
    return described


def _describe_errors(result: SelectionResult) -> List[Dict[str, str]]:
    return [
        {"type": type(error).__name__, "message": str(error)}
        for error in result.errors
    ]


def run_selection(config: Dict[str, Any], logger: logging.Logger) -> Dict[str, object]:
    """Execute one selection from loaded config and return the report payload."""
    logger.info("STEP_START: build_criteria")
    criteria = build_matching_criteria(config.get("matching", {}))
    logger.info("STEP_DONE: build_criteria")

    logger.info("STEP_START: select_files")
    start_time = utc_now()
    result = select_files(criteria, logger)
    end_time = utc_now()
    logger.info(
        "STEP_DONE: select_files candidates=%d selected=%d errors=%d",
        result.candidates,
        len(result.paths),
        len(result.errors),
    )

    return {
        "finder": {
            "name": TOOL_NAME,
            "version": TOOL_VERSION,
        },
        "selection_started_at": start_time,
        "selection_completed_at": end_time,
        "criteria": describe_criteria(criteria),
        "stats": {
            "candidates": result.candidates,
            "selected": len(result.paths),
            "errors": len(result.errors),
        },
        "files": list(result.paths),
        "errors": _describe_errors(result),
    }
