"""Glob expansion and exclusion filtering for candidate file selection."""

from __future__ import annotations

import glob
import logging
import os
from typing import Dict, List, Optional, Sequence

from wcmatch import glob as wcglob

from .errors import PatternExpansionError


LOGGER = logging.getLogger("file_finder.discovery")

# `*`, `?` and `[...]` stay inside one path segment; only `**` crosses `/`.
GLOB_FLAGS = wcglob.GLOBSTAR | wcglob.DOTGLOB


def validate_pattern(pattern: str) -> None:
    """Raise ValueError when a glob cannot be compiled."""
    wcglob.translate(pattern, flags=GLOB_FLAGS)


def is_excluded_file(path: str, exclude: Sequence[str]) -> bool:
    """Return True when the path, as expanded or absolute, matches any exclusion."""
    if not exclude:
        return False
    patterns = list(exclude)
    absolute = os.path.abspath(path)
    return wcglob.globmatch(path, patterns, flags=GLOB_FLAGS) or wcglob.globmatch(
        absolute, patterns, flags=GLOB_FLAGS
    )


def expand_pattern(pattern: str) -> List[str]:
    """Return regular files matching one include pattern, in sorted order."""
    try:
        matches = glob.glob(pattern, recursive=True, include_hidden=True)
    except (OSError, ValueError) as exc:
        raise PatternExpansionError(pattern, str(exc)) from exc
    return sorted(match for match in matches if os.path.isfile(match))


def _usable_excludes(exclude: Sequence[str], logger: logging.Logger) -> List[str]:
    usable: List[str] = []
    for pattern in exclude:
        try:
            validate_pattern(pattern)
        except ValueError as exc:
            logger.warning("Ignoring malformed exclude pattern %r: %s", pattern, exc)
            continue
        usable.append(pattern)
    return usable


def find_candidates(
    include: Sequence[str],
    exclude: Sequence[str] = (),
    logger: Optional[logging.Logger] = None,
) -> List[str]:
    """
    Expand include patterns into unique absolute file paths.

    Order is first include pattern first, then sorted matches within it. A
    pattern that fails to expand contributes nothing; patterns are checked
    when configuration is loaded, so this only degrades the one pattern
    instead of failing the whole call.
    """
    log = logger or LOGGER
    exclude_patterns = _usable_excludes(exclude, log)
    seen: Dict[str, None] = {}

    for pattern in include:
        try:
            matches = expand_pattern(pattern)
        except PatternExpansionError as exc:
            log.warning("%s; treating as no matches", exc)
            continue

        log.debug("Pattern %r matched %d file(s)", pattern, len(matches))
        for match in matches:
            if is_excluded_file(match, exclude_patterns):
                continue
            seen.setdefault(os.path.abspath(match), None)

    return list(seen)
