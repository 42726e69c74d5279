"""Error types raised or collected while selecting files."""

from __future__ import annotations

from typing import Optional


class SelectionError(Exception):
    """Base class for file selection failures."""


class ConfigError(SelectionError, ValueError):
    """Matching criteria could not be built from configuration."""


class PatternExpansionError(SelectionError):
    """An include pattern could not be expanded against the filesystem."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"unable to expand pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class RuleConfigurationError(SelectionError):
    """A sort rule cannot be applied with the configured regex or timezone."""

    def __init__(self, sort_type: str, regex_key: str, reason: str) -> None:
        super().__init__(f"{sort_type} sort on {regex_key!r}: {reason}")
        self.sort_type = sort_type
        self.regex_key = regex_key
        self.reason = reason


class KeyParseError(SelectionError):
    """A file's extracted key could not be parsed for a sort rule."""

    def __init__(
        self,
        sort_type: str,
        regex_key: str,
        path: str,
        value: Optional[str],
    ) -> None:
        if value:
            detail = f"cannot parse {value!r}"
        else:
            detail = "no value extracted"
        super().__init__(f"{sort_type} sort on {regex_key!r}: {detail} for {path}")
        self.sort_type = sort_type
        self.regex_key = regex_key
        self.path = path
        self.value = value
