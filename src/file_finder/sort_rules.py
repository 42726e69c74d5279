"""Sort rules ranking candidate files by keys pulled from their names."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Any, Callable, Dict, List, Mapping, Tuple, Type
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import ConfigError, KeyParseError, RuleConfigurationError


SORT_TYPE_NUMERIC = "numeric"
SORT_TYPE_ALPHABETICAL = "alphabetical"
SORT_TYPE_TIMESTAMP = "timestamp"


def extract_keys(regex: re.Pattern, filename: str) -> Dict[str, str]:
    """
    Apply the regex once to the full path as matched.

    Every named group is present in the result; groups that did not take part
    in the match, or a name that does not match at all, map to "".
    """
    keys = {name: "" for name in regex.groupindex}
    match = regex.search(filename)
    if match is None:
        return keys
    for name, value in match.groupdict().items():
        keys[name] = value or ""
    return keys


@dataclass(frozen=True)
class SortRule:
    """
    Common behaviour for all sort rules.

    Subclasses turn an extracted string into a comparable value via
    ``parse_key``; values that fail to parse rank after all others no matter
    the direction.
    """

    regex_key: str
    ascending: bool = False

    sort_type = ""

    def check(self, regex: re.Pattern) -> None:
        if self.regex_key not in regex.groupindex:
            raise RuleConfigurationError(
                self.sort_type,
                self.regex_key,
                f"regex {regex.pattern!r} has no group named {self.regex_key!r}",
            )

    def parse_key(self, value: str) -> Any:
        raise NotImplementedError

    def _sort_key(self) -> Callable[[Tuple[bool, Any]], Tuple[bool, Any]]:
        # Descending sorts with reverse=True, so invalid entries must compare lowest.
        if self.ascending:
            return lambda item: (not item[0], item[1])
        return lambda item: item

    def sort(
        self,
        regex: re.Pattern,
        paths: List[str],
    ) -> Tuple[List[str], List[KeyParseError]]:
        """
        Stable-sort paths by this rule.

        Raises RuleConfigurationError when the rule cannot run at all. Files
        whose key does not parse are returned as errors alongside the order.
        """
        self.check(regex)
        errors: List[KeyParseError] = []
        ranked: List[Tuple[Tuple[bool, Any], str]] = []
        for path in paths:
            value = extract_keys(regex, path)[self.regex_key]
            try:
                ranked.append(((True, self.parse_key(value)), path))
            except (ValueError, OverflowError):
                errors.append(KeyParseError(self.sort_type, self.regex_key, path, value))
                ranked.append(((False, self.fallback_value()), path))

        sort_key = self._sort_key()
        ranked.sort(key=lambda entry: sort_key(entry[0]), reverse=not self.ascending)
        return [path for _, path in ranked], errors

    def fallback_value(self) -> Any:
        return 0


@dataclass(frozen=True)
class NumericSortRule(SortRule):
    sort_type = SORT_TYPE_NUMERIC

    def parse_key(self, value: str) -> int:
        # int() would also accept "1_000" and surrounding whitespace.
        if not re.fullmatch(r"[+-]?[0-9]+", value):
            raise ValueError(f"not a base-10 integer: {value!r}")
        return int(value)


@dataclass(frozen=True)
class AlphabeticalSortRule(SortRule):
    sort_type = SORT_TYPE_ALPHABETICAL

    def parse_key(self, value: str) -> str:
        return value


@dataclass(frozen=True)
class TimestampSortRule(SortRule):
    """Order by a date parsed with a strptime ``layout`` in ``location``."""

    layout: str = ""
    location: str = ""

    sort_type = SORT_TYPE_TIMESTAMP

    def zone(self) -> tzinfo:
        if not self.location:
            return timezone.utc
        try:
            return ZoneInfo(self.location)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise RuleConfigurationError(
                self.sort_type,
                self.regex_key,
                f"unknown location {self.location!r}",
            ) from exc

    def check(self, regex: re.Pattern) -> None:
        super().check(regex)
        if not self.layout:
            raise RuleConfigurationError(self.sort_type, self.regex_key, "layout is required")
        self.zone()

    def parse_key(self, value: str) -> datetime:
        parsed = datetime.strptime(value, self.layout)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=self.zone())
        # Aware values compare by instant; converting near datetime.min/max can overflow.
        return parsed

    def fallback_value(self) -> datetime:
        return datetime.min.replace(tzinfo=timezone.utc)


SORT_RULE_TYPES: Dict[str, Type[SortRule]] = {
    SORT_TYPE_NUMERIC: NumericSortRule,
    SORT_TYPE_ALPHABETICAL: AlphabeticalSortRule,
    SORT_TYPE_TIMESTAMP: TimestampSortRule,
}


def _as_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ConfigError(f"sort_by.{field_name} must be true or false, got {value!r}")


def build_sort_rule(raw: Mapping[str, Any]) -> SortRule:
    """Build a sort rule from its config mapping, validating type-specific fields."""
    if not isinstance(raw, Mapping):
        raise ConfigError(f"sort_by entries must be objects, got {raw!r}")

    sort_type = str(raw.get("sort_type", "")).strip().lower()
    rule_cls = SORT_RULE_TYPES.get(sort_type)
    if rule_cls is None:
        known = ", ".join(sorted(SORT_RULE_TYPES))
        raise ConfigError(f"sort_by.sort_type {sort_type!r} is not one of: {known}")

    regex_key = str(raw.get("regex_key") or "").strip()
    if not regex_key:
        raise ConfigError(f"{sort_type} sort rule requires regex_key")
    ascending = _as_bool(raw.get("ascending", False), "ascending")

    if rule_cls is not TimestampSortRule:
        return rule_cls(regex_key=regex_key, ascending=ascending)

    layout = str(raw.get("layout") or "")
    if not layout:
        raise ConfigError(f"timestamp sort rule on {regex_key!r} requires layout")
    rule = TimestampSortRule(
        regex_key=regex_key,
        ascending=ascending,
        layout=layout,
        location=str(raw.get("location") or "").strip(),
    )
    try:
        rule.zone()
    except RuleConfigurationError as exc:
        raise ConfigError(str(exc)) from exc
    return rule


def describe_rule(rule: SortRule) -> Dict[str, Any]:
    """Config-shaped view of a rule, used in reports."""
    described: Dict[str, Any] = {
        "sort_type": rule.sort_type,
        "regex_key": rule.regex_key,
        "ascending": rule.ascending,
    }
    if isinstance(rule, TimestampSortRule):
        described["layout"] = rule.layout
        described["location"] = rule.location
    return described
