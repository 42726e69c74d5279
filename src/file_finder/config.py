"""Configuration loading and matching criteria construction."""

from __future__ import annotations

import json
import os
import re
import sys
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .discovery import validate_pattern
from .errors import ConfigError
from .models import MatchingCriteria, OrderingCriteria
from .sort_rules import SortRule, build_sort_rule


CONFIG_FILENAME = "finder_config.json"

DEFAULT_CONFIG: Dict[str, Any] = {
    "matching": {
        "include": [],
        "exclude": [],
        "ordering_criteria": {
            "regex": "",
            "sort_by": [],
        },
    },
    "output": {
        "path": "",
        "pretty": True,
    },
}

STARTER_MATCHING: Dict[str, Any] = {
    "include": ["${HOME}/logs/**/*.log*"],
    "exclude": ["${HOME}/logs/**/*.gz"],
    "ordering_criteria": {
        "regex": r"app\.(?P<date>\d{4}-\d{2}-\d{2})\.log(?:\.(?P<seq>\d+))?",
        "sort_by": [
            {"sort_type": "numeric", "regex_key": "seq", "ascending": False},
            {
                "sort_type": "timestamp",
                "regex_key": "date",
                "ascending": False,
                "layout": "%Y-%m-%d",
                "location": "UTC",
            },
        ],
    },
}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries, with override values taking precedence."""
    merged = deepcopy(base)
    for key, value in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def expand_env_values(obj: Any) -> Any:
    """Expand environment variables (e.g. ${HOME}) in string values."""
    if isinstance(obj, dict):
        return {key: expand_env_values(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [expand_env_values(item) for item in obj]
    if isinstance(obj, str):
        return os.path.expandvars(obj)
    return obj


def read_json_file(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def write_json_file(path: Path, data: Dict[str, Any], pretty: bool = True) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        if pretty:
            json.dump(data, handle, indent=2, ensure_ascii=False)
        else:
            json.dump(data, handle, ensure_ascii=False)


def write_default_config(config_path: Path) -> None:
    """Write a starter config file to disk."""
    starter = deep_merge(DEFAULT_CONFIG, {"matching": STARTER_MATCHING})
    write_json_file(config_path, starter, pretty=True)


def load_config(config_path: Path) -> Dict[str, Any]:
    """Load a JSON config file merged with defaults."""
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}. "
            "Use --init-config to create a starter config file."
        )
    user_config = read_json_file(config_path)
    if not isinstance(user_config, dict):
        raise ConfigError(f"Config root must be a JSON object: {config_path}")
    for section in DEFAULT_CONFIG:
        if section in user_config and not isinstance(user_config[section], dict):
            raise ConfigError(f"Config section {section!r} must be a JSON object: {config_path}")
    return deep_merge(DEFAULT_CONFIG, expand_env_values(user_config))


def resolve_config_path(cli_config: Optional[str]) -> Path:
    """
    Resolve configuration path with the following precedence:
    1) --config path passed by user
    2) finder_config.json in current working directory
    3) finder_config.json or <executable>_config.json next to executable/script
    """
    if cli_config:
        return Path(cli_config).expanduser()

    candidate_names: List[str] = [CONFIG_FILENAME]
    executable_stem = Path(sys.argv[0]).stem
    if executable_stem:
        candidate_names.append(f"{executable_stem}_config.json")

    search_dirs: List[Path] = [Path.cwd(), Path(sys.argv[0]).resolve().parent]

    seen = set()
    for directory in search_dirs:
        key = str(directory)
        if key in seen:
            continue
        seen.add(key)
        for name in candidate_names:
            candidate = directory / name
            if candidate.exists():
                return candidate

    return Path(CONFIG_FILENAME)


def resolve_output_path(output_value: str) -> Optional[Path]:
    """Return the report destination, or None to print the report instead."""
    raw_value = (output_value or "").strip()
    if not raw_value or raw_value == "-":
        return None
    return Path(raw_value).expanduser()


def _pattern_list(matching_cfg: Dict[str, Any], key: str) -> Tuple[str, ...]:
    raw = matching_cfg.get(key) or []
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        raise ConfigError(f"matching.{key} must be a list of glob strings")

    patterns = tuple(item.strip() for item in raw if item.strip())
    for pattern in patterns:
        try:
            validate_pattern(pattern)
        except ValueError as exc:
            raise ConfigError(f"matching.{key} has malformed glob {pattern!r}: {exc}") from exc
    return patterns


def _build_sort_rules(raw_rules: Sequence[Any]) -> Tuple[SortRule, ...]:
    rules: List[SortRule] = []
    for index, raw_rule in enumerate(raw_rules):
        try:
            rules.append(build_sort_rule(raw_rule))
        except ConfigError as exc:
            raise ConfigError(f"matching.ordering_criteria.sort_by[{index}]: {exc}") from exc
    return tuple(rules)


def build_ordering_criteria(ordering_cfg: Optional[Dict[str, Any]]) -> Optional[OrderingCriteria]:
    """
    Build ordering criteria; returns None when no sort rules are configured.

    Rules referring to a group the regex lacks are accepted here and reported
    per rule at selection time.
    """
    if not ordering_cfg:
        return None
    if not isinstance(ordering_cfg, dict):
        raise ConfigError("matching.ordering_criteria must be an object")

    raw_rules = ordering_cfg.get("sort_by") or []
    if not isinstance(raw_rules, list):
        raise ConfigError("matching.ordering_criteria.sort_by must be a list")
    if not raw_rules:
        return None

    regex = str(ordering_cfg.get("regex") or "")
    if not regex:
        raise ConfigError("matching.ordering_criteria.regex is required when sort_by is set")
    try:
        re.compile(regex)
    except re.error as exc:
        raise ConfigError(f"matching.ordering_criteria.regex does not compile: {exc}") from exc

    return OrderingCriteria(regex=regex, sort_by=_build_sort_rules(raw_rules))


def build_matching_criteria(matching_cfg: Dict[str, Any]) -> MatchingCriteria:
    """Validate the matching section of a config and build immutable criteria."""
    if not isinstance(matching_cfg, dict):
        raise ConfigError("matching must be an object")

    include = _pattern_list(matching_cfg, "include")
    if not include:
        raise ConfigError("matching.include must list at least one glob pattern")

    return MatchingCriteria(
        include=include,
        exclude=_pattern_list(matching_cfg, "exclude"),
        ordering_criteria=build_ordering_criteria(matching_cfg.get("ordering_criteria")),
    )
