"""
Pytest configuration and shared fixtures.
"""

from pathlib import Path
from typing import Callable, List

import pytest


@pytest.fixture
def make_files(tmp_path: Path) -> Callable[..., List[str]]:
    """Create empty files under tmp_path and return their absolute paths."""

    def _make(*names: str) -> List[str]:
        created = []
        for name in names:
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("", encoding="utf-8")
            created.append(str(path))
        return created

    return _make


@pytest.fixture
def rotated_logs(make_files) -> List[str]:
    """Numerically rotated files where lexical and numeric order disagree."""
    return make_files("app.log.1", "app.log.2", "app.log.10")


@pytest.fixture
def dated_logs(make_files) -> List[str]:
    """Daily files with a trailing suffix, used for cascade priority checks."""
    return make_files(
        "svc-2024-01-01.a.log",
        "svc-2024-01-01.b.log",
        "svc-2024-02-01.a.log",
    )
