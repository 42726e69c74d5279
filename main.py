#!/usr/bin/env python3
"""Application starter; runs the finder CLI from a source checkout."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Sequence

MIN_SUPPORTED_PYTHON = (3, 11)


def _ensure_src_on_path() -> None:
    """Ensure src/ is importable when running from repository root."""
    root = Path(__file__).resolve().parent
    src_str = str(root / "src")
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Invoke finder CLI main function."""
    if sys.version_info[:2] < MIN_SUPPORTED_PYTHON:
        current = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
        print(
            f"Unsupported Python runtime: {current}. "
            f"Use Python {MIN_SUPPORTED_PYTHON[0]}.{MIN_SUPPORTED_PYTHON[1]} or newer.",
            file=sys.stderr,
        )
        return 1

    _ensure_src_on_path()
    from file_finder.cli import main as cli_main

    return cli_main(argv)


if __name__ == "__main__":
    raise SystemExit(main())
