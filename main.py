#!/usr/bin/env python3
"""Runs the ``webtraffic`` command from a source checkout."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Sequence

SRC_PATH = Path(__file__).resolve().parent / "src"
if SRC_PATH.exists() and str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


def main(argv: Optional[Sequence[str]] = None) -> None:
    from webtraffic import cli

    sys.exit(cli.run_cli(argv))


if __name__ == "__main__":
    main()
