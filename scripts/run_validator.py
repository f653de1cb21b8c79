#!/usr/bin/env python3
"""Command-line entry point for the SHACL report pipeline."""
from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root (containing the ``shaclreport`` package) is on ``sys.path``
# so the script can be executed directly without an editable install.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from shaclreport.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
