#!/usr/bin/env python3
"""
Interactive management systems launcher.

Usage:
    python3 scripts/interactive.py vehicles
    python3 scripts/interactive.py tax --today 2025-06-15
    python3 scripts/interactive.py internships --log-level INFO --log-file session.log
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from mgmt_cli.main import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
