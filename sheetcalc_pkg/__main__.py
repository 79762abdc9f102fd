"""Main entry point for running sheetcalc_pkg as a module.

This allows running SheetCalc with:
    python -m sheetcalc_pkg
    python -m sheetcalc_pkg --health-check
    python -m sheetcalc_pkg -e "2+2"

This is equivalent to running:
    python -m sheetcalc_pkg.cli
    python sheetcalc.py
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
