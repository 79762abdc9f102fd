#!/usr/bin/env python3
"""
SheetCalc - spreadsheet style calculator

Main entry point for the SheetCalc application.
This file serves as a thin wrapper that delegates all functionality
to the sheetcalc_pkg package.

Usage:
    python sheetcalc.py                     # Interactive REPL
    python sheetcalc.py -e "2+2"            # Evaluate expression
    python sheetcalc.py -s 3 -e "10 / 3"    # Evaluate with 3 fractional digits
    python sheetcalc.py --help              # Show help
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entry point for SheetCalc.

    Delegates all functionality to the sheetcalc_pkg.cli module,
    which handles argument parsing, expression evaluation, and output formatting.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        from sheetcalc_pkg.cli import main_entry

        return main_entry(sys.argv[1:])
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        return 1
    except ImportError as e:
        print(f"Error: Failed to import sheetcalc_pkg: {e}")
        print("Please ensure the package is installed: pip install -e .")
        return 1


if __name__ == "__main__":
    sys.exit(main())
