"""Centralized configuration for SheetCalc.

This module defines:
- The default rounding scale for inexact results
- Input validation limits (length, nesting depth)
- Numeric limits for exact exponentiation and rounding
- Error tokens returned by the calculator facade
- Regex patterns for tokenizing and function names

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with SHEETCALC_)
"""

import os
import re

# Version is defined in pyproject.toml [project] section
try:
    import importlib.metadata

    VERSION = importlib.metadata.version("sheetcalc")
except Exception:
    # Fallback if package not installed
    VERSION = "1.0.0"

# Maximum number of fractional digits kept for inexact results
DEFAULT_SCALE = int(os.getenv("SHEETCALC_DEFAULT_SCALE", "10"))

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("SHEETCALC_MAX_INPUT_LENGTH", "10000"))  # characters
MAX_NESTING_DEPTH = int(
    os.getenv("SHEETCALC_MAX_NESTING_DEPTH", "100")
)  # parentheses and function calls

# Numeric limits
MAX_EXACT_EXPONENT = int(
    os.getenv("SHEETCALC_MAX_EXACT_EXPONENT", "10000")
)  # larger integral exponents use the float fallback
MAX_RESULT_DIGITS = int(
    os.getenv("SHEETCALC_MAX_RESULT_DIGITS", "100000")
)  # estimated digits above which exact powers use the float fallback
MAX_ROUNDING_DIGITS = int(
    os.getenv("SHEETCALC_MAX_ROUNDING_DIGITS", "1000")
)  # bound for the precision argument of ROUND
MAX_LITERAL_EXPONENT = int(
    os.getenv("SHEETCALC_MAX_LITERAL_EXPONENT", "10000")
)  # bound for the decimal exponent of number literals

# Logging
LOG_LEVEL = os.getenv("SHEETCALC_LOG_LEVEL", "WARNING")

# Error tokens (spreadsheet style)
SYNTAX_ERROR_TOKEN = "#SYNTAXERROR"
DIV0_TOKEN = "#DIV0"
ERROR_TOKEN_TEMPLATE = "#ERROR({})"

DECIMAL_SEPARATOR = "."

# Registered function names must be producible by the tokenizer
FUNCTION_NAME_RE = re.compile(r"[A-Za-z][A-Za-z0-9]*")
STRICT_NUMBER_RE = re.compile(r"[0-9]+")
