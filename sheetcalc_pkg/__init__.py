"""SheetCalc package: tokenizer, parser, expression tree and calculator facade."""

__all__ = [
    "config",
    "tokenizer",
    "operators",
    "functions",
    "tree",
    "parser",
    "calculator",
    "types",
    "api",
    "cli",
    "logging_config",
]

# Public API exports

__api_exports__ = [
    "create_calculator",
    "calculate",
    "evaluate",
    "validate_expression",
    "render_tree",
]
