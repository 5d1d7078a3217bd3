"""
inline-values: rewrite Ruby source so every expression's value can be
recorded next to the line it appears on.
"""

from inline_values.models import ParseFailure, Rewritten, WrapHooks, WrapOutcome
from inline_values.transform import WrapExpressions, WrapSyntaxError, wrap, wrap_expressions
from inline_values.utils.guard import HardCoreEnsure, run_guarded

__version__ = "1.0.0"

__all__ = [
    "wrap",
    "wrap_expressions",
    "WrapExpressions",
    "WrapSyntaxError",
    "WrapHooks",
    "Rewritten",
    "ParseFailure",
    "WrapOutcome",
    "HardCoreEnsure",
    "run_guarded",
]
