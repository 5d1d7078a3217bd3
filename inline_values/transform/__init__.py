"""
Expression wrapping transform.

Classifies void values, plans wrap edits per line, and patches the source.
"""

from inline_values.transform.line_groups import LineGrouper
from inline_values.transform.patcher import TextPatcher, edit_order
from inline_values.transform.planner import WrapPlanner
from inline_values.transform.sentinel import SENTINEL, SUBSTITUTION, substitution_for
from inline_values.transform.void_values import is_void
from inline_values.transform.wrap_expressions import (
    WrapExpressions,
    WrapSyntaxError,
    wrap,
    wrap_expressions,
)

__all__ = [
    "is_void",
    "LineGrouper",
    "WrapPlanner",
    "TextPatcher",
    "edit_order",
    "SENTINEL",
    "SUBSTITUTION",
    "substitution_for",
    "WrapExpressions",
    "WrapSyntaxError",
    "wrap",
    "wrap_expressions",
]
