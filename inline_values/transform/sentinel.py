"""Fault-injection sentinel substitution."""

from typing import Optional

# An identifier that, when wrapped, is replaced with text that cannot parse.
SENTINEL = "__TOTAL_FUCKING_FAILURE__"
SUBSTITUTION = ".....TOTAL FUCKING FAILURE!....."


def substitution_for(text: str) -> Optional[str]:
    """Return the replacement for a wrapped span's text, if it is the sentinel."""
    if text == SENTINEL:
        return SUBSTITUTION
    return None
