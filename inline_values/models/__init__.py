"""Data models for the expression wrapping transform."""

from .result import ParseFailure, Rewritten, WrapOutcome
from .syntax_node import NON_STATEMENT_KINDS, NodeKind, SyntaxNode, UnknownNodeKindError
from .wrap import (
    BufferRegions,
    EditKind,
    LineGroup,
    WrapCandidate,
    WrapEdit,
    WrapHooks,
)

__all__ = [
    # Syntax models
    "NodeKind",
    "NON_STATEMENT_KINDS",
    "SyntaxNode",
    "UnknownNodeKindError",
    # Wrap models
    "WrapHooks",
    "EditKind",
    "WrapCandidate",
    "WrapEdit",
    "LineGroup",
    "BufferRegions",
    # Result models
    "Rewritten",
    "ParseFailure",
    "WrapOutcome",
]
