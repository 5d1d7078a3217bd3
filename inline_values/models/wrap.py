"""
Data models for planning and applying wrap edits.

These models carry the hooks supplied by the caller, the per-node wrap
candidates found by the planner, the per-line grouping of those
candidates, and the textual edits consumed by the patcher.
"""

from enum import Enum
from typing import Callable, List, Optional

from pydantic import BaseModel, Field

from .syntax_node import NodeKind, SyntaxNode


def _no_text() -> str:
    return ""


def _no_line_text(line: int) -> str:
    return ""


class WrapHooks(BaseModel):
    """Caller-supplied text producers spliced into the rewritten source."""

    before_all: Callable[[], str] = Field(default=_no_text, description="Text placed before the program body")
    after_all: Callable[[], str] = Field(default=_no_text, description="Text placed after the program body")
    before_each: Callable[[int], str] = Field(default=_no_line_text, description="Text placed before a wrapped expression")
    after_each: Callable[[int], str] = Field(default=_no_line_text, description="Text placed after a wrapped expression")


class EditKind(str, Enum):
    """Kinds of textual edits."""
    OPEN = "open"
    CLOSE = "close"
    REPLACE = "replace"


class WrapCandidate(BaseModel):
    """A node the planner is willing to wrap."""

    start_offset: int
    end_offset: int
    start_line: int
    end_line: int
    order: int = Field(..., description="Depth-first visit order; lower means outer")


class WrapEdit(BaseModel):
    """A planned insertion (or replacement) at an offset of the original buffer."""

    offset: int
    text: str
    kind: EditKind
    span_start: int = Field(..., description="Start offset of the span this edit belongs to")
    span_end: int = Field(..., description="End offset of the span this edit belongs to")
    length: int = Field(0, description="Characters of the original consumed (replace only)")
    body: bool = Field(False, description="True for the before_all/after_all pair")


class LineGroup(BaseModel):
    """All candidates whose span ends on one physical line."""

    line: int
    candidates: List[WrapCandidate] = Field(default_factory=list)
    has_heredoc: bool = False

    @property
    def winner(self) -> Optional[WrapCandidate]:
        """
        The candidate that gets the line's wrap pair.

        The span reaching furthest right wins; on ties the outermost
        (earliest visited) candidate is kept.
        """
        best = None
        for candidate in self.candidates:
            if best is None or candidate.end_offset > best.end_offset:
                best = candidate
        return best


class BufferRegions(BaseModel):
    """
    Disjoint regions of the source buffer.

    ``[0, body_start)`` holds leading comments and blank lines,
    ``[body_start, body_end)`` is the wrapped body and
    ``[data_start, len(source))`` is the verbatim data segment.
    """

    body_start: int
    body_end: int
    data_start: Optional[int] = None

    @classmethod
    def locate(cls, root: SyntaxNode) -> "BufferRegions":
        """
        Compute the regions of a parsed program.

        The body runs from the first statement to the visible end of the
        last one. A program without statements has an empty body at
        offset 0, ahead of any comments.
        """
        statements = root.statements
        if statements:
            body_start = statements[0].start_offset
            body_end = statements[-1].end_offset
        else:
            body_start = body_end = 0

        data_start = None
        for child in root.children_of_kind(NodeKind.DATA_SEGMENT):
            data_start = child.start_offset

        return cls(body_start=body_start, body_end=body_end, data_start=data_start)
