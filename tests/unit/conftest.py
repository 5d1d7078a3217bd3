"""Shared fixtures for unit tests."""

from typing import Optional

import pytest

from inline_values.models import NodeKind, SyntaxNode, WrapHooks


class TreeBuilder:
    """Builds SyntaxNode trees over a source string by locating text."""

    def __init__(self, source: str):
        self.source = source

    def _position(self, offset: int):
        line = self.source.count("\n", 0, offset) + 1
        line_start = self.source.rfind("\n", 0, offset) + 1
        return line, offset - line_start

    def node(
        self,
        kind: NodeKind,
        start: int,
        end: int,
        *children: Optional[SyntaxNode],
        role: Optional[str] = None
    ) -> SyntaxNode:
        start_line, start_column = self._position(start)
        end_line, end_column = self._position(end)
        return SyntaxNode(
            kind=kind,
            start_line=start_line,
            start_column=start_column,
            end_line=end_line,
            end_column=end_column,
            start_offset=start,
            end_offset=end,
            children=list(children),
            role=role,
        )

    def at(
        self,
        kind: NodeKind,
        text: str,
        *children: Optional[SyntaxNode],
        role: Optional[str] = None,
        after: int = 0
    ) -> SyntaxNode:
        """Node spanning the first occurrence of text at or after an offset."""
        start = self.source.index(text, after)
        return self.node(kind, start, start + len(text), *children, role=role)

    def program(self, *children: Optional[SyntaxNode]) -> SyntaxNode:
        return self.node(NodeKind.PROGRAM, 0, len(self.source), *children)


@pytest.fixture
def tree_builder():
    """Factory for TreeBuilder instances."""
    return TreeBuilder


@pytest.fixture
def brackets():
    """Hooks wrapping the body in [ ] and each expression in < >."""
    return WrapHooks(
        before_all=lambda: "[",
        after_all=lambda: "]",
        before_each=lambda line: "<",
        after_each=lambda line: ">",
    )
