"""
Base interface for language-specific source parsers.

This module defines the abstract base class that all parsers must implement
to feed syntax trees into the expression wrapping transform.
"""

from abc import ABC, abstractmethod
from typing import Union

from inline_values.models import ParseFailure, SyntaxNode, UnknownNodeKindError

__all__ = ['SourceParser', 'UnknownNodeKindError']


class SourceParser(ABC):
    """Base interface for parsers producing SyntaxNode trees."""

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the language name (e.g., 'ruby')."""
        pass

    @abstractmethod
    def parse(self, source: str) -> Union[SyntaxNode, ParseFailure]:
        """
        Parse source text into a syntax tree.

        Args:
            source: Complete program text

        Returns:
            The PROGRAM node of the tree, or a ParseFailure describing
            the first syntax error when the source is malformed

        Raises:
            UnknownNodeKindError: If the grammar produced a node type with
                no NodeKind mapping
        """
        pass
