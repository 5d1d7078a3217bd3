"""
Source parser architecture for the wrapping transform.

This package provides the parser system that turns program text into
SyntaxNode trees, including the base parser interface and parser manager.
"""

from parsers.base import SourceParser, UnknownNodeKindError
from parsers.manager import ParserManager, get_parser_manager

__all__ = ['SourceParser', 'UnknownNodeKindError', 'ParserManager', 'get_parser_manager']
