"""
Ruby source parser.

This parser provides Ruby syntax trees built with tree-sitter-ruby.
"""

from parsers.ruby.parser import RUBY_PARSER_DIR, RubyParser

__all__ = ['RubyParser', 'RUBY_PARSER_DIR']
