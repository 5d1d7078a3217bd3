"""
Ruby source parser.

This parser provides Ruby syntax trees for the wrapping transform using
tree-sitter-ruby, converting the concrete tree into SyntaxNode models.
"""

import logging
import re
from bisect import bisect_right
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import tree_sitter
import tree_sitter_ruby
import yaml

from inline_values.models import NodeKind, ParseFailure, SyntaxNode
from parsers.base import SourceParser, UnknownNodeKindError

logger = logging.getLogger(__name__)

RUBY_PARSER_DIR = Path(__file__).parent

# Words Ruby never reads as a local name; tree-sitter-ruby recovers a stray
# one (a surplus `end`, say) as an identifier.
RESERVED_WORDS = frozenset({
    "BEGIN", "END", "alias", "and", "begin", "case", "class", "def", "do",
    "else", "elsif", "end", "ensure", "for", "if", "in", "module", "not",
    "or", "rescue", "then", "undef", "unless", "until", "when", "while",
})

# Fields in which a reserved word is a legal method or parameter name.
NAME_FIELDS = frozenset({"method", "name"})


class _OffsetMap:
    """Translates tree-sitter byte offsets into character offsets and lines."""

    def __init__(self, source: str, encoded: bytes):
        self._byte_to_char: Optional[List[int]] = None
        if len(encoded) != len(source):
            table: List[int] = []
            for index, char in enumerate(source):
                table.extend([index] * len(char.encode("utf-8")))
            table.append(len(source))
            self._byte_to_char = table
        self._line_starts = [0] + [match.end() for match in re.finditer("\n", source)]

    def char(self, byte_offset: int) -> int:
        if self._byte_to_char is None:
            return byte_offset
        return self._byte_to_char[byte_offset]

    def locate(self, char_offset: int) -> Tuple[int, int]:
        """Return the 1-indexed line and 0-indexed column of an offset."""
        line_index = bisect_right(self._line_starts, char_offset) - 1
        return line_index + 1, char_offset - self._line_starts[line_index]


def _children_with_fields(ts_node: tree_sitter.Node) -> Iterator[Tuple[tree_sitter.Node, Optional[str]]]:
    cursor = ts_node.walk()
    if not cursor.goto_first_child():
        return
    while True:
        yield cursor.node, cursor.field_name
        if not cursor.goto_next_sibling():
            break


def _first_error(ts_node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
    if ts_node.is_error or ts_node.is_missing:
        return ts_node
    for child in ts_node.children:
        if child.is_error or child.is_missing or child.has_error:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def _first_rejected(
    ts_node: tree_sitter.Node,
    encoded: bytes,
    field: Optional[str] = None
) -> Optional[Tuple[tree_sitter.Node, str]]:
    """Find a construct the grammar accepts but Ruby rejects."""
    if ts_node.type in ("alias", "undef"):
        # operands are method names
        return None
    if ts_node.type == "identifier" and field not in NAME_FIELDS:
        word = encoded[ts_node.start_byte:ts_node.end_byte].decode("utf-8")
        if word in RESERVED_WORDS:
            return ts_node, f"syntax error, unexpected '{word}'"
    if ts_node.type == "heredoc_body" and not any(c.type == "heredoc_end" for c in ts_node.children):
        return ts_node, "syntax error, unterminated heredoc"

    for child, child_field in _children_with_fields(ts_node):
        found = _first_rejected(child, encoded, child_field)
        if found is not None:
            return found
    return None


class RubyParser(SourceParser):
    """Ruby parser built on tree-sitter-ruby."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the Ruby parser.

        Args:
            config: Parsed config.yaml contents. If None, loads the bundled file.
        """
        if config is None:
            with open(RUBY_PARSER_DIR / "config.yaml", 'r') as f:
                config = yaml.safe_load(f)

        self._node_kinds = {
            ts_type: NodeKind(kind)
            for ts_type, kind in config['node_kinds'].items()
        }
        marker = config.get('data_segment_marker', '__END__')
        self._data_marker = re.compile(rf"^{re.escape(marker)}(?:\r?\n|\Z)", re.MULTILINE)

        self._parser = tree_sitter.Parser(tree_sitter.Language(tree_sitter_ruby.language()))

        logger.info("Ruby parser initialized successfully")

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "ruby"

    def parse(self, source: str) -> Union[SyntaxNode, ParseFailure]:
        """
        Parse Ruby source using tree-sitter-ruby.

        Args:
            source: Ruby program text

        Returns:
            The PROGRAM node, or a ParseFailure for malformed source
        """
        encoded = source.encode("utf-8")
        tree = self._parser.parse(encoded)
        offsets = _OffsetMap(source, encoded)

        failure = None
        if tree.root_node.has_error or tree.root_node.is_error:
            failure = self._failure_for(_first_error(tree.root_node) or tree.root_node, source, offsets)
        else:
            rejected = _first_rejected(tree.root_node, encoded)
            if rejected is not None:
                node, message = rejected
                failure = self._failure_for(node, source, offsets, message)

        if failure is not None:
            logger.debug(f"Ruby source failed to parse: {failure}")
            return failure

        program = self._convert(tree.root_node, None, offsets)
        return self._with_data_segment(program, source, offsets)

    def _kind_for(self, ts_node: tree_sitter.Node, offsets: _OffsetMap) -> NodeKind:
        if ts_node.type == "unary" and ts_node.child_count and ts_node.children[0].type == "defined?":
            return NodeKind.DEFINED
        try:
            return self._node_kinds[ts_node.type]
        except KeyError:
            line, _ = offsets.locate(offsets.char(ts_node.start_byte))
            raise UnknownNodeKindError(ts_node.type, line) from None

    def _convert(
        self,
        ts_node: tree_sitter.Node,
        role: Optional[str],
        offsets: _OffsetMap
    ) -> SyntaxNode:
        """
        Convert a tree-sitter node (and its named descendants) to a SyntaxNode.

        Anonymous tokens are dropped. A node ends where its last child other
        than a displaced heredoc body ends, so its span covers only what is
        written on the declaring lines.

        Args:
            ts_node: tree-sitter Node
            role: Field name of the node in its parent
            offsets: Offset translation for the parsed source

        Returns:
            SyntaxNode model instance
        """
        kind = self._kind_for(ts_node, offsets)

        children: List[Optional[SyntaxNode]] = []
        visible_end: Optional[int] = None
        for child, field in _children_with_fields(ts_node):
            if child.is_named:
                converted = self._convert(child, field, offsets)
                children.append(converted)
                child_end = converted.end_offset
            else:
                child_end = offsets.char(child.end_byte)

            if child.type != "heredoc_body":
                visible_end = child_end

        start_offset = offsets.char(ts_node.start_byte)
        end_offset = offsets.char(ts_node.end_byte)
        if visible_end is not None:
            end_offset = visible_end

        start_line, start_column = offsets.locate(start_offset)
        end_line, end_column = offsets.locate(end_offset)

        return SyntaxNode(
            kind=kind,
            start_line=start_line,
            start_column=start_column,
            end_line=end_line,
            end_column=end_column,
            start_offset=start_offset,
            end_offset=end_offset,
            children=children,
            role=role,
        )

    def _with_data_segment(self, program: SyntaxNode, source: str, offsets: _OffsetMap) -> SyntaxNode:
        """Replace whatever the grammar made of __END__ with one DATA_SEGMENT child."""
        children = [
            child for child in program.present_children
            if child.kind != NodeKind.DATA_SEGMENT
        ]
        comments = [child for child in children if child.kind == NodeKind.COMMENT]
        search_from = max(
            (child.end_offset for child in children if child.kind != NodeKind.COMMENT),
            default=0
        )

        data_start = None
        for match in self._data_marker.finditer(source, search_from):
            if any(c.start_offset <= match.start() < c.end_offset for c in comments):
                continue
            data_start = match.start()
            break

        if data_start is None:
            return program.model_copy(update={"children": children})

        start_line, start_column = offsets.locate(data_start)
        end_line, end_column = offsets.locate(len(source))
        segment = SyntaxNode(
            kind=NodeKind.DATA_SEGMENT,
            start_line=start_line,
            start_column=start_column,
            end_line=end_line,
            end_column=end_column,
            start_offset=data_start,
            end_offset=len(source),
        )
        return program.model_copy(update={"children": children + [segment]})

    def _failure_for(
        self,
        error_node: tree_sitter.Node,
        source: str,
        offsets: _OffsetMap,
        message: Optional[str] = None
    ) -> ParseFailure:
        start = offsets.char(error_node.start_byte)
        end = offsets.char(error_node.end_byte)
        line, column = offsets.locate(start)
        snippet = source[start:end].split("\n", 1)[0][:40]

        if message is None and error_node.is_missing:
            message = f"syntax error, missing '{error_node.type}'"
        elif message is None and snippet.strip():
            message = f"syntax error, unexpected '{snippet.strip()}'"
        elif message is None:
            message = "syntax error, unexpected end of input"

        return ParseFailure(message=message, line=line, column=column, snippet=snippet)
