"""Syntax tree data models shared by parsers and the wrapping transform."""

from enum import Enum
from typing import Iterator, List, Optional, Union

from pydantic import BaseModel, ConfigDict


class NodeKind(str, Enum):
    """Closed set of syntactic kinds the transform understands."""

    # containers and clauses
    PROGRAM = "program"
    STATEMENTS = "statements"
    ELSE = "else"
    ENSURE = "ensure"
    RESCUE = "rescue"
    HEADER = "header"
    BEGIN = "begin"
    PARENTHESES = "parentheses"

    # control flow
    CONDITIONAL = "conditional"
    ELSIF = "elsif"
    TERNARY = "ternary"
    CONDITIONAL_MODIFIER = "conditional_modifier"
    LOOP = "loop"
    LOOP_MODIFIER = "loop_modifier"
    RESCUE_MODIFIER = "rescue_modifier"
    CASE = "case"
    WHEN = "when"
    PATTERN = "pattern"
    PATTERN_MATCH = "pattern_match"

    # definitions
    METHOD = "method"
    CLASS = "class"
    MODULE = "module"
    SINGLETON_CLASS = "singleton_class"
    BLOCK = "block"
    LAMBDA = "lambda"
    PARAMETERS = "parameters"
    ALIAS = "alias"
    UNDEF = "undef"

    # expressions
    CALL = "call"
    DEFINED = "defined"
    ARGUMENTS = "arguments"
    PAIR = "pair"
    SPLAT = "splat"
    ASSIGNMENT = "assignment"
    OPERATOR_ASSIGNMENT = "operator_assignment"
    ASSIGNMENT_TARGET = "assignment_target"
    ARRAY = "array"
    HASH = "hash"

    # literals and lookups
    STRING = "string"
    REGEX = "regex"
    HEREDOC = "heredoc"
    HEREDOC_BODY = "heredoc_body"
    LITERAL = "literal"
    LITERAL_PART = "literal_part"
    VARIABLE = "variable"
    MACRO = "macro"

    # non-local jumps
    RETURN = "return"
    NEXT = "next"
    BREAK = "break"
    REDO = "redo"
    RETRY = "retry"

    # not code
    COMMENT = "comment"
    DATA_SEGMENT = "data_segment"
    EMPTY = "empty"
    LIFECYCLE_BLOCK = "lifecycle_block"


class UnknownNodeKindError(Exception):
    """Raised when a syntax node kind has no known treatment."""

    def __init__(self, kind: Union[str, NodeKind], line: Optional[int] = None):
        self.kind = kind
        self.line = line
        name = kind.value if isinstance(kind, NodeKind) else kind
        location = f" at line {line}" if line is not None else ""
        super().__init__(f"Unknown syntax node kind '{name}'{location}")


# Kinds that sit among statements without being statements themselves.
NON_STATEMENT_KINDS = frozenset({
    NodeKind.COMMENT,
    NodeKind.HEREDOC_BODY,
    NodeKind.EMPTY,
    NodeKind.DATA_SEGMENT,
})


class SyntaxNode(BaseModel):
    """
    Immutable syntax tree node.

    Lines are 1-indexed, columns and offsets are 0-indexed character
    positions into the original source. ``role`` is the field name the
    node occupies in its parent (``receiver``, ``condition``, ...), if any.
    """

    model_config = ConfigDict(frozen=True)

    kind: NodeKind
    start_line: int
    start_column: int
    end_line: int
    end_column: int
    start_offset: int
    end_offset: int
    children: List[Optional['SyntaxNode']] = []
    role: Optional[str] = None

    @property
    def present_children(self) -> List['SyntaxNode']:
        """Children that are actually present."""
        return [child for child in self.children if child is not None]

    @property
    def statements(self) -> List['SyntaxNode']:
        """Present children that count as statements of a sequence."""
        return [
            child for child in self.present_children
            if child.kind not in NON_STATEMENT_KINDS
        ]

    def child_with_role(self, role: str) -> Optional['SyntaxNode']:
        for child in self.present_children:
            if child.role == role:
                return child
        return None

    def children_of_kind(self, *kinds: NodeKind) -> List['SyntaxNode']:
        return [child for child in self.present_children if child.kind in kinds]

    def walk(self) -> Iterator['SyntaxNode']:
        """Yield this node and all descendants, depth-first."""
        yield self
        for child in self.present_children:
            yield from child.walk()

    def source_text(self, source: str) -> str:
        return source[self.start_offset:self.end_offset]


# Enable forward references for recursive model
SyntaxNode.model_rebuild()
