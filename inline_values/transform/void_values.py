"""
Void-value classification.

A void value expression leaves the current flow (``return``, ``next``,
``break``, ``redo``, ``retry``), so text placed after it is unreachable and
wrapping it would not parse. Control-flow constructs are void when one of
their branches is.
"""

from typing import List, Optional

from inline_values.models import NodeKind, SyntaxNode

JUMP_KINDS = frozenset({
    NodeKind.RETURN,
    NodeKind.NEXT,
    NodeKind.BREAK,
    NodeKind.REDO,
    NodeKind.RETRY,
})

BRANCHING_KINDS = frozenset({
    NodeKind.CONDITIONAL,
    NodeKind.ELSIF,
    NodeKind.TERNARY,
    NodeKind.CONDITIONAL_MODIFIER,
})

SEQUENCE_KINDS = frozenset({
    NodeKind.PROGRAM,
    NodeKind.STATEMENTS,
    NodeKind.BEGIN,
    NodeKind.PARENTHESES,
    NodeKind.ELSE,
    NodeKind.ENSURE,
})

BRANCH_ROLES = ("consequence", "alternative", "body")

_CLAUSE_KINDS = frozenset({NodeKind.RESCUE, NodeKind.ELSE, NodeKind.ENSURE})


def is_void(node: Optional[SyntaxNode]) -> bool:
    """
    Return True if evaluating the node always exits non-locally.

    Args:
        node: Node to classify; None (an absent child) is never void

    Returns:
        Whether the node is a void value expression
    """
    if node is None:
        return False
    if node.kind in JUMP_KINDS:
        return True
    if node.kind in BRANCHING_KINDS:
        return any(is_void(node.child_with_role(role)) for role in BRANCH_ROLES)
    if node.kind in SEQUENCE_KINDS:
        return _sequence_is_void(node)
    if node.kind == NodeKind.RESCUE:
        return any(is_void(body) for body in node.children_of_kind(NodeKind.STATEMENTS))
    if node.kind == NodeKind.RESCUE_MODIFIER:
        return any(is_void(child) for child in node.present_children)
    return False


def _tail_is_void(statements: List[SyntaxNode]) -> bool:
    return bool(statements) and is_void(statements[-1])


def _sequence_is_void(node: SyntaxNode) -> bool:
    statements = node.statements
    protected = [s for s in statements if s.kind not in _CLAUSE_KINDS]
    rescues = [s for s in statements if s.kind == NodeKind.RESCUE]
    else_clauses = [s for s in statements if s.kind == NodeKind.ELSE]
    ensures = [s for s in statements if s.kind == NodeKind.ENSURE]

    if rescues and else_clauses:
        void = is_void(else_clauses[-1])
    else:
        void = _tail_is_void(protected)

    if any(is_void(ensure) for ensure in ensures):
        void = True
    return void
