"""
Wrap planning.

The planner walks a syntax tree depth-first and decides which nodes may
be wrapped. Every NodeKind has exactly one handler; the handlers encode
which parts of a construct are values (and so may be wrapped) and which
are names, parameters, targets or patterns (and so must be left alone).
The per-line winners among the collected candidates become open/close
edits carrying the caller's hook text.
"""

from typing import Callable, Dict, FrozenSet, List, Optional, Set, Tuple

from inline_values.models import (
    EditKind,
    NodeKind,
    SyntaxNode,
    UnknownNodeKindError,
    WrapCandidate,
    WrapEdit,
    WrapHooks,
)
from inline_values.transform.line_groups import LineGrouper
from inline_values.transform.sentinel import substitution_for
from inline_values.transform.void_values import is_void
from inline_values.utils.logging import get_logger

logger = get_logger(__name__, phase="plan")

# Roles that name things rather than compute values.
CALL_NAME_ROLES = frozenset({"method", "name", "operator"})
DEFINITION_ROLES = frozenset({"name", "object", "parameters"})
NAMESPACE_ROLES = frozenset({"name", "superclass", "value"})


class WrapPlanner:
    """Collects wrap candidates from a tree and turns them into edits."""

    HANDLERS: Dict[NodeKind, str] = {
        # sequences and clauses: entered, never wrapped
        NodeKind.PROGRAM: "_descend",
        NodeKind.STATEMENTS: "_descend",
        NodeKind.ELSE: "_descend",
        NodeKind.ENSURE: "_descend",
        NodeKind.ELSIF: "_descend",
        NodeKind.ARGUMENTS: "_descend",
        NodeKind.BLOCK: "_descend",
        NodeKind.RESCUE: "_clause_body",
        NodeKind.WHEN: "_clause_body",
        NodeKind.CLASS: "_namespace",
        NodeKind.MODULE: "_namespace",
        NodeKind.SINGLETON_CLASS: "_namespace",
        NodeKind.PAIR: "_pair",

        # expressions: wrapped, then entered
        NodeKind.BEGIN: "_expression",
        NodeKind.PARENTHESES: "_expression",
        NodeKind.CONDITIONAL: "_expression",
        NodeKind.TERNARY: "_expression",
        NodeKind.CONDITIONAL_MODIFIER: "_expression",
        NodeKind.LOOP_MODIFIER: "_expression",
        NodeKind.RESCUE_MODIFIER: "_expression",
        NodeKind.CASE: "_expression",
        NodeKind.LAMBDA: "_expression",
        NodeKind.ARRAY: "_expression",
        NodeKind.HASH: "_expression",
        NodeKind.RETURN: "_expression",
        NodeKind.NEXT: "_expression",
        NodeKind.BREAK: "_expression",
        NodeKind.REDO: "_expression",
        NodeKind.RETRY: "_expression",
        NodeKind.METHOD: "_method",
        NodeKind.CALL: "_call",
        NodeKind.ASSIGNMENT: "_assignment",
        NodeKind.OPERATOR_ASSIGNMENT: "_operator_assignment",
        NodeKind.LOOP: "_loop",
        NodeKind.PATTERN_MATCH: "_pattern_match",

        # literals: wrapped, never entered
        NodeKind.STRING: "_literal",
        NodeKind.REGEX: "_literal",
        NodeKind.HEREDOC: "_heredoc",
        NodeKind.LITERAL: "_literal",
        NodeKind.VARIABLE: "_literal",
        NodeKind.MACRO: "_literal",
        NodeKind.DEFINED: "_literal",
        NodeKind.HEREDOC_BODY: "_heredoc_body",

        # never wrapped, never entered
        NodeKind.HEADER: "_skip",
        NodeKind.PATTERN: "_skip",
        NodeKind.PARAMETERS: "_skip",
        NodeKind.ALIAS: "_skip",
        NodeKind.UNDEF: "_skip",
        NodeKind.SPLAT: "_skip",
        NodeKind.ASSIGNMENT_TARGET: "_skip",
        NodeKind.LITERAL_PART: "_skip",
        NodeKind.COMMENT: "_skip",
        NodeKind.DATA_SEGMENT: "_skip",
        NodeKind.EMPTY: "_skip",
        NodeKind.LIFECYCLE_BLOCK: "_skip",
    }

    def __init__(self, source: str, hooks: Optional[WrapHooks] = None, fault_injection: bool = True):
        """
        Args:
            source: Source text the tree was parsed from
            hooks: Text producers for the wrap markers
            fault_injection: Replace the sentinel identifier when it is wrapped
        """
        self._source = source
        self._hooks = hooks or WrapHooks()
        self._fault_injection = fault_injection
        self._candidates: List[WrapCandidate] = []
        self._heredoc_bodies: List[Tuple[int, int]] = []
        self._heredoc_lines: Set[int] = set()

    def plan(self, root: SyntaxNode) -> List[WrapEdit]:
        """
        Plan the wrap edits for a tree.

        Args:
            root: PROGRAM node of the parsed source

        Returns:
            Open, close and replace edits in ascending line order

        Raises:
            UnknownNodeKindError: If a node kind has no handler
        """
        self._candidates = []
        self._heredoc_bodies = []
        self._heredoc_lines = set()

        self._visit(root)

        grouper = LineGrouper(self._heredoc_bodies, self._heredoc_lines)
        edits: List[WrapEdit] = []
        for group in grouper.group(self._candidates):
            winner = group.winner
            if winner is None:
                continue
            edits.extend(self._edits_for(winner))

        logger.debug(
            f"Planned {len(edits)} edits from {len(self._candidates)} candidates",
            extra={"heredoc_count": len(self._heredoc_bodies)}
        )
        return edits

    def _edits_for(self, candidate: WrapCandidate) -> List[WrapEdit]:
        span = {"span_start": candidate.start_offset, "span_end": candidate.end_offset}
        edits = [
            WrapEdit(
                offset=candidate.start_offset,
                text=self._hooks.before_each(candidate.start_line),
                kind=EditKind.OPEN,
                **span
            ),
        ]

        if self._fault_injection:
            replacement = substitution_for(self._source[candidate.start_offset:candidate.end_offset])
            if replacement is not None:
                edits.append(WrapEdit(
                    offset=candidate.start_offset,
                    text=replacement,
                    kind=EditKind.REPLACE,
                    length=candidate.end_offset - candidate.start_offset,
                    **span
                ))

        edits.append(WrapEdit(
            offset=candidate.end_offset,
            text=self._hooks.after_each(candidate.end_line),
            kind=EditKind.CLOSE,
            **span
        ))
        return edits

    def _visit(self, node: Optional[SyntaxNode]) -> None:
        if node is None:
            return
        # A bare regex condition matches against $_; wrapping it changes that.
        if node.kind == NodeKind.REGEX and node.role == "condition":
            return

        handler_name = self.HANDLERS.get(node.kind)
        if handler_name is None:
            raise UnknownNodeKindError(node.kind, node.start_line)
        handler: Callable[[SyntaxNode], None] = getattr(self, handler_name)
        handler(node)

    def _visit_children(
        self,
        node: SyntaxNode,
        skip_roles: FrozenSet[str] = frozenset(),
    ) -> None:
        for child in node.present_children:
            if child.role in skip_roles:
                continue
            self._visit(child)

    def _add_candidate(self, node: SyntaxNode) -> None:
        if is_void(node):
            return
        self._candidates.append(WrapCandidate(
            start_offset=node.start_offset,
            end_offset=node.end_offset,
            start_line=node.start_line,
            end_line=node.end_line,
            order=len(self._candidates),
        ))

    # Handlers

    def _skip(self, node: SyntaxNode) -> None:
        pass

    def _descend(self, node: SyntaxNode) -> None:
        self._visit_children(node)

    def _literal(self, node: SyntaxNode) -> None:
        self._add_candidate(node)

    def _expression(self, node: SyntaxNode) -> None:
        self._add_candidate(node)
        self._visit_children(node)

    def _heredoc(self, node: SyntaxNode) -> None:
        self._heredoc_lines.add(node.start_line)
        self._add_candidate(node)

    def _heredoc_body(self, node: SyntaxNode) -> None:
        self._heredoc_bodies.append((node.start_offset, node.end_offset))

    def _clause_body(self, node: SyntaxNode) -> None:
        for body in node.children_of_kind(NodeKind.STATEMENTS):
            self._visit(body)

    def _namespace(self, node: SyntaxNode) -> None:
        self._visit_children(node, skip_roles=NAMESPACE_ROLES)

    def _pair(self, node: SyntaxNode) -> None:
        self._visit(node.child_with_role("value"))

    def _method(self, node: SyntaxNode) -> None:
        self._add_candidate(node)
        self._visit_children(node, skip_roles=DEFINITION_ROLES)

    def _call(self, node: SyntaxNode) -> None:
        self._add_candidate(node)
        skip_roles = CALL_NAME_ROLES
        arguments = node.child_with_role("arguments")
        if arguments is not None and arguments.end_line == node.start_line < node.end_line:
            # a(b) {\n} keeps its first line for the call's own pair
            skip_roles = skip_roles | {"arguments"}
        self._visit_children(node, skip_roles=skip_roles)

    def _assignment(self, node: SyntaxNode) -> None:
        self._add_candidate(node)
        target = node.child_with_role("left")
        # a.b = c and a[i] = c evaluate the receiver and the index; A::B = c stays whole
        if target is not None and target.kind == NodeKind.CALL and target.child_with_role("name") is None:
            self._visit_children(target, skip_roles=CALL_NAME_ROLES)
        self._visit(node.child_with_role("right"))

    def _operator_assignment(self, node: SyntaxNode) -> None:
        self._add_candidate(node)
        self._visit(node.child_with_role("right"))

    def _loop(self, node: SyntaxNode) -> None:
        self._add_candidate(node)
        self._visit_children(node, skip_roles=frozenset({"pattern"}))

    def _pattern_match(self, node: SyntaxNode) -> None:
        self._add_candidate(node)
        self._visit(node.child_with_role("value"))
