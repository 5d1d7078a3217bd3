"""Unit tests for the wrap planner."""

import pytest

from inline_values.models import (
    BufferRegions,
    EditKind,
    NodeKind,
    UnknownNodeKindError,
    WrapHooks,
)
from inline_values.transform.patcher import TextPatcher
from inline_values.transform.planner import WrapPlanner
from inline_values.transform.sentinel import SUBSTITUTION

ANGLES = WrapHooks(before_each=lambda line: "<", after_each=lambda line: ">")


def render(source, root, hooks=ANGLES, **kwargs):
    edits = WrapPlanner(source, hooks, **kwargs).plan(root)
    return TextPatcher(source, BufferRegions.locate(root)).apply(edits)


def test_every_node_kind_has_a_handler():
    assert set(WrapPlanner.HANDLERS) == set(NodeKind)
    for handler_name in WrapPlanner.HANDLERS.values():
        assert callable(getattr(WrapPlanner, handler_name))


def test_missing_handler_raises(tree_builder, monkeypatch):
    monkeypatch.delitem(WrapPlanner.HANDLERS, NodeKind.VARIABLE)
    b = tree_builder("a")
    root = b.program(b.at(NodeKind.VARIABLE, "a"))

    with pytest.raises(UnknownNodeKindError) as exc_info:
        WrapPlanner("a").plan(root)

    assert exc_info.value.kind == NodeKind.VARIABLE
    assert exc_info.value.line == 1


def test_single_expression(tree_builder):
    b = tree_builder("A")
    root = b.program(b.at(NodeKind.VARIABLE, "A"))
    edits = WrapPlanner("A", ANGLES).plan(root)

    assert [(e.kind, e.offset) for e in edits] == [(EditKind.OPEN, 0), (EditKind.CLOSE, 1)]
    assert render("A", root) == "<A>"


def test_one_pair_per_line_goes_to_rightmost_expression(tree_builder):
    b = tree_builder("a;b")
    root = b.program(b.at(NodeKind.VARIABLE, "a"), b.at(NodeKind.VARIABLE, "b"))
    assert render("a;b", root) == "a;<b>"


def test_multiline_method_chain_nests(tree_builder):
    source = "a\n.b\n.c"
    b = tree_builder(source)
    inner = b.at(
        NodeKind.CALL, "a\n.b",
        b.at(NodeKind.VARIABLE, "a", role="receiver"),
        b.at(NodeKind.VARIABLE, "b", role="method"),
        role="receiver",
    )
    outer = b.at(NodeKind.CALL, source, inner, b.at(NodeKind.VARIABLE, "c", role="method"))
    assert render(source, b.program(outer)) == "<<<a>\n.b>\n.c>"


def test_method_names_are_not_values(tree_builder):
    source = "a.b(\n1)"
    b = tree_builder(source)
    call = b.at(
        NodeKind.CALL, source,
        b.at(NodeKind.VARIABLE, "a", role="receiver"),
        b.at(NodeKind.VARIABLE, "b", role="method"),
        b.at(NodeKind.ARGUMENTS, "(\n1)", b.at(NodeKind.LITERAL, "1"), role="arguments"),
    )
    assert render(source, b.program(call)) == "<<a>.b(\n1)>"


def test_void_expressions_are_entered_but_not_wrapped(tree_builder):
    source = "def a\n1\nreturn 2\nend"
    b = tree_builder(source)
    method = b.at(
        NodeKind.METHOD, source,
        b.at(NodeKind.VARIABLE, "a", role="name"),
        b.at(
            NodeKind.STATEMENTS, "1\nreturn 2",
            b.at(NodeKind.LITERAL, "1"),
            b.at(NodeKind.RETURN, "return 2", b.at(NodeKind.ARGUMENTS, "2", b.at(NodeKind.LITERAL, "2"))),
            role="body",
        ),
    )
    assert render(source, b.program(method)) == "<def a\n<1>\nreturn <2>\nend>"


def test_void_modifier_wraps_only_its_condition(tree_builder):
    source = "def a\nreturn if 1\nend"
    b = tree_builder(source)
    modifier = b.at(
        NodeKind.CONDITIONAL_MODIFIER, "return if 1",
        b.at(NodeKind.RETURN, "return", role="body"),
        b.at(NodeKind.LITERAL, "1", role="condition"),
    )
    method = b.at(
        NodeKind.METHOD, source,
        b.at(NodeKind.VARIABLE, "a", role="name"),
        b.at(NodeKind.STATEMENTS, "return if 1", modifier, role="body"),
    )
    assert render(source, b.program(method)) == "<def a\nreturn if <1>\nend>"


def test_class_body_is_wrapped_but_not_the_class(tree_builder):
    source = "class A < B\n1\nend"
    b = tree_builder(source)
    klass = b.at(
        NodeKind.CLASS, source,
        b.at(NodeKind.VARIABLE, "A", role="name"),
        b.at(NodeKind.HEADER, "< B", b.at(NodeKind.VARIABLE, "B"), role="superclass"),
        b.at(NodeKind.STATEMENTS, "1", b.at(NodeKind.LITERAL, "1"), role="body"),
    )
    assert render(source, b.program(klass)) == "class A < B\n<1>\nend"


def test_regex_condition_is_not_wrapped(tree_builder):
    source = "if /a/\n1\nend"
    b = tree_builder(source)
    conditional = b.at(
        NodeKind.CONDITIONAL, source,
        b.at(NodeKind.REGEX, "/a/", role="condition"),
        b.at(NodeKind.STATEMENTS, "1", b.at(NodeKind.LITERAL, "1"), role="consequence"),
    )
    assert render(source, b.program(conditional)) == "<if /a/\n<1>\nend>"


def test_assignment_to_element_evaluates_receiver_and_index(tree_builder):
    source = "a[\n1\n] = 2"
    b = tree_builder(source)
    assignment = b.at(
        NodeKind.ASSIGNMENT, source,
        b.at(
            NodeKind.CALL, "a[\n1\n]",
            b.at(NodeKind.VARIABLE, "a", role="object"),
            b.at(NodeKind.LITERAL, "1"),
            role="left",
        ),
        b.at(NodeKind.LITERAL, "2", role="right"),
    )
    assert render(source, b.program(assignment)) == "<<a>[\n<1>\n] = 2>"


def test_operator_assignment_target_is_not_entered(tree_builder):
    source = "a[\n1\n] += 2"
    b = tree_builder(source)
    assignment = b.at(
        NodeKind.OPERATOR_ASSIGNMENT, source,
        b.at(
            NodeKind.CALL, "a[\n1\n]",
            b.at(NodeKind.VARIABLE, "a", role="object"),
            b.at(NodeKind.LITERAL, "1"),
            role="left",
        ),
        b.at(NodeKind.LITERAL, "2", role="right"),
    )
    assert render(source, b.program(assignment)) == "<a[\n1\n] += 2>"


def test_constant_path_target_is_not_entered(tree_builder):
    source = "A::B={\n}"
    b = tree_builder(source)
    assignment = b.at(
        NodeKind.ASSIGNMENT, source,
        b.at(
            NodeKind.CALL, "A::B",
            b.at(NodeKind.VARIABLE, "A", role="scope"),
            b.at(NodeKind.VARIABLE, "B", role="name"),
            role="left",
        ),
        b.at(NodeKind.HASH, "{\n}", role="right"),
    )
    assert render(source, b.program(assignment)) == "<A::B={\n}>"


def test_block_call_leaves_first_line_arguments_alone(tree_builder):
    source = "a(b) {\n}"
    b = tree_builder(source)
    call = b.at(
        NodeKind.CALL, source,
        b.at(NodeKind.VARIABLE, "a", role="method"),
        b.at(NodeKind.ARGUMENTS, "(b)", b.at(NodeKind.VARIABLE, "b"), role="arguments"),
        b.at(NodeKind.BLOCK, "{\n}", role="block"),
    )
    assert render(source, b.program(call)) == "<a(b) {\n}>"


def test_block_call_still_wraps_block_body(tree_builder):
    source = "a(b) do\nc\nend"
    b = tree_builder(source)
    call = b.at(
        NodeKind.CALL, source,
        b.at(NodeKind.VARIABLE, "a", role="method"),
        b.at(NodeKind.ARGUMENTS, "(b)", b.at(NodeKind.VARIABLE, "b"), role="arguments"),
        b.at(
            NodeKind.BLOCK, "do\nc\nend",
            b.at(NodeKind.STATEMENTS, "c", b.at(NodeKind.VARIABLE, "c"), role="body"),
            role="block",
        ),
    )
    assert render(source, b.program(call)) == "<a(b) do\n<c>\nend>"


def test_hash_pairs_wrap_values_only(tree_builder):
    source = "{a: 1,\nb: 2}"
    b = tree_builder(source)
    hash_node = b.at(
        NodeKind.HASH, source,
        b.at(
            NodeKind.PAIR, "a: 1",
            b.at(NodeKind.LITERAL_PART, "a", role="key"),
            b.at(NodeKind.LITERAL, "1", role="value"),
        ),
        b.at(
            NodeKind.PAIR, "b: 2",
            b.at(NodeKind.LITERAL_PART, "b", role="key"),
            b.at(NodeKind.LITERAL, "2", role="value"),
        ),
    )
    assert render(source, b.program(hash_node)) == "<{a: <1>,\nb: 2}>"


def test_heredocs_on_one_line_share_a_pair(tree_builder):
    source = "<<A + <<B\n1\nA\n2\nB"
    b = tree_builder(source)
    binary = b.at(
        NodeKind.CALL, "<<A + <<B",
        b.at(NodeKind.HEREDOC, "<<A", role="left"),
        b.at(NodeKind.HEREDOC, "<<B", role="right"),
    )
    root = b.program(
        binary,
        b.at(NodeKind.HEREDOC_BODY, "\n1\nA"),
        b.at(NodeKind.HEREDOC_BODY, "\n2\nB"),
    )
    hooks = WrapHooks(before_each=lambda line: "{", after_each=lambda line: "}")
    assert render(source, root, hooks) == "{<<A + <<B}\n1\nA\n2\nB"


def test_names_parameters_and_patterns_are_never_wrapped(tree_builder):
    source = "alias a b\nfor x in y\n1\nend"
    b = tree_builder(source)
    loop = b.at(
        NodeKind.LOOP, "for x in y\n1\nend",
        b.at(NodeKind.VARIABLE, "x", role="pattern"),
        b.at(NodeKind.ARGUMENTS, "in y", b.at(NodeKind.VARIABLE, "y"), role="value"),
        b.at(NodeKind.STATEMENTS, "1", b.at(NodeKind.LITERAL, "1"), role="body"),
    )
    root = b.program(
        b.at(NodeKind.ALIAS, "alias a b", b.at(NodeKind.VARIABLE, "a", role="name")),
        loop,
    )
    assert render(source, root) == "alias a b\n<for x in <y>\n<1>\nend>"


def test_hooks_receive_start_and_end_lines(tree_builder):
    source = "\na\n.b"
    b = tree_builder(source)
    call = b.at(
        NodeKind.CALL, "a\n.b",
        b.at(NodeKind.VARIABLE, "a", role="receiver"),
        b.at(NodeKind.VARIABLE, "b", role="method"),
    )
    opened = []
    closed = []
    hooks = WrapHooks(
        before_each=lambda line: opened.append(line) or "",
        after_each=lambda line: closed.append(line) or "",
    )
    WrapPlanner(source, hooks).plan(b.program(call))

    assert opened == [2, 2]
    assert closed == [2, 3]


def test_sentinel_is_replaced_inside_its_markers(tree_builder):
    source = "__TOTAL_FUCKING_FAILURE__"
    b = tree_builder(source)
    root = b.program(b.at(NodeKind.VARIABLE, source))

    assert render(source, root) == f"<{SUBSTITUTION}>"
    assert render(source, root, fault_injection=False) == f"<{source}>"
