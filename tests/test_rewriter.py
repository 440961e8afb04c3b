"""Unit tests for the rewrite passes."""
from __future__ import annotations

import pytest

from withql.compile.postgres import PostgresCompiler
from withql.compile.rewriter import (
    OrderMacroPass,
    ParameterRewriter,
    PlaceholderPass,
    RewriteState,
    reverse_order_term,
)
from withql.compile.sqlite import SQLiteCompiler
from withql.errors import BuildError


@pytest.mark.parametrize(
    ("term", "expected"),
    [
        ("created_at DESC", "created_at ASC"),
        ("u.name ASC", "u.name DESC"),
        ("u.name asc", "u.name DESC"),
        ("u.id", "u.id DESC"),
        ("COALESCE(a, b) DESC NULLS LAST", "COALESCE(a, b) ASC NULLS LAST"),
    ],
)
def test_reverse_order_term(term, expected):
    assert reverse_order_term(term) == expected


def test_order_macros_resolved():
    state = OrderMacroPass(["a ASC", "b DESC"]).apply(
        RewriteState("OVER (ORDER BY $order_by) / OVER (ORDER BY $rev_order_by)")
    )
    assert state.text == "OVER (ORDER BY a ASC, b DESC) / OVER (ORDER BY a DESC, b ASC)"


def test_order_macro_pass_is_noop_without_macros():
    state = RewriteState("SELECT 1", ("x",))
    assert OrderMacroPass(None).apply(state) is state


def test_order_macro_requires_terms():
    with pytest.raises(BuildError, match="requires order_by terms"):
        OrderMacroPass([]).apply(RewriteState("ORDER BY $rev_order_by"))


def test_placeholders_follow_occurrence_order():
    state = PlaceholderPass(SQLiteCompiler(), {"a": 1, "b": 2}).apply(
        RewriteState("x = ?a AND y = ?b AND z = ?a")
    )
    assert state.text == "x = ? AND y = ? AND z = ?"
    assert state.params == (1, 2, 1)


def test_each_occurrence_binds_a_value():
    state = PlaceholderPass(SQLiteCompiler(), {"v": "s"}).apply(
        RewriteState("?v ?v ?v")
    )
    assert state.params == ("s", "s", "s")


def test_placeholder_numbering_continues_from_state():
    state = PlaceholderPass(PostgresCompiler(), {"b": 2}).apply(
        RewriteState("y = ?b", params=(1,))
    )
    assert state.text == "y = $2"
    assert state.params == (1, 2)


def test_missing_placeholder_value():
    with pytest.raises(BuildError, match="^Missing parameter: gone$"):
        PlaceholderPass(SQLiteCompiler(), {"here": 1}).apply(
            RewriteState("?here AND ?gone")
        )


def test_none_values_are_bound():
    state = PlaceholderPass(SQLiteCompiler(), {"n": None}).apply(RewriteState("x IS ?n"))
    assert state.params == (None,)


def test_text_without_placeholders_unchanged():
    text = "SELECT '?' AS q, a ? b FROM t"
    state = PlaceholderPass(SQLiteCompiler(), {}).apply(RewriteState(text))
    assert state.text == text
    assert state.params == ()


def test_rewriter_runs_macros_before_placeholders():
    rewriter = ParameterRewriter.for_request(
        PostgresCompiler(), ["score DESC"], {"min": 10}
    )
    state = rewriter.rewrite("WHERE s > ?min ORDER BY $rev_order_by")
    assert state == RewriteState("WHERE s > $1 ORDER BY score ASC", (10,))
