"""Unit tests for DependencyExpander."""
from __future__ import annotations

import pytest

from withql.compile.dependencies import DependencyExpander
from withql.errors import BuildError
from withql.schema.query import SubqueryComponent, ViewDefinition


def _view(name: str, *deps: ViewDefinition) -> ViewDefinition:
    return ViewDefinition(name=name, query=f"SELECT * FROM src_{name}", dependencies=list(deps))


def _sub(name: str, *views: ViewDefinition) -> SubqueryComponent:
    return SubqueryComponent(
        name=name,
        alias=name[:2],
        query="SELECT 1",
        join_type="LEFT",
        join_on="TRUE",
        views=list(views),
    )


def _names(views: list[ViewDefinition]) -> list[str]:
    return [v.name for v in views]


def test_no_views():
    assert DependencyExpander().expand([_sub("plain")]) == []


def test_dependencies_come_first():
    b = _view("b")
    a = _view("a", b)
    assert _names(DependencyExpander().expand([_sub("comp", a)])) == ["b", "a"]


def test_shared_dependency_emitted_once():
    shared = _view("shared")
    left = _view("left", shared)
    right = _view("right", shared)
    views = DependencyExpander().expand([_sub("one", left), _sub("two", right, shared)])
    assert _names(views) == ["shared", "left", "right"]


def test_first_seen_definition_wins():
    first = ViewDefinition(name="v", query="SELECT 1")
    second = ViewDefinition(name="v", query="SELECT 2")
    views = DependencyExpander().expand([_sub("one", first), _sub("two", second)])
    assert [v.query for v in views] == ["SELECT 1"]


def test_diamond_dependency_order():
    d = _view("d")
    b = _view("b", d)
    c = _view("c", d)
    a = _view("a", b, c)
    assert _names(DependencyExpander().expand([_sub("comp", a)])) == ["d", "b", "c", "a"]


def test_cycle_is_reported():
    # a -> b -> a, expressed through a second view object named "a".
    inner_a = _view("a")
    b = _view("b", inner_a)
    a = _view("a", b)
    with pytest.raises(BuildError, match="^Circular view dependency: a -> b -> a$"):
        DependencyExpander().expand([_sub("comp", a)])


def test_self_dependency_is_reported():
    with pytest.raises(BuildError, match="x -> x"):
        DependencyExpander().expand([_sub("comp", _view("x", _view("x")))])
