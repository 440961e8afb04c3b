"""Shared pytest fixtures for withQL unit and integration tests."""
from __future__ import annotations

import pytest

from withql.compile.builder import Composer
from withql.compile.postgres import PostgresCompiler
from withql.schema.query import Query, SubqueryComponent, ViewDefinition

USER_TAGS_SQL = """
    SELECT p.user_id AS user_id, JSON_GROUP_ARRAY(t.name) AS tag_names
    FROM tags t
    JOIN post_tags pt ON pt.tag_id = t.id
    JOIN posts p ON p.id = pt.post_id
    GROUP BY p.user_id
"""


@pytest.fixture()
def composer() -> Composer:
    """SQLite composer (``?`` placeholders)."""
    return Composer()


@pytest.fixture()
def pg_composer() -> Composer:
    """PostgreSQL composer (``$n`` placeholders)."""
    return Composer(PostgresCompiler())


@pytest.fixture()
def users_query() -> Query:
    """Bare ``users`` query without subqueries."""
    return Query(
        source_table="users",
        alias="u",
        fields={"id": "u.id", "name": "u.name"},
    )


@pytest.fixture()
def user_tags() -> SubqueryComponent:
    return SubqueryComponent(
        name="user_tags",
        alias="ut",
        join_type="LEFT",
        join_on="u.id = ut.user_id",
        query=USER_TAGS_SQL,
        fields={"tag_names": "ut.tag_names"},
    )


@pytest.fixture()
def post_counts() -> SubqueryComponent:
    return SubqueryComponent(
        name="post_counts",
        alias="pc",
        join_type="INNER",
        join_on="u.id = pc.user_id",
        query="SELECT user_id, COUNT(*) AS post_count FROM posts GROUP BY user_id",
        fields={"post_count": "pc.post_count"},
    )


@pytest.fixture()
def active_posts_view() -> ViewDefinition:
    """``active_posts`` depending on ``recent_posts``."""
    recent = ViewDefinition(
        name="recent_posts",
        query="SELECT * FROM posts WHERE created_at >= '2023-01-03'",
    )
    return ViewDefinition(
        name="active_posts",
        query="SELECT user_id, COUNT(*) AS n FROM recent_posts GROUP BY user_id",
        dependencies=[recent],
    )
