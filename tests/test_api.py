"""Unit tests for the package-level API and configuration."""
from __future__ import annotations

import json

import pytest

import withql
from withql import BuildError, ComposerConfig, CompositionOptions, Query


def test_compose_accepts_dicts():
    r = withql.compose(
        {"source_table": "users", "alias": "u", "fields": {"id": "u.id"}},
        {"where": "u.id = ?id", "params": {"id": 4}},
    )
    assert r.text == "SELECT u.id AS id FROM users AS u WHERE (u.id = ?)"
    assert r.params == [4]


def test_compose_accepts_models():
    query = Query(source_table="users", alias="u", fields={"id": "u.id"})
    r = withql.compose(query, CompositionOptions(page_size=3))
    assert r.text.endswith("LIMIT 3")


def test_compose_with_config_target():
    r = withql.compose(
        {"source_table": "users", "alias": "u", "fields": {"id": "u.id"}},
        {"where": "u.id = ?id", "params": {"id": 4}},
        config=ComposerConfig(target="postgres"),
    )
    assert r.text.endswith("(u.id = $1)")


def test_compose_wraps_type_errors():
    with pytest.raises(BuildError, match="Invalid composition request") as exc_info:
        withql.compose(
            {"source_table": "users", "alias": "u", "fields": {"id": "u.id"}},
            {"page": "first"},
        )
    assert exc_info.value.stage == "parse"


def test_compose_rejects_unknown_keys():
    with pytest.raises(BuildError, match="Invalid composition request"):
        withql.compose({"table": "users", "alias": "u", "fields": {"id": "u.id"}})


def test_compose_json():
    request = {
        "query": {
            "source_table": "users",
            "alias": "u",
            "fields": {"id": "u.id"},
            "subqueries": [
                {
                    "name": "roles",
                    "alias": "r",
                    "query": "SELECT user_id, role FROM user_roles",
                    "join_type": "LEFT JOIN",
                    "join_on": "u.id = r.user_id",
                    "fields": {"role": "r.role"},
                }
            ],
        },
        "options": {"order_by": ["u.id ASC"]},
    }
    r = withql.compose_json(json.dumps(request))
    assert "LEFT JOIN roles AS r ON u.id = r.user_id" in r.text
    assert r.text.endswith("ORDER BY u.id ASC")


def test_compose_json_invalid_json():
    with pytest.raises(BuildError, match="Invalid JSON"):
        withql.compose_json("{not json")


@pytest.mark.parametrize(
    "payload",
    [
        "[]",
        '{"options": {}}',
        '{"query": {}, "extra": 1}',
    ],
)
def test_compose_json_bad_shape(payload):
    with pytest.raises(BuildError):
        withql.compose_json(payload)


def test_config_builder():
    config = (
        ComposerConfig.builder()
        .target("mysql")
        .pagination_columns(num="n", remaining="left_over")
        .build()
    )
    assert config == ComposerConfig(
        target="mysql", num_column="n", remaining_column="left_over"
    )
    assert not ComposerConfig.builder().without_pagination_columns().build().pagination_columns


def test_config_rejects_non_identifier_columns():
    with pytest.raises(BuildError, match="Invalid composer configuration"):
        ComposerConfig.builder().pagination_columns(num="row num").build()


def test_builtin_targets_registered():
    assert {"sqlite", "postgres", "mysql"} <= set(withql.CompilerFactory.registered_targets())


def test_sanitize_identifier_export():
    assert withql.sanitize_identifier("u; DROP TABLE x") == "uDROPTABLEx"


def test_config_rejects_non_ascii_columns():
    with pytest.raises(BuildError, match="Invalid composer configuration"):
        ComposerConfig.builder().pagination_columns(num="ñum").build()
    with pytest.raises(ValueError):
        ComposerConfig(remaining_column="rést")


def test_compose_rejects_alias_without_identifier_chars():
    with pytest.raises(BuildError, match="alias has no valid identifier characters") as exc_info:
        withql.compose({"source_table": "users", "alias": "$$", "fields": {"id": "id"}})
    assert exc_info.value.stage == "validate"
