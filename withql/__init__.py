"""withQL – composable CTE-based SQL statement assembly.

Describe a query, get back SQL text and positional parameters.

Public API
----------
``compose``
    Validate and compose a :class:`Query` (or an equivalent dict) plus
    optional :class:`CompositionOptions` into a :class:`CompositionResult`.

``compose_json``
    Same, from a JSON document ``{"query": {...}, "options": {...}}``.

``paginate``
    Turn one page of result rows into a :class:`Paginated` envelope using
    the window columns added to ordered, paginated compositions.

Example::

    import sqlite3
    import withql

    result = withql.compose(
        {
            "source_table": "users",
            "alias": "u",
            "fields": {"id": "u.id", "name": "u.name"},
        },
        {"where": "u.id = ?user_id", "params": {"user_id": 1}},
    )
    rows = sqlite3.connect("app.db").execute(*result.as_tuple()).fetchall()

Extensibility
-------------
New dialect compilers can be registered via::

    from withql.compile.registry import CompilerFactory

    @CompilerFactory.register("duckdb")
    class DuckDBCompiler(SQLCompiler):
        ...

and selected with ``ComposerConfig(target="duckdb")``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as _PydanticValidationError

from withql.compile.base import CompositionResult, SQLCompiler
from withql.compile.builder import Composer
from withql.compile.identifiers import sanitize_identifier
from withql.compile.mysql import MySQLCompiler
from withql.compile.postgres import PostgresCompiler
from withql.compile.registry import CompilerFactory
from withql.compile.sqlite import SQLiteCompiler
from withql.errors import BuildError
from withql.pagination import Paginated, PaginationInfo, paginate
from withql.schema.config import ComposerConfig
from withql.schema.query import (
    CompositionOptions,
    Query,
    SubqueryComponent,
    ViewDefinition,
)
from withql.validate.validator import QueryValidator, ValidationResult

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core pipeline
    "compose",
    "compose_json",
    "paginate",
    # Request models
    "Query",
    "SubqueryComponent",
    "ViewDefinition",
    "CompositionOptions",
    "ComposerConfig",
    # Composition
    "Composer",
    "CompositionResult",
    "CompilerFactory",
    "SQLCompiler",
    "SQLiteCompiler",
    "PostgresCompiler",
    "MySQLCompiler",
    "QueryValidator",
    "ValidationResult",
    "sanitize_identifier",
    # Pagination
    "Paginated",
    "PaginationInfo",
    # Errors
    "BuildError",
]


def compose(
    query: Query | Mapping[str, Any],
    options: CompositionOptions | Mapping[str, Any] | None = None,
    *,
    config: ComposerConfig | None = None,
) -> CompositionResult:
    """Validate and compose a query to parameterized SQL.

    This is the main entry point::

        result = withql.compose(query, CompositionOptions(page=2, page_size=10))
        cursor.execute(result.text, result.params)

    Args:
        query: A :class:`Query` or a dict with the same shape.
        options: A :class:`CompositionOptions`, a dict, or ``None``.
        config: Optional composer settings; defaults to ``ComposerConfig()``.

    Returns:
        ``CompositionResult`` with ``text``, positional ``params`` and
        ``dialect``.

    Raises:
        BuildError: If the request is malformed, invalid, or references a
            parameter that was not supplied.
    """
    try:
        query = Query.model_validate(query)
        if options is not None:
            options = CompositionOptions.model_validate(options)
    except _PydanticValidationError as exc:
        raise BuildError(f"Invalid composition request: {exc}", stage="parse") from exc
    return Composer(config=config).compose(query, options)


def compose_json(
    request_json: str,
    *,
    config: ComposerConfig | None = None,
) -> CompositionResult:
    """Parse a JSON request and compose it.

    The document is an object with a required ``"query"`` member and an
    optional ``"options"`` member, shaped like :class:`Query` and
    :class:`CompositionOptions`.

    Raises:
        BuildError: If ``request_json`` is not valid JSON, has the wrong
            shape, or fails composition.
    """
    try:
        raw = json.loads(request_json)
    except json.JSONDecodeError as exc:
        raise BuildError(f"Invalid JSON: {exc}", stage="parse") from exc

    if not isinstance(raw, dict) or "query" not in raw:
        raise BuildError("Request must be an object with a 'query' member", stage="parse")
    extra = set(raw) - {"query", "options"}
    if extra:
        raise BuildError(f"Unknown request members: {sorted(extra)}", stage="parse")
    return compose(raw["query"], raw.get("options"), config=config)
