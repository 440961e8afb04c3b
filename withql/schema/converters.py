"""Build field mappings from external schema sources.

SQLAlchemy converter
--------------------
:func:`fields_from_sqlalchemy` reflects one table from a live engine and
returns a ``{column: "alias.column"}`` mapping, in column order, ready to be
used as ``Query.fields`` or ``SubqueryComponent.fields``.

Install the optional dependency before using this module::

    pip install "withql[sqlalchemy]"

Example::

    from sqlalchemy import create_engine
    from withql import Query
    from withql.schema.converters import fields_from_sqlalchemy

    engine = create_engine("sqlite:///app.db")
    query = Query(
        source_table="users",
        alias="u",
        fields=fields_from_sqlalchemy(engine, "users", "u", exclude=["password"]),
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from withql.compile.identifiers import sanitize_identifier
from withql.errors import BuildError

if TYPE_CHECKING:
    from sqlalchemy import Engine, Table


def fields_from_sqlalchemy(
    engine: Engine,
    table: str,
    alias: str,
    *,
    schema: str | None = None,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
) -> dict[str, str]:
    """Reflect ``table`` and map each column to ``<alias>.<column>``.

    Args:
        engine: A :class:`sqlalchemy.engine.Engine`.
        table: Name of the table to reflect.
        alias: Alias the table is referenced under in the composed query.
        schema: Optional database schema name (e.g. ``"public"``).
        include: When given, only these columns are kept (in table order).
        exclude: Columns to leave out.

    Returns:
        An insertion-ordered field mapping.

    Raises:
        ImportError: If ``sqlalchemy`` is not installed.
        BuildError: If the table does not exist or no columns remain.
    """
    try:
        from sqlalchemy import MetaData as _MetaData
        from sqlalchemy.exc import InvalidRequestError
    except ImportError as exc:
        raise ImportError(
            "SQLAlchemy is required for fields_from_sqlalchemy(). "
            'Install it with: pip install "withql[sqlalchemy]"'
        ) from exc

    metadata = _MetaData()
    try:
        with engine.connect() as conn:
            metadata.reflect(bind=conn, only=[table], schema=schema)
    except InvalidRequestError as exc:
        raise BuildError(f"Table '{table}' not found.", stage="parse") from exc

    key = f"{schema}.{table}" if schema else table
    return _table_to_fields(metadata.tables[key], alias, include, exclude)


def _table_to_fields(
    table: Table,
    alias: str,
    include: list[str] | None,
    exclude: list[str] | None,
) -> dict[str, str]:
    skip = set(exclude or ())
    keep = set(include) if include is not None else None
    qualifier = sanitize_identifier(alias)

    fields: dict[str, str] = {}
    for column in table.columns:
        if column.name in skip or (keep is not None and column.name not in keep):
            continue
        fields[column.name] = f"{qualifier}.{column.name}"

    if not fields:
        raise BuildError(
            f"No columns of table '{table.name}' left to project.", stage="parse"
        )
    return fields
