"""Pagination metadata from composed-query results.

A paginated composition ordered by more than one term carries two window
columns on every row: the row's position in the full ordered result
(``_num``) and the number of rows after it (``_remaining``).  :func:`paginate`
turns one page of such rows into a :class:`Paginated` envelope::

    result = compose(query, {"order_by": ["u.name ASC", "u.id ASC"], "page": 1, "page_size": 20})
    rows = conn.execute(*result.as_tuple()).fetchall()
    page = paginate(rows, page=1, limit=20)
    page.pagination.total, page.pagination.has_more
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from withql.errors import BuildError
from withql.schema.config import ComposerConfig


class PaginationInfo(BaseModel):
    """Page position and totals.

    Attributes:
        page: Zero-based page index that was requested.
        limit: Page size that was requested.
        total: Rows in the full, unpaginated result.
        has_more: True when rows exist after this page.
    """

    model_config = ConfigDict(frozen=True)

    page: int
    limit: int
    total: int
    has_more: bool


class Paginated(BaseModel):
    """One page of rows plus its :class:`PaginationInfo`."""

    model_config = ConfigDict(frozen=True)

    data: list[dict[str, Any]]
    pagination: PaginationInfo


def paginate(
    rows: Iterable[Mapping[str, Any]],
    page: int,
    limit: int,
    config: ComposerConfig | None = None,
) -> Paginated:
    """Build a :class:`Paginated` envelope from one page of result rows.

    ``total`` is the first row's remaining count plus its row number;
    ``has_more`` is whether the last row has rows after it.  The two
    window columns are stripped from the returned data.

    Args:
        rows: Result rows as mappings (``dict``, ``sqlite3.Row``,
            SQLAlchemy ``RowMapping``).
        page: Zero-based page index used for the query.
        limit: Page size used for the query.
        config: Supplies the window column names; defaults to
            ``ComposerConfig()``.

    Raises:
        BuildError: If a row lacks either window column.
    """
    config = config or ComposerConfig()
    num_col, remaining_col = config.num_column, config.remaining_column

    records = [dict(row) for row in rows]
    for record in records:
        for column in (remaining_col, num_col):
            if column not in record:
                raise BuildError(
                    f"Row is missing pagination field: {column}", stage="paginate"
                )

    if records:
        total = int(records[0][remaining_col]) + int(records[0][num_col])
        has_more = int(records[-1][remaining_col]) > 0
    else:
        total, has_more = 0, False

    data = [
        {k: v for k, v in record.items() if k not in (num_col, remaining_col)}
        for record in records
    ]
    return Paginated(
        data=data,
        pagination=PaginationInfo(page=page, limit=limit, total=total, has_more=has_more),
    )
