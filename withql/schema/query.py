"""Pydantic models describing a composition request.

A request is a :class:`Query` (the primary source, its projection and its
CTE-backed subqueries) plus optional per-call :class:`CompositionOptions`.

The models only check types.  Presence rules (a source must be given, the
alias must be non-empty, ...) are enforced by
:class:`~withql.validate.validator.QueryValidator` so that error messages
come out in a fixed, documented order.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

#: Accepted join kinds.
JOIN_KINDS: frozenset[str] = frozenset({"INNER", "LEFT"})

#: SQL keyword emitted for each join kind.
JOIN_KEYWORDS: dict[str, str] = {"INNER": "JOIN", "LEFT": "LEFT JOIN"}

# SQL spellings accepted on input and folded onto the canonical kinds.
_JOIN_SPELLINGS: dict[str, str] = {
    "JOIN": "INNER",
    "INNER JOIN": "INNER",
    "LEFT JOIN": "LEFT",
    "LEFT OUTER JOIN": "LEFT",
}


class ViewDefinition(BaseModel):
    """A named SQL fragment that other fragments may depend on.

    Views form a DAG through ``dependencies``; each is emitted as its own
    CTE ahead of the subqueries that need it.  Names and query text are
    configuration, not external input, and are emitted verbatim.

    Attributes:
        name: CTE name.
        query: SQL body of the CTE.
        dependencies: Views that must be emitted before this one.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    query: str
    dependencies: list[ViewDefinition] = Field(default_factory=list)


class SubqueryComponent(BaseModel):
    """A named, aliased CTE joined onto the main source.

    Attributes:
        name: CTE name used in the ``WITH`` clause.
        alias: Alias the CTE is joined under.
        query: SQL body of the CTE.
        join_type: ``INNER`` or ``LEFT`` (``JOIN`` / ``LEFT JOIN`` accepted).
        join_on: Raw join predicate referencing both sides.
        fields: Output field name to SQL expression, in projection order.
        params: Default values for ``?name`` placeholders in ``query``.
        views: Views this subquery depends on.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = ""
    alias: str = ""
    query: str = ""
    join_type: str = ""
    join_on: str = ""
    fields: dict[str, str] = Field(default_factory=dict)
    params: dict[str, Any] | None = None
    views: list[ViewDefinition] = Field(default_factory=list)

    @field_validator("join_type", mode="before")
    @classmethod
    def _normalize_join_type(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        folded = " ".join(value.upper().split())
        if folded in JOIN_KINDS:
            return folded
        return _JOIN_SPELLINGS.get(folded, value)

    @property
    def join_keyword(self) -> str:
        """The SQL join keyword for ``join_type``."""
        return JOIN_KEYWORDS[self.join_type]


class Query(BaseModel):
    """The root composition unit.

    Exactly one of ``source_table`` and ``source_query`` must be set.

    Attributes:
        source_table: Table to select from.
        source_query: Raw SQL used as a derived table instead of a table.
        alias: Alias of the primary source.
        fields: Output field name to SQL expression, in projection order.
        where: Filter expression for the primary source.
        subqueries: CTE-backed subqueries joined onto the source.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    source_table: str | None = None
    source_query: str | None = None
    alias: str = ""
    fields: dict[str, str] = Field(default_factory=dict)
    where: str | None = None
    subqueries: list[SubqueryComponent] = Field(default_factory=list)


class CompositionOptions(BaseModel):
    """Per-call overrides.

    Attributes:
        where: Extra filter ANDed with ``Query.where``.
        params: Values for ``?name`` placeholders.
        page: Zero-based page index.
        page_size: Rows per page.
        order_by: ``"<expr> ASC|DESC"`` sort terms, trusted verbatim.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    where: str | None = None
    params: dict[str, Any] | None = None
    page: int | None = None
    page_size: int | None = None
    order_by: list[str] | None = None

    @property
    def paginated(self) -> bool:
        """True when both ``page`` and ``page_size`` are set."""
        return self.page is not None and self.page_size is not None
