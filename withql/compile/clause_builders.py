"""Clause-level SQL builders.

Each class renders exactly one part of the statement from an already
validated request and returns ``""`` when the part is absent, so the
composer can drop empty fragments.

Classes
-------
WithClauseBuilder   : ``WITH <views>, <subqueries>``
SelectClauseBuilder : ``SELECT <expr> AS <field>, …``
FromClauseBuilder   : ``FROM <table | (query)> AS <alias>``
JoinClauseBuilder   : ``JOIN | LEFT JOIN <name> AS <alias> ON …``
TailClauseBuilder   : ``WHERE … ORDER BY … LIMIT … OFFSET …``
"""
from __future__ import annotations

from withql.compile.context import CompilationContext
from withql.compile.dependencies import DependencyExpander
from withql.compile.identifiers import sanitize_identifier
from withql.compile.rewriter import ORDER_BY_MACRO
from withql.schema.query import CompositionOptions, Query, SubqueryComponent


class WithClauseBuilder:
    """Builds the ``WITH <name> AS (…), …`` block.

    Views the subqueries depend on are expanded by ``DependencyExpander``
    and emitted first, verbatim; subquery CTE names are sanitized.
    """

    def __init__(self, expander: DependencyExpander | None = None) -> None:
        self._expander = expander or DependencyExpander()

    def build(self, subqueries: list[SubqueryComponent]) -> str:
        if not subqueries:
            return ""
        entries = [
            f"{view.name} AS ({view.query.strip()})"
            for view in self._expander.expand(subqueries)
        ]
        entries.extend(
            f"{sanitize_identifier(sub.name)} AS ({sub.query.strip()})"
            for sub in subqueries
        )
        return f"WITH {', '.join(entries)}"


class SelectClauseBuilder:
    """Builds the ``SELECT …`` clause.

    Main-query fields come first, then each subquery's fields in
    declaration order.  For paginated requests ordered by more than one
    term, two window columns carrying the row number and the rows remaining
    are appended.  Both count against the same forward ordering, so their
    sum is the full row count even when sort keys tie.
    """

    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx

    def build(self, query: Query, options: CompositionOptions) -> str:
        items = self._field_items(query.fields)
        for sub in query.subqueries:
            items.extend(self._field_items(sub.fields))
        if self._wants_window_columns(options):
            items.extend(self._window_items())
        return f"SELECT {', '.join(items)}"

    @staticmethod
    def _field_items(fields: dict[str, str]) -> list[str]:
        return [
            f"{expr.strip()} AS {sanitize_identifier(name)}"
            for name, expr in fields.items()
        ]

    def _wants_window_columns(self, options: CompositionOptions) -> bool:
        return (
            self._ctx.config.pagination_columns
            and len(options.order_by or ()) > 1
            and options.paginated
        )

    def _window_items(self) -> list[str]:
        config = self._ctx.config
        row_number = f"ROW_NUMBER() OVER (ORDER BY {ORDER_BY_MACRO})"
        return [
            f"{row_number} AS {config.num_column}",
            f"COUNT(*) OVER () - {row_number} AS {config.remaining_column}",
        ]


class FromClauseBuilder:
    """Builds the ``FROM <table | (subquery)> AS <alias>`` fragment.

    A raw source query is wrapped in parentheses and never inspected.
    """

    def build(self, query: Query) -> str:
        alias = sanitize_identifier(query.alias)
        if query.source_table and query.source_table.strip():
            return f"FROM {sanitize_identifier(query.source_table)} AS {alias}"
        return f"FROM ({query.source_query}) AS {alias}"


class JoinClauseBuilder:
    """Builds one ``JOIN … ON …`` line per subquery, newline-joined."""

    def build(self, subqueries: list[SubqueryComponent]) -> str:
        return "\n".join(self._build_one(sub) for sub in subqueries)

    @staticmethod
    def _build_one(sub: SubqueryComponent) -> str:
        name = sanitize_identifier(sub.name)
        alias = sanitize_identifier(sub.alias)
        return f"{sub.join_keyword} {name} AS {alias} ON {sub.join_on}"


class TailClauseBuilder:
    """Builds ``WHERE``, ``ORDER BY``, ``LIMIT`` and ``OFFSET``."""

    def build(self, query: Query, options: CompositionOptions) -> list[str]:
        """Return the non-empty tail clauses in statement order."""
        parts = [
            self.where(query, options),
            self.order_by(options),
            self.limit(options),
            self.offset(options),
        ]
        return [part for part in parts if part]

    @staticmethod
    def where(query: Query, options: CompositionOptions) -> str:
        conditions = [
            f"({cond})"
            for cond in (query.where, options.where)
            if cond and cond.strip()
        ]
        if not conditions:
            return ""
        return f"WHERE {' AND '.join(conditions)}"

    @staticmethod
    def order_by(options: CompositionOptions) -> str:
        if not options.order_by:
            return ""
        return f"ORDER BY {', '.join(options.order_by)}"

    @staticmethod
    def limit(options: CompositionOptions) -> str:
        if options.page_size is None:
            return ""
        return f"LIMIT {options.page_size}"

    @staticmethod
    def offset(options: CompositionOptions) -> str:
        if not options.paginated:
            return ""
        return f"OFFSET {options.page * options.page_size}"
