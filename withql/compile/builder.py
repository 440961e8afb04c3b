"""Statement composition.

``Composer`` is the top-level orchestrator.  It validates the request,
drives the clause builders, joins their fragments and hands the result to
the parameter rewriter.  All dialect-specific behaviour (the placeholder
marker) is delegated to the injected ``SQLCompiler``.

Pipeline
--------
Composer
  ├── QueryValidator       (validate/validator.py)
  ├── WithClauseBuilder    (clause_builders.py)
  │     └── DependencyExpander (dependencies.py)
  ├── SelectClauseBuilder  (clause_builders.py)
  ├── FromClauseBuilder    (clause_builders.py)
  ├── JoinClauseBuilder    (clause_builders.py)
  ├── TailClauseBuilder    (clause_builders.py)
  └── ParameterRewriter    (rewriter.py)
"""

from __future__ import annotations

import logging
from typing import Any

from withql.compile.base import CompositionResult, SQLCompiler
from withql.compile.clause_builders import (
    FromClauseBuilder,
    JoinClauseBuilder,
    SelectClauseBuilder,
    TailClauseBuilder,
    WithClauseBuilder,
)
from withql.compile.context import CompilationContext
from withql.compile.registry import CompilerFactory
from withql.compile.rewriter import ParameterRewriter
from withql.errors import BuildError
from withql.schema.config import ComposerConfig
from withql.schema.query import CompositionOptions, Query, SubqueryComponent
from withql.validate.validator import QueryValidator

_logger = logging.getLogger(__name__)


class Composer:
    """Composes a :class:`Query` into parameterized SQL.

    Args:
        compiler: Dialect compiler.  Defaults to the compiler registered
            for ``config.target``.
        config: Composer settings; defaults to ``ComposerConfig()``.
        validator: Optional validator override.
    """

    def __init__(
        self,
        compiler: SQLCompiler | None = None,
        config: ComposerConfig | None = None,
        validator: QueryValidator | None = None,
    ) -> None:
        config = config or ComposerConfig()
        compiler = compiler or CompilerFactory.create(config.target)
        self._ctx = CompilationContext(compiler=compiler, config=config)
        self._validator = validator or QueryValidator()
        self._with = WithClauseBuilder()
        self._select = SelectClauseBuilder(self._ctx)
        self._from = FromClauseBuilder()
        self._join = JoinClauseBuilder()
        self._tail = TailClauseBuilder()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compose(
        self,
        query: Query,
        options: CompositionOptions | None = None,
    ) -> CompositionResult:
        """Compose ``query`` to SQL text and positional parameters.

        Args:
            query: The request's primary source, projection and subqueries.
            options: Per-call filter, parameters, ordering and paging.

        Returns:
            :class:`~withql.compile.base.CompositionResult`.

        Raises:
            BuildError: On any validation or substitution failure.  Other
                exceptions are wrapped into a ``BuildError``.
        """
        options = options or CompositionOptions()
        try:
            return self._compose(query, options)
        except BuildError:
            raise
        except Exception as exc:
            _logger.error("Unexpected failure while composing SQL", exc_info=True)
            raise BuildError(f"Failed to build SQL query: {exc}") from exc

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _compose(self, query: Query, options: CompositionOptions) -> CompositionResult:
        self._validator.validate(query, options)

        fragments = [
            self._with.build(query.subqueries),
            self._select.build(query, options),
            self._from.build(query),
            self._join.build(query.subqueries),
            *self._tail.build(query, options),
        ]
        text = " ".join(fragment for fragment in fragments if fragment)

        rewriter = ParameterRewriter.for_request(
            self._ctx.compiler,
            options.order_by,
            _merge_params(query.subqueries, options.params),
        )
        state = rewriter.rewrite(text)

        _logger.debug(
            "Composed %s statement with %d parameter(s): %s",
            self._ctx.compiler.dialect_name,
            len(state.params),
            state.text,
        )
        return CompositionResult(
            text=state.text,
            params=list(state.params),
            dialect=self._ctx.compiler.dialect_name,
        )


def _merge_params(
    subqueries: list[SubqueryComponent], overrides: dict[str, Any] | None
) -> dict[str, Any]:
    """Subquery default params (first declaration wins), overridden by call params."""
    merged: dict[str, Any] = {}
    for sub in subqueries:
        for name, value in (sub.params or {}).items():
            merged.setdefault(name, value)
    merged.update(overrides or {})
    return merged
