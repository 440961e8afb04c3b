"""View dependency expansion.

Each :class:`~withql.schema.query.SubqueryComponent` may depend on a tree of
:class:`~withql.schema.query.ViewDefinition` objects.  ``DependencyExpander``
flattens those trees into the order a ``WITH`` clause needs: every view
after all of its own dependencies, each name once, first occurrence wins.

A view that (directly or transitively) depends on itself raises
:class:`~withql.errors.BuildError` naming the cycle.
"""
from __future__ import annotations

import logging

from withql.errors import BuildError
from withql.schema.query import SubqueryComponent, ViewDefinition

_logger = logging.getLogger(__name__)


class DependencyExpander:
    """Flattens view dependency trees into dependency-ordered CTE entries."""

    def expand(self, components: list[SubqueryComponent]) -> list[ViewDefinition]:
        """Return the views of all ``components``, dependencies first.

        Args:
            components: Subqueries in declaration order.

        Returns:
            De-duplicated views, each preceded by everything it depends on.

        Raises:
            BuildError: If the dependency graph contains a cycle.
        """
        ordered: list[ViewDefinition] = []
        seen: set[str] = set()
        for component in components:
            for view in component.views:
                self._visit(view, ordered, seen, path=[])
        if ordered:
            _logger.debug("Expanded views: %s", [v.name for v in ordered])
        return ordered

    def _visit(
        self,
        view: ViewDefinition,
        ordered: list[ViewDefinition],
        seen: set[str],
        path: list[str],
    ) -> None:
        if view.name in path:
            cycle = " -> ".join([*path[path.index(view.name):], view.name])
            raise BuildError(f"Circular view dependency: {cycle}", stage="with")
        if view.name in seen:
            return
        path.append(view.name)
        for dependency in view.dependencies:
            self._visit(dependency, ordered, seen, path)
        path.pop()
        seen.add(view.name)
        ordered.append(view)
