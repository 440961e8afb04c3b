"""Compiler abstractions: CompositionResult and the SQLCompiler ABC.

The Strategy pattern is used: ``SQLCompiler`` decides the one
dialect-specific detail of a composed statement, the positional placeholder
marker.  ``SQLiteCompiler``, ``PostgresCompiler`` and ``MySQLCompiler``
provide the concrete markers.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CompositionResult:
    """The output of a successful composition.

    Attributes:
        text: The SQL statement with positional placeholders.
        params: Bound values, index-aligned with placeholder occurrence
            order in ``text``.
        dialect: The dialect the placeholders were rendered for.
    """

    text: str
    params: list[Any] = field(default_factory=list)
    dialect: str = "sqlite"

    def as_tuple(self) -> tuple[str, tuple[Any, ...]]:
        """Return ``(text, params)`` ready for ``cursor.execute(*result.as_tuple())``."""
        return self.text, tuple(self.params)


class SQLCompiler(ABC):
    """Abstract base for dialect-specific compilers."""

    @abstractmethod
    def placeholder(self, position: int) -> str:
        """Return the positional placeholder for the parameter at ``position``.

        Args:
            position: One-based index of the parameter in the output list.

        Returns:
            Dialect-specific placeholder string.
        """

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name."""
