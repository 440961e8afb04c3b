"""SQLite dialect compiler."""
from __future__ import annotations

from withql.compile.base import SQLCompiler
from withql.compile.registry import CompilerFactory


@CompilerFactory.register("sqlite")
class SQLiteCompiler(SQLCompiler):
    """Renders SQLite-flavoured positional placeholders.

    Parameter style: ``?`` (qmark), compatible with Python's built-in
    ``sqlite3`` positional execution (``cursor.execute(sql, params)``).
    """

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    def placeholder(self, position: int) -> str:
        return "?"
