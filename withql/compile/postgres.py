"""PostgreSQL dialect compiler."""

from __future__ import annotations

from withql.compile.base import SQLCompiler
from withql.compile.registry import CompilerFactory


@CompilerFactory.register("postgres")
class PostgresCompiler(SQLCompiler):
    """Renders PostgreSQL-flavoured positional placeholders.

    Parameter style: ``$1``, ``$2``, ... (numeric), the native server-side
    style used by ``asyncpg`` and by ``psycopg`` prepared statements.
    Each occurrence gets its own number, so a name used twice binds twice.
    """

    @property
    def dialect_name(self) -> str:
        return "postgres"

    def placeholder(self, position: int) -> str:
        return f"${position}"
