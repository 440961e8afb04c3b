"""MySQL dialect compiler."""

from __future__ import annotations

from withql.compile.base import SQLCompiler
from withql.compile.registry import CompilerFactory


@CompilerFactory.register("mysql")
class MySQLCompiler(SQLCompiler):
    """Renders MySQL-flavoured positional placeholders.

    Parameter style: ``%s`` (format), compatible with ``PyMySQL`` and
    ``mysql-connector-python`` positional execution.

    Note: a literal ``%`` inside an expression (e.g. ``LIKE 'a%'``) must be
    written as ``%%`` for these drivers; expressions are emitted verbatim.
    """

    @property
    def dialect_name(self) -> str:
        return "mysql"

    def placeholder(self, position: int) -> str:
        return "%s"
