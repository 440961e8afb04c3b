"""withQL composition layer: Query → parameterized SQL."""
from withql.compile.base import CompositionResult, SQLCompiler
from withql.compile.builder import Composer
from withql.compile.mysql import MySQLCompiler
from withql.compile.postgres import PostgresCompiler
from withql.compile.sqlite import SQLiteCompiler

__all__ = [
    "CompositionResult",
    "SQLCompiler",
    "Composer",
    "MySQLCompiler",
    "PostgresCompiler",
    "SQLiteCompiler",
]
