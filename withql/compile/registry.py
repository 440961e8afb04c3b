"""Dialect registry.

``CompilerFactory`` maps a ``ComposerConfig.target`` name to the
:class:`~withql.compile.base.SQLCompiler` that renders its placeholders.
The built-in SQLite, PostgreSQL and MySQL compilers register themselves
with the decorator below when ``withql.compile`` is imported; a custom
dialect does the same::

    from withql.compile.base import SQLCompiler
    from withql.compile.registry import CompilerFactory

    @CompilerFactory.register("oracle")
    class OracleCompiler(SQLCompiler):
        dialect_name = "oracle"

        def placeholder(self, position: int) -> str:
            return f":{position}"

    withql.compose(query, options, config=ComposerConfig(target="oracle"))
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar, TypeVar

from withql.compile.base import SQLCompiler
from withql.errors import BuildError

_C = TypeVar("_C", bound=type[SQLCompiler])


class CompilerFactory:
    """Target name to :class:`SQLCompiler` class.

    A target may be registered again to replace its compiler; the last
    registration wins.
    """

    _compilers: ClassVar[dict[str, type[SQLCompiler]]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[_C], _C]:
        """Class decorator registering a compiler under ``name``."""

        def decorator(compiler_cls: _C) -> _C:
            cls._compilers[name] = compiler_cls
            return compiler_cls

        return decorator

    @classmethod
    def create(cls, name: str) -> SQLCompiler:
        """Instantiate the compiler registered for ``name``.

        Raises:
            BuildError: If ``name`` is not registered.
        """
        compiler_cls = cls._compilers.get(name)
        if compiler_cls is None:
            raise BuildError(
                f"Unsupported dialect target: '{name}'. "
                f"Registered targets: {cls.registered_targets()}."
            )
        return compiler_cls()

    @classmethod
    def registered_targets(cls) -> list[str]:
        return sorted(cls._compilers)
