"""Compilation context value object.

Packages the ``(compiler, config)`` pair handed to every clause builder and
rewrite pass into a single object.
"""
from __future__ import annotations

from dataclasses import dataclass

from withql.compile.base import SQLCompiler
from withql.schema.config import ComposerConfig


@dataclass(frozen=True)
class CompilationContext:
    """Immutable context for the composer and its sub-builders.

    Attributes:
        compiler: Dialect-specific compiler (placeholder style).
        config: Composer settings (pagination column names).
    """

    compiler: SQLCompiler
    config: ComposerConfig
