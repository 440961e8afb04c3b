"""Text rewrite passes run over the assembled statement.

The composer assembles SQL with two kinds of named markers:

``$order_by`` / ``$rev_order_by``
    Ordering macros, replaced by the request's ORDER BY terms (reversed for
    ``$rev_order_by``).  Used by the pagination window columns and allowed
    anywhere in caller-supplied SQL.

``?name``
    Named parameters, replaced by the dialect's positional placeholder while
    the matching value is appended to the output parameter list.

Each step is a :class:`RewritePass` mapping one immutable
:class:`RewriteState` to the next, so passes can be tested alone and a
structured expression mode could later replace them without touching the
clause builders.
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from functools import reduce
from typing import Any, NamedTuple, Protocol

from withql.compile.base import SQLCompiler
from withql.errors import BuildError

ORDER_BY_MACRO = "$order_by"
REV_ORDER_BY_MACRO = "$rev_order_by"

_MACRO = re.compile(r"\$(rev_order_by|order_by)\b")
_DIRECTION = re.compile(r"\b(ASC|DESC)\b", re.IGNORECASE)
_PLACEHOLDER = re.compile(r"\?([A-Za-z_][A-Za-z0-9_]*)")


class RewriteState(NamedTuple):
    """SQL text plus the positional parameters bound so far."""

    text: str
    params: tuple[Any, ...] = ()


class RewritePass(Protocol):
    def apply(self, state: RewriteState) -> RewriteState: ...


def reverse_order_term(term: str) -> str:
    """Flip every ``ASC``/``DESC`` token in ``term``.

    A term without a direction sorts ascending, so ``DESC`` is appended.

    >>> reverse_order_term("created_at DESC")
    'created_at ASC'
    """
    if not _DIRECTION.search(term):
        return f"{term.rstrip()} DESC"
    return _DIRECTION.sub(
        lambda m: "DESC" if m.group(1).upper() == "ASC" else "ASC", term
    )


class OrderMacroPass:
    """Resolves ``$order_by`` and ``$rev_order_by``."""

    def __init__(self, order_by: Iterable[str] | None) -> None:
        self._terms = list(order_by or ())

    def apply(self, state: RewriteState) -> RewriteState:
        if not _MACRO.search(state.text):
            return state
        if not self._terms:
            raise BuildError(
                f"Order macro {ORDER_BY_MACRO} requires order_by terms",
                stage="rewrite",
            )
        forward = ", ".join(self._terms)
        backward = ", ".join(reverse_order_term(t) for t in self._terms)
        text = _MACRO.sub(
            lambda m: backward if m.group(1) == "rev_order_by" else forward,
            state.text,
        )
        return state._replace(text=text)


class _Fold(NamedTuple):
    pieces: tuple[str, ...]
    params: tuple[Any, ...]
    cursor: int


class PlaceholderPass:
    """Replaces each ``?name`` with a positional placeholder.

    Every occurrence binds its own value, so a name used three times adds
    three entries to the parameter list.
    """

    def __init__(self, compiler: SQLCompiler, values: Mapping[str, Any] | None) -> None:
        self._compiler = compiler
        self._values = dict(values or {})

    def apply(self, state: RewriteState) -> RewriteState:
        source = state.text

        def step(acc: _Fold, match: re.Match[str]) -> _Fold:
            name = match.group(1)
            if name not in self._values:
                raise BuildError(f"Missing parameter: {name}", stage="rewrite")
            params = (*acc.params, self._values[name])
            marker = self._compiler.placeholder(len(params))
            return _Fold(
                pieces=(*acc.pieces, source[acc.cursor:match.start()], marker),
                params=params,
                cursor=match.end(),
            )

        folded = reduce(step, _PLACEHOLDER.finditer(source), _Fold((), state.params, 0))
        text = "".join((*folded.pieces, source[folded.cursor:]))
        return RewriteState(text=text, params=folded.params)


class ParameterRewriter:
    """Runs rewrite passes in order over an assembled statement."""

    def __init__(self, passes: Iterable[RewritePass]) -> None:
        self._passes = list(passes)

    @classmethod
    def for_request(
        cls,
        compiler: SQLCompiler,
        order_by: Iterable[str] | None,
        values: Mapping[str, Any] | None,
    ) -> ParameterRewriter:
        """Macro pass then placeholder pass, the composer's standard pipeline."""
        return cls([OrderMacroPass(order_by), PlaceholderPass(compiler, values)])

    def rewrite(self, text: str) -> RewriteState:
        return reduce(lambda state, p: p.apply(state), self._passes, RewriteState(text))
