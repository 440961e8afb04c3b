"""Identifier sanitizing.

Structural identifiers (table, alias, CTE and output field names) are
filtered, not quoted: every character outside ``[A-Za-z0-9_]`` is dropped.
Expressions and predicates are caller-controlled SQL and never pass
through here.
"""
from __future__ import annotations

import re

_UNSAFE = re.compile(r"[^A-Za-z0-9_]")


def sanitize_identifier(identifier: str) -> str:
    """Return ``identifier`` with every non ``[A-Za-z0-9_]`` character removed.

    >>> sanitize_identifier("u; DROP TABLE x")
    'uDROPTABLEx'
    """
    return _UNSAFE.sub("", identifier)


def is_plain_identifier(identifier: str) -> bool:
    """True when ``identifier`` is non-empty and survives sanitizing unchanged."""
    return bool(identifier) and _UNSAFE.search(identifier) is None


def has_identifier_chars(identifier: str) -> bool:
    """True when sanitizing ``identifier`` leaves at least one character."""
    return bool(sanitize_identifier(identifier))
