"""Test fixtures: sample schema DDL and seed data."""

from __future__ import annotations

import sqlite3
from pathlib import Path

_FIXTURES_DIR = Path(__file__).parent


def load_ddl() -> str:
    """Return the sample SQLite DDL."""
    return (_FIXTURES_DIR / "ddl_sqlite.sql").read_text()


def load_seed() -> str:
    """Return the sample SQLite INSERT statements."""
    return (_FIXTURES_DIR / "seed_sqlite.sql").read_text()


def seeded_connection() -> sqlite3.Connection:
    """Open an in-memory SQLite database with the sample schema and data."""
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.executescript(load_ddl())
    conn.executescript(load_seed())
    return conn
