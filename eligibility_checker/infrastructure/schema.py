"""
Schema bootstrap for the ``determinations`` table.

The DDL lives in ``schema.sql`` next to this module and is idempotent, so it is
safe to apply on every deployment.
"""

from __future__ import annotations

from pathlib import Path

import psycopg

SCHEMA_PATH = Path(__file__).with_name("schema.sql")


def load_schema_sql() -> str:
    """Return the DDL script text."""
    return SCHEMA_PATH.read_text(encoding="utf-8")


def apply_schema(conn: psycopg.Connection) -> None:
    """
    Create the table, indexes and statistics view if they do not exist.

    The caller owns the connection; this commits on success.
    """
    with conn.cursor() as cur:
        cur.execute(load_schema_sql())
    conn.commit()


def schema_exists(conn: psycopg.Connection) -> bool:
    with conn.cursor() as cur:
        cur.execute(
            """
            SELECT EXISTS (
                SELECT FROM information_schema.tables
                WHERE table_schema = 'public'
                AND table_name = 'determinations'
            );
            """
        )
        row = cur.fetchone()
    return bool(row and row[0])


__all__ = ["SCHEMA_PATH", "apply_schema", "load_schema_sql", "schema_exists"]
