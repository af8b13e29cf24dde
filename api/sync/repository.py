"""
Sync persistence.

Table and column names come from the fixed `SourceSpec`s in `mappings.py`,
never from request input, so they are interpolated into the SQL text directly.
Values always go through asyncpg placeholders.
"""

from __future__ import annotations

from typing import Any

from core import db


def _placeholders(n: int) -> str:
    return ", ".join(f"${i}" for i in range(1, n + 1))


async def record_exists(table: str, record_id: int) -> bool:
    row = await db.fetch_one(
        f"""
        SELECT 1 AS ok
        FROM {table}
        WHERE id = $1
        LIMIT 1
        """,
        record_id,
    )
    return row is not None


async def insert_record(table: str, columns: list[str], values: list[Any]) -> None:
    if len(columns) != len(values):
        raise RuntimeError(f"Column/value count mismatch for {table}: {len(columns)} != {len(values)}")

    await db.execute(
        f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({_placeholders(len(values))})",
        *values,
    )
