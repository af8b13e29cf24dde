"""
Read-only queries over the synced tables.
"""

from __future__ import annotations

from typing import Any

from core import db


async def list_msv_visits() -> list[dict[str, Any]]:
    return await db.fetch_all("SELECT * FROM MSVTable")


async def get_msv_visit(record_id: int) -> dict[str, Any] | None:
    return await db.fetch_one("SELECT * FROM MSVTable WHERE id = $1", record_id)


async def list_client_submissions() -> list[dict[str, Any]]:
    return await db.fetch_all("SELECT * FROM ClientsTable ORDER BY qtr DESC")


async def get_client_submission(record_id: int) -> dict[str, Any] | None:
    return await db.fetch_one("SELECT * FROM ClientsTable WHERE id = $1", record_id)


async def list_attendance() -> list[dict[str, Any]]:
    return await db.fetch_all("SELECT * FROM attendance_records")
