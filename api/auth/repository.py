"""
Auth persistence helpers.
"""

from __future__ import annotations

from core import db


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def create_user(*, username: str, email: str, password_hash: str) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO users (username, email, password_hash)
        VALUES ($1, $2, $3)
        RETURNING id, username, email, created_at
        """,
        username.strip(),
        normalize_email(email),
        password_hash,
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def get_user_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, username, email, password_hash, created_at
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )
