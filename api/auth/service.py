"""
Auth business logic.

Sessions are cookie-backed (Starlette `SessionMiddleware`); an authenticated
session carries `user_id` and `username`.
"""

from __future__ import annotations

from typing import Any, MutableMapping

from . import repository, schemas, security

SESSION_USER_ID = "user_id"
SESSION_USERNAME = "username"


# Credential failures carry the plain-text message shown to the user.
class CredentialsError(RuntimeError):
    pass


async def signup(payload: schemas.SignupRequest) -> dict:
    # The unique index on users.email is the only duplicate check.
    password_hash = security.hash_password(payload.password)
    return await repository.create_user(
        username=payload.username,
        email=payload.email,
        password_hash=password_hash,
    )


async def signin(payload: schemas.SigninRequest) -> dict:
    user_row = await repository.get_user_by_email(payload.email)
    if user_row is None:
        raise CredentialsError("No user found with that email")

    if not security.verify_password(payload.password, str(user_row.get("password_hash") or "")):
        raise CredentialsError("Incorrect password")

    return user_row


def start_session(session: MutableMapping[str, Any], user_row: dict) -> None:
    session.clear()
    session[SESSION_USER_ID] = int(user_row["id"])
    session[SESSION_USERNAME] = str(user_row["username"])


def end_session(session: MutableMapping[str, Any]) -> None:
    session.clear()


def session_user(session: MutableMapping[str, Any]) -> dict | None:
    user_id = session.get(SESSION_USER_ID)
    if user_id is None:
        return None
    return {"id": user_id, "username": session.get(SESSION_USERNAME)}
