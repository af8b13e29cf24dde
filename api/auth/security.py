"""
Auth security helpers.
"""

from __future__ import annotations

import bcrypt


class AuthSecurityError(RuntimeError):
    pass


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    try:
        return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")
    except ValueError as exc:
        # Newer bcrypt releases reject passwords over 72 bytes.
        raise AuthSecurityError("Password cannot be hashed.") from exc


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False
