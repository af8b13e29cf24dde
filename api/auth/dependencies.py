"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import Request

from . import service


# Raised by the route guard; `main.py` turns it into a redirect to /signin.
class NotAuthenticated(Exception):
    pass


async def require_session(request: Request) -> dict:
    user = service.session_user(request.session)
    if user is None:
        raise NotAuthenticated()
    return user
