"""
Signup / signin / logout pages.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Form, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from pydantic import ValidationError

from core.settings import SESSION_COOKIE_NAME
from core.templating import templates

from . import schemas, security, service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/signup", response_class=HTMLResponse)
async def signup_page(request: Request):
    return templates.TemplateResponse(request, "signup.html")


@router.post("/signup")
async def signup(
    username: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
):
    try:
        payload = schemas.SignupRequest(username=username, email=email, password=password)
    except ValidationError:
        return PlainTextResponse("Invalid sign-up details", status_code=status.HTTP_400_BAD_REQUEST)

    try:
        user_row = await service.signup(payload)
    except security.AuthSecurityError:
        logger.exception("signup_hash_failed email=%s", payload.email)
        return PlainTextResponse("Internal server error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    except Exception:
        logger.exception("signup_insert_failed email=%s", payload.email)
        return PlainTextResponse("Sign-up error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info("signup_complete user_id=%s", user_row["id"])
    return RedirectResponse("/signin", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/signin", response_class=HTMLResponse)
async def signin_page(request: Request):
    return templates.TemplateResponse(request, "signin.html")


@router.post("/signin")
async def signin(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
):
    payload = schemas.SigninRequest(email=email, password=password)

    try:
        user_row = await service.signin(payload)
    except service.CredentialsError as exc:
        return PlainTextResponse(str(exc), status_code=status.HTTP_401_UNAUTHORIZED)
    except Exception:
        logger.exception("signin_lookup_failed email=%s", payload.email)
        return PlainTextResponse("Internal server error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    service.start_session(request.session, user_row)
    logger.info("signin_complete user_id=%s", user_row["id"])
    return RedirectResponse("/display-data", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/logout")
async def logout(request: Request):
    service.end_session(request.session)
    response = RedirectResponse("/signin", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return response
