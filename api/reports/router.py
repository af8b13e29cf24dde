"""
Server-rendered tables and charts over the synced data, plus JSON detail
lookups used by the table pages.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from fastapi import APIRouter, Depends, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse

from auth import dependencies as auth_dependencies
from core.templating import templates

from . import repository

logger = logging.getLogger(__name__)

router = APIRouter()

FETCH_ERROR = "An error occurred while fetching data"
NOT_FOUND_ERROR = "No data found for the given ID."


async def _render_rows(
    request: Request,
    template: str,
    context_key: str,
    query: Callable[[], Awaitable[list[dict[str, Any]]]],
    **extra: Any,
):
    try:
        rows = await query()
    except Exception:
        logger.exception("report_query_failed template=%s", template)
        return PlainTextResponse(FETCH_ERROR, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    context = {context_key: jsonable_encoder(rows), **extra}
    return templates.TemplateResponse(request, template, context)


def _parse_id(raw: str) -> int | None:
    raw = (raw or "").strip()
    if not (raw.isascii() and raw.isdigit()):
        return None
    return int(raw)


async def _row_json(query: Callable[[int], Awaitable[dict[str, Any] | None]], raw_id: str):
    record_id = _parse_id(raw_id)
    if record_id is None:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": NOT_FOUND_ERROR})

    try:
        row = await query(record_id)
    except Exception:
        logger.exception("report_lookup_failed id=%s", record_id)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": f"{FETCH_ERROR}."},
        )

    if row is None:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": NOT_FOUND_ERROR})
    return JSONResponse(content=jsonable_encoder(row))


@router.get("/display-data", response_class=HTMLResponse)
async def display_data(
    request: Request,
    current_user: dict = Depends(auth_dependencies.require_session),
):
    return await _render_rows(
        request,
        "data.html",
        "data",
        repository.list_msv_visits,
        username=current_user.get("username"),
    )


@router.get("/display-data/{record_id}")
async def display_data_row(
    record_id: str,
    _: dict = Depends(auth_dependencies.require_session),
):
    return await _row_json(repository.get_msv_visit, record_id)


@router.get("/display-charts", response_class=HTMLResponse)
async def display_charts(
    request: Request,
    _: dict = Depends(auth_dependencies.require_session),
):
    return await _render_rows(
        request,
        "dynamicchart.html",
        "chart",
        repository.list_msv_visits,
        title="Monitoring visits",
    )


@router.get("/submission-table", response_class=HTMLResponse)
async def submission_table(request: Request):
    return await _render_rows(request, "submission.html", "data", repository.list_client_submissions)


@router.get("/submission-table/{record_id}")
async def submission_table_row(record_id: str):
    return await _row_json(repository.get_client_submission, record_id)


@router.get("/submission-charts", response_class=HTMLResponse)
async def submission_charts(request: Request):
    return await _render_rows(
        request,
        "dynamicchart.html",
        "chart",
        repository.list_client_submissions,
        title="Client submissions",
    )


@router.get("/attendance-table", response_class=HTMLResponse)
async def attendance_table(request: Request):
    return await _render_rows(request, "attendance.html", "data", repository.list_attendance)
