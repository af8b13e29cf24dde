"""
FastAPI router for the ingest endpoints.

Each GET pulls one upstream source and stores the submissions it has not
seen yet.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from . import mappings, service

logger = logging.getLogger(__name__)

router = APIRouter()

SUCCESS_MESSAGE = "Data fetched and stored successfully"


async def _run(spec: mappings.SourceSpec):
    try:
        result = await service.run_sync(spec)
    except Exception as exc:
        logger.exception("sync_failed source=%s", spec.name)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc) or exc.__class__.__name__},
        )

    return {
        "message": SUCCESS_MESSAGE,
        "data": result.data,
        "inserted": result.inserted,
        "skipped": result.skipped,
    }


@router.get("/fetch-data")
async def fetch_msv_data():
    """
    Pull monitoring/supervision visit submissions into MSVTable.
    """
    return await _run(mappings.MSV)


@router.get("/submission-data")
async def fetch_client_submissions():
    """
    Pull client exit-interview submissions into ClientsTable.
    """
    return await _run(mappings.CLIENTS)


@router.get("/attendance-data")
async def fetch_attendance():
    """
    Pull attendance sheets into attendance_records.

    Sheets without any participant entries are skipped.
    """
    return await _run(mappings.ATTENDANCE)
