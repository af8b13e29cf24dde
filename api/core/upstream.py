"""
HTTP client for the upstream survey-collection APIs.

Each source is a single form-data export URL (KoboToolbox style). A GET
returns either a bare JSON array of submissions or the paginated envelope
`{"count": ..., "results": [...]}`; only the first page is read.
"""

from __future__ import annotations

from typing import Any

import httpx


# Upstream failures are explicit and separable from database errors.
class UpstreamError(RuntimeError):
    pass


def _normalize_url(url: str) -> str:
    url = (url or "").strip()
    if not url:
        raise UpstreamError("Upstream API URL is not configured.")
    return url


async def fetch_records(
    url: str,
    *,
    timeout_s: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[Any]:
    """
    GET `url` and return the submissions it lists, exactly as received.
    """
    url = _normalize_url(url)

    try:
        async with httpx.AsyncClient(timeout=timeout_s, transport=transport) as client:
            resp = await client.get(url)
    except httpx.HTTPError as exc:
        raise UpstreamError(f"Upstream request failed: {exc}") from exc

    if resp.status_code != 200:
        # Avoid dumping huge bodies; include a small snippet.
        body = resp.text[:500]
        raise UpstreamError(f"Upstream request failed: {resp.status_code} {body}")

    try:
        data: Any = resp.json()
    except ValueError as exc:
        raise UpstreamError("Upstream returned a non-JSON body.") from exc

    if isinstance(data, dict) and isinstance(data.get("results"), list):
        data = data["results"]

    if not isinstance(data, list):
        raise UpstreamError("Upstream did not return a JSON array of records.")

    return data
