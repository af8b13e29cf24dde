"""
Process-wide logging setup.
"""

from __future__ import annotations

import logging

from . import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str | None = None) -> None:
    logging.basicConfig(level=level or settings.log_level(), format=LOG_FORMAT)
    # httpx logs every request at INFO; the sync jobs log their own fetches.
    logging.getLogger("httpx").setLevel(logging.WARNING)
