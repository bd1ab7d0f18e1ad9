from __future__ import annotations

"""FastAPI application entrypoint.

Run locally with ``uvicorn app.main:app --reload``. Logging is configured
here so that importing :mod:`app.api` from tests leaves it untouched.
"""

import logging

from .api import app as app  # re-use existing API routes
from .config import get_log_level


def configure_logging() -> None:
    level = get_log_level()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )


configure_logging()
