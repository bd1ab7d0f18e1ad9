from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session

from .config import get_engine

logger = logging.getLogger(__name__)

# URLs whose tables have already been created in this process.
_ready_urls: set[str] = set()
engine: Engine | None = None


def _resolve_engine() -> Engine:
    global engine
    if engine is None:
        engine = get_engine()
    return engine


def ensure_schema(target: Engine | None = None) -> None:
    """Create any missing tables, once per URL.

    Column changes to existing tables go through the alembic revisions in
    ``migrations/``.
    """
    resolved = target or _resolve_engine()
    url = resolved.url.render_as_string(hide_password=True)
    if url in _ready_urls:
        return
    SQLModel.metadata.create_all(resolved)
    logger.info("Schema ready on %s", url)
    _ready_urls.add(url)


def get_session() -> Iterator[Session]:
    """FastAPI dependency yielding one session per request."""
    ensure_schema()
    with Session(_resolve_engine()) as session:
        yield session


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session for scripts running outside a request."""
    ensure_schema()
    with Session(_resolve_engine()) as session:
        yield session
