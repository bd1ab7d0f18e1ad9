from __future__ import annotations
from fastapi import FastAPI

from .config import require_auth_settings
from .database import ensure_schema, get_session
from .errors import install_error_handlers
from .routers import startups, users

__all__ = ["app", "get_session"]

app = FastAPI(title="Startup Directory API")
install_error_handlers(app)
app.include_router(users.router)
app.include_router(startups.router)


@app.on_event("startup")
def on_startup():
    # Refuse to serve without a signing secret.
    require_auth_settings()
    ensure_schema()


@app.get("/hello")
def hello():
    return {"message": "hello"}
