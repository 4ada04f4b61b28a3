"""Route registration — mounts all routers under ``/api/v1``."""

from fastapi import FastAPI

from triage_server.routes.chat import router as chat_router
from triage_server.routes.conversations import router as conversations_router
from triage_server.routes.doctors import router as doctors_router
from triage_server.routes.reference import router as reference_router

API_PREFIX = "/api/v1"


def register_routes(app: FastAPI) -> None:
    """Include all sub-routers under the versioned API prefix."""
    app.include_router(conversations_router, prefix=API_PREFIX)
    app.include_router(chat_router, prefix=API_PREFIX)
    app.include_router(doctors_router, prefix=API_PREFIX)
    app.include_router(reference_router, prefix=API_PREFIX)
