"""Application factory and CLI entry point.

``create_app()`` builds the FastAPI application with:
  - Lifespan handler that loads rulesets and builds the conversation registry once
  - CORS middleware
  - Global exception handlers (InvalidChoice → 400, SDK ValueError → 404/409/429/400)
  - All API routes mounted under ``/api/v1``
  - A ``/health`` endpoint for readiness probes

The ``cli()`` function is the ``triage-server`` console-script entry point.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from symptom_triage.directory import InMemoryDirectory
from symptom_triage.errors import InvalidChoice
from symptom_triage.ruleset import RulesetStore

from triage_server.config import ServerSettings, load_settings
from triage_server.conversations import ConversationRegistry
from triage_server.errors import (
    generic_error_handler,
    invalid_choice_handler,
    key_error_handler,
    value_error_handler,
)
from triage_server.routes import register_routes

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Lifespan — runs once at startup/shutdown
# ------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialise shared resources at startup, drop them on shutdown.

    Startup:
      1. Load and validate YAML rulesets into a ``RulesetStore``
      2. Build the ``ConversationRegistry`` and the doctor directory
      3. Stash them on ``app.state`` for dependency injection
    """
    settings: ServerSettings = app.state.settings

    store = RulesetStore(ruleset_dir=settings.ruleset_dir)
    store.load()
    logger.info("RulesetStore loaded successfully")

    app.state.store = store
    app.state.registry = ConversationRegistry(
        store,
        max_per_user=settings.max_conversations_per_user,
        ttl_seconds=settings.conversation_ttl_seconds,
    )
    app.state.directory = InMemoryDirectory(store.doctors)

    yield

    logger.info("Shutting down with %d open conversations", len(app.state.registry))


# ------------------------------------------------------------------
# Factory
# ------------------------------------------------------------------

def create_app(settings: ServerSettings | None = None) -> FastAPI:
    """Build and return the configured FastAPI application."""
    if settings is None:
        settings = load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="Symptom Triage API Server",
        description="REST API for guided triage, free-text symptom classification and doctor hand-off",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store settings so the lifespan handler can read them
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(InvalidChoice, invalid_choice_handler)
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(KeyError, key_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    @app.get("/health")
    def health() -> dict:
        """Readiness probe — reports whether the rulesets are loaded."""
        store = getattr(app.state, "store", None)
        if store is None or store.tree is None:
            return {"status": "error", "detail": "rulesets not loaded"}
        return {"status": "ok", "nodes": len(store.tree.nodes), "rules": len(store.rules)}

    register_routes(app)

    return app


# ------------------------------------------------------------------
# Module-level ASGI export (for uvicorn triage_server.app:app)
# ------------------------------------------------------------------
app = create_app()


# ------------------------------------------------------------------
# CLI entry point
# ------------------------------------------------------------------

def cli() -> None:
    """Console-script entry point: ``triage-server``."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "triage_server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )
