"""Voting API — FastAPI application wiring.

Invariants:
    - Routers are included explicitly, one per concern
    - VotingError, validation errors and unexpected exceptions all leave as
      the same JSON error envelope
    - The election store is opened in the lifespan and closed on shutdown

Design Decisions:
    - Lifespan context manager over @app.on_event
    - Tables are created at startup only when DATABASE_CREATE_TABLES is true;
      Postgres deployments run alembic
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from voting.api.error_handlers import register_error_handlers
from voting.api.routes import (
    election_lifecycle, election_results, election_workflow, health,
)
from voting.config import get_settings
from voting.infrastructure.database import open_store
from voting.infrastructure.observability import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    store = open_store(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_create_tables:
        await store.ensure_schema()
    logger.info("Voting API ready")
    try:
        yield
    finally:
        await store.close()
        logger.info("Voting API stopped")


def create_app() -> FastAPI:
    application = FastAPI(title="Voting API", version="1.0.0", lifespan=lifespan)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(application)
    for router in (
        health.router,
        election_lifecycle.router,
        election_workflow.router,
        election_results.router,
    ):
        application.include_router(router)
    return application


app = create_app()
