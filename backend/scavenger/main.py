"""Scavenger Integrity API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ScavengerError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Store and Directories built on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - The SQL schema is created on startup only when create_schema_on_startup is
      set; deployments that run Alembic turn it off
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scavenger.api.error_handlers import register_error_handlers
from scavenger.api.routes import artifacts, health, integrity, sessions, teams, users
from scavenger.config import get_settings
from scavenger.infrastructure.observability import setup_logging
from scavenger.infrastructure.sql_store import SqlKeyValueStore
from scavenger.infrastructure.store_factory import build_store
from scavenger.services.directories import init_directories

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    store = build_store(settings)
    if isinstance(store, SqlKeyValueStore) and settings.create_schema_on_startup:
        await store.manager.create_schema()
    init_directories(
        store,
        namespace=settings.store_namespace,
        serialize=settings.serialize_writes,
    )
    logger.info("Scavenger Integrity API started")
    yield
    if isinstance(store, SqlKeyValueStore):
        await store.manager.dispose()
    logger.info("Scavenger Integrity API shutting down")


app = FastAPI(
    title="Scavenger Integrity API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(users.router)
app.include_router(sessions.router)
app.include_router(teams.router)
app.include_router(artifacts.router)
app.include_router(integrity.router)

register_error_handlers(app)
