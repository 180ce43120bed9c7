"""Library Back Office API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map LibraryError -> problem-details responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: cleanup runs in the same function as startup
    - Error handlers live in api/error_handlers.py; this module only wires things together
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from backoffice.api.error_handlers import register_error_handlers
from backoffice.api.routes import (
    alerts, audit, books, categories, dashboard, fines, health, import_export,
    librarians, members, notifications, reports, reservations, reviews, search,
    statistics, transactions,
)
from backoffice.config import get_settings
from backoffice.infrastructure import database
from backoffice.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Library back office API started")
    yield
    logger.info("Library back office API shutting down")
    if database.db_manager is not None:
        await database.db_manager.dispose()


app = FastAPI(
    title="Library Back Office API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(books.router)
app.include_router(categories.router)
app.include_router(members.router)
app.include_router(librarians.router)
app.include_router(transactions.router)
app.include_router(reservations.router)
app.include_router(fines.router)
app.include_router(reviews.router)
app.include_router(notifications.router)
app.include_router(alerts.router)
app.include_router(audit.router)
app.include_router(reports.router)
app.include_router(import_export.router)
app.include_router(dashboard.router)
app.include_router(statistics.router)
app.include_router(search.router)

register_error_handlers(app)

# Mounted after the API routers so /api/v1/* takes precedence;
# html=True serves index.html for unknown paths (SPA fallback)
if os.path.isdir("static"):
    app.mount("/", StaticFiles(directory="static", html=True), name="static")
