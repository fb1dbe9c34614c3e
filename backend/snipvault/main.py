"""SnipVault API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map SnipVaultError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - One SnippetEngine per process: seeded on startup, flushed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Engine stored on app.state and reached through the get_engine dependency
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from snipvault.api.error_handlers import register_error_handlers
from snipvault.api.routes import health, snippets, transfer
from snipvault.config import Settings, get_settings
from snipvault.infrastructure.database import init_db
from snipvault.infrastructure.kv_medium import SqlKeyValueMedium
from snipvault.infrastructure.observability import setup_logging
from snipvault.services.persistent_store import SnippetPersistence
from snipvault.services.snippet_engine import SnippetEngine

logger = logging.getLogger(__name__)


async def build_engine(settings: Settings) -> SnippetEngine:
    """Open the SQL-backed store and seed the engine from it."""
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    await manager.create_schema()
    medium = SqlKeyValueMedium(manager, quota_bytes=settings.store_quota_bytes)
    return await SnippetEngine.open(
        SnippetPersistence(medium, settings.store_key),
        debounce_seconds=settings.persist_debounce_ms / 1000,
        strict_actions=settings.strict_actions,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    engine = await build_engine(settings)
    app.state.engine = engine
    logger.info("SnipVault API started")
    yield
    await engine.close()
    await engine.dispose()
    logger.info("SnipVault API shut down")


app = FastAPI(title="SnipVault API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(snippets.router)
app.include_router(transfer.router)

register_error_handlers(app)
