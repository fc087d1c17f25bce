"""FastAPI application entry point — wires everything together.

Usage:
    python -m src.main

Serves quote exports and tour pricing over HTTP.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI

from src.api.routes import router
from src.config import settings
from src.document.images import ImageFetcher
from src.document.renderer import PdfRenderer
from src.store.firestore import FirestoreStore, create_firestore_client

# ── Logging setup ────────────────────────────────────────────────────

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    stream=sys.stdout,
)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = logging.getLogger(__name__)

# ── FastAPI lifespan ─────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle."""
    logger.info("Starting %s quote service (env=%s)", settings.branding.company_name, settings.environment)

    # 1. Document store (only if Firebase credentials are configured)
    store: FirestoreStore | None = None
    if settings.firebase.enabled:
        store = FirestoreStore(create_firestore_client())
        logger.info("Firestore store initialized")
    else:
        logger.warning("FIREBASE_CREDENTIALS_PATH not set — quote and tour routes will return 503")
    app.state.store = store

    # 2. Rendering collaborators
    app.state.renderer = PdfRenderer()
    app.state.fetcher = ImageFetcher()

    try:
        yield
    finally:
        logger.info("Shutting down quote service...")
        if store is not None:
            await store.close()
            logger.info("Document store closed")

    logger.info("Quote service shutdown complete")


# ── FastAPI app ──────────────────────────────────────────────────────

app = FastAPI(
    title="Serengeti Quotes API",
    description="Quote PDF export and tour pricing for serengetinexus.com",
    version="0.1.0",
    lifespan=lifespan,
)
app.include_router(router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "environment": settings.environment,
        "company": settings.branding.company_name,
    }


# ── Entry point ──────────────────────────────────────────────────────

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
