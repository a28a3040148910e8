"""
darkroom.api.main — FastAPI application entry point
====================================================

Read-only JSON view of the bot's store (leaderboards, challenges,
winners).  Run with::

    uvicorn darkroom.api.main:app --port 8000
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

load_dotenv()

from darkroom import __version__  # noqa: E402
from darkroom.api.deps import get_engine  # noqa: E402
from darkroom.api.routes.public import router as public_router  # noqa: E402

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle — warm the DB engine."""
    engine = get_engine()
    logger.info("Darkroom API started — engine ready (%s)", engine.url.database)
    yield
    logger.info("Darkroom API shutting down")


app = FastAPI(
    title="Darkroom API",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(public_router, prefix="/api")


@app.get("/api/health")
def health():
    return {"status": "ok"}
