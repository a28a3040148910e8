"""
darkroom.database.engine — Database Connection & Async Helper
==============================================================

Discord bots run on an ``asyncio`` event loop while SQLAlchemy (and the
``web3`` client) are **synchronous**.  Calling either directly from a cog
would freeze the gateway until the call returns, so every blocking call is
shipped to a worker thread:

    1. An event fires in Discord  (async world).
    2. The Cog calls ``await run_db(some_function, arg1, arg2)``.
    3. ``run_db`` hands the function to ``asyncio.to_thread()``.
    4. The result is awaited back in the Cog, which can then reply.

Usage::

    from darkroom.database.engine import create_db_engine, init_db, run_db

    engine = create_db_engine()          # reads DATABASE_PATH from .env
    init_db(engine)                      # CREATE TABLE IF NOT EXISTS …

    # Inside an async Cog method:
    rows = await run_db(get_leaderboard, engine, guild_id)
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from contextlib import contextmanager
from typing import ParamSpec, TypeVar

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from darkroom.database.models import Base

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

DEFAULT_DATABASE_PATH = "./darkroom.db"


# ---------------------------------------------------------------------------
# Engine creation
# ---------------------------------------------------------------------------
def create_db_engine(path: str | None = None) -> Engine:
    """Build a SQLAlchemy :class:`Engine` for the embedded SQLite store.

    The file location comes from *path*, then the ``DATABASE_PATH`` env
    var, then ``./darkroom.db``.  ``check_same_thread`` is disabled because
    :func:`run_db` executes queries on pool threads.
    """
    db_path = path or os.getenv("DATABASE_PATH") or DEFAULT_DATABASE_PATH
    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,        # Set True for SQL debugging
        connect_args={"check_same_thread": False},
    )
    logger.info("Database engine created → %s", db_path)
    return engine


# ---------------------------------------------------------------------------
# Schema initialization
# ---------------------------------------------------------------------------
def init_db(engine: Engine) -> None:
    """Create all tables defined in :mod:`darkroom.database.models`.

    Safe to call on every startup — ``CREATE TABLE IF NOT EXISTS`` under
    the hood.  There are no versioned migrations.
    """
    Base.metadata.create_all(engine)
    logger.info("Database tables verified / created.")


# ---------------------------------------------------------------------------
# Session helper
# ---------------------------------------------------------------------------
@contextmanager
def get_session(engine: Engine):
    """Yield a :class:`Session` that auto-commits on success and rolls back
    on exception.
    """
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ---------------------------------------------------------------------------
# Async bridge
# ---------------------------------------------------------------------------
async def run_db(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """Run a **synchronous** function on a background thread.

    Every store query and every chain call in a Cog goes through here::

        result = await run_db(my_sync_function, engine, user_id)
    """
    return await asyncio.to_thread(func, *args, **kwargs)
