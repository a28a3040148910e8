"""
darkroom.api.deps — FastAPI dependency injection
=================================================
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy import Engine

from darkroom.database.engine import create_db_engine, init_db


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    engine = create_db_engine()
    init_db(engine)
    return engine


EngineDep = Annotated[Engine, Depends(get_engine)]
