"""
darkroom.services.moderation_service — Infraction Log
======================================================

The insert and the re-count run as two statements.  A crash in between
leaves an infraction that no warning was issued for; that gap is accepted.
"""

from __future__ import annotations

import logging

from sqlalchemy import Engine, func, select

from darkroom.database.engine import get_session
from darkroom.database.models import Infraction

logger = logging.getLogger(__name__)


def record_infraction(engine: Engine, user_id: int, space_id: int, message: str) -> int:
    """Store one infraction and return the user's total in *space_id*."""
    with get_session(engine) as session:
        session.add(Infraction(user_id=user_id, space_id=space_id, message=message))

    total = count_infractions(engine, user_id, space_id)
    logger.info("Infraction #%d recorded for user %s in guild %s", total, user_id, space_id)
    return total


def count_infractions(engine: Engine, user_id: int, space_id: int) -> int:
    with get_session(engine) as session:
        return session.scalar(
            select(func.count(Infraction.id)).where(
                Infraction.user_id == user_id, Infraction.space_id == space_id
            )
        ) or 0


def top_offenders(engine: Engine, space_id: int, limit: int = 10) -> list[tuple[int, int]]:
    """``(user_id, total)`` pairs for *space_id*, worst first."""
    total = func.count(Infraction.id).label("total")
    with get_session(engine) as session:
        rows = session.execute(
            select(Infraction.user_id, total)
            .where(Infraction.space_id == space_id)
            .group_by(Infraction.user_id)
            .order_by(total.desc())
            .limit(limit)
        ).all()
    return [(r[0], r[1]) for r in rows]
