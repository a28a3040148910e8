"""
darkroom.services.stats_service — Engagement Counters & Leaderboard
====================================================================

Every message and reaction bumps a per-(user, guild) counter with a single
atomic SQLite upsert, so concurrent events never lose an increment and no
in-memory cache is needed.  All functions are synchronous; cogs call them
through ``run_db``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Engine, select
from sqlalchemy.dialects.sqlite import insert

from darkroom.database.engine import get_session
from darkroom.database.models import UserStat, utcnow

logger = logging.getLogger(__name__)

LEADERBOARD_SIZE = 10


@dataclass(frozen=True, slots=True)
class LeaderboardRow:
    rank: int
    user_id: int
    message_count: int
    reaction_count: int


def _bump(engine: Engine, user_id: int, space_id: int, column: str, at: datetime | None) -> None:
    now = at or utcnow()
    counter = getattr(UserStat, column)
    stmt = insert(UserStat).values(
        user_id=user_id,
        space_id=space_id,
        message_count=1 if column == "message_count" else 0,
        reaction_count=1 if column == "reaction_count" else 0,
        last_active=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[UserStat.user_id, UserStat.space_id],
        set_={column: counter + 1, "last_active": stmt.excluded.last_active},
    )
    with get_session(engine) as session:
        session.execute(stmt)


def record_message(engine: Engine, user_id: int, space_id: int, at: datetime | None = None) -> None:
    """Count one message for *user_id* in *space_id*."""
    _bump(engine, user_id, space_id, "message_count", at)


def record_reaction(engine: Engine, user_id: int, space_id: int, at: datetime | None = None) -> None:
    """Count one reaction for *user_id* in *space_id*."""
    _bump(engine, user_id, space_id, "reaction_count", at)


def get_user_stat(engine: Engine, user_id: int, space_id: int) -> UserStat | None:
    with get_session(engine) as session:
        return session.get(UserStat, (user_id, space_id))


def get_leaderboard(engine: Engine, space_id: int, limit: int = LEADERBOARD_SIZE) -> list[LeaderboardRow]:
    """Top members of *space_id* by message count.

    Ties keep the store's natural row order.
    """
    with get_session(engine) as session:
        rows = session.execute(
            select(UserStat.user_id, UserStat.message_count, UserStat.reaction_count)
            .where(UserStat.space_id == space_id)
            .order_by(UserStat.message_count.desc())
            .limit(limit)
        ).all()
    return [
        LeaderboardRow(rank=i, user_id=r[0], message_count=r[1], reaction_count=r[2])
        for i, r in enumerate(rows, 1)
    ]
