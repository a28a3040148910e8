"""
darkroom.services.challenge_service — Photo Challenge Store Operations
=======================================================================

Synchronous queries behind the weekly photo challenge.  The async
resolution flow (payout + announcement) lives in
:mod:`darkroom.services.resolution_service`.

Note: nothing here enforces "one active challenge per guild".  Starting a
second challenge while one is running simply adds another active row.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy import Engine, select, update

from darkroom.database.engine import get_session
from darkroom.database.models import (
    Challenge,
    ChallengeEntry,
    ChallengeWinner,
    utcnow,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WinnerRow:
    user_id: int
    theme: str | None
    prize_amount: int
    reaction_count: int
    timestamp: datetime
    paid: bool = True


def as_utc(value: datetime) -> datetime:
    """SQLite hands datetimes back naive; they were stored as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def days_left(end_time: datetime, now: datetime | None = None) -> int:
    """Whole days until *end_time*, rounded up."""
    now = now or utcnow()
    remaining = (as_utc(end_time) - as_utc(now)).total_seconds()
    return math.ceil(remaining / 86400)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------
def start_challenge(
    engine: Engine,
    space_id: int,
    channel_id: int,
    theme: str,
    duration_days: int = 7,
    now: datetime | None = None,
) -> Challenge:
    """Open a new active challenge lasting *duration_days* from *now*."""
    start = now or utcnow()
    with get_session(engine) as session:
        challenge = Challenge(
            space_id=space_id,
            channel_id=channel_id,
            theme=theme,
            start_time=start,
            end_time=start + timedelta(days=duration_days),
            active=True,
        )
        session.add(challenge)
        session.flush()
    logger.info("Challenge %d started in guild %s: %r", challenge.id, space_id, theme)
    return challenge


def get_active_challenge(engine: Engine, space_id: int) -> Challenge | None:
    with get_session(engine) as session:
        return session.scalar(
            select(Challenge)
            .where(Challenge.space_id == space_id, Challenge.active.is_(True))
            .order_by(Challenge.id)
            .limit(1)
        )


def get_active_challenges(engine: Engine, space_id: int) -> list[Challenge]:
    with get_session(engine) as session:
        return list(session.scalars(
            select(Challenge)
            .where(Challenge.space_id == space_id, Challenge.active.is_(True))
            .order_by(Challenge.id)
        ).all())


def get_expired_challenges(engine: Engine, now: datetime | None = None) -> list[Challenge]:
    """Active challenges whose window has closed, across every guild."""
    now = now or utcnow()
    with get_session(engine) as session:
        return list(session.scalars(
            select(Challenge)
            .where(Challenge.active.is_(True), Challenge.end_time <= now)
            .order_by(Challenge.id)
        ).all())


def end_challenges(engine: Engine, space_id: int) -> int:
    """Flip every active challenge of *space_id* to inactive."""
    with get_session(engine) as session:
        result = session.execute(
            update(Challenge)
            .where(Challenge.space_id == space_id, Challenge.active.is_(True))
            .values(active=False)
        )
        return result.rowcount or 0


def deactivate_challenge(engine: Engine, challenge_id: int) -> None:
    with get_session(engine) as session:
        session.execute(
            update(Challenge).where(Challenge.id == challenge_id).values(active=False)
        )


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------
def record_entry(engine: Engine, challenge_id: int, user_id: int, message_id: int) -> ChallengeEntry:
    with get_session(engine) as session:
        entry = ChallengeEntry(
            challenge_id=challenge_id, user_id=user_id, message_id=message_id
        )
        session.add(entry)
        session.flush()
    return entry


def add_entry_reaction(engine: Engine, message_id: int) -> int:
    """Count a reaction on any entry posted as *message_id*.

    The match is by message id alone, not scoped to a challenge or channel.
    Returns the number of entries touched.
    """
    with get_session(engine) as session:
        result = session.execute(
            update(ChallengeEntry)
            .where(ChallengeEntry.message_id == message_id)
            .values(reaction_count=ChallengeEntry.reaction_count + 1)
        )
        return result.rowcount or 0


def get_top_entry(engine: Engine, challenge_id: int) -> ChallengeEntry | None:
    """The entry with the most reactions; ties fall to row order."""
    with get_session(engine) as session:
        return session.scalar(
            select(ChallengeEntry)
            .where(ChallengeEntry.challenge_id == challenge_id)
            .order_by(ChallengeEntry.reaction_count.desc())
            .limit(1)
        )


# ---------------------------------------------------------------------------
# Winners
# ---------------------------------------------------------------------------
def record_winner(
    engine: Engine,
    challenge_id: int,
    user_id: int,
    reaction_count: int,
    prize_amount: int,
    paid: bool = True,
) -> ChallengeWinner:
    with get_session(engine) as session:
        winner = ChallengeWinner(
            challenge_id=challenge_id,
            user_id=user_id,
            reaction_count=reaction_count,
            prize_amount=prize_amount,
            paid=paid,
        )
        session.add(winner)
        session.flush()
    return winner


def get_recent_winners(engine: Engine, limit: int = 5) -> list[WinnerRow]:
    """Newest winners first, with the theme of the challenge they won."""
    with get_session(engine) as session:
        rows = session.execute(
            select(
                ChallengeWinner.user_id,
                Challenge.theme,
                ChallengeWinner.prize_amount,
                ChallengeWinner.reaction_count,
                ChallengeWinner.timestamp,
                ChallengeWinner.paid,
            )
            .outerjoin(Challenge, ChallengeWinner.challenge_id == Challenge.id)
            .order_by(ChallengeWinner.timestamp.desc(), ChallengeWinner.id.desc())
            .limit(limit)
        ).all()
    return [
        WinnerRow(
            user_id=r[0],
            theme=r[1],
            prize_amount=r[2],
            reaction_count=r[3],
            timestamp=as_utc(r[4]),
            paid=bool(r[5]),
        )
        for r in rows
    ]
