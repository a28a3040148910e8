"""
darkroom.api.routes.public — Read-only public endpoints
========================================================
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from darkroom.api.deps import EngineDep
from darkroom.services.challenge_service import (
    as_utc,
    days_left,
    get_active_challenge,
    get_recent_winners,
)
from darkroom.services.stats_service import LEADERBOARD_SIZE, get_leaderboard

router = APIRouter(tags=["public"])


# ---------------------------------------------------------------------------
# GET /spaces/{space_id}/leaderboard
# ---------------------------------------------------------------------------
@router.get("/spaces/{space_id}/leaderboard")
def leaderboard(
    space_id: int,
    engine: EngineDep,
    limit: int = Query(LEADERBOARD_SIZE, ge=1, le=100),
):
    """Members of a guild ranked by message count."""
    rows = get_leaderboard(engine, space_id, limit)
    return {
        "space_id": str(space_id),
        "users": [
            {
                "rank": r.rank,
                "user_id": str(r.user_id),
                "message_count": r.message_count,
                "reaction_count": r.reaction_count,
            }
            for r in rows
        ],
    }


# ---------------------------------------------------------------------------
# GET /spaces/{space_id}/challenge
# ---------------------------------------------------------------------------
@router.get("/spaces/{space_id}/challenge")
def current_challenge(space_id: int, engine: EngineDep):
    challenge = get_active_challenge(engine, space_id)
    if challenge is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "No active challenge")
    return {
        "id": challenge.id,
        "theme": challenge.theme,
        "channel_id": str(challenge.channel_id),
        "start_time": as_utc(challenge.start_time).isoformat(),
        "end_time": as_utc(challenge.end_time).isoformat(),
        "days_left": days_left(challenge.end_time),
    }


# ---------------------------------------------------------------------------
# GET /winners
# ---------------------------------------------------------------------------
@router.get("/winners")
def winners(engine: EngineDep, limit: int = Query(5, ge=1, le=50)):
    """Hall of fame, newest first.

    ``prize_amount`` is in token base units, sent as a string because a
    uint256 does not survive a JSON number.
    """
    return {
        "winners": [
            {
                "user_id": str(w.user_id),
                "theme": w.theme,
                "prize_amount": str(w.prize_amount),
                "paid": w.paid,
                "reaction_count": w.reaction_count,
                "timestamp": w.timestamp.isoformat(),
            }
            for w in get_recent_winners(engine, limit)
        ],
    }
