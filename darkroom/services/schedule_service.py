"""
darkroom.services.schedule_service — Daily Greeting Configuration
==================================================================
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import Engine, select, update
from sqlalchemy.dialects.sqlite import insert

from darkroom.database.engine import get_session
from darkroom.database.models import DEFAULT_GM_MESSAGE, BotChannel, utcnow

logger = logging.getLogger(__name__)


def set_scheduled_message(
    engine: Engine,
    space_id: int,
    channel_id: int,
    text: str | None = None,
) -> BotChannel:
    """Enable the daily greeting for *channel_id*.

    A non-empty *text* replaces the channel's message; otherwise the
    existing (or default) message is kept.
    """
    text = (text or "").strip()
    values: dict = {
        "space_id": space_id,
        "channel_id": channel_id,
        "cron_enabled": True,
        "scheduled_message": text or DEFAULT_GM_MESSAGE,
    }
    stmt = insert(BotChannel).values(**values)
    set_: dict = {"cron_enabled": True}
    if text:
        set_["scheduled_message"] = stmt.excluded.scheduled_message
    stmt = stmt.on_conflict_do_update(index_elements=[BotChannel.channel_id], set_=set_)

    with get_session(engine) as session:
        session.execute(stmt)
        channel = session.scalar(
            select(BotChannel).where(BotChannel.channel_id == channel_id)
        )
    logger.info("Daily greeting enabled for channel %s", channel_id)
    return channel


def disable_channel(engine: Engine, channel_id: int) -> bool:
    """Turn the greeting off.  Returns False if the channel was never set up."""
    with get_session(engine) as session:
        result = session.execute(
            update(BotChannel)
            .where(BotChannel.channel_id == channel_id)
            .values(cron_enabled=False)
        )
        return bool(result.rowcount)


def get_enabled_channels(engine: Engine) -> list[BotChannel]:
    with get_session(engine) as session:
        return list(session.scalars(
            select(BotChannel).where(BotChannel.cron_enabled.is_(True)).order_by(BotChannel.id)
        ).all())


def mark_posted(engine: Engine, channel_id: int, at: datetime | None = None) -> None:
    with get_session(engine) as session:
        session.execute(
            update(BotChannel)
            .where(BotChannel.channel_id == channel_id)
            .values(last_cron_post=at or utcnow())
        )
