"""
darkroom.bot.cogs.tasks — Scheduled Jobs
=========================================

Two ``discord.ext.tasks`` loops pinned to UTC wall-clock times:

- **Daily greeting** — every day at ``greeting_hour`` posts each enabled
  channel's gm and stamps ``last_cron_post``.  Running it twice posts twice.
- **Weekly resolution** — fires daily at ``resolution_hour`` but only acts
  on ``resolution_weekday``; resolves every challenge whose window closed.

Each channel / challenge is handled in its own try block so one failure
cannot abort the batch.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, time
from typing import TYPE_CHECKING

from discord.ext import commands, tasks

from darkroom.database.engine import run_db
from darkroom.services.resolution_service import resolve_channel, resolve_expired
from darkroom.services.schedule_service import get_enabled_channels, mark_posted

if TYPE_CHECKING:
    from darkroom.bot.core import DarkroomBot

logger = logging.getLogger(__name__)


class ScheduledJobs(commands.Cog):
    """Daily greeting and weekly challenge resolution."""

    def __init__(self, bot: DarkroomBot) -> None:
        self.bot = bot

    async def cog_load(self) -> None:
        """Pin the loops to the configured hours and start them."""
        cfg = self.bot.cfg
        self.greeting_loop.change_interval(time=time(hour=cfg.greeting_hour, tzinfo=UTC))
        self.resolution_loop.change_interval(time=time(hour=cfg.resolution_hour, tzinfo=UTC))
        self.greeting_loop.start()
        self.resolution_loop.start()

    async def cog_unload(self) -> None:
        self.greeting_loop.cancel()
        self.resolution_loop.cancel()

    # -------------------------------------------------------------------
    # Daily greeting
    # -------------------------------------------------------------------
    async def post_greetings(self) -> int:
        """Send every enabled channel its greeting.  Returns how many went out."""
        channels = await run_db(get_enabled_channels, self.bot.engine)
        sent = 0
        for row in channels:
            try:
                channel = await resolve_channel(self.bot, row.channel_id)
                if channel is None:
                    continue
                await channel.send(row.scheduled_message or self.bot.cfg.default_gm_message)
                await run_db(mark_posted, self.bot.engine, row.channel_id)
                sent += 1
            except Exception:
                logger.exception(
                    "Greeting failed for channel %s", row.channel_id,
                    extra={"task": "greeting"},
                )
        logger.info("Daily greeting posted to %d/%d channels", sent, len(channels))
        return sent

    @tasks.loop(time=time(hour=9, tzinfo=UTC))
    async def greeting_loop(self):
        await self.post_greetings()

    @greeting_loop.before_loop
    async def _wait_greeting(self):
        await self.bot.wait_until_ready()

    # -------------------------------------------------------------------
    # Weekly challenge resolution
    # -------------------------------------------------------------------
    async def run_weekly_resolution(self, now: datetime | None = None) -> int:
        now = now or datetime.now(UTC)
        if now.weekday() != self.bot.cfg.resolution_weekday:
            return 0
        logger.info("Running weekly challenge results…")
        resolved = await resolve_expired(self.bot)
        logger.info("Weekly resolution complete: %d challenge(s) closed", resolved)
        return resolved

    @tasks.loop(time=time(hour=23, tzinfo=UTC))
    async def resolution_loop(self):
        try:
            await self.run_weekly_resolution()
        except Exception:
            logger.exception("Weekly resolution failed", extra={"task": "resolution"})

    @resolution_loop.before_loop
    async def _wait_resolution(self):
        await self.bot.wait_until_ready()


async def setup(bot: DarkroomBot) -> None:
    await bot.add_cog(ScheduledJobs(bot))
