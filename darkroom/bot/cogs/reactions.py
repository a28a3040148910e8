"""
darkroom.bot.cogs.reactions — Reaction Tracking
================================================

Listens for ``on_raw_reaction_add`` (raw so reactions on uncached messages
still count) and:

- bumps ``reaction_count`` on any challenge entry posted as that message,
- counts the reaction toward the reactor's engagement stats.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from darkroom.database.engine import run_db
from darkroom.services.challenge_service import add_entry_reaction
from darkroom.services.stats_service import record_reaction

if TYPE_CHECKING:
    from darkroom.bot.core import DarkroomBot

logger = logging.getLogger(__name__)


class Reactions(commands.Cog, name="Reactions"):
    """Counts reactions for stats and challenge entries."""

    def __init__(self, bot: DarkroomBot) -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_raw_reaction_add(self, payload: discord.RawReactionActionEvent) -> None:
        try:
            await self._handle_reaction(payload)
        except Exception:
            logger.exception(
                "Error processing reaction on message %s from user %s",
                payload.message_id, payload.user_id,
            )

    async def _handle_reaction(self, payload: discord.RawReactionActionEvent) -> None:
        """Inner reaction handler (separated for error isolation)."""

        # Gate: Ignore DMs
        if payload.guild_id is None:
            return

        # Gate: Ignore bots (including ourselves)
        if self.bot.user is not None and payload.user_id == self.bot.user.id:
            return
        if payload.member is not None and payload.member.bot:
            return

        touched = await run_db(add_entry_reaction, self.bot.engine, payload.message_id)
        if touched:
            logger.debug("Reaction counted on challenge entry %s", payload.message_id)

        await run_db(record_reaction, self.bot.engine, payload.user_id, payload.guild_id)


async def setup(bot: DarkroomBot) -> None:
    await bot.add_cog(Reactions(bot))
