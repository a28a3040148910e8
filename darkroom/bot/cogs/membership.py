"""
darkroom.bot.cogs.membership — Welcome New Members
===================================================

Greets every human who joins the guild in the guild's system channel.
Requires the GUILD_MEMBERS privileged intent.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from darkroom.constants import WELCOME_MESSAGE

if TYPE_CHECKING:
    from darkroom.bot.core import DarkroomBot

logger = logging.getLogger(__name__)


class Membership(commands.Cog, name="Membership"):
    """Welcomes members when they join."""

    def __init__(self, bot: DarkroomBot) -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_member_join(self, member: discord.Member) -> None:
        try:
            if member.bot:
                logger.info("Bot %s joined guild %s", member.id, member.guild.id)
                return

            channel = member.guild.system_channel
            if channel is None:
                logger.debug("Guild %s has no system channel; skipping welcome", member.guild.id)
                return

            await channel.send(WELCOME_MESSAGE.format(user_id=member.id))
            logger.info("Welcomed %s (ID: %d)", member.display_name, member.id)

        except Exception:
            logger.exception(
                "Error welcoming member %s", member.id,
                extra={"event_type": "member_join", "user_id": member.id},
            )


async def setup(bot: DarkroomBot) -> None:
    await bot.add_cog(Membership(bot))
