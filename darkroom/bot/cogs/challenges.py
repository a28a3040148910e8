"""
darkroom.bot.cogs.challenges — Weekly Photo Challenge Commands
===============================================================

- /challenge_start theme — admin: open a challenge in this channel
- /challenge_end — admin: resolve every active challenge in this server
- /challenge_current — show the running theme and days left
- /challenge_winners — hall of fame (last 5 winners)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from darkroom.bot.cogs.admin import is_admin, reject_non_admin
from darkroom.constants import describe
from darkroom.database.engine import run_db
from darkroom.services.challenge_service import (
    days_left,
    get_active_challenge,
    get_active_challenges,
    get_recent_winners,
    start_challenge,
)
from darkroom.services.embeds import build_challenge_start_embed, build_winners_embed
from darkroom.services.resolution_service import resolve_many

if TYPE_CHECKING:
    from darkroom.bot.core import DarkroomBot

logger = logging.getLogger(__name__)

NO_ACTIVE_REPLY = "\U0001f4f7 No active challenge right now!"
CLOSE_FAILED_REPLY = "⚠️ Something went wrong closing the challenge. Please check the logs."


class Challenges(commands.Cog, name="Challenges"):
    """Photo challenge lifecycle commands."""

    def __init__(self, bot: DarkroomBot) -> None:
        self.bot = bot

    # -------------------------------------------------------------------
    # /challenge_start
    # -------------------------------------------------------------------
    @app_commands.command(name="challenge_start", description=describe("challenge_start"))
    @app_commands.describe(theme="Theme of the week, e.g. Reflections")
    @is_admin()
    async def challenge_start(
        self, interaction: discord.Interaction, theme: str | None = None
    ) -> None:
        theme = (theme or "").strip()
        if not theme:
            await interaction.response.send_message(
                "⚠️ Please specify a theme, e.g. `/challenge_start Reflections`",
                ephemeral=True,
            )
            return

        cfg = self.bot.cfg
        await run_db(
            start_challenge,
            self.bot.engine,
            interaction.guild_id or 0,
            interaction.channel_id or 0,
            theme,
            cfg.challenge_duration_days,
        )
        await interaction.response.send_message(
            embed=build_challenge_start_embed(
                theme, cfg.challenge_hashtag, cfg.challenge_duration_days
            )
        )

    # -------------------------------------------------------------------
    # /challenge_end
    # -------------------------------------------------------------------
    @app_commands.command(name="challenge_end", description=describe("challenge_end"))
    @is_admin()
    async def challenge_end(self, interaction: discord.Interaction) -> None:
        await interaction.response.defer(thinking=True)
        try:
            challenges = await run_db(
                get_active_challenges, self.bot.engine, interaction.guild_id or 0
            )
            resolved = await resolve_many(self.bot, challenges)
        except Exception:
            logger.exception("challenge_end failed in guild %s", interaction.guild_id)
            await interaction.followup.send(CLOSE_FAILED_REPLY)
            return

        if not challenges:
            await interaction.followup.send(NO_ACTIVE_REPLY)
        elif resolved < len(challenges):
            await interaction.followup.send(CLOSE_FAILED_REPLY)
        else:
            await interaction.followup.send(
                "✅ The current photo challenge has been closed for submissions."
            )

    # -------------------------------------------------------------------
    # /challenge_current
    # -------------------------------------------------------------------
    @app_commands.command(name="challenge_current", description=describe("challenge_current"))
    async def challenge_current(self, interaction: discord.Interaction) -> None:
        challenge = await run_db(get_active_challenge, self.bot.engine, interaction.guild_id or 0)
        if challenge is None:
            await interaction.response.send_message(NO_ACTIVE_REPLY)
            return

        left = days_left(challenge.end_time)
        await interaction.response.send_message(
            f"\U0001f5d3️ Current theme: *{challenge.theme}* ({left} days left)"
        )

    # -------------------------------------------------------------------
    # /challenge_winners
    # -------------------------------------------------------------------
    @app_commands.command(name="challenge_winners", description=describe("challenge_winners"))
    async def challenge_winners(self, interaction: discord.Interaction) -> None:
        try:
            winners = await run_db(get_recent_winners, self.bot.engine, 5)
        except Exception:
            logger.exception("Error fetching winners")
            await interaction.response.send_message(
                "⚠️ Couldn't fetch winners right now. Please try again later."
            )
            return

        if not winners:
            await interaction.response.send_message(
                "\U0001f3c6 No photo challenge winners yet! "
                "Participate this week to become the first!"
            )
            return

        cfg = self.bot.cfg
        await interaction.response.send_message(
            embed=build_winners_embed(winners, cfg.token_decimals, cfg.token_symbol)
        )

    async def cog_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        await reject_non_admin(interaction, error)


async def setup(bot: DarkroomBot) -> None:
    await bot.add_cog(Challenges(bot))
