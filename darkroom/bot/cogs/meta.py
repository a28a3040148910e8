"""
darkroom.bot.cogs.meta — Help, Leaderboard & Member Commands
=============================================================

- /help — list commands from the registry
- /leaderboard — top 10 members by messages
- /infractions — top 10 offenders
- /link-wallet — register the address that receives tips and prizes
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from darkroom.constants import describe
from darkroom.database.engine import run_db
from darkroom.services.embeds import (
    build_help_embed,
    build_infractions_embed,
    build_leaderboard_embed,
)
from darkroom.services.moderation_service import top_offenders
from darkroom.services.stats_service import LEADERBOARD_SIZE, get_leaderboard
from darkroom.services.wallet_service import is_valid_address, link_wallet

if TYPE_CHECKING:
    from darkroom.bot.core import DarkroomBot

logger = logging.getLogger(__name__)


class Meta(commands.Cog, name="Meta"):
    """Read-only community commands and wallet linking."""

    def __init__(self, bot: DarkroomBot) -> None:
        self.bot = bot

    # -------------------------------------------------------------------
    # /help
    # -------------------------------------------------------------------
    @app_commands.command(name="help", description=describe("help"))
    async def show_help(self, interaction: discord.Interaction) -> None:
        await interaction.response.send_message(
            embed=build_help_embed(self.bot.cfg.community_name)
        )

    # -------------------------------------------------------------------
    # /leaderboard
    # -------------------------------------------------------------------
    @app_commands.command(name="leaderboard", description=describe("leaderboard"))
    async def leaderboard(self, interaction: discord.Interaction) -> None:
        guild_id = interaction.guild_id or 0
        try:
            rows = await run_db(get_leaderboard, self.bot.engine, guild_id, LEADERBOARD_SIZE)
        except Exception:
            logger.exception("Leaderboard query failed for guild %s", guild_id)
            await interaction.response.send_message("❌ Error fetching leaderboard")
            return

        if not rows:
            await interaction.response.send_message("\U0001f4ca No activity data yet!")
            return

        await interaction.response.send_message(
            embed=build_leaderboard_embed(rows, interaction.user.id)
        )

    # -------------------------------------------------------------------
    # /infractions
    # -------------------------------------------------------------------
    @app_commands.command(name="infractions", description=describe("infractions"))
    async def infractions(self, interaction: discord.Interaction) -> None:
        offenders = await run_db(top_offenders, self.bot.engine, interaction.guild_id or 0)
        if not offenders:
            await interaction.response.send_message("✅ No infractions logged yet!")
            return
        await interaction.response.send_message(embed=build_infractions_embed(offenders))

    # -------------------------------------------------------------------
    # /link-wallet
    # -------------------------------------------------------------------
    @app_commands.command(name="link-wallet", description=describe("link-wallet"))
    @app_commands.describe(address="Your wallet address (0x…)")
    async def link_wallet_cmd(self, interaction: discord.Interaction, address: str) -> None:
        address = address.strip()
        if not is_valid_address(address):
            await interaction.response.send_message(
                "❌ That doesn't look like a valid wallet address.", ephemeral=True
            )
            return

        link = await run_db(link_wallet, self.bot.engine, interaction.user.id, address)
        logger.info("User %s linked wallet %s", interaction.user.id, link.address)
        await interaction.response.send_message(
            f"\U0001f517 Tips and prizes will be sent to `{link.address}`.", ephemeral=True
        )


async def setup(bot: DarkroomBot) -> None:
    await bot.add_cog(Meta(bot))
