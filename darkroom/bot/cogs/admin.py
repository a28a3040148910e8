"""
darkroom.bot.cogs.admin — Admin Slash Commands
===============================================

- /set-gm (alias /set_gm) — enable the daily greeting in this channel
- /stop-gm — disable it again

Admin commands use :func:`is_admin`: Administrator permission or the
configured ``admin_role_id``.  A failed check gets a rejection reply and
changes nothing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from darkroom.constants import describe
from darkroom.database.engine import run_db
from darkroom.services.schedule_service import disable_channel, set_scheduled_message

if TYPE_CHECKING:
    from darkroom.bot.core import DarkroomBot

logger = logging.getLogger(__name__)

ADMIN_ONLY_REPLY = "\U0001f512 Only admins can use this command."


def is_admin():
    """Decorator that checks the invoking member's admin privilege."""
    async def predicate(interaction: discord.Interaction) -> bool:
        bot: DarkroomBot = interaction.client  # type: ignore[assignment]
        return bot.is_admin(interaction.user)
    return app_commands.check(predicate)


async def reject_non_admin(
    interaction: discord.Interaction, error: app_commands.AppCommandError
) -> None:
    """Shared ``cog_app_command_error`` body for cogs with admin commands."""
    if isinstance(error, app_commands.CheckFailure):
        logger.info(
            "Rejected admin command /%s from %s",
            interaction.command.name if interaction.command else "?",
            interaction.user.id,
        )
        await interaction.response.send_message(ADMIN_ONLY_REPLY, ephemeral=True)
    else:
        raise error


class Admin(commands.Cog, name="Admin"):
    """Channel scheduling commands for admins."""

    def __init__(self, bot: DarkroomBot) -> None:
        self.bot = bot

    async def _set_gm(self, interaction: discord.Interaction, message: str | None) -> None:
        if interaction.guild_id is None or interaction.channel_id is None:
            await interaction.response.send_message(
                "❌ This command only works in a server channel.", ephemeral=True
            )
            return

        await run_db(
            set_scheduled_message,
            self.bot.engine,
            interaction.guild_id,
            interaction.channel_id,
            message,
        )
        await interaction.response.send_message(
            "✅ We keep the 'gm' rolling every morning!"
        )

    # -------------------------------------------------------------------
    # /set-gm and /set_gm
    # -------------------------------------------------------------------
    @app_commands.command(name="set-gm", description=describe("set-gm"))
    @app_commands.describe(message="Custom greeting (defaults to the community gm)")
    @is_admin()
    async def set_gm(self, interaction: discord.Interaction, message: str | None = None) -> None:
        await self._set_gm(interaction, message)

    @app_commands.command(name="set_gm", description=describe("set_gm"))
    @app_commands.describe(message="Custom greeting (defaults to the community gm)")
    @is_admin()
    async def set_gm_alias(self, interaction: discord.Interaction, message: str | None = None) -> None:
        await self._set_gm(interaction, message)

    # -------------------------------------------------------------------
    # /stop-gm
    # -------------------------------------------------------------------
    @app_commands.command(name="stop-gm", description=describe("stop-gm"))
    @is_admin()
    async def stop_gm(self, interaction: discord.Interaction) -> None:
        if interaction.channel_id is None:
            return
        was_set = await run_db(disable_channel, self.bot.engine, interaction.channel_id)
        if was_set:
            await interaction.response.send_message("\U0001f634 No more morning gm here.")
        else:
            await interaction.response.send_message(
                "ℹ️ This channel doesn't have a morning gm.", ephemeral=True
            )

    async def cog_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        await reject_non_admin(interaction, error)


async def setup(bot: DarkroomBot) -> None:
    await bot.add_cog(Admin(bot))
