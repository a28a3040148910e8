"""
darkroom.bot.core — Bot Instance & Cog Loader
==============================================

Defines :class:`DarkroomBot`, a ``commands.Bot`` subclass that:

1. Stores the shared config (``bot.cfg``), DB engine (``bot.engine``),
   profanity filter (``bot.profanity``) and token client (``bot.tokens``)
   so every Cog can reach them through ``self.bot``.
2. Loads every Cog listed in :data:`EXTENSIONS`.
3. Syncs the slash-command tree on startup (guild-scoped for dev, global
   for production — controlled by the ``DEV_GUILD_ID`` env var).
"""

from __future__ import annotations

import logging
import os

import discord
from discord.ext import commands
from sqlalchemy import Engine

from darkroom.config import DarkroomConfig
from darkroom.engine.moderation import ProfanityFilter
from darkroom.services.token_service import TokenClient

logger = logging.getLogger(__name__)

# Cog modules to load on startup.
EXTENSIONS: list[str] = [
    "darkroom.bot.cogs.social",
    "darkroom.bot.cogs.reactions",
    "darkroom.bot.cogs.membership",
    "darkroom.bot.cogs.meta",
    "darkroom.bot.cogs.challenges",
    "darkroom.bot.cogs.admin",
    "darkroom.bot.cogs.tasks",
]


def has_admin_permission(member: discord.abc.User | None, admin_role_id: int) -> bool:
    """True if *member* holds Administrator or the configured admin role."""
    if member is None:
        return False
    perms = getattr(member, "guild_permissions", None)
    if perms is not None and perms.administrator:
        return True
    roles = getattr(member, "roles", None) or []
    return any(role.id == admin_role_id for role in roles)


class DarkroomBot(commands.Bot):
    """Custom Bot subclass that carries project-wide state."""

    def __init__(
        self,
        cfg: DarkroomConfig,
        engine: Engine,
        tokens: TokenClient,
        profanity: ProfanityFilter | None = None,
    ) -> None:
        intents = discord.Intents.default()
        intents.message_content = True    # Privileged: profanity, hashtags, tips
        intents.members = True            # Privileged: welcome on join

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            help_command=None,  # /help is a slash command
            description=f"{cfg.community_name} photo community bot",
        )

        self.cfg = cfg
        self.engine = engine
        self.tokens = tokens
        self.profanity = profanity or ProfanityFilter(
            extra_words=cfg.extra_profanity, allowed_words=cfg.allowed_words
        )

    def is_admin(self, member: discord.abc.User | None) -> bool:
        return has_admin_permission(member, self.cfg.admin_role_id)

    # -----------------------------------------------------------------------
    # Lifecycle hooks
    # -----------------------------------------------------------------------
    async def setup_hook(self) -> None:
        """Load all Cog extensions.  One broken Cog shouldn't take down the bot."""
        for ext in EXTENSIONS:
            try:
                await self.load_extension(ext)
                logger.info("Loaded extension: %s", ext)
            except Exception as exc:
                logger.error("Failed to load extension %s: %s", ext, exc)

    async def on_ready(self) -> None:
        """Fired when the bot has connected and the cache is populated."""
        assert self.user is not None  # guaranteed after on_ready
        logger.info("Logged in as %s (ID: %s)", self.user.name, self.user.id)

        dev_guild_id = os.getenv("DEV_GUILD_ID")
        if dev_guild_id:
            guild = discord.Object(id=int(dev_guild_id))
            self.tree.copy_global_to(guild=guild)
            synced = await self.tree.sync(guild=guild)
            logger.info("Synced %d commands to dev guild %s", len(synced), dev_guild_id)
        else:
            synced = await self.tree.sync()
            logger.info("Synced %d commands globally", len(synced))

    async def close(self) -> None:
        logger.info("Bot shutting down…")
        await super().close()
