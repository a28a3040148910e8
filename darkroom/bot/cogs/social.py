"""
darkroom.bot.cogs.social — Message Pipeline
============================================

Every guild message from a human runs through, in order:

1. Moderation — a profane message is flagged, logged, escalated and
   **nothing else happens** for it.
2. Challenge entry — non-admin messages carrying the challenge hashtag
   while a challenge is active become entries.
3. Engagement stats — message counter for the (user, guild) pair.
4. Tipping — "tip" plus mentions; admin only.
5. Keyword replies — only when the message was not a tip request.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from darkroom.constants import INFRACTION_REACTIONS
from darkroom.database.engine import run_db
from darkroom.engine.moderation import escalation_for
from darkroom.engine.tipping import (
    format_amount,
    is_tip_request,
    tip_recipients,
    to_base_units,
)
from darkroom.engine.triggers import TriggerKind, match_trigger
from darkroom.services.challenge_service import get_active_challenge, record_entry
from darkroom.services.moderation_service import record_infraction
from darkroom.services.payout_service import PayoutError, bot_balance, send_tokens
from darkroom.services.stats_service import record_message

if TYPE_CHECKING:
    from darkroom.bot.core import DarkroomBot

logger = logging.getLogger(__name__)


async def safe_send(channel: discord.abc.Messageable, content: str) -> bool:
    """Send *content*, logging instead of raising on an HTTP failure."""
    try:
        await channel.send(content)
        return True
    except discord.HTTPException:
        logger.exception("Failed to send message to channel %s", getattr(channel, "id", "?"))
        return False


class Social(commands.Cog, name="Social"):
    """Moderation, stats, challenge entries, tips and chat triggers."""

    def __init__(self, bot: DarkroomBot) -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        try:
            await self._handle_message(message)
        except Exception:
            logger.exception(
                "Error processing message %s from user %s",
                message.id,
                message.author.id,
                extra={"event_type": "message", "user_id": message.author.id,
                       "message_id": message.id},
            )

    async def _handle_message(self, message: discord.Message) -> None:
        """Inner message handler (separated for error isolation)."""

        # Gate 1: Ignore bots (including ourselves)
        if message.author.bot:
            return

        # Gate 2: Ignore DMs
        if message.guild is None:
            return

        content = message.content or ""

        if self.bot.profanity.is_profane(content):
            await self._moderate(message)
            return

        is_admin = self.bot.is_admin(message.author)

        if not is_admin:
            await self._maybe_enter_challenge(message)

        await run_db(record_message, self.bot.engine, message.author.id, message.guild.id)

        bot_id = self.bot.user.id if self.bot.user else None
        recipients = tip_recipients(
            [m.id for m in message.mentions], message.author.id, bot_id
        )
        if is_tip_request(content, recipients):
            await self._handle_tip(message, recipients, is_admin)
            return

        await self._handle_trigger(message)

    # -------------------------------------------------------------------
    # 1. Moderation
    # -------------------------------------------------------------------
    async def _moderate(self, message: discord.Message) -> None:
        author_id = message.author.id
        guild = message.guild
        assert guild is not None
        logger.info("Profanity detected from %s in guild %s", author_id, guild.id)

        for emoji in INFRACTION_REACTIONS:
            try:
                await message.add_reaction(emoji)
            except discord.HTTPException:
                logger.warning("Could not react to message %s", message.id)

        total = await run_db(
            record_infraction, self.bot.engine, author_id, guild.id, message.content
        )
        escalation = escalation_for(
            total, warn_at=self.bot.cfg.warn_threshold, ban_at=self.bot.cfg.ban_threshold
        )

        if escalation.warn:
            await safe_send(
                message.channel,
                f"⚠️ <@{author_id}>, please avoid using inappropriate language.",
            )

        if escalation.ban:
            await safe_send(
                message.channel,
                f"⛔ <@{author_id}>, you have been removed for repeated profanity.",
            )
            try:
                await guild.ban(
                    message.author,
                    reason=f"{total} profanity infractions",
                    delete_message_seconds=0,
                )
                logger.info("Banned user %s from guild %s", author_id, guild.id)
            except discord.HTTPException as exc:
                logger.warning("Ban not permitted or failed for %s: %s", author_id, exc)

    # -------------------------------------------------------------------
    # 2. Challenge entries
    # -------------------------------------------------------------------
    async def _maybe_enter_challenge(self, message: discord.Message) -> None:
        hashtag = self.bot.cfg.challenge_hashtag.lower()
        if hashtag not in (message.content or "").lower():
            return
        assert message.guild is not None

        challenge = await run_db(get_active_challenge, self.bot.engine, message.guild.id)
        if challenge is None:
            return

        await run_db(
            record_entry, self.bot.engine, challenge.id, message.author.id, message.id
        )
        logger.info(
            "Challenge %d entry from %s (message %s)",
            challenge.id, message.author.id, message.id,
        )
        await safe_send(
            message.channel,
            f"✅ <@{message.author.id}> entered this week's challenge! Good luck! \U0001f4f7",
        )

    # -------------------------------------------------------------------
    # 4. Tipping
    # -------------------------------------------------------------------
    async def _handle_tip(
        self, message: discord.Message, recipients: list[int], is_admin: bool
    ) -> None:
        channel = message.channel
        if not is_admin:
            await safe_send(
                channel,
                f"❌ <@{message.author.id}>, you need admin permissions to use this command.",
            )
            return

        cfg = self.bot.cfg
        amount = to_base_units(cfg.tip_amount, cfg.token_decimals)
        needed = amount * len(recipients)

        try:
            balance = await bot_balance(self.bot)
        except Exception:
            logger.exception("Balance check failed before tipping")
            await safe_send(channel, "⚠️ I couldn't check my wallet right now. Try again later.")
            return

        if balance < needed:
            logger.info("Tip refused: balance %d < needed %d", balance, needed)
            await safe_send(
                channel, f"⚠️ I don't have enough {cfg.token_symbol} to send a tip."
            )
            return

        pretty = format_amount(amount, cfg.token_decimals, cfg.token_symbol)
        for user_id in recipients:
            try:
                await send_tokens(self.bot, user_id, amount)
            except PayoutError as exc:
                logger.warning("Tip to %s failed: %s", user_id, exc.reason)
                await safe_send(channel, f"⚠️ Couldn't tip <@{user_id}>: {exc.reason}.")
                continue
            await safe_send(channel, f"\U0001f4b8\U0001f4b8 You've been tipped {pretty} <@{user_id}>!")

    # -------------------------------------------------------------------
    # 5. Keyword replies
    # -------------------------------------------------------------------
    async def _handle_trigger(self, message: discord.Message) -> None:
        trigger = match_trigger(message.content or "")
        if trigger is None:
            return
        if trigger.kind is TriggerKind.REACT:
            try:
                await message.add_reaction(trigger.value)
            except discord.HTTPException:
                logger.warning("Could not react to message %s", message.id)
        else:
            await safe_send(
                message.channel, trigger.value.format(mention=f"<@{message.author.id}>")
            )


async def setup(bot: DarkroomBot) -> None:
    await bot.add_cog(Social(bot))
