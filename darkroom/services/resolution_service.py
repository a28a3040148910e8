"""
darkroom.services.resolution_service — Challenge Resolution
============================================================

Closes a photo challenge, manually (``/challenge_end``) or from the weekly
sweep:

1. Pick the entry with the most reactions.
2. Mark the challenge inactive.
3. Send the prize to the winner's linked wallet (best effort).
4. Append a ``challenge_winners`` row recording whether the prize went out.
5. Announce the result in the challenge channel.

The challenge is closed before any transfer is submitted, so a failure
later on can never lead to the prize being paid a second time.  With no
entries only the "no entries" announcement is posted.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.abc import Messageable

from darkroom.database.engine import run_db
from darkroom.database.models import Challenge, ChallengeWinner
from darkroom.engine.tipping import format_amount, to_base_units
from darkroom.services.challenge_service import (
    deactivate_challenge,
    get_expired_challenges,
    get_top_entry,
    record_winner,
)
from darkroom.services.embeds import build_winner_embed
from darkroom.services.payout_service import PayoutError, send_tokens

if TYPE_CHECKING:
    from darkroom.bot.core import DarkroomBot

logger = logging.getLogger(__name__)


async def resolve_channel(bot: DarkroomBot, channel_id: int) -> Messageable | None:
    channel = bot.get_channel(channel_id)
    if channel is None:
        try:
            channel = await bot.fetch_channel(channel_id)
        except (discord.NotFound, discord.Forbidden, discord.HTTPException):
            logger.warning("Challenge channel %s is unreachable", channel_id)
            return None
    return channel if isinstance(channel, Messageable) else None


async def _announce(channel: Messageable | None, **kwargs) -> None:
    if channel is None:
        return
    try:
        await channel.send(**kwargs)
    except discord.HTTPException:
        logger.exception("Failed to post challenge result to channel %s", getattr(channel, "id", "?"))


async def resolve_challenge(bot: DarkroomBot, challenge: Challenge) -> ChallengeWinner | None:
    """Resolve *challenge* and return the winner row, if any."""
    cfg = bot.cfg
    top = await run_db(get_top_entry, bot.engine, challenge.id)

    # Must happen before any transfer: an active challenge gets resolved again.
    await run_db(deactivate_challenge, bot.engine, challenge.id)

    channel = await resolve_channel(bot, challenge.channel_id)
    if top is None:
        await _announce(
            channel,
            content=f"\U0001f4f8 The challenge \"{challenge.theme}\" ended with no entries this week.",
        )
        logger.info("Challenge %d (%r) closed with no entries", challenge.id, challenge.theme)
        return None

    prize_units = to_base_units(cfg.prize_amount, cfg.token_decimals)
    paid = True
    try:
        await send_tokens(bot, top.user_id, prize_units)
    except PayoutError as exc:
        paid = False
        logger.warning("Prize for challenge %d not sent: %s", challenge.id, exc.reason)

    winner = await run_db(
        record_winner,
        bot.engine,
        challenge.id,
        top.user_id,
        top.reaction_count,
        prize_units,
        paid,
    )
    prize = format_amount(prize_units, cfg.token_decimals, cfg.token_symbol)
    await _announce(
        channel,
        embed=build_winner_embed(challenge.theme, top.user_id, top.reaction_count, prize, paid),
    )
    if not paid:
        await _announce(
            channel,
            content=(
                f"⚠️ Could not send the prize to <@{top.user_id}>. "
                "Make sure you've used `/link-wallet`, or ask an admin to check the bot's wallet."
            ),
        )

    logger.info(
        "Challenge %d (%r) resolved, winner %s (paid: %s)",
        challenge.id, challenge.theme, top.user_id, paid,
    )
    return winner


async def resolve_many(bot: DarkroomBot, challenges: list[Challenge]) -> int:
    """Resolve each of *challenges*.  Returns how many completed.

    One challenge failing does not stop the rest.
    """
    resolved = 0
    for challenge in challenges:
        try:
            await resolve_challenge(bot, challenge)
            resolved += 1
        except Exception:
            logger.exception("Failed to resolve challenge %d", challenge.id)
    return resolved


async def resolve_expired(bot: DarkroomBot) -> int:
    """Resolve every challenge whose window has closed."""
    challenges = await run_db(get_expired_challenges, bot.engine)
    return await resolve_many(bot, challenges)
