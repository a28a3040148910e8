"""
tests/test_reactions_cog.py — Reaction Tracking Tests
======================================================
"""

from __future__ import annotations

import asyncio
from types import SimpleNamespace

from conftest import BOT_USER_ID
from darkroom.bot.cogs.reactions import Reactions
from darkroom.services.challenge_service import get_top_entry, record_entry, start_challenge
from darkroom.services.stats_service import get_user_stat

GUILD = 100


def run_async(coro):
    return asyncio.run(coro)


def _payload(*, user_id=2, message_id=8001, guild_id=GUILD, member_bot=False):
    return SimpleNamespace(
        guild_id=guild_id,
        user_id=user_id,
        message_id=message_id,
        member=SimpleNamespace(id=user_id, bot=member_bot),
    )


def test_reaction_counts_for_reactor(db_engine, bot):
    cog = Reactions(bot)
    run_async(cog._handle_reaction(_payload()))
    run_async(cog._handle_reaction(_payload()))

    stat = get_user_stat(db_engine, 2, GUILD)
    assert stat.reaction_count == 2
    assert stat.message_count == 0


def test_reaction_on_entry_bumps_entry(db_engine, bot):
    c = start_challenge(db_engine, GUILD, 700, "Reflections")
    record_entry(db_engine, c.id, 1, 8001)
    cog = Reactions(bot)
    for uid in (2, 3, 4):
        run_async(cog._handle_reaction(_payload(user_id=uid)))

    assert get_top_entry(db_engine, c.id).reaction_count == 3


def test_own_reactions_ignored(db_engine, bot):
    cog = Reactions(bot)
    run_async(cog._handle_reaction(_payload(user_id=BOT_USER_ID)))
    assert get_user_stat(db_engine, BOT_USER_ID, GUILD) is None


def test_other_bots_ignored(db_engine, bot):
    cog = Reactions(bot)
    run_async(cog._handle_reaction(_payload(user_id=5, member_bot=True)))
    assert get_user_stat(db_engine, 5, GUILD) is None


def test_dm_reactions_ignored(db_engine, bot):
    cog = Reactions(bot)
    run_async(cog._handle_reaction(_payload(guild_id=None)))
    assert get_user_stat(db_engine, 2, GUILD) is None
