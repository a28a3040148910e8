"""
tests/test_resolution.py — Challenge Resolution & Scheduled Job Tests
======================================================================

Covers winner selection, prize payout, the hall-of-fame row, the weekly
sweep and the daily greeting job.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import discord
from web3 import Web3

from conftest import make_bot
from darkroom.bot.cogs.tasks import ScheduledJobs
from darkroom.services.challenge_service import (
    add_entry_reaction,
    get_active_challenge,
    get_active_challenges,
    get_recent_winners,
    get_top_entry,
    record_entry,
    start_challenge,
)
from darkroom.services.resolution_service import (
    resolve_challenge,
    resolve_expired,
    resolve_many,
)
from darkroom.services.schedule_service import get_enabled_channels, set_scheduled_message
from darkroom.services.wallet_service import link_wallet

GUILD = 100
CHANNEL = 700
ADDR = "0x" + "33" * 20
JAN_1 = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def run_async(coro):
    """Run an async coroutine to completion (no pytest-asyncio needed)."""
    return asyncio.run(coro)


def _make_messageable(channel_id: int = CHANNEL) -> MagicMock:
    ch = MagicMock(spec=discord.TextChannel)
    ch.id = channel_id
    ch.send = AsyncMock()
    return ch


def _seed_entries(db_engine, challenge_id):
    record_entry(db_engine, challenge_id, 1, 8001)
    record_entry(db_engine, challenge_id, 2, 8002)
    for _ in range(4):
        add_entry_reaction(db_engine, 8002)
    add_entry_reaction(db_engine, 8001)


# ---------------------------------------------------------------------------
# resolve_challenge
# ---------------------------------------------------------------------------
class TestResolveChallenge:
    def test_winner_paid_recorded_and_announced(self, db_engine, cfg):
        ch = _make_messageable()
        bot = make_bot(db_engine, cfg, channels={CHANNEL: ch})
        c = start_challenge(db_engine, GUILD, CHANNEL, "Reflections")
        _seed_entries(db_engine, c.id)
        link_wallet(db_engine, 2, ADDR)

        winner = run_async(resolve_challenge(bot, c))

        assert winner.user_id == 2
        assert winner.reaction_count == 4
        bot.tokens.transfer.assert_called_once_with(Web3.to_checksum_address(ADDR), 5_000_000)

        (row,) = get_recent_winners(db_engine)
        assert (row.user_id, row.theme, row.prize_amount) == (2, "Reflections", 5_000_000)
        assert row.paid is True
        assert get_active_challenge(db_engine, GUILD) is None

        embed = ch.send.await_args.kwargs["embed"]
        assert "Reflections" in embed.title
        assert "sent on-chain" in embed.description

    def test_no_entries(self, db_engine, cfg):
        ch = _make_messageable()
        bot = make_bot(db_engine, cfg, channels={CHANNEL: ch})
        c = start_challenge(db_engine, GUILD, CHANNEL, "Empty")

        assert run_async(resolve_challenge(bot, c)) is None
        assert get_recent_winners(db_engine) == []
        assert get_active_challenge(db_engine, GUILD) is None
        bot.tokens.transfer.assert_not_called()
        assert "no entries" in ch.send.await_args.kwargs["content"]

    def test_payout_failure_still_records_winner(self, db_engine, cfg):
        ch = _make_messageable()
        bot = make_bot(db_engine, cfg, channels={CHANNEL: ch})
        c = start_challenge(db_engine, GUILD, CHANNEL, "Reflections")
        _seed_entries(db_engine, c.id)  # winner 2 has no wallet linked

        winner = run_async(resolve_challenge(bot, c))

        assert winner.user_id == 2
        (row,) = get_recent_winners(db_engine)
        assert row.paid is False
        bot.tokens.transfer.assert_not_called()
        embed = ch.send.await_args_list[0].kwargs["embed"]
        assert "payout pending" in embed.description
        assert "Could not send the prize" in ch.send.await_args_list[1].kwargs["content"]

    def test_unreachable_channel(self, db_engine, cfg):
        bot = make_bot(db_engine, cfg)
        bot.fetch_channel = AsyncMock(
            side_effect=discord.NotFound(MagicMock(status=404, reason="Not Found"), "Unknown Channel")
        )
        c = start_challenge(db_engine, GUILD, CHANNEL, "Reflections")
        _seed_entries(db_engine, c.id)

        winner = run_async(resolve_challenge(bot, c))
        assert winner is not None
        assert get_active_challenge(db_engine, GUILD) is None


# ---------------------------------------------------------------------------
# Batches
# ---------------------------------------------------------------------------
class TestBatches:
    def test_resolve_many_isolates_failures(self, db_engine, cfg):
        bot = make_bot(db_engine, cfg, channels={CHANNEL: _make_messageable()})
        broken = start_challenge(db_engine, GUILD, CHANNEL, "Broken")
        fine = start_challenge(db_engine, GUILD, CHANNEL, "Fine")

        def _top_entry(engine, challenge_id):
            if challenge_id == broken.id:
                raise RuntimeError("store hiccup")
            return get_top_entry(engine, challenge_id)

        with patch(
            "darkroom.services.resolution_service.get_top_entry", side_effect=_top_entry
        ):
            assert run_async(resolve_many(bot, [broken, fine])) == 1

        assert [c.id for c in get_active_challenges(db_engine, GUILD)] == [broken.id]

    def test_resolve_expired_only_closed_windows(self, db_engine, cfg):
        bot = make_bot(db_engine, cfg, channels={CHANNEL: _make_messageable()})
        start_challenge(db_engine, GUILD, CHANNEL, "Old", now=JAN_1)
        start_challenge(db_engine, 200, CHANNEL, "Running")

        assert run_async(resolve_expired(bot)) == 1
        assert get_active_challenge(db_engine, GUILD) is None
        assert get_active_challenge(db_engine, 200).theme == "Running"


# ---------------------------------------------------------------------------
# A prize goes out once
# ---------------------------------------------------------------------------
class TestSinglePayout:
    def _expired_challenge_with_winner(self, db_engine):
        c = start_challenge(db_engine, GUILD, CHANNEL, "Reflections", now=JAN_1)
        record_entry(db_engine, c.id, 2, 8002)
        link_wallet(db_engine, 2, ADDR)
        return c

    def test_repeated_sweeps_pay_eighteen_decimal_prize_once(self, db_engine, cfg):
        cfg18 = replace(cfg, token_symbol="DRK", token_decimals=18, prize_amount=10)
        bot = make_bot(db_engine, cfg18, channels={CHANNEL: _make_messageable()})
        self._expired_challenge_with_winner(db_engine)

        results = [run_async(resolve_expired(bot)) for _ in range(3)]

        assert results == [1, 0, 0]
        bot.tokens.transfer.assert_called_once_with(Web3.to_checksum_address(ADDR), 10**19)
        (row,) = get_recent_winners(db_engine)
        assert row.prize_amount == 10**19
        assert row.paid is True
        assert get_active_challenge(db_engine, GUILD) is None

    def test_failure_after_transfer_is_not_retried(self, db_engine, cfg):
        bot = make_bot(db_engine, cfg, channels={CHANNEL: _make_messageable()})
        self._expired_challenge_with_winner(db_engine)

        with patch(
            "darkroom.services.resolution_service.record_winner",
            side_effect=RuntimeError("disk full"),
        ):
            assert run_async(resolve_expired(bot)) == 0
        assert run_async(resolve_expired(bot)) == 0

        bot.tokens.transfer.assert_called_once()
        assert get_active_challenge(db_engine, GUILD) is None


# ---------------------------------------------------------------------------
# Scheduled jobs
# ---------------------------------------------------------------------------
class TestScheduledJobs:
    def test_weekly_resolution_only_on_configured_day(self, db_engine, cfg):
        bot = make_bot(db_engine, cfg, channels={CHANNEL: _make_messageable()})
        start_challenge(db_engine, GUILD, CHANNEL, "Old", now=JAN_1)
        jobs = ScheduledJobs(bot)

        saturday = datetime(2026, 1, 10, 23, 0, tzinfo=UTC)
        assert run_async(jobs.run_weekly_resolution(now=saturday)) == 0
        assert get_active_challenge(db_engine, GUILD) is not None

        sunday = saturday + timedelta(days=1)
        assert run_async(jobs.run_weekly_resolution(now=sunday)) == 1
        assert get_active_challenge(db_engine, GUILD) is None

    def test_greeting_posts_every_run(self, db_engine, cfg):
        ch = _make_messageable()
        bot = make_bot(db_engine, cfg, channels={CHANNEL: ch})
        set_scheduled_message(db_engine, GUILD, CHANNEL, "gm photographers")
        jobs = ScheduledJobs(bot)

        assert run_async(jobs.post_greetings()) == 1
        assert run_async(jobs.post_greetings()) == 1
        assert [c.args[0] for c in ch.send.await_args_list] == ["gm photographers"] * 2
        (row,) = get_enabled_channels(db_engine)
        assert row.last_cron_post is not None

    def test_greeting_failure_isolated(self, db_engine, cfg):
        broken = _make_messageable(701)
        broken.send = AsyncMock(
            side_effect=discord.HTTPException(MagicMock(status=500, reason="boom"), "boom")
        )
        ok = _make_messageable(702)
        bot = make_bot(db_engine, cfg, channels={701: broken, 702: ok})
        set_scheduled_message(db_engine, GUILD, 701)
        set_scheduled_message(db_engine, GUILD, 702)

        assert run_async(ScheduledJobs(bot).post_greetings()) == 1
        ok.send.assert_awaited_once()
