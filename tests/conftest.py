"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.pool import StaticPool

from darkroom.config import DarkroomConfig
from darkroom.database.models import Base

BOT_USER_ID = 999


@pytest.fixture
def db_engine() -> Engine:
    """In-memory SQLite engine with all Darkroom tables.

    Uses StaticPool so every thread shares the same in-memory database
    (required by ``asyncio.to_thread`` inside ``run_db``).
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def cfg() -> DarkroomConfig:
    return DarkroomConfig(
        community_name="Test Darkroom",
        admin_role_id=42,
        token_address="0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
        token_symbol="USDC",
        token_decimals=6,
        tip_amount=1,
        prize_amount=5,
    )


def make_bot(
    engine: Engine,
    cfg: DarkroomConfig,
    *,
    admin_ids: tuple[int, ...] = (),
    balance: int = 100_000_000,
    profane_words: tuple[str, ...] = ("darn",),
    channels: dict[int, object] | None = None,
) -> MagicMock:
    """Lightweight stand-in for DarkroomBot with a real store behind it."""
    bot = MagicMock()
    bot.engine = engine
    bot.cfg = cfg
    bot.user = SimpleNamespace(id=BOT_USER_ID)
    bot.profanity = SimpleNamespace(
        is_profane=lambda text: any(w in text.lower() for w in profane_words)
    )
    bot.is_admin = lambda member: member is not None and member.id in admin_ids

    bot.tokens = MagicMock()
    bot.tokens.balance.return_value = balance
    bot.tokens.transfer.return_value = "0xfeedbeef"

    def _get_channel(ch_id):
        if channels and ch_id in channels:
            return channels[ch_id]
        return None

    bot.get_channel = _get_channel
    bot.fetch_channel = AsyncMock(
        side_effect=discord.NotFound(MagicMock(status=404, reason="Not Found"), "Unknown Channel")
    )
    return bot


@pytest.fixture
def bot(db_engine, cfg) -> MagicMock:
    return make_bot(db_engine, cfg)
