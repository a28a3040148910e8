"""
darkroom.database.models — SQLAlchemy 2.0 Data Models
======================================================

Tables:
- user_stats         — Per-guild message/reaction counters
- bot_channels       — Channels opted into the daily greeting
- user_infractions   — One row per profane message
- photo_challenges   — Themed, time-boxed photo contests
- challenge_entries  — Submissions to a challenge
- challenge_winners  — Append-only record of winners and whether the prize went out
- wallet_links       — Discord member → on-chain address
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator

DEFAULT_GM_MESSAGE = "\U0001f31e gm everyone!"  # 🌞


def utcnow() -> datetime:
    return datetime.now(UTC)


class TokenAmount(TypeDecorator):
    """Token base units stored as decimal text.

    A uint256 amount (10 tokens at 18 decimals is 10**19) does not fit a
    SQLite INTEGER, so the value round-trips through a string.
    """

    impl = String(78)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(int(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return int(value)


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all Darkroom ORM models."""


# ---------------------------------------------------------------------------
# UserStat — one row per (user, guild)
# ---------------------------------------------------------------------------
class UserStat(Base):
    __tablename__ = "user_stats"

    user_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    space_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    message_count: Mapped[int] = mapped_column(Integer, default=0)
    reaction_count: Mapped[int] = mapped_column(Integer, default=0)
    last_active: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )

    __table_args__ = (
        Index("ix_user_stats_space_messages", "space_id", "message_count"),
    )

    def __repr__(self) -> str:
        return (
            f"<UserStat user={self.user_id} space={self.space_id} "
            f"msgs={self.message_count} rxns={self.reaction_count}>"
        )


# ---------------------------------------------------------------------------
# BotChannel — daily greeting configuration
# ---------------------------------------------------------------------------
class BotChannel(Base):
    __tablename__ = "bot_channels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    space_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    channel_id: Mapped[int] = mapped_column(BigInteger, nullable=False, unique=True)
    last_cron_post: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )
    scheduled_message: Mapped[str] = mapped_column(Text, default=DEFAULT_GM_MESSAGE)
    cron_enabled: Mapped[bool] = mapped_column(Boolean, default=False)

    def __repr__(self) -> str:
        return f"<BotChannel channel={self.channel_id} enabled={self.cron_enabled}>"


# ---------------------------------------------------------------------------
# Infraction — profane message log
# ---------------------------------------------------------------------------
class Infraction(Base):
    __tablename__ = "user_infractions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    space_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        Index("ix_user_infractions_user_space", "user_id", "space_id"),
    )

    def __repr__(self) -> str:
        return f"<Infraction id={self.id} user={self.user_id} space={self.space_id}>"


# ---------------------------------------------------------------------------
# Challenge — weekly photo contest
# ---------------------------------------------------------------------------
class Challenge(Base):
    """A themed photo challenge.

    ``active`` is a plain flag.  Nothing stops two active challenges from
    existing in the same guild; readers take the first one they find.
    """
    __tablename__ = "photo_challenges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    space_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    channel_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    theme: Mapped[str] = mapped_column(String(200), nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True)

    entries: Mapped[list[ChallengeEntry]] = relationship(back_populates="challenge")

    __table_args__ = (
        Index("ix_photo_challenges_space_active", "space_id", "active"),
    )

    def __repr__(self) -> str:
        return f"<Challenge id={self.id} theme={self.theme!r} active={self.active}>"


class ChallengeEntry(Base):
    __tablename__ = "challenge_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    challenge_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("photo_challenges.id"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    message_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    reaction_count: Mapped[int] = mapped_column(Integer, default=0)

    challenge: Mapped[Challenge] = relationship(back_populates="entries")

    __table_args__ = (
        Index("ix_challenge_entries_message", "message_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<ChallengeEntry id={self.id} challenge={self.challenge_id} "
            f"user={self.user_id} rxns={self.reaction_count}>"
        )


class ChallengeWinner(Base):
    __tablename__ = "challenge_winners"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    challenge_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    reaction_count: Mapped[int] = mapped_column(Integer, default=0)
    prize_amount: Mapped[int] = mapped_column(TokenAmount, default=0)  # token base units
    paid: Mapped[bool] = mapped_column(Boolean, default=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def __repr__(self) -> str:
        return f"<ChallengeWinner challenge={self.challenge_id} user={self.user_id}>"


# ---------------------------------------------------------------------------
# WalletLink — where tips and prizes are sent
# ---------------------------------------------------------------------------
class WalletLink(Base):
    __tablename__ = "wallet_links"

    user_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    address: Mapped[str] = mapped_column(String(42), nullable=False)
    linked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        return f"<WalletLink user={self.user_id} address={self.address}>"
