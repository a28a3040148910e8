"""
darkroom.config — YAML Configuration Loader
============================================

Reads ``config.yaml`` for the **soft** settings (community identity, admin
role, token amounts, challenge and moderation tuning).  Secrets — the
Discord token, the wallet key and the RPC endpoint — come from the
environment instead and are checked in :mod:`darkroom.bot.__main__`.

Usage::

    from darkroom.config import load_config

    cfg = load_config()          # reads ./config.yaml by default
    print(cfg.community_name)    # "Darkroom"
    print(cfg.tip_amount)        # 1.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class DarkroomConfig:
    """Immutable configuration loaded from ``config.yaml``.

    Token amounts are expressed in whole tokens; services convert them to
    base units with ``token_decimals``.
    """

    # Identity
    community_name: str

    # Discord
    admin_role_id: int  # Members with this role (or Administrator) may run admin commands

    # Token
    token_address: str
    token_symbol: str
    token_decimals: int
    tip_amount: float
    prize_amount: float

    # Challenges
    challenge_hashtag: str = "#weeklychallenge"
    challenge_duration_days: int = 7

    # Moderation
    warn_threshold: int = 5
    ban_threshold: int = 20
    extra_profanity: tuple[str, ...] = field(default_factory=tuple)
    allowed_words: tuple[str, ...] = field(default_factory=tuple)

    # Scheduled jobs (UTC)
    default_gm_message: str = "\U0001f31e gm everyone!"
    greeting_hour: int = 9
    resolution_weekday: int = 6  # Monday=0 … Sunday=6
    resolution_hour: int = 23


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> DarkroomConfig:
    """Read *path* and return a :class:`DarkroomConfig` instance.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    token = raw["token"]
    challenges = raw.get("challenges") or {}
    moderation = raw.get("moderation") or {}
    schedule = raw.get("schedule") or {}

    return DarkroomConfig(
        community_name=raw["community_name"],
        admin_role_id=int(raw["admin_role_id"]),
        token_address=token["address"],
        token_symbol=token.get("symbol", "USDC"),
        token_decimals=int(token.get("decimals", 6)),
        tip_amount=float(token["tip_amount"]),
        prize_amount=float(token["prize_amount"]),
        challenge_hashtag=challenges.get("hashtag", "#weeklychallenge"),
        challenge_duration_days=int(challenges.get("duration_days", 7)),
        warn_threshold=int(moderation.get("warn_threshold", 5)),
        ban_threshold=int(moderation.get("ban_threshold", 20)),
        extra_profanity=tuple(moderation.get("extra_words") or ()),
        allowed_words=tuple(moderation.get("allowed_words") or ()),
        default_gm_message=schedule.get("default_gm_message", "\U0001f31e gm everyone!"),
        greeting_hour=int(schedule.get("greeting_hour", 9)),
        resolution_weekday=int(schedule.get("resolution_weekday", 6)),
        resolution_hour=int(schedule.get("resolution_hour", 23)),
    )
