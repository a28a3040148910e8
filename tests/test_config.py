"""
tests/test_config.py — Configuration & Startup Checks
======================================================
"""

from __future__ import annotations

import textwrap

import pytest

from darkroom.bot.__main__ import missing_secrets
from darkroom.config import load_config

MINIMAL_YAML = textwrap.dedent(
    """\
    community_name: Darkroom
    admin_role_id: 1234
    token:
      address: "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
      tip_amount: 1
      prize_amount: 5
    """
)


class TestLoadConfig:
    def test_minimal_file_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(MINIMAL_YAML, encoding="utf-8")

        cfg = load_config(path)
        assert cfg.community_name == "Darkroom"
        assert cfg.admin_role_id == 1234
        assert cfg.token_symbol == "USDC"
        assert cfg.token_decimals == 6
        assert cfg.tip_amount == 1.0
        assert cfg.challenge_hashtag == "#weeklychallenge"
        assert (cfg.warn_threshold, cfg.ban_threshold) == (5, 20)
        assert cfg.resolution_weekday == 6

    def test_overrides(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            MINIMAL_YAML
            + textwrap.dedent(
                """\
                challenges:
                  hashtag: "#photoweek"
                  duration_days: 3
                moderation:
                  ban_threshold: 10
                  extra_words: [blurryjunk]
                schedule:
                  greeting_hour: 7
                """
            ),
            encoding="utf-8",
        )

        cfg = load_config(path)
        assert cfg.challenge_hashtag == "#photoweek"
        assert cfg.challenge_duration_days == 3
        assert cfg.ban_threshold == 10
        assert cfg.extra_profanity == ("blurryjunk",)
        assert cfg.greeting_hour == 7

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_missing_required_key(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("community_name: Darkroom\n", encoding="utf-8")
        with pytest.raises(KeyError):
            load_config(path)


class TestSecrets:
    def test_all_missing(self, monkeypatch):
        for name in ("DISCORD_TOKEN", "WALLET_PRIVATE_KEY", "RPC_URL"):
            monkeypatch.delenv(name, raising=False)
        assert missing_secrets() == ["DISCORD_TOKEN", "WALLET_PRIVATE_KEY", "RPC_URL"]

    def test_placeholder_counts_as_missing(self, monkeypatch):
        monkeypatch.setenv("DISCORD_TOKEN", "your-discord-bot-token-here")
        monkeypatch.setenv("WALLET_PRIVATE_KEY", "0xabc")
        monkeypatch.setenv("RPC_URL", "https://mainnet.base.org")
        assert missing_secrets() == ["DISCORD_TOKEN"]

    def test_all_present(self, monkeypatch):
        monkeypatch.setenv("DISCORD_TOKEN", "token")
        monkeypatch.setenv("WALLET_PRIVATE_KEY", "0xabc")
        monkeypatch.setenv("RPC_URL", "https://mainnet.base.org")
        assert missing_secrets() == []
