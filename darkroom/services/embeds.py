"""
darkroom.services.embeds — Discord embed builders
==================================================

All embed construction lives here so cogs and the resolution service only
supply data — no layout concerns.
"""

from __future__ import annotations

from collections.abc import Sequence

import discord

from darkroom.constants import RANK_BADGES, build_help_text
from darkroom.engine.tipping import format_amount
from darkroom.services.challenge_service import WinnerRow
from darkroom.services.stats_service import LeaderboardRow


def build_help_embed(community_name: str) -> discord.Embed:
    embed = discord.Embed(
        title="\U0001f4f8 Darkroom Help",
        description=build_help_text(),
        color=discord.Color.blurple(),
    )
    embed.set_footer(text=community_name)
    return embed


def build_leaderboard_embed(rows: Sequence[LeaderboardRow], viewer_id: int) -> discord.Embed:
    """Top contributors, with a callout on the viewer's own row if listed."""
    lines = []
    for r in rows:
        medal = RANK_BADGES[r.rank - 1] if r.rank <= len(RANK_BADGES) else f"{r.rank}."
        lines.append(f"{medal} <@{r.user_id}>")
        lines.append(
            f"   \U0001f4ac {r.message_count} messages | "
            f"❤️ {r.reaction_count} reactions"
        )
        if r.user_id == viewer_id:
            lines.append(
                f"   \U0001f389 You are position {r.rank} with {r.message_count} "
                f"messages and {r.reaction_count} reactions"
            )
        lines.append("")

    return discord.Embed(
        title="\U0001f3c6 Top Contributors",
        description="\n".join(lines).strip(),
        color=discord.Color.gold(),
    )


def build_infractions_embed(offenders: Sequence[tuple[int, int]]) -> discord.Embed:
    lines = [f"• <@{user_id}> — {total} infractions" for user_id, total in offenders]
    return discord.Embed(
        title="\U0001f6a8 Top Offenders",
        description="\n".join(lines),
        color=discord.Color.red(),
    )


def build_challenge_start_embed(theme: str, hashtag: str, days: int) -> discord.Embed:
    return discord.Embed(
        title="\U0001f4f8 New Weekly Photo Challenge!",
        description=(
            f"Theme: *{theme}*\n\n"
            f"Post your photos with **{hashtag}** in the next {days} days! ❤️"
        ),
        color=discord.Color.teal(),
    )


def build_winner_embed(
    theme: str,
    user_id: int,
    reaction_count: int,
    prize: str,
    paid: bool,
) -> discord.Embed:
    """Weekly winner announcement."""
    prize_line = (
        f"\U0001f4b0 **Prize:** {prize} sent on-chain!"
        if paid
        else f"\U0001f4b0 **Prize:** {prize} (payout pending)"
    )
    return discord.Embed(
        title=f"\U0001f3c6 Photo of the Week — Theme: {theme} \U0001f3c6",
        description=(
            f"<@{user_id}> wins with {reaction_count} reactions!\n\n{prize_line}"
        ),
        color=discord.Color.gold(),
    )


def build_winners_embed(
    winners: Sequence[WinnerRow], decimals: int, symbol: str
) -> discord.Embed:
    """Hall of fame for ``/challenge_winners``."""
    blocks = []
    for i, w in enumerate(winners, 1):
        date = f"{w.timestamp:%b} {w.timestamp.day}"
        prize = format_amount(w.prize_amount, decimals, symbol)
        if not w.paid:
            prize += " (not paid)"
        blocks.append(
            f"**{i}.** <@{w.user_id}> — *{w.theme or 'Unknown theme'}*\n"
            f"\U0001f4b0 {prize} — \U0001f5d3 {date}"
        )
    return discord.Embed(
        title="\U0001f4f8 Photo Challenge Hall of Fame",
        description="\n\n".join(blocks),
        color=discord.Color.gold(),
    )
