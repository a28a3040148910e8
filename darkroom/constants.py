"""
darkroom.constants — Shared Constants & Command Registry
=========================================================

Single source of truth for presentation constants and the slash-command
registry.  The registry only carries display metadata; behaviour lives in
the cogs, which look their descriptions up here.
"""

from __future__ import annotations

from typing import NamedTuple

RANK_BADGES: list[str] = ["\U0001f947", "\U0001f948", "\U0001f949"]  # 🥇🥈🥉

# Reactions added to a profane message, in order.
INFRACTION_REACTIONS: tuple[str, ...] = ("\U0001f44e\U0001f3fe", "❌")  # 👎🏾 ❌

WELCOME_MESSAGE = (
    "\U0001f44b Welcome <@{user_id}>! We're excited to have you here!\n\n"
    "\U0001f4cb **Getting Started:**\n"
    "• Explore our channels and join conversations\n"
    "• Use `/help` to see available commands\n"
    "• Check pinned messages for important info\n"
    "• Introduce yourself when you're ready!\n\n"
    "\U0001f4a1 **Quick Tips:**\n"
    "• Be respectful and kind to all members\n"
    "• Ask questions - we're here to help!\n"
    "• Have fun and engage with the community\n\n"
    "Welcome aboard! \U0001f680"
)


# ---------------------------------------------------------------------------
# Slash-command registry
# ---------------------------------------------------------------------------
class CommandInfo(NamedTuple):
    name: str
    description: str
    admin_only: bool = False


COMMANDS: list[CommandInfo] = [
    CommandInfo("help", "Get help with bot commands"),
    CommandInfo("leaderboard", "See who's been keeping the channel on fire"),
    CommandInfo("infractions", "Who has been messing up?"),
    CommandInfo("set-gm", "Post a gm in this channel every morning", admin_only=True),
    CommandInfo("set_gm", "Alias of /set-gm", admin_only=True),
    CommandInfo("stop-gm", "Stop the morning gm in this channel", admin_only=True),
    CommandInfo("challenge_start", "Start the weekly photo challenge", admin_only=True),
    CommandInfo("challenge_end", "End the weekly photo challenge and pick a winner", admin_only=True),
    CommandInfo("challenge_current", "Show the current photo challenge"),
    CommandInfo("challenge_winners", "See the latest challenge winners"),
    CommandInfo("link-wallet", "Link the wallet that receives your tips and prizes"),
]

COMMANDS_BY_NAME: dict[str, CommandInfo] = {c.name: c for c in COMMANDS}


def describe(name: str) -> str:
    """Return the registered description for command *name*."""
    return COMMANDS_BY_NAME[name].description


def build_help_text() -> str:
    """Render ``/help`` from the registry, skipping aliases."""
    lines = ["**Available Commands:**", ""]
    for cmd in COMMANDS:
        if cmd.description.startswith("Alias of"):
            continue
        prefix = "ADMIN ONLY - " if cmd.admin_only else ""
        lines.append(f"• `/{cmd.name}` - {prefix}{cmd.description}")
    lines.append("")
    lines.append("• Some messages trigger me, so feel free to say hello and see what works.")
    return "\n".join(lines)
