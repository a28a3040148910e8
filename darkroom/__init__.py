"""
Darkroom — A Discord Bot for Photography Communities
=====================================================
Tracks who keeps the conversation going, keeps the language clean, runs a
weekly photo challenge with an on-chain prize, and lets admins tip members
in tokens.

Package layout::

    darkroom/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Slash-command registry + presentation constants
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helper
    │   └── models.py      # ORM models (7 tables)
    ├── engine/
    │   ├── moderation.py  # Profanity filter + escalation rules
    │   ├── tipping.py     # Tip parsing + token unit conversion
    │   └── triggers.py    # Keyword replies
    ├── services/
    │   ├── stats_service.py       # Message/reaction counters, leaderboard
    │   ├── moderation_service.py  # Infraction log
    │   ├── challenge_service.py   # Challenge store operations
    │   ├── resolution_service.py  # Winner selection, payout, announcement
    │   ├── schedule_service.py    # Daily greeting config
    │   ├── wallet_service.py      # Member wallet links
    │   ├── token_service.py       # ERC-20 client (web3)
    │   ├── payout_service.py      # Tips and prizes
    │   └── embeds.py              # Discord embed builders
    ├── bot/
    │   ├── core.py        # Bot subclass, cog loader
    │   └── cogs/
    │       ├── social.py      # on_message pipeline
    │       ├── reactions.py   # Reaction tracking
    │       ├── membership.py  # Welcome on join
    │       ├── meta.py        # /help, /leaderboard, /infractions, /link-wallet
    │       ├── challenges.py  # /challenge_*
    │       ├── admin.py       # /set-gm, /stop-gm
    │       └── tasks.py       # Daily greeting + weekly resolution
    └── api/
        ├── main.py        # FastAPI app
        └── routes/        # Read-only public endpoints
"""

__version__ = "0.1.0"
