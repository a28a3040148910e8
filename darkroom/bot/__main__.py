"""
darkroom.bot.__main__ — Entry point for ``python -m darkroom.bot``
==================================================================

Wiring:
1. Load .env (secrets) and refuse to start without them.
2. Load config.yaml (soft settings).
3. Create the SQLite engine and ensure tables exist.
4. Build the token client for the bot wallet.
5. Create the DarkroomBot and run it (blocking).
"""

from __future__ import annotations

import logging
import os
import sys

from dotenv import load_dotenv

from darkroom.bot.core import DarkroomBot
from darkroom.config import load_config
from darkroom.database.engine import create_db_engine, init_db
from darkroom.services.token_service import TokenClient

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("darkroom")

REQUIRED_SECRETS: dict[str, str] = {
    "DISCORD_TOKEN": "your-discord-bot-token-here",
    "WALLET_PRIVATE_KEY": "your-wallet-private-key-here",
    "RPC_URL": "",
}


def missing_secrets() -> list[str]:
    """Names of required env vars that are unset or still placeholders."""
    missing = []
    for name, placeholder in REQUIRED_SECRETS.items():
        value = os.getenv(name, "").strip()
        if not value or value == placeholder:
            missing.append(name)
    return missing


def main() -> None:
    """Bootstrap and run the Darkroom bot."""

    # 1. Secrets.
    load_dotenv()
    missing = missing_secrets()
    if missing:
        logger.critical(
            "Missing required secrets: %s.  "
            "Copy .env.example → .env and fill them in.",
            ", ".join(missing),
        )
        sys.exit(1)

    # 2. Soft configuration.
    cfg = load_config()
    logger.info("Config loaded — Community: %s", cfg.community_name)

    # 3. Database.
    engine = create_db_engine()
    init_db(engine)

    # 4. Bot wallet.
    tokens = TokenClient(
        rpc_url=os.environ["RPC_URL"],
        private_key=os.environ["WALLET_PRIVATE_KEY"],
        token_address=cfg.token_address,
    )

    # 5. Bot.
    bot = DarkroomBot(cfg=cfg, engine=engine, tokens=tokens)

    logger.info("Starting Darkroom bot…")
    try:
        bot.run(os.environ["DISCORD_TOKEN"], log_handler=None)
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully…")


if __name__ == "__main__":
    main()
