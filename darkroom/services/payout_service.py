"""
darkroom.services.payout_service — Tips & Prizes
=================================================

Async entry points that turn "pay member X this many base units" into a
token transfer.  Each call is attempted exactly once; there is no retry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from darkroom.database.engine import run_db
from darkroom.services.wallet_service import get_wallet

if TYPE_CHECKING:
    from darkroom.bot.core import DarkroomBot

logger = logging.getLogger(__name__)


class PayoutError(Exception):
    """A tip or prize could not be sent."""

    def __init__(self, user_id: int, reason: str) -> None:
        super().__init__(f"payout to {user_id} failed: {reason}")
        self.user_id = user_id
        self.reason = reason


@dataclass(frozen=True, slots=True)
class PayoutResult:
    user_id: int
    address: str
    amount: int
    tx_hash: str


async def bot_balance(bot: DarkroomBot) -> int:
    return await run_db(bot.tokens.balance)


async def send_tokens(bot: DarkroomBot, user_id: int, amount: int) -> PayoutResult:
    """Transfer *amount* base units to the wallet linked by *user_id*.

    Raises
    ------
    PayoutError
        If the member has no linked wallet or the transfer is rejected.
    """
    address = await run_db(get_wallet, bot.engine, user_id)
    if address is None:
        raise PayoutError(user_id, "no wallet linked")

    try:
        tx_hash = await run_db(bot.tokens.transfer, address, amount)
    except Exception as exc:
        raise PayoutError(user_id, str(exc)) from exc

    logger.info("Paid %d units to user %s (%s)", amount, user_id, tx_hash)
    return PayoutResult(user_id=user_id, address=address, amount=amount, tx_hash=tx_hash)
