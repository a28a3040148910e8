"""
darkroom.engine.tipping — Tip Request Parsing & Token Amounts
==============================================================
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from decimal import Decimal

_TIP_RE = re.compile(r"\btip\b", re.IGNORECASE)


def tip_recipients(mention_ids: Iterable[int], author_id: int, bot_id: int | None) -> list[int]:
    """Mentioned members who should receive a tip, in mention order.

    The bot and the sender are never tipped and duplicates are dropped.
    """
    seen: set[int] = set()
    recipients: list[int] = []
    for uid in mention_ids:
        if uid in (author_id, bot_id) or uid in seen:
            continue
        seen.add(uid)
        recipients.append(uid)
    return recipients


def is_tip_request(content: str, recipient_ids: list[int]) -> bool:
    """A message asks for a tip when it has the word "tip" and names somebody.

    "multiple" or "stipend" do not count.
    """
    return bool(recipient_ids) and _TIP_RE.search(content) is not None


def to_base_units(amount: float | Decimal, decimals: int) -> int:
    """Convert whole tokens to integer base units (``1.5`` USDC → ``1_500_000``)."""
    return int(Decimal(str(amount)) * (Decimal(10) ** decimals))


def from_base_units(units: int, decimals: int) -> Decimal:
    """Convert integer base units back to whole tokens."""
    return Decimal(units) / (Decimal(10) ** decimals)


def format_amount(units: int, decimals: int, symbol: str) -> str:
    value = from_base_units(units, decimals).normalize()
    return f"{value:f} {symbol}"
