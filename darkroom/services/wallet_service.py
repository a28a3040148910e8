"""
darkroom.services.wallet_service — Member Wallet Links
=======================================================

Discord ids are not on-chain addresses, so members register the address
that should receive tips and prizes with ``/link-wallet``.
"""

from __future__ import annotations

from sqlalchemy import Engine
from web3 import Web3

from darkroom.database.engine import get_session
from darkroom.database.models import WalletLink


def is_valid_address(address: str) -> bool:
    return Web3.is_address(address)


def link_wallet(engine: Engine, user_id: int, address: str) -> WalletLink:
    """Create or replace the wallet for *user_id*.

    Raises
    ------
    ValueError
        If *address* is not a valid EVM address.
    """
    if not is_valid_address(address):
        raise ValueError(f"Not a valid wallet address: {address!r}")
    checksum = Web3.to_checksum_address(address)
    with get_session(engine) as session:
        link = session.get(WalletLink, user_id)
        if link is None:
            link = WalletLink(user_id=user_id, address=checksum)
            session.add(link)
        else:
            link.address = checksum
        session.flush()
    return link


def get_wallet(engine: Engine, user_id: int) -> str | None:
    with get_session(engine) as session:
        link = session.get(WalletLink, user_id)
        return link.address if link else None
