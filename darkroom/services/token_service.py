"""
darkroom.services.token_service — ERC-20 Client for the Bot Wallet
===================================================================

Wraps ``web3`` so the rest of the bot only sees three operations: the bot
wallet address, its token balance, and a token transfer.  Every call is
blocking network I/O, so cogs go through ``run_db`` like they do for the
store.
"""

from __future__ import annotations

import logging

from web3 import Web3

logger = logging.getLogger(__name__)

# Minimal ERC-20 ABI — only what the bot calls.
ERC20_ABI: list[dict] = [
    {
        "constant": True,
        "inputs": [{"name": "owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": False,
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "name": "transfer",
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]


class TokenClient:
    """Balance lookups and transfers of one ERC-20 token from the bot wallet."""

    def __init__(self, rpc_url: str, private_key: str, token_address: str) -> None:
        self.w3 = Web3(Web3.HTTPProvider(rpc_url))
        self.account = self.w3.eth.account.from_key(private_key)
        self.contract = self.w3.eth.contract(
            address=Web3.to_checksum_address(token_address), abi=ERC20_ABI
        )
        logger.info("Token client ready — wallet %s, token %s", self.address, token_address)

    @property
    def address(self) -> str:
        return self.account.address

    def balance(self) -> int:
        """Bot wallet balance in token base units."""
        return self.contract.functions.balanceOf(self.address).call()

    def transfer(self, to: str, amount: int) -> str:
        """Submit a token transfer and return the transaction hash.

        The transaction is signed locally and broadcast; this does not wait
        for it to be mined.
        """
        tx = self.contract.functions.transfer(
            Web3.to_checksum_address(to), amount
        ).build_transaction({
            "from": self.address,
            "nonce": self.w3.eth.get_transaction_count(self.address, "pending"),
        })
        signed = self.account.sign_transaction(tx)
        tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        tx_hex = self.w3.to_hex(tx_hash)
        logger.info("Transfer of %d units to %s submitted: %s", amount, to, tx_hex)
        return tx_hex
