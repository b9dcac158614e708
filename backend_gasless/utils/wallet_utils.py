"""Wallet address parsing utilities."""

from __future__ import annotations

from solders.pubkey import Pubkey

from backend_gasless.core.exceptions import InvalidAddress


def parse_wallet(value: str, field_name: str) -> Pubkey:
    """Parse a base58 address into a Pubkey; raise InvalidAddress naming the field."""
    try:
        return Pubkey.from_string(value.strip())
    except Exception as e:
        raise InvalidAddress(f"Invalid Solana address: {field_name}") from e
