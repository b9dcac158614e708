"""
Fee payer (sponsor) keypair handle.

Loaded once at startup from FEE_PAYER_PRIVATE_KEY. The handle exposes the
public key and a partial_sign operation only; the secret never leaves it and
is never logged. Attributes cannot be reassigned after construction, so the
handle is safe to share across request threads.
"""

from __future__ import annotations

import json
from typing import Any

import base58
from solders.hash import Hash
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from backend_gasless.core.exceptions import ConfigurationError
from backend_gasless.gasless_logging import get_logger

logger = get_logger(__name__)

MISSING_FEE_PAYER_MESSAGE = "Missing fee payer private key in environment variables"
INVALID_FEE_PAYER_MESSAGE = "Invalid fee payer private key"


def _keypair_from_secret(secret: str) -> Keypair:
    """Keypair from a base58 string or a JSON array of 64 bytes."""
    raw = secret.strip()
    if raw.startswith("["):
        arr = json.loads(raw)
        return Keypair.from_bytes(bytes(arr[:64]))
    return Keypair.from_bytes(base58.b58decode(raw))


class FeePayer:
    """Read-only signing capability for the sponsoring account."""

    __slots__ = ("_keypair", "_pubkey")

    def __init__(self, keypair: Keypair) -> None:
        object.__setattr__(self, "_keypair", keypair)
        object.__setattr__(self, "_pubkey", keypair.pubkey())

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("FeePayer is read-only")

    def __repr__(self) -> str:
        return f"FeePayer(pubkey={self._pubkey})"

    @classmethod
    def from_secret(cls, secret: str) -> FeePayer:
        """Load from FEE_PAYER_PRIVATE_KEY; raise ConfigurationError if absent or malformed."""
        if not secret or not secret.strip():
            raise ConfigurationError(MISSING_FEE_PAYER_MESSAGE)
        try:
            keypair = _keypair_from_secret(secret)
        except Exception as e:
            # the exception text may echo key bytes; log its type only
            logger.error("fee_payer_load_failed", error_type=type(e).__name__)
            raise ConfigurationError(INVALID_FEE_PAYER_MESSAGE) from None
        return cls(keypair)

    @property
    def pubkey(self) -> Pubkey:
        return self._pubkey

    def partial_sign(self, transaction: Transaction, recent_blockhash: Hash) -> None:
        """Fill the fee payer's signature slot; other signer slots stay unset."""
        transaction.partial_sign([self._keypair], recent_blockhash)
