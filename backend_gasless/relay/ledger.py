"""
Solana RPC access for the relay: recipient account existence, latest
blockhash, and mint decimals.

The only module in the relay that performs network I/O. Each call uses the
configured timeout (httpx under solana-py); failures are re-raised as
LedgerError / LedgerTimeout for the builder and assembler to map.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
from solana.rpc.api import Client
from solana.rpc.commitment import Commitment, Confirmed
from solders.hash import Hash
from solders.pubkey import Pubkey

from backend_gasless.config.env import DEFAULT_RPC_TIMEOUT_SEC, mask_rpc_url
from backend_gasless.core.exceptions import LedgerError, LedgerTimeout
from backend_gasless.gasless_logging import error_text, get_logger, short_address

logger = get_logger(__name__)

# SPL mint layout: 4 option tag + 32 mint_authority + 8 supply, then decimals (u8)
MINT_ACCOUNT_LEN = 82
MINT_DECIMALS_OFFSET = 44


@dataclass(frozen=True)
class Checkpoint:
    """Recent blockhash and the last block height at which it is still valid."""

    blockhash: Hash
    last_valid_block_height: int


def _is_timeout(exc: BaseException) -> bool:
    seen: BaseException | None = exc
    while seen is not None:
        if isinstance(seen, httpx.TimeoutException):
            return True
        seen = seen.__cause__ or seen.__context__
    return False


def _ledger_error(operation: str, exc: Exception) -> LedgerError:
    if _is_timeout(exc):
        return LedgerTimeout(f"{operation} timed out")
    return LedgerError(f"{operation} failed: {error_text(exc)}")


def _raw_account_data(account: Any) -> bytes:
    """account.data from get_account_info as bytes (solders Account holds bytes)."""
    data = getattr(account, "data", None)
    if data is None:
        return b""
    return bytes(data)


class SolanaLedger:
    """Thin wrapper over solana.rpc.api.Client. Stateless apart from the client; thread-safe."""

    def __init__(
        self,
        rpc_url: str,
        *,
        timeout: float = DEFAULT_RPC_TIMEOUT_SEC,
        commitment: Commitment = Confirmed,
        client: Client | None = None,
    ) -> None:
        self._rpc_url = rpc_url
        self._timeout = timeout
        self._commitment = commitment
        self._client = client

    def __repr__(self) -> str:
        return f"SolanaLedger(rpc_url={mask_rpc_url(self._rpc_url)!r}, timeout={self._timeout})"

    def _client_ensure(self) -> Client:
        if self._client is None:
            self._client = Client(self._rpc_url, commitment=self._commitment, timeout=self._timeout)
        return self._client

    def account_exists(self, address: Pubkey) -> bool:
        """True if the account is present on-chain at the configured commitment."""
        try:
            resp = self._client_ensure().get_account_info(address, commitment=self._commitment)
        except Exception as e:
            logger.warning("ledger_get_account_info_failed", account=short_address(address), error=error_text(e))
            raise _ledger_error("getAccountInfo", e) from e
        return getattr(resp, "value", None) is not None

    def get_latest_checkpoint(self) -> Checkpoint:
        """Latest blockhash + last valid block height. Never cached: blockhashes expire."""
        try:
            resp = self._client_ensure().get_latest_blockhash(self._commitment)
        except Exception as e:
            logger.warning("ledger_get_latest_blockhash_failed", error=error_text(e))
            raise _ledger_error("getLatestBlockhash", e) from e
        value = getattr(resp, "value", None)
        if value is None:
            raise LedgerError("getLatestBlockhash returned no value")
        return Checkpoint(
            blockhash=value.blockhash,
            last_valid_block_height=int(value.last_valid_block_height),
        )

    def get_mint_decimals(self, mint: Pubkey) -> int | None:
        """
        Decimals configured on the mint account, or None when the account is
        missing or too short to be a mint.
        """
        try:
            resp = self._client_ensure().get_account_info(mint, commitment=self._commitment)
        except Exception as e:
            logger.warning("ledger_get_mint_failed", mint=short_address(mint), error=error_text(e))
            raise _ledger_error("getAccountInfo", e) from e
        account = getattr(resp, "value", None)
        if account is None:
            return None
        data = _raw_account_data(account)
        if len(data) < MINT_ACCOUNT_LEN:
            return None
        return data[MINT_DECIMALS_OFFSET]
