"""
Pytest fixtures for gasless relay tests.

FakeLedger stands in for SolanaLedger: it records every call so tests can
assert that no network access happened, and can be told which accounts
exist or which call should fail. No test touches a real RPC endpoint.
"""

from __future__ import annotations

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from backend_gasless.relay.fee_payer import FeePayer
from backend_gasless.relay.ledger import Checkpoint
from backend_gasless.relay.service import GaslessTransferService

LAST_VALID_BLOCK_HEIGHT = 250_000_123


class FakeLedger:
    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []
        self.existing_accounts: set[Pubkey] = set()
        self.mint_decimals: dict[Pubkey, int] = {}
        self.blockhash = Hash.new_unique()
        self.last_valid_block_height = LAST_VALID_BLOCK_HEIGHT
        self.account_error: Exception | None = None
        self.checkpoint_error: Exception | None = None

    def account_exists(self, address: Pubkey) -> bool:
        self.calls.append(("account_exists", address))
        if self.account_error is not None:
            raise self.account_error
        return address in self.existing_accounts

    def get_latest_checkpoint(self) -> Checkpoint:
        self.calls.append(("get_latest_checkpoint", None))
        if self.checkpoint_error is not None:
            raise self.checkpoint_error
        return Checkpoint(blockhash=self.blockhash, last_valid_block_height=self.last_valid_block_height)

    def get_mint_decimals(self, mint: Pubkey) -> int | None:
        self.calls.append(("get_mint_decimals", mint))
        return self.mint_decimals.get(mint)


@pytest.fixture
def fee_payer_keypair() -> Keypair:
    return Keypair()


@pytest.fixture
def fee_payer(fee_payer_keypair) -> FeePayer:
    return FeePayer(fee_payer_keypair)


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def sender() -> Pubkey:
    return Keypair().pubkey()


@pytest.fixture
def recipient() -> Pubkey:
    return Keypair().pubkey()


@pytest.fixture
def mint() -> Pubkey:
    return Keypair().pubkey()


@pytest.fixture
def service(ledger, fee_payer) -> GaslessTransferService:
    return GaslessTransferService(ledger, fee_payer)


@pytest.fixture
def client(service):
    """TestClient with the relay service overridden (lifespan not run)."""
    from fastapi.testclient import TestClient

    from backend_gasless.api_server.gasless import get_gasless_service
    from backend_gasless.api_server.server import app

    app.dependency_overrides[get_gasless_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_gasless_service, None)


@pytest.fixture
def clean_env(monkeypatch):
    """Drop relay env vars and the settings cache; keep .env out of the way."""
    for name in (
        "SOLANA_RPC_URL",
        "SOLANA_NETWORK",
        "FEE_PAYER_PRIVATE_KEY",
        "RPC_TIMEOUT_SEC",
        "VERIFY_TOKEN_DECIMALS",
        "API_HOST",
        "API_PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("backend_gasless.config.settings.load_gasless_env", lambda: None)

    from backend_gasless.config import get_settings

    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()
