"""
Environment variable loading for the gasless relay.

- SOLANA_RPC_URL: explicit RPC endpoint (wins over everything else)
- SOLANA_NETWORK: devnet | mainnet (default: devnet), picks the public RPC
- FEE_PAYER_PRIVATE_KEY: sponsor secret key, base58 or JSON array of 64 ints
- RPC_TIMEOUT_SEC: per-call RPC timeout (default: 10)
- VERIFY_TOKEN_DECIMALS: check request decimals against the mint account
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

# config is backend_gasless/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEVNET_RPC_URL = "https://api.devnet.solana.com"
MAINNET_RPC_URL = "https://api.mainnet-beta.solana.com"
DEFAULT_RPC_TIMEOUT_SEC = 10.0


def load_gasless_env() -> None:
    """Load .env from project root. Existing environment variables win."""
    from dotenv import load_dotenv

    load_dotenv(_ENV_PATH, override=False)


def parse_bool_env(name: str, default: bool = False) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    return default


def get_solana_network() -> str:
    """Return devnet | mainnet from SOLANA_NETWORK (mainnet-beta accepted). Default: devnet."""
    raw = (os.getenv("SOLANA_NETWORK") or "devnet").strip().lower()
    if raw in ("mainnet", "mainnet-beta"):
        return "mainnet"
    return "devnet"


def get_solana_rpc_url() -> str:
    """SOLANA_RPC_URL if set, otherwise the public endpoint of SOLANA_NETWORK."""
    url = (os.getenv("SOLANA_RPC_URL") or "").strip()
    if url:
        return url
    return MAINNET_RPC_URL if get_solana_network() == "mainnet" else DEVNET_RPC_URL


def get_fee_payer_private_key() -> str:
    """Raw FEE_PAYER_PRIVATE_KEY, stripped. Empty string when unset."""
    return (os.getenv("FEE_PAYER_PRIVATE_KEY") or "").strip()


def get_rpc_timeout_sec() -> float:
    raw = (os.getenv("RPC_TIMEOUT_SEC") or "").strip()
    if not raw:
        return DEFAULT_RPC_TIMEOUT_SEC
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_RPC_TIMEOUT_SEC
    return value if value > 0 else DEFAULT_RPC_TIMEOUT_SEC


def mask_rpc_url(url: str) -> str:
    """Hide API keys embedded in provider URLs (e.g. ?api-key=...)."""
    if "api-key=" in url:
        return url.split("api-key=")[0] + "api-key=***"
    return url
