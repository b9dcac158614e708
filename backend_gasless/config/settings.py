"""
Application settings for the gasless relay.

Settings are read once from the environment (after loading .env) into a
frozen dataclass. The fee payer secret is kept out of repr so that logging
or printing the settings never leaks it.
"""

from __future__ import annotations

import functools
import os
from dataclasses import dataclass, field

from backend_gasless.config.env import (
    get_fee_payer_private_key,
    get_rpc_timeout_sec,
    get_solana_network,
    get_solana_rpc_url,
    load_gasless_env,
    parse_bool_env,
)


@dataclass(frozen=True)
class Settings:
    solana_network: str
    solana_rpc_url: str
    fee_payer_private_key: str = field(repr=False)
    rpc_timeout_sec: float
    verify_token_decimals: bool = False
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    @property
    def has_fee_payer(self) -> bool:
        return bool(self.fee_payer_private_key)


def load_settings() -> Settings:
    """Build Settings from the current environment (no caching)."""
    load_gasless_env()
    return Settings(
        solana_network=get_solana_network(),
        solana_rpc_url=get_solana_rpc_url(),
        fee_payer_private_key=get_fee_payer_private_key(),
        rpc_timeout_sec=get_rpc_timeout_sec(),
        verify_token_decimals=parse_bool_env("VERIFY_TOKEN_DECIMALS", False),
        api_host=(os.getenv("API_HOST") or "0.0.0.0").strip(),
        api_port=int((os.getenv("API_PORT") or "8000").strip() or "8000"),
    )


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the process-wide settings, loaded on first call.

    Tests that change the environment call get_settings.cache_clear().
    """
    return load_settings()
