"""
Main entrypoint: run the gasless relay API with uvicorn.

Env: SOLANA_RPC_URL / SOLANA_NETWORK, FEE_PAYER_PRIVATE_KEY, RPC_TIMEOUT_SEC,
VERIFY_TOKEN_DECIMALS, API_HOST, API_PORT, LOG_LEVEL, LOG_FORMAT.

    python main.py                 # serve
    python main.py --check-config  # print resolved config and sponsor pubkey, then exit

Equivalent without this script: uvicorn backend_gasless.api_server.app:app --host 0.0.0.0 --port 8000
"""

import argparse
import os
import sys

# Configure structured JSON logging before other imports that may log
from backend_gasless.gasless_logging import get_logger

logger = get_logger("main")


def check_config() -> int:
    """Load settings and the fee payer; return 0 if the relay can sponsor transactions."""
    from backend_gasless.config import get_settings
    from backend_gasless.config.env import mask_rpc_url
    from backend_gasless.core.exceptions import ConfigurationError
    from backend_gasless.relay.fee_payer import FeePayer

    settings = get_settings()
    logger.info(
        "config_resolved",
        network=settings.solana_network,
        rpc_url=mask_rpc_url(settings.solana_rpc_url),
        rpc_timeout_sec=settings.rpc_timeout_sec,
        verify_token_decimals=settings.verify_token_decimals,
    )
    try:
        fee_payer = FeePayer.from_secret(settings.fee_payer_private_key)
    except ConfigurationError as e:
        logger.error("config_check_failed", message=e.message)
        return 1
    logger.info("config_check_ok", fee_payer=str(fee_payer.pubkey))
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Gasless Solana transfer relay.")
    parser.add_argument("--check-config", action="store_true", help="Validate configuration and exit")
    args = parser.parse_args()

    if args.check_config:
        sys.exit(check_config())

    from backend_gasless.api_server.app import app
    from backend_gasless.config import get_settings
    import uvicorn

    settings = get_settings()
    logger.info("main_server_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()
