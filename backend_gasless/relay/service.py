"""
Gasless transfer pipeline: validate -> require fee payer -> build -> assemble.

One GaslessTransferService is created at startup and shared by all request
threads. It holds only read-only collaborators (ledger client, fee payer
handle, flags), so no locking is needed.
"""

from __future__ import annotations

from backend_gasless.config.settings import Settings
from backend_gasless.core.exceptions import ConfigurationError
from backend_gasless.gasless_logging import get_logger, short_address
from backend_gasless.relay.assembler import assemble_sponsored_transaction
from backend_gasless.relay.fee_payer import MISSING_FEE_PAYER_MESSAGE, FeePayer
from backend_gasless.relay.instructions import build_transfer_instructions
from backend_gasless.relay.ledger import SolanaLedger
from backend_gasless.relay.models import ESTIMATED_FEE_LAMPORTS, GaslessTransaction, TransferRequest
from backend_gasless.relay.validation import check_request_fields, resolve_transfer

logger = get_logger(__name__)


class GaslessTransferService:
    def __init__(
        self,
        ledger: SolanaLedger,
        fee_payer: FeePayer | None,
        *,
        fee_payer_error: ConfigurationError | None = None,
        verify_token_decimals: bool = False,
        estimated_fee: int = ESTIMATED_FEE_LAMPORTS,
    ) -> None:
        self._ledger = ledger
        self._fee_payer = fee_payer
        self._fee_payer_error = fee_payer_error
        self._verify_token_decimals = verify_token_decimals
        self._estimated_fee = estimated_fee

    def require_fee_payer(self) -> FeePayer:
        """The sponsor handle, or the ConfigurationError recorded at startup."""
        if self._fee_payer is None:
            message = self._fee_payer_error.message if self._fee_payer_error else MISSING_FEE_PAYER_MESSAGE
            raise ConfigurationError(message)
        return self._fee_payer

    def build_gasless_transfer(self, request: TransferRequest) -> GaslessTransaction:
        """
        Run the full pipeline for one request.

        Input errors are raised before any RPC call. A missing fee payer is
        reported after input checks, for every otherwise acceptable request.
        """
        amount, decimals = check_request_fields(request)
        fee_payer = self.require_fee_payer()
        transfer_req = resolve_transfer(request, amount, decimals)

        logger.info(
            "gasless_transfer_requested",
            sender=short_address(transfer_req.sender),
            recipient=short_address(transfer_req.recipient),
            token=short_address(transfer_req.token_address) if transfer_req.token_address else "SOL",
            amount=str(transfer_req.amount),
        )

        plan = build_transfer_instructions(
            transfer_req,
            fee_payer.pubkey,
            self._ledger,
            verify_decimals=self._verify_token_decimals,
        )
        result = assemble_sponsored_transaction(
            plan,
            fee_payer,
            self._ledger,
            estimated_fee=self._estimated_fee,
        )
        logger.info(
            "gasless_transaction_assembled",
            transaction_type=plan.kind.value,
            instruction_count=len(plan.instructions),
            amount_base_units=plan.amount_base_units,
            creates_recipient_account=plan.creates_recipient_account,
            last_valid_block_height=result.last_valid_block_height,
        )
        return result


def build_gasless_service(settings: Settings) -> GaslessTransferService:
    """
    Create the service from settings. A missing or malformed fee payer key
    does not stop startup: the error is kept and returned to every request.
    """
    fee_payer: FeePayer | None = None
    fee_payer_error: ConfigurationError | None = None
    try:
        fee_payer = FeePayer.from_secret(settings.fee_payer_private_key)
        logger.info("fee_payer_loaded", fee_payer=str(fee_payer.pubkey))
    except ConfigurationError as e:
        fee_payer_error = e
        logger.error("fee_payer_unavailable", message=e.message)

    ledger = SolanaLedger(settings.solana_rpc_url, timeout=settings.rpc_timeout_sec)
    return GaslessTransferService(
        ledger,
        fee_payer,
        fee_payer_error=fee_payer_error,
        verify_token_decimals=settings.verify_token_decimals,
    )
