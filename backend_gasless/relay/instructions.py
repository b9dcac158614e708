"""
Transfer instruction builder.

Native SOL: a single System Program transfer of floor(amount * 1e9) lamports.

SPL token: derive sender and recipient associated token accounts (ATAs). If
the recipient ATA does not exist yet, prepend a create-ATA instruction paid
by the fee payer. Then add transfer_checked, which encodes decimals so the
Token program rejects a transfer whose decimals disagree with the mint.

Instruction order is significant and never changed after building:
[create_ata?, transfer].
"""

from __future__ import annotations

from solders.instruction import Instruction
from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import (
    TransferCheckedParams,
    create_associated_token_account,
    get_associated_token_address,
    transfer_checked,
)

from backend_gasless.core.exceptions import (
    InstructionBuildFailed,
    InvalidTokenAddress,
    ValidationError,
)
from backend_gasless.gasless_logging import error_text, get_logger, short_address
from backend_gasless.relay.amounts import NATIVE_DECIMALS, sol_to_lamports, to_base_units
from backend_gasless.relay.ledger import SolanaLedger
from backend_gasless.relay.models import TransferKind, TransferPlan, ValidatedTransfer

logger = get_logger(__name__)


def parse_token_address(token_address: str) -> Pubkey:
    try:
        return Pubkey.from_string(token_address)
    except Exception as e:
        raise InvalidTokenAddress(f"Invalid token address: {e}") from e


def build_native_transfer(sender: Pubkey, recipient: Pubkey, lamports: int) -> Instruction:
    return transfer(TransferParams(from_pubkey=sender, to_pubkey=recipient, lamports=lamports))


def build_transfer_checked(
    source: Pubkey,
    mint: Pubkey,
    dest: Pubkey,
    owner: Pubkey,
    amount: int,
    decimals: int,
) -> Instruction:
    return transfer_checked(
        TransferCheckedParams(
            program_id=TOKEN_PROGRAM_ID,
            source=source,
            mint=mint,
            dest=dest,
            owner=owner,
            amount=amount,
            decimals=decimals,
        )
    )


def _verify_mint_decimals(ledger: SolanaLedger, mint: Pubkey, decimals: int) -> None:
    try:
        actual = ledger.get_mint_decimals(mint)
    except Exception as e:
        raise InstructionBuildFailed() from e
    if actual is None:
        raise InvalidTokenAddress("Invalid token address: mint account not found")
    if actual != decimals:
        raise ValidationError(f"Decimals mismatch: token uses {actual}, request specified {decimals}")


def plan_native_transfer(transfer_req: ValidatedTransfer) -> TransferPlan:
    lamports = sol_to_lamports(transfer_req.amount)
    ix = build_native_transfer(transfer_req.sender, transfer_req.recipient, lamports)
    return TransferPlan(
        kind=TransferKind.SOL,
        instructions=(ix,),
        amount_base_units=lamports,
        decimals=NATIVE_DECIMALS,
    )


def plan_token_transfer(
    transfer_req: ValidatedTransfer,
    fee_payer: Pubkey,
    ledger: SolanaLedger,
    *,
    verify_decimals: bool = False,
) -> TransferPlan:
    """
    SPL path. Raises InvalidTokenAddress for a malformed mint, ValidationError
    for bad amounts or (when verify_decimals) a decimals mismatch, and
    InstructionBuildFailed when ATA derivation or the existence query fails.
    """
    mint = parse_token_address(transfer_req.token_address or "")
    amount = to_base_units(transfer_req.amount, transfer_req.decimals)

    if verify_decimals:
        _verify_mint_decimals(ledger, mint, transfer_req.decimals)

    try:
        sender_ata = get_associated_token_address(transfer_req.sender, mint)
        recipient_ata = get_associated_token_address(transfer_req.recipient, mint)
        recipient_exists = ledger.account_exists(recipient_ata)
    except Exception as e:
        logger.warning(
            "gasless_recipient_account_lookup_failed",
            mint=short_address(mint),
            recipient=short_address(transfer_req.recipient),
            error=error_text(e),
        )
        raise InstructionBuildFailed() from e

    instructions: list[Instruction] = []
    if not recipient_exists:
        logger.info(
            "gasless_recipient_account_missing",
            recipient_token_account=str(recipient_ata),
            mint=str(mint),
        )
        instructions.append(
            create_associated_token_account(payer=fee_payer, owner=transfer_req.recipient, mint=mint)
        )
    instructions.append(
        build_transfer_checked(
            source=sender_ata,
            mint=mint,
            dest=recipient_ata,
            owner=transfer_req.sender,
            amount=amount,
            decimals=transfer_req.decimals,
        )
    )
    return TransferPlan(
        kind=TransferKind.SPL,
        instructions=tuple(instructions),
        amount_base_units=amount,
        decimals=transfer_req.decimals,
        recipient_token_account=recipient_ata,
        creates_recipient_account=not recipient_exists,
    )


def build_transfer_instructions(
    transfer_req: ValidatedTransfer,
    fee_payer: Pubkey,
    ledger: SolanaLedger,
    *,
    verify_decimals: bool = False,
) -> TransferPlan:
    """Pick the native or token path for a validated request."""
    if transfer_req.is_native:
        return plan_native_transfer(transfer_req)
    return plan_token_transfer(transfer_req, fee_payer, ledger, verify_decimals=verify_decimals)
