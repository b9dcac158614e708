"""
Fee-sponsored transaction assembler.

Compiles the instruction plan into a legacy transaction whose fee payer is
the sponsor, signs it with the sponsor only, and serializes it for the
client. The sender's signature slot is left as the default (all-zero)
signature; the client fills it before broadcasting.
"""

from __future__ import annotations

import base64

import base58
from solders.message import Message
from solders.transaction import Transaction

from backend_gasless.core.exceptions import TransactionAssemblyFailed
from backend_gasless.gasless_logging import error_text, get_logger
from backend_gasless.relay.fee_payer import FeePayer
from backend_gasless.relay.ledger import Checkpoint, SolanaLedger
from backend_gasless.relay.models import ESTIMATED_FEE_LAMPORTS, GaslessTransaction, TransferPlan

logger = get_logger(__name__)


def compile_sponsored_transaction(
    plan: TransferPlan,
    fee_payer: FeePayer,
    checkpoint: Checkpoint,
) -> Transaction:
    """Message with fee payer first, instructions in plan order, fee payer signature only."""
    message = Message.new_with_blockhash(list(plan.instructions), fee_payer.pubkey, checkpoint.blockhash)
    transaction = Transaction.new_unsigned(message)
    fee_payer.partial_sign(transaction, checkpoint.blockhash)
    return transaction


def serialize_transaction(transaction: Transaction) -> tuple[str, str]:
    """(base58 wire bytes, base64 message bytes). No signature verification."""
    wire = base58.b58encode(bytes(transaction)).decode("ascii")
    message = base64.b64encode(bytes(transaction.message)).decode("ascii")
    return wire, message


def assemble_sponsored_transaction(
    plan: TransferPlan,
    fee_payer: FeePayer,
    ledger: SolanaLedger,
    *,
    estimated_fee: int = ESTIMATED_FEE_LAMPORTS,
) -> GaslessTransaction:
    """
    Fetch a fresh blockhash, compile, partially sign, serialize.

    Any failure (RPC error or timeout, compile/sign/serialize error) raises
    TransactionAssemblyFailed with the cause chained. Nothing is retried.
    """
    try:
        checkpoint = ledger.get_latest_checkpoint()
    except Exception as e:
        logger.warning("gasless_checkpoint_fetch_failed", error=error_text(e))
        raise TransactionAssemblyFailed() from e

    try:
        transaction = compile_sponsored_transaction(plan, fee_payer, checkpoint)
        wire, message = serialize_transaction(transaction)
    except Exception as e:
        logger.error("gasless_transaction_compile_failed", error=error_text(e), transaction_type=plan.kind.value)
        raise TransactionAssemblyFailed() from e

    return GaslessTransaction(
        serialized_transaction=wire,
        message=message,
        transaction_type=plan.kind,
        estimated_fee=estimated_fee,
        last_valid_block_height=checkpoint.last_valid_block_height,
    )
