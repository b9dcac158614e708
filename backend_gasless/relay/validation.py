"""
Input validation for gasless transfer requests.

Pure checks with no network access. Required fields and amount are checked
first; address parsing happens separately (parse_addresses) once the service
knows it can sponsor the transaction at all.
"""

from __future__ import annotations

from decimal import Decimal

from solders.pubkey import Pubkey

from backend_gasless.core.exceptions import ValidationError
from backend_gasless.relay.amounts import MAX_TOKEN_DECIMALS
from backend_gasless.relay.models import DEFAULT_TOKEN_DECIMALS, TransferRequest, ValidatedTransfer
from backend_gasless.utils.wallet_utils import parse_wallet

# Wrapped SOL mint; clients send it to mean "native SOL"
NATIVE_MINT_ADDRESS = "So11111111111111111111111111111111111111112"

MISSING_PARAMETERS_MESSAGE = "Missing required parameters"
NON_POSITIVE_AMOUNT_MESSAGE = "Amount must be greater than 0"


def normalize_token_address(token_address: str | None) -> str | None:
    """None for native SOL (absent, blank or the wrapped SOL mint), else the stripped address."""
    if token_address is None:
        return None
    value = token_address.strip()
    if not value or value == NATIVE_MINT_ADDRESS:
        return None
    return value


def check_request_fields(request: TransferRequest) -> tuple[Decimal, int]:
    """Validate presence, amount and decimals. Returns (amount, decimals)."""
    sender = (request.sender_address or "").strip()
    recipient = (request.recipient_address or "").strip()
    if not sender or not recipient or request.amount is None:
        raise ValidationError(MISSING_PARAMETERS_MESSAGE)

    amount = request.amount
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(NON_POSITIVE_AMOUNT_MESSAGE)

    decimals = DEFAULT_TOKEN_DECIMALS if request.decimals is None else request.decimals
    if decimals < 0 or decimals > MAX_TOKEN_DECIMALS:
        raise ValidationError(f"Decimals must be between 0 and {MAX_TOKEN_DECIMALS}")
    return amount, decimals


def parse_addresses(request: TransferRequest) -> tuple[Pubkey, Pubkey]:
    """Parse sender and recipient; InvalidAddress names the offending field."""
    sender = parse_wallet(request.sender_address or "", "senderAddress")
    recipient = parse_wallet(request.recipient_address or "", "recipientAddress")
    return sender, recipient


def resolve_transfer(request: TransferRequest, amount: Decimal, decimals: int) -> ValidatedTransfer:
    """Parse addresses for a request whose fields already passed check_request_fields."""
    sender, recipient = parse_addresses(request)
    return ValidatedTransfer(
        sender=sender,
        recipient=recipient,
        amount=amount,
        token_address=normalize_token_address(request.token_address),
        decimals=decimals,
    )


def validate_transfer_request(request: TransferRequest) -> ValidatedTransfer:
    """Full validation: fields, amount, decimals, then sender/recipient addresses."""
    amount, decimals = check_request_fields(request)
    return resolve_transfer(request, amount, decimals)
