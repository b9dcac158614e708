"""
Tests for request validation and the end-to-end pipeline in
GaslessTransferService (FakeLedger, real signing).
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock, patch

import base58
import pytest
from solders.signature import Signature
from solders.transaction import Transaction
from spl.token.instructions import get_associated_token_address

from backend_gasless.config.settings import Settings
from backend_gasless.core.exceptions import (
    ConfigurationError,
    InvalidAddress,
    InvalidTokenAddress,
    ValidationError,
)
from backend_gasless.relay.fee_payer import INVALID_FEE_PAYER_MESSAGE, MISSING_FEE_PAYER_MESSAGE
from backend_gasless.relay.models import TransferKind, TransferRequest
from backend_gasless.relay.service import GaslessTransferService, build_gasless_service
from backend_gasless.relay.validation import (
    NATIVE_MINT_ADDRESS,
    normalize_token_address,
    validate_transfer_request,
)


def _request(sender, recipient, amount="1", **extra) -> TransferRequest:
    return TransferRequest(
        sender_address=str(sender) if sender is not None else None,
        recipient_address=str(recipient) if recipient is not None else None,
        amount=Decimal(amount) if amount is not None else None,
        **extra,
    )


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------


@pytest.mark.parametrize("token", [None, "", "  ", NATIVE_MINT_ADDRESS])
def test_native_token_addresses_normalize_to_none(token):
    assert normalize_token_address(token) is None


def test_validate_defaults_decimals_to_nine(sender, recipient):
    transfer_req = validate_transfer_request(_request(sender, recipient, "2"))
    assert transfer_req.decimals == 9
    assert transfer_req.is_native
    assert transfer_req.sender == sender


@pytest.mark.parametrize(
    "fields",
    [
        {"sender": None},
        {"recipient": None},
        {"amount": None},
        {"sender": ""},
    ],
)
def test_missing_fields(sender, recipient, fields):
    args = {"sender": sender, "recipient": recipient, "amount": "1"}
    args.update(fields)
    with pytest.raises(ValidationError, match="Missing required parameters"):
        validate_transfer_request(_request(args["sender"], args["recipient"], args["amount"]))


@pytest.mark.parametrize("amount", ["0", "-0.5"])
def test_non_positive_amount(sender, recipient, amount):
    with pytest.raises(ValidationError, match="Amount must be greater than 0"):
        validate_transfer_request(_request(sender, recipient, amount))


def test_invalid_sender_address_names_field(recipient):
    with pytest.raises(InvalidAddress, match="senderAddress"):
        validate_transfer_request(_request("0OIl-bad", recipient))


def test_invalid_recipient_address_names_field(sender):
    with pytest.raises(InvalidAddress, match="recipientAddress"):
        validate_transfer_request(_request(sender, "tooShort"))


def test_decimals_out_of_range(sender, recipient, mint):
    with pytest.raises(ValidationError, match="Decimals"):
        validate_transfer_request(_request(sender, recipient, token_address=str(mint), decimals=300))


# -----------------------------------------------------------------------------
# Pipeline
# -----------------------------------------------------------------------------


def test_native_pipeline(service, ledger, sender, recipient, fee_payer):
    result = service.build_gasless_transfer(_request(sender, recipient, "1.5"))
    assert result.transaction_type is TransferKind.SOL
    tx = Transaction.from_bytes(base58.b58decode(result.serialized_transaction))
    assert len(tx.message.instructions) == 1
    assert tx.message.account_keys[0] == fee_payer.pubkey
    assert [name for name, _ in ledger.calls] == ["get_latest_checkpoint"]


def test_sol_sentinel_is_native(service, sender, recipient):
    result = service.build_gasless_transfer(_request(sender, recipient, "1", token_address=NATIVE_MINT_ADDRESS))
    assert result.transaction_type is TransferKind.SOL


def test_token_pipeline_existing_account(service, ledger, sender, recipient, mint):
    ledger.existing_accounts.add(get_associated_token_address(recipient, mint))
    result = service.build_gasless_transfer(_request(sender, recipient, "10", token_address=str(mint), decimals=6))
    tx = Transaction.from_bytes(base58.b58decode(result.serialized_transaction))
    assert result.transaction_type is TransferKind.SPL
    assert len(tx.message.instructions) == 1
    assert len([s for s in tx.signatures if s != Signature.default()]) == 1


def test_zero_amount_makes_no_network_calls(service, ledger, sender, recipient):
    with pytest.raises(ValidationError):
        service.build_gasless_transfer(_request(sender, recipient, "0"))
    assert ledger.calls == []


def test_bad_address_fails_before_build(service, ledger, recipient):
    with pytest.raises(InvalidAddress):
        service.build_gasless_transfer(_request("bad", recipient, "1"))
    assert ledger.calls == []


def test_bad_token_address(service, ledger, sender, recipient):
    with pytest.raises(InvalidTokenAddress):
        service.build_gasless_transfer(_request(sender, recipient, "1", token_address="xyz!"))
    assert ledger.calls == []


def test_missing_fee_payer(ledger, sender, recipient):
    service = GaslessTransferService(ledger, None)
    with pytest.raises(ConfigurationError) as exc_info:
        service.build_gasless_transfer(_request(sender, recipient, "1"))
    assert exc_info.value.message == MISSING_FEE_PAYER_MESSAGE
    assert exc_info.value.status_code == 500
    assert ledger.calls == []


def _settings(key: str) -> Settings:
    return Settings(
        solana_network="devnet",
        solana_rpc_url="https://rpc.example",
        fee_payer_private_key=key,
        rpc_timeout_sec=10.0,
    )


def test_build_service_without_key_keeps_error(sender, recipient):
    service = build_gasless_service(_settings(""))
    with pytest.raises(ConfigurationError, match=MISSING_FEE_PAYER_MESSAGE):
        service.build_gasless_transfer(_request(sender, recipient, "1"))


def test_build_service_with_malformed_key(sender, recipient):
    service = build_gasless_service(_settings("definitely-not-a-key"))
    with pytest.raises(ConfigurationError, match=INVALID_FEE_PAYER_MESSAGE):
        service.require_fee_payer()


def test_build_service_with_valid_key(fee_payer_keypair):
    service = build_gasless_service(_settings(base58.b58encode(bytes(fee_payer_keypair)).decode()))
    assert service.require_fee_payer().pubkey == fee_payer_keypair.pubkey()


def test_request_fields_checked_once(service, sender, recipient):
    from backend_gasless.relay import service as service_module
    from backend_gasless.relay import validation

    checker = MagicMock(wraps=validation.check_request_fields)
    with patch.object(service_module, "check_request_fields", checker), patch.object(
        validation, "check_request_fields", checker
    ):
        service.build_gasless_transfer(_request(sender, recipient, "1"))
    assert checker.call_count == 1


def test_boolean_decimals_rejected_by_model():
    import pydantic

    with pytest.raises(pydantic.ValidationError):
        TransferRequest.model_validate({"decimals": True})
    assert TransferRequest.model_validate({"decimals": 6}).decimals == 6
