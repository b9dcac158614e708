"""
Tests for loading the fee payer keypair from FEE_PAYER_PRIVATE_KEY.
"""

from __future__ import annotations

import json

import base58
import pytest
from solders.keypair import Keypair

from backend_gasless.core.exceptions import ConfigurationError
from backend_gasless.relay.fee_payer import (
    INVALID_FEE_PAYER_MESSAGE,
    MISSING_FEE_PAYER_MESSAGE,
    FeePayer,
)


def test_from_base58_secret():
    kp = Keypair()
    secret = base58.b58encode(bytes(kp)).decode()
    fee_payer = FeePayer.from_secret(secret)
    assert fee_payer.pubkey == kp.pubkey()


def test_from_json_array_secret():
    kp = Keypair()
    secret = json.dumps(list(bytes(kp)))
    fee_payer = FeePayer.from_secret(secret)
    assert fee_payer.pubkey == kp.pubkey()


@pytest.mark.parametrize("secret", ["", "   "])
def test_missing_secret(secret):
    with pytest.raises(ConfigurationError) as exc_info:
        FeePayer.from_secret(secret)
    assert exc_info.value.message == MISSING_FEE_PAYER_MESSAGE
    assert exc_info.value.status_code == 500


@pytest.mark.parametrize("secret", ["not-base58-0OIl", "3xyz", "[1, 2, 3]"])
def test_malformed_secret(secret):
    with pytest.raises(ConfigurationError) as exc_info:
        FeePayer.from_secret(secret)
    assert exc_info.value.message == INVALID_FEE_PAYER_MESSAGE
    # key material must not be chained into tracebacks
    assert exc_info.value.__cause__ is None


def test_fee_payer_is_read_only(fee_payer):
    with pytest.raises(AttributeError):
        fee_payer._keypair = Keypair()
    with pytest.raises(AttributeError):
        fee_payer.pubkey = Keypair().pubkey()


def test_repr_shows_pubkey_only(fee_payer_keypair):
    fee_payer = FeePayer(fee_payer_keypair)
    text = repr(fee_payer)
    assert str(fee_payer_keypair.pubkey()) in text
    assert base58.b58encode(bytes(fee_payer_keypair)).decode() not in text
