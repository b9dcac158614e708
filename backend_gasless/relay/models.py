"""
Request/response models for the gasless transfer endpoint and the plain
dataclasses passed between pipeline stages.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, StrictInt
from solders.instruction import Instruction
from solders.pubkey import Pubkey

DEFAULT_TOKEN_DECIMALS = 9
ESTIMATED_FEE_LAMPORTS = 5000


class TransferKind(str, Enum):
    SOL = "sol"
    SPL = "spl"


class TransferRequest(BaseModel):
    """POST /api/gasless body. Required fields are checked in validation, not here,
    so a missing field gets the same error shape as any other bad input."""

    model_config = ConfigDict(populate_by_name=True)

    sender_address: str | None = Field(None, alias="senderAddress", description="Sender wallet (base58)")
    recipient_address: str | None = Field(None, alias="recipientAddress", description="Recipient wallet (base58)")
    amount: Decimal | None = Field(None, description="Amount in whole units of the asset")
    token_address: str | None = Field(None, alias="tokenAddress", description="SPL mint; omit for SOL")
    decimals: StrictInt | None = Field(None, description="Mint decimals for SPL transfers (default 9)")


class GaslessTransferResponse(BaseModel):
    """POST /api/gasless success body."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    serialized_transaction: str = Field(..., alias="serializedTransaction", description="Wire transaction, base58")
    message: str = Field(..., description="Message bytes for client signing, base64")
    transaction_type: TransferKind = Field(..., alias="transactionType")
    estimated_fee: int = Field(ESTIMATED_FEE_LAMPORTS, alias="estimatedFee", description="Lamports")


class FeePayerResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    fee_payer: str = Field(..., alias="feePayer", description="Sponsor public key (base58)")


@dataclass(frozen=True)
class ValidatedTransfer:
    sender: Pubkey
    recipient: Pubkey
    amount: Decimal
    token_address: str | None  # None: native SOL
    decimals: int

    @property
    def is_native(self) -> bool:
        return self.token_address is None


@dataclass(frozen=True)
class TransferPlan:
    """Ordered instructions for one transfer. Account creation, if any, comes first."""

    kind: TransferKind
    instructions: tuple[Instruction, ...]
    amount_base_units: int
    decimals: int
    recipient_token_account: Pubkey | None = None
    creates_recipient_account: bool = False


@dataclass(frozen=True)
class GaslessTransaction:
    serialized_transaction: str
    message: str
    transaction_type: TransferKind
    estimated_fee: int
    last_valid_block_height: int

    def to_response(self) -> GaslessTransferResponse:
        return GaslessTransferResponse(
            serialized_transaction=self.serialized_transaction,
            message=self.message,
            transaction_type=self.transaction_type,
            estimated_fee=self.estimated_fee,
        )
