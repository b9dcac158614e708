"""
Application-level exceptions.

Every GaslessError carries the HTTP status and the client-safe message the
API returns as {"success": false, "message": ...}. Underlying causes are
chained with `raise ... from e` and logged, never sent to the client.
"""

from __future__ import annotations


class GaslessError(Exception):
    """Base class for errors that map to a structured API error response."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(GaslessError):
    """Bad client input: missing field, non-positive amount, bad decimals."""

    status_code = 400
    default_message = "Invalid request"


class InvalidAddress(ValidationError):
    default_message = "Invalid Solana address"


class InvalidTokenAddress(ValidationError):
    default_message = "Invalid token address"


class ConfigurationError(GaslessError):
    """Server misconfiguration (e.g. missing fee payer key). Needs an operator."""

    status_code = 500
    default_message = "Server misconfiguration"


class InstructionBuildFailed(GaslessError):
    status_code = 500
    default_message = "Failed to build transfer instructions"


class TransactionAssemblyFailed(GaslessError):
    status_code = 500
    default_message = "Failed to assemble transaction"


class LedgerError(Exception):
    """RPC call failed. Internal: callers map it to a GaslessError."""


class LedgerTimeout(LedgerError):
    """RPC call exceeded the configured timeout."""
