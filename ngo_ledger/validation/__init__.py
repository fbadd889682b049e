"""User input validation."""

from ngo_ledger.validation.validator import (
    AccountValidator,
    TransactionValidator,
    ValidationFailedError,
)

__all__ = [
    "AccountValidator",
    "TransactionValidator",
    "ValidationFailedError",
]
