from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar


@dataclass(eq=False)
class LedgerError(Exception):
    """Canonical error type for account operations and the ledger store.

    Subclasses pin a stable machine-readable `code`; callers that only need
    "did it work" catch LedgerError and read `code`/`reason`.
    """

    reason: str
    details: Any | None = None

    code: ClassVar[str] = "ledger_error"

    def __str__(self) -> str:  # pragma: no cover
        if self.details is None:
            return f"{self.code}:{self.reason}"
        return f"{self.code}:{self.reason}:{self.details}"


class InvalidAmountError(LedgerError):
    code = "invalid_amount"


class InvalidNameError(LedgerError):
    code = "invalid_name"


class NotFoundError(LedgerError):
    code = "account_not_found"


class InsufficientFundsError(LedgerError):
    code = "insufficient_funds"


class BalanceOverflowError(LedgerError):
    code = "balance_overflow"


class StoreError(LedgerError):
    """Underlying persistence failure (locked DB, I/O error, constraint, ...)."""

    code = "store_error"
