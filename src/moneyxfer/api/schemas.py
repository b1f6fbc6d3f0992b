"""Pydantic request schemas for the HTTP API.

These exist only for HTTP input validation; amount and id rules are enforced
by the ledger itself. The upper bounds keep values inside what the store can
hold, so oversized input is a 422 rather than a failed bind.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from moneyxfer.ledger.accounts import MAX_STORE_INT


class CreateAccountRequest(BaseModel):
    name: str = Field(..., description="Display name, e.g. Alice")


class AmountRequest(BaseModel):
    amount: int = Field(..., le=MAX_STORE_INT, description="Amount in minor units; must be positive")


class TransferRequest(BaseModel):
    from_id: int = Field(..., le=MAX_STORE_INT, description="Source account id")
    to_id: int = Field(..., le=MAX_STORE_INT, description="Destination account id")
    amount: int = Field(..., le=MAX_STORE_INT, description="Amount in minor units; must be positive")
