from __future__ import annotations

from fastapi import Request

from moneyxfer.api.errors import ApiError
from moneyxfer.boot import Ledger


def _ledger(request: Request) -> Ledger:
    ledger = getattr(request.app.state, "ledger", None)
    if ledger is None:
        raise ApiError.internal("not_ready", "ledger not attached to app.state", {})
    return ledger
