from __future__ import annotations

import time

from fastapi import APIRouter, Request

router = APIRouter()


def _now_ms() -> int:
    return int(time.time() * 1000)


@router.get("/health")
def v1_health(request: Request) -> dict[str, object]:
    # health must never touch the database
    ledger = getattr(request.app.state, "ledger", None)
    return {
        "ok": True,
        "service": "moneyxfer",
        "version": "v1",
        "ts_ms": _now_ms(),
        "ledger_attached": ledger is not None,
    }
