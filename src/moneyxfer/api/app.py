from __future__ import annotations

import os

from fastapi import FastAPI

from moneyxfer.api.errors import ApiError, api_error_handler, ledger_error_handler
from moneyxfer.api.middleware import RequestLogMiddleware
from moneyxfer.api.routes_accounts import router as accounts_router
from moneyxfer.api.routes_health import router as health_router
from moneyxfer.api.routes_transfers import router as transfers_router
from moneyxfer.boot import Ledger, build_ledger as _build_ledger
from moneyxfer.errors import LedgerError


def _request_logging_enabled() -> bool:
    raw = (os.environ.get("MONEYXFER_LOG_REQUESTS") or "1").strip().lower()
    return raw not in {"0", "false", "no", "off"}


def build_ledger() -> Ledger:
    """Build the Ledger for the API runtime.

    This wrapper exists so tests can monkeypatch `moneyxfer.api.app.build_ledger`
    without reaching into the boot module.
    """
    return _build_ledger()


def create_app(*, boot_runtime: bool = True) -> FastAPI:
    """Create the FastAPI application.

    boot_runtime:
      - True (default): open the ledger database and attach app.state.ledger
      - False: no database; routes answer 500 not_ready until a ledger is attached
    """
    mode = os.environ.get("MONEYXFER_MODE", "prod").strip().lower()

    # Disable docs in production.
    if mode == "prod":
        app = FastAPI(title="moneyxfer API", docs_url=None, redoc_url=None, openapi_url=None)
    else:
        app = FastAPI(title="moneyxfer API")

    app.state.ledger = build_ledger() if boot_runtime else None

    if _request_logging_enabled():
        app.add_middleware(RequestLogMiddleware)

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(LedgerError, ledger_error_handler)

    app.include_router(health_router, prefix="/v1", tags=["health"])
    app.include_router(accounts_router, prefix="/v1", tags=["accounts"])
    app.include_router(transfers_router, prefix="/v1", tags=["transfers"])

    return app
