from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from moneyxfer.errors import LedgerError

_STATUS_BY_CODE = {
    "invalid_amount": 400,
    "invalid_name": 400,
    "account_not_found": 404,
    "insufficient_funds": 409,
    "balance_overflow": 409,
    "store_error": 500,
}


@dataclass(frozen=True, slots=True, eq=False)
class ApiError(Exception):
    status_code: int
    code: str
    message: str
    details: Dict[str, Any]

    @staticmethod
    def internal(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(500, code, message, details or {})

    @staticmethod
    def from_ledger(err: LedgerError) -> "ApiError":
        details = err.details if isinstance(err.details, dict) else {}
        return ApiError(_STATUS_BY_CODE.get(err.code, 500), err.code, err.reason, dict(details))

    def to_json(self) -> Dict[str, Any]:
        return {"ok": False, "error": {"code": self.code, "message": self.message, "details": self.details}}


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_json())


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    return await api_error_handler(request, ApiError.from_ledger(exc))
