from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from moneyxfer.api.common import _ledger
from moneyxfer.api.schemas import TransferRequest

router = APIRouter()


@router.post("/transfers")
def v1_transfer(body: TransferRequest, request: Request) -> JSONResponse:
    """Run one atomic transfer.

    200 with the committed result, or 409 with the aborted result; either way
    the payload says which phase failed and why.
    """
    res = _ledger(request).transfer_money(body.from_id, body.to_id, body.amount)
    return JSONResponse(status_code=200 if res.ok else 409, content=res.to_json())
