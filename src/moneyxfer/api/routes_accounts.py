from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Request

from moneyxfer.api.common import _ledger
from moneyxfer.api.schemas import AmountRequest, CreateAccountRequest

router = APIRouter()

Json = Dict[str, Any]


@router.post("/accounts")
def v1_account_create(body: CreateAccountRequest, request: Request) -> Json:
    account_id = _ledger(request).create_account(body.name)
    return {"ok": True, "id": account_id}


@router.get("/accounts/{account_id}")
def v1_account_get(account_id: int, request: Request) -> Json:
    acct = _ledger(request).get_account(account_id)
    return {"ok": True, "account": acct.to_json()}


@router.get("/accounts/{account_id}/exists")
def v1_account_exists(account_id: int, request: Request) -> Json:
    return {"ok": True, "id": account_id, "exists": _ledger(request).verify_account(account_id)}


@router.post("/accounts/{account_id}/deposit")
def v1_account_deposit(account_id: int, body: AmountRequest, request: Request) -> Json:
    ledger = _ledger(request)
    ledger.deposit_money(account_id, body.amount)
    return {"ok": True, "id": account_id, "balance": ledger.check_balance(account_id)}


@router.post("/accounts/{account_id}/withdraw")
def v1_account_withdraw(account_id: int, body: AmountRequest, request: Request) -> Json:
    ledger = _ledger(request)
    ledger.withdraw_money(account_id, body.amount)
    return {"ok": True, "id": account_id, "balance": ledger.check_balance(account_id)}
