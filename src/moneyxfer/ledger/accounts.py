# src/moneyxfer/ledger/accounts.py
from __future__ import annotations

import logging
import sqlite3
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence

from moneyxfer.errors import (
    BalanceOverflowError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidNameError,
    NotFoundError,
)
from moneyxfer.ledger.scope import TransactionScope
from moneyxfer.ledger.sqlite_db import SqliteDB
from moneyxfer.structured_logging import log_event

log = logging.getLogger(__name__)

Json = Dict[str, Any]

# SQLite INTEGER is a signed 64-bit value; larger ints cannot be bound, and
# arithmetic past it silently turns into REAL.
MAX_STORE_INT = 2**63 - 1


def _now_ms() -> int:
    return int(time.time() * 1000)


def _as_account_id(v: Any) -> Optional[int]:
    """Account ids are positive ints the store can hold; anything else cannot name an account."""
    if isinstance(v, bool) or not isinstance(v, int):
        return None
    if not (1 <= v <= MAX_STORE_INT):
        return None
    return v


def _require_account_id(v: Any) -> int:
    aid = _as_account_id(v)
    if aid is None:
        raise NotFoundError("account not found", {"account_id": repr(v)})
    return aid


def _require_amount(amount: Any) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError("amount must be an integer", {"amount": repr(amount)})
    if amount <= 0:
        raise InvalidAmountError("amount must be positive", {"amount": amount})
    if amount > MAX_STORE_INT:
        raise InvalidAmountError("amount exceeds the storable range", {"amount": amount, "max": MAX_STORE_INT})
    return amount


@dataclass(frozen=True)
class Account:
    id: int
    name: str
    balance: int
    created_ts_ms: int

    @staticmethod
    def from_row(row: sqlite3.Row) -> "Account":
        return Account(
            id=int(row["id"]),
            name=str(row["name"]),
            balance=int(row["balance"]),
            created_ts_ms=int(row["created_ts_ms"]),
        )

    def to_json(self) -> Json:
        return {"id": self.id, "name": self.name, "balance": self.balance, "created_ts_ms": self.created_ts_ms}


class Accounts:
    """Account primitives over the ledger store.

    Every operation takes an optional `scope`. When given, the operation runs
    inside it and leaves commit/abort to the scope's owner. When omitted,
    mutations run in a scope of their own and reads use a plain connection.

    Errors are LedgerError subclasses, raised in this order of precedence:
    InvalidAmountError, NotFoundError, InsufficientFundsError. StoreError may
    come from any step.
    """

    def __init__(self, *, db: SqliteDB) -> None:
        self._db = db

    @contextmanager
    def _mutation_scope(self, scope: Optional[TransactionScope]) -> Iterator[TransactionScope]:
        if scope is not None:
            yield scope
            return
        with self._db.scope() as sc:
            yield sc

    def _query(self, scope: Optional[TransactionScope], sql: str, params: Sequence[Any]) -> List[sqlite3.Row]:
        if scope is not None:
            return scope.query(sql, params)
        return self._db.query(sql, params)

    def create_account(self, name: str, *, scope: Optional[TransactionScope] = None) -> int:
        """Insert a new account with balance 0 and return its store-assigned id."""
        n = str(name or "").strip()
        if not n:
            raise InvalidNameError("account name must be non-empty", {"name": name})

        with self._mutation_scope(scope) as sc:
            cur = sc.execute(
                "INSERT INTO accounts(name, balance, created_ts_ms) VALUES(?, 0, ?);",
                (n, _now_ms()),
            )
            account_id = int(cur.lastrowid)

        log_event(log, "account_created", level=logging.DEBUG, account_id=account_id, name=n)
        return account_id

    def verify_account(self, account_id: Any, *, scope: Optional[TransactionScope] = None) -> bool:
        aid = _as_account_id(account_id)
        if aid is None:
            return False
        return bool(self._query(scope, "SELECT 1 FROM accounts WHERE id=? LIMIT 1;", (aid,)))

    def get_account(self, account_id: Any, *, scope: Optional[TransactionScope] = None) -> Account:
        aid = _require_account_id(account_id)
        rows = self._query(
            scope,
            "SELECT id, name, balance, created_ts_ms FROM accounts WHERE id=? LIMIT 1;",
            (aid,),
        )
        if not rows:
            raise NotFoundError("account not found", {"account_id": aid})
        return Account.from_row(rows[0])

    def check_balance(self, account_id: Any, *, scope: Optional[TransactionScope] = None) -> int:
        aid = _require_account_id(account_id)
        rows = self._query(scope, "SELECT balance FROM accounts WHERE id=? LIMIT 1;", (aid,))
        if not rows:
            raise NotFoundError("account not found", {"account_id": aid})
        return int(rows[0]["balance"])

    def withdraw_money(self, account_id: Any, amount: Any, *, scope: Optional[TransactionScope] = None) -> None:
        amt = _require_amount(amount)
        aid = _require_account_id(account_id)

        # The scope holds the write lock, so read-check-write cannot interleave
        # with another writer.
        with self._mutation_scope(scope) as sc:
            balance = self.check_balance(aid, scope=sc)
            if balance < amt:
                raise InsufficientFundsError(
                    "insufficient funds",
                    {"account_id": aid, "balance": balance, "amount": amt},
                )
            sc.execute("UPDATE accounts SET balance = balance - ? WHERE id=?;", (amt, aid))

        log_event(log, "account_withdraw", level=logging.DEBUG, account_id=aid, amount=amt)

    def deposit_money(self, account_id: Any, amount: Any, *, scope: Optional[TransactionScope] = None) -> None:
        amt = _require_amount(amount)
        aid = _require_account_id(account_id)

        with self._mutation_scope(scope) as sc:
            balance = self.check_balance(aid, scope=sc)
            if balance > MAX_STORE_INT - amt:
                raise BalanceOverflowError(
                    "deposit would exceed the maximum balance",
                    {"account_id": aid, "balance": balance, "amount": amt, "max": MAX_STORE_INT},
                )
            sc.execute("UPDATE accounts SET balance = balance + ? WHERE id=?;", (amt, aid))

        log_event(log, "account_deposit", level=logging.DEBUG, account_id=aid, amount=amt)
