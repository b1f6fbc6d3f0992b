# src/moneyxfer/ledger/transfer.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from moneyxfer.errors import LedgerError
from moneyxfer.ledger.accounts import Accounts
from moneyxfer.ledger.sqlite_db import SqliteDB
from moneyxfer.structured_logging import log_event

log = logging.getLogger(__name__)

Json = Dict[str, Any]


class TransferState(str, Enum):
    STARTED = "started"
    WITHDRAWING = "withdrawing"
    DEPOSITING = "depositing"
    COMMITTED = "committed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class TransferIntent:
    from_id: Any
    to_id: Any
    amount: Any


@dataclass(frozen=True)
class TransferResult:
    """Outcome of one transfer. Truthy iff the transfer committed."""

    ok: bool
    state: TransferState
    intent: TransferIntent
    failed_at: Optional[TransferState] = None
    code: str = "ok"
    reason: str = "committed"
    details: Any | None = None

    def __bool__(self) -> bool:
        return self.ok

    @staticmethod
    def committed(intent: TransferIntent) -> "TransferResult":
        return TransferResult(True, TransferState.COMMITTED, intent)

    @staticmethod
    def aborted(intent: TransferIntent, *, failed_at: TransferState, error: LedgerError) -> "TransferResult":
        return TransferResult(
            ok=False,
            state=TransferState.ABORTED,
            intent=intent,
            failed_at=failed_at,
            code=error.code,
            reason=error.reason,
            details=error.details,
        )

    def to_json(self) -> Json:
        return {
            "ok": self.ok,
            "state": self.state.value,
            "from_id": self.intent.from_id,
            "to_id": self.intent.to_id,
            "amount": self.intent.amount,
            "failed_at": None if self.failed_at is None else self.failed_at.value,
            "code": self.code,
            "reason": self.reason,
            "details": self.details,
        }


class TransferOrchestrator:
    """Withdraw + deposit as one all-or-nothing unit.

    Both mutations run inside a single TransactionScope. Any LedgerError from
    either step (or from BEGIN/COMMIT) aborts the scope, which discards the
    withdrawal along with everything else, and yields a failed TransferResult.
    Failures are never retried: insufficient funds and unknown accounts are not
    transient, and store failures surface to the caller as-is.
    """

    def __init__(self, *, db: SqliteDB, accounts: Accounts) -> None:
        self._db = db
        self._accounts = accounts

    def transfer_money(self, from_id: Any, to_id: Any, amount: Any) -> TransferResult:
        return self.execute(TransferIntent(from_id=from_id, to_id=to_id, amount=amount))

    def execute(self, intent: TransferIntent) -> TransferResult:
        phase = TransferState.STARTED
        try:
            with self._db.scope() as scope:
                phase = TransferState.WITHDRAWING
                self._accounts.withdraw_money(intent.from_id, intent.amount, scope=scope)
                phase = TransferState.DEPOSITING
                self._accounts.deposit_money(intent.to_id, intent.amount, scope=scope)
        except LedgerError as e:
            result = TransferResult.aborted(intent, failed_at=phase, error=e)
            log_event(
                log,
                "transfer_aborted",
                level=logging.WARNING,
                from_id=intent.from_id,
                to_id=intent.to_id,
                amount=intent.amount,
                failed_at=phase.value,
                code=e.code,
                reason=e.reason,
            )
            return result

        log_event(
            log,
            "transfer_committed",
            from_id=intent.from_id,
            to_id=intent.to_id,
            amount=intent.amount,
        )
        return TransferResult.committed(intent)
