# src/moneyxfer/boot.py
from __future__ import annotations

from typing import Any, Optional

from moneyxfer.config import LedgerConfig, load_ledger_config
from moneyxfer.ledger.accounts import Account, Accounts
from moneyxfer.ledger.sqlite_db import SqliteDB
from moneyxfer.ledger.transfer import TransferOrchestrator, TransferResult


class Ledger:
    """Caller-facing surface over one ledger database.

    Build it with build_ledger(); nothing here touches the database at import
    time.
    """

    def __init__(self, *, db: SqliteDB, cfg: Optional[LedgerConfig] = None) -> None:
        self.cfg = cfg
        self.db = db
        self.accounts = Accounts(db=db)
        self.transfers = TransferOrchestrator(db=db, accounts=self.accounts)

    def create_account(self, name: str) -> int:
        return self.accounts.create_account(name)

    def verify_account(self, account_id: Any) -> bool:
        return self.accounts.verify_account(account_id)

    def get_account(self, account_id: Any) -> Account:
        return self.accounts.get_account(account_id)

    def check_balance(self, account_id: Any) -> int:
        return self.accounts.check_balance(account_id)

    def deposit_money(self, account_id: Any, amount: Any) -> None:
        self.accounts.deposit_money(account_id, amount)

    def withdraw_money(self, account_id: Any, amount: Any) -> None:
        self.accounts.withdraw_money(account_id, amount)

    def transfer_money(self, from_id: Any, to_id: Any, amount: Any) -> TransferResult:
        return self.transfers.transfer_money(from_id, to_id, amount)


def build_ledger(cfg: Optional[LedgerConfig] = None, *, db_path: Optional[str] = None) -> Ledger:
    """
    Startup step: open the database, create/check the schema and return the
    Ledger. Must run once before any account operation.

    `db_path` overrides the configured path (tests, the demo driver).
    """
    if cfg is None and db_path is None:
        cfg = load_ledger_config()
    db = SqliteDB(path=db_path if db_path is not None else cfg.db_path)  # type: ignore[union-attr]
    db.init_schema()
    return Ledger(db=db, cfg=cfg)
