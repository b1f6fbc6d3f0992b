from moneyxfer.ledger.accounts import Account, Accounts
from moneyxfer.ledger.scope import ScopeState, TransactionScope
from moneyxfer.ledger.sqlite_db import SqliteDB
from moneyxfer.ledger.transfer import TransferIntent, TransferOrchestrator, TransferResult, TransferState

__all__ = [
    "Account",
    "Accounts",
    "ScopeState",
    "SqliteDB",
    "TransactionScope",
    "TransferIntent",
    "TransferOrchestrator",
    "TransferResult",
    "TransferState",
]
