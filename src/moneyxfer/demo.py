# src/moneyxfer/demo.py
from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from moneyxfer.boot import Ledger, build_ledger
from moneyxfer.env import load_dotenv_if_present
from moneyxfer.errors import LedgerError
from moneyxfer.structured_logging import configure_structured_logging, log_event

log = logging.getLogger("moneyxfer.demo")

# The store assigns ids from 1, so 0 never names an account.
MISSING_ACCOUNT_ID = 0


def _balances(ledger: Ledger, *ids: int) -> str:
    parts: List[str] = []
    for aid in ids:
        acct = ledger.get_account(aid)
        parts.append(f"{acct.name}={acct.balance}")
    return ", ".join(parts)


def run_scenarios(ledger: Ledger) -> List[bool]:
    """Run the three canned transfers and return their outcomes in order."""
    alice = ledger.create_account("Alice")
    bob = ledger.create_account("Bob")
    ledger.deposit_money(alice, 500)
    ledger.deposit_money(bob, 1000)
    print(f"setup: {_balances(ledger, alice, bob)}")

    scenarios = [
        ("transfer 300 Alice -> Bob", alice, bob, 300),
        ("transfer 500 Alice -> Bob (insufficient funds)", alice, bob, 500),
        ("transfer 500 Bob -> missing account", bob, MISSING_ACCOUNT_ID, 500),
    ]

    outcomes: List[bool] = []
    for label, src, dst, amount in scenarios:
        res = ledger.transfer_money(src, dst, amount)
        outcomes.append(res.ok)
        status = "ok" if res.ok else f"failed ({res.code} at {res.failed_at.value if res.failed_at is not None else '-'})"
        print(f"{label}: {status}; {_balances(ledger, alice, bob)}")
    return outcomes


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="moneyxfer.demo", description="Run the atomic transfer scenarios.")
    ap.add_argument("--db", default=None, help="SQLite path (default: MONEYXFER_DB_PATH)")
    args = ap.parse_args(argv)

    load_dotenv_if_present()
    configure_structured_logging()

    try:
        ledger = build_ledger(db_path=args.db)
        run_scenarios(ledger)
    except LedgerError as e:
        log_event(log, "demo_failed", level=logging.ERROR, code=e.code, reason=e.reason)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
