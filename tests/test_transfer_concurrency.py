from __future__ import annotations

import multiprocessing as mp
from pathlib import Path

from moneyxfer.boot import build_ledger


def _worker(db_path: str, a: int, b: int, rounds: int) -> None:
    ledger = build_ledger(db_path=db_path)
    for _ in range(int(rounds)):
        assert ledger.transfer_money(a, b, 7)
        assert ledger.transfer_money(b, a, 7)


def test_concurrent_transfers_conserve_money_across_processes(tmp_path: Path) -> None:
    """Transfers from several processes serialize on the store's write lock.

    Every worker moves money back and forth; with atomic transfers the final
    balances must equal the starting ones exactly.
    """
    db_path = str(tmp_path / "ledger.db")
    ledger = build_ledger(db_path=db_path)
    a = ledger.create_account("A")
    b = ledger.create_account("B")
    ledger.deposit_money(a, 1000)
    ledger.deposit_money(b, 1000)

    procs: list[mp.Process] = []
    workers = 4
    rounds = 50

    for _ in range(workers):
        pr = mp.Process(target=_worker, args=(db_path, a, b, rounds))
        pr.start()
        procs.append(pr)

    for pr in procs:
        pr.join(60)
        assert pr.exitcode == 0

    assert ledger.check_balance(a) == 1000
    assert ledger.check_balance(b) == 1000
