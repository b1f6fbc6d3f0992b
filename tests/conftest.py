from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure local "src/" takes precedence over any globally-installed "moneyxfer" package.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

src_str = str(SRC)
if src_str not in sys.path:
    sys.path.insert(0, src_str)


@pytest.fixture
def ledger(tmp_path: Path):
    from moneyxfer.boot import build_ledger

    return build_ledger(db_path=str(tmp_path / "ledger.db"))
