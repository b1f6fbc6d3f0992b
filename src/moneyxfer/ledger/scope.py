# src/moneyxfer/ledger/scope.py
from __future__ import annotations

import logging
import sqlite3
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence

from moneyxfer.errors import StoreError
from moneyxfer.structured_logging import log_event

log = logging.getLogger(__name__)


class ScopeState(str, Enum):
    NEW = "new"
    OPEN = "open"
    COMMITTED = "committed"
    ABORTED = "aborted"


class TransactionScope:
    """One unit of work over one SQLite connection.

    Mutations executed through the scope are provisional until commit();
    abort() discards every one of them. The scope owns its connection and
    closes it when it resolves, so it cannot outlive the call that made it.

    Lifecycle: new -> open -> committed | aborted. Nothing is re-entered.
    """

    def __init__(self, *, connect: Callable[[], sqlite3.Connection]) -> None:
        self._connect = connect
        self._con: Optional[sqlite3.Connection] = None
        self._state = ScopeState.NEW

    @property
    def state(self) -> ScopeState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is ScopeState.OPEN

    def _require_open(self) -> sqlite3.Connection:
        if self._state is not ScopeState.OPEN or self._con is None:
            raise RuntimeError(f"transaction scope is {self._state.value}, not open")
        return self._con

    def begin(self) -> None:
        """Open the connection and take the write lock (BEGIN IMMEDIATE)."""
        if self._state is not ScopeState.NEW:
            raise RuntimeError(f"transaction scope already {self._state.value}")

        try:
            con = self._connect()
        except StoreError:
            self._state = ScopeState.ABORTED
            raise
        try:
            con.execute("BEGIN IMMEDIATE;")
        except sqlite3.Error as e:
            con.close()
            self._state = ScopeState.ABORTED
            raise StoreError("cannot begin transaction", {"error": str(e)}) from e

        self._con = con
        self._state = ScopeState.OPEN

    def execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        con = self._require_open()
        try:
            return con.execute(sql, tuple(params))
        except sqlite3.Error as e:
            raise StoreError("statement failed", {"error": str(e)}) from e

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        con = self._require_open()
        try:
            return con.execute(sql, tuple(params)).fetchall()
        except sqlite3.Error as e:
            raise StoreError("query failed", {"error": str(e)}) from e

    def commit(self) -> None:
        """Durably apply every mutation. A failed COMMIT rolls back and raises StoreError."""
        con = self._require_open()
        try:
            con.execute("COMMIT;")
        except sqlite3.Error as e:
            self.abort()
            raise StoreError("commit failed", {"error": str(e)}) from e
        self._state = ScopeState.COMMITTED
        self._close()

    def abort(self) -> None:
        """Discard every mutation made since begin(). No-op unless open."""
        if self._state is not ScopeState.OPEN:
            return
        con = self._con
        self._state = ScopeState.ABORTED
        try:
            if con is not None:
                con.execute("ROLLBACK;")
        except sqlite3.Error as e:
            # Closing the connection below discards the open transaction anyway.
            log_event(log, "rollback_failed", level=logging.WARNING, error=str(e))
        finally:
            self._close()

    def _close(self) -> None:
        con, self._con = self._con, None
        if con is not None:
            con.close()

    def __enter__(self) -> "TransactionScope":
        self.begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None and self._state is ScopeState.OPEN:
            self.commit()
        else:
            self.abort()
        return False
