# src/moneyxfer/ledger/sqlite_db.py
from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Sequence

from moneyxfer.errors import StoreError
from moneyxfer.ledger.scope import TransactionScope


def _env_int(name: str, default: int) -> int:
    try:
        raw = str(os.environ.get(name, "")).strip()
        return int(raw) if raw else int(default)
    except ValueError:
        return int(default)


class SqliteDB:
    """SQLite manager for the account ledger.

    Design goals:
      - single durable DB file for every account
      - cross-process safe (SQLite locks)
      - cross-thread safe by never sharing connections: every read and every
        TransactionScope opens its own connection

    Writers serialize on SQLite's single write lock (BEGIN IMMEDIATE). Waiting
    for that lock is bounded by PRAGMA busy_timeout; there is no retry loop on
    top of it.
    """

    SCHEMA_VERSION = 2

    def __init__(self, *, path: str) -> None:
        self.path = str(path)

    @staticmethod
    def _sqlite_synchronous_pragma() -> str:
        """Return a safe PRAGMA synchronous value.

        Defaults:
          - prod     -> FULL
          - dev/test -> NORMAL

        Override with MONEYXFER_SQLITE_SYNCHRONOUS in {OFF,NORMAL,FULL,EXTRA}.
        """
        mode = (os.environ.get("MONEYXFER_MODE") or "prod").strip().lower()
        default = "FULL" if mode == "prod" else "NORMAL"
        raw = (os.environ.get("MONEYXFER_SQLITE_SYNCHRONOUS") or default).strip().upper()

        if raw not in {"OFF", "NORMAL", "FULL", "EXTRA"}:
            raw = default
        return raw

    def ensure_parent_dir(self) -> None:
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> sqlite3.Connection:
        """Open a configured connection. Raises StoreError on any sqlite failure."""
        self.ensure_parent_dir()

        connect_timeout_s = float(_env_int("MONEYXFER_SQLITE_CONNECT_TIMEOUT_MS", 30_000)) / 1000.0
        try:
            con = sqlite3.connect(
                self.path,
                timeout=connect_timeout_s,
                isolation_level=None,  # BEGIN/COMMIT/ROLLBACK are issued by TransactionScope
                check_same_thread=False,
            )
        except sqlite3.Error as e:
            raise StoreError("cannot open ledger database", {"path": self.path, "error": str(e)}) from e

        try:
            con.row_factory = sqlite3.Row

            # WAL lets readers proceed while a transfer holds the write lock,
            # and they only ever see committed balances.
            allow_non_wal = (os.environ.get("MONEYXFER_SQLITE_ALLOW_NON_WAL") or "").strip().lower() in {"1", "true"}
            row = con.execute("PRAGMA journal_mode=WAL;").fetchone()
            mode = str(row[0]).strip().lower() if row is not None else ""
            if mode and mode != "wal" and not allow_non_wal:
                raise StoreError("sqlite journal_mode is not wal", {"journal_mode": mode})

            con.execute(f"PRAGMA synchronous={self._sqlite_synchronous_pragma()};")
            con.execute("PRAGMA foreign_keys=ON;")
            con.execute("PRAGMA temp_store=MEMORY;")

            busy_ms = max(0, _env_int("MONEYXFER_SQLITE_BUSY_TIMEOUT_MS", int(connect_timeout_s * 1000)))
            con.execute(f"PRAGMA busy_timeout={busy_ms};")
        except sqlite3.Error as e:
            con.close()
            raise StoreError("cannot configure ledger database", {"path": self.path, "error": str(e)}) from e
        except StoreError:
            con.close()
            raise

        return con

    def init_schema(self) -> None:
        """Create tables and check the schema version. Call once at startup."""
        with self.scope() as sc:
            sc.execute(
                """
                CREATE TABLE IF NOT EXISTS meta (
                  key TEXT PRIMARY KEY,
                  value TEXT NOT NULL
                );
                """
            )

            sc.execute(
                """
                CREATE TABLE IF NOT EXISTS accounts (
                  id INTEGER PRIMARY KEY AUTOINCREMENT,
                  name TEXT NOT NULL,
                  balance INTEGER NOT NULL DEFAULT 0 CHECK (typeof(balance) = 'integer' AND balance >= 0),
                  created_ts_ms INTEGER NOT NULL
                );
                """
            )

            rows = sc.query("SELECT value FROM meta WHERE key='schema_version' LIMIT 1;")
            if not rows:
                sc.execute("INSERT INTO meta(key, value) VALUES('schema_version', ?);", (str(self.SCHEMA_VERSION),))
                return

            try:
                have = int(str(rows[0]["value"]))
            except ValueError:
                have = 0
            if have != self.SCHEMA_VERSION:
                raise StoreError(
                    "schema_version mismatch; refuse to start to avoid corrupting data",
                    {"have": have, "want": self.SCHEMA_VERSION},
                )

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        con = self._connect()
        try:
            yield con
        finally:
            con.close()

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        """Run a read outside any transaction scope (autocommit snapshot)."""
        with self.connection() as con:
            try:
                return con.execute(sql, tuple(params)).fetchall()
            except sqlite3.Error as e:
                raise StoreError("query failed", {"error": str(e)}) from e

    def scope(self) -> TransactionScope:
        """Return a new, not-yet-begun TransactionScope bound to this DB.

        Use as a context manager: BEGIN on enter, COMMIT on clean exit,
        ROLLBACK on any exception.
        """
        return TransactionScope(connect=self._connect)
