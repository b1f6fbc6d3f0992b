"""Atomic money transfers over a SQLite-backed account ledger."""

__version__ = "0.1.0"
