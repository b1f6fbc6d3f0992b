# src/moneyxfer/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any


def _as_int(v: Any, default: int) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return int(default)


def _as_str(v: Any, default: str) -> str:
    if v is None:
        return str(default)
    s = str(v)
    return s if s.strip() else str(default)


@dataclass(frozen=True)
class LedgerConfig:
    mode: str  # "dev" | "test" | "prod"

    # Single SQLite DB file holding every account.
    db_path: str

    api_host: str
    api_port: int

    log_level: str


_ALLOWED_MODES = {"dev", "test", "prod"}
_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def validate_ledger_config(cfg: LedgerConfig) -> None:
    """Fail-fast validation for operator config."""

    mode = str(cfg.mode or "").strip().lower()
    if mode not in _ALLOWED_MODES:
        raise ValueError(f"mode must be one of {sorted(_ALLOWED_MODES)}; got: {cfg.mode!r}")

    if not isinstance(cfg.db_path, str) or not cfg.db_path.strip():
        raise ValueError("db_path must be a non-empty string")

    if not isinstance(cfg.api_host, str) or not cfg.api_host.strip():
        raise ValueError("api_host must be a non-empty string")

    if not (0 < int(cfg.api_port) < 65536):
        raise ValueError(f"api_port must be in 1..65535; got: {cfg.api_port!r}")

    if str(cfg.log_level).upper() not in _ALLOWED_LOG_LEVELS:
        raise ValueError(f"log_level must be one of {sorted(_ALLOWED_LOG_LEVELS)}; got: {cfg.log_level!r}")


def load_ledger_config() -> LedgerConfig:
    """Read LedgerConfig from MONEYXFER_* environment variables and validate it."""
    cfg = LedgerConfig(
        mode=_as_str(os.environ.get("MONEYXFER_MODE"), "prod").strip().lower(),
        db_path=_as_str(os.environ.get("MONEYXFER_DB_PATH"), "./data/moneyxfer.db"),
        api_host=_as_str(os.environ.get("MONEYXFER_API_HOST"), "127.0.0.1"),
        api_port=_as_int(os.environ.get("MONEYXFER_API_PORT"), 8080),
        log_level=_as_str(os.environ.get("MONEYXFER_LOG_LEVEL"), "INFO").strip().upper(),
    )
    validate_ledger_config(cfg)
    return cfg
