# src/moneyxfer/structured_logging.py
"""JSON-lines logging on top of stdlib `logging`.

Every ledger event is one line of canonical JSON (sorted keys, no spaces), so
the output can be grepped or fed to a log shipper without a parser.
"""
from __future__ import annotations

import json
import logging
import os
import sys
import time
from typing import Any, Dict, Optional, TextIO

Json = Dict[str, Any]


class JsonLineHandler(logging.StreamHandler):
    """Stream handler that writes each record's message as-is, one per line.

    The class doubles as a marker: configure_structured_logging() installs at
    most one of these on the root logger.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        super().__init__(stream if stream is not None else sys.stdout)
        self.setFormatter(logging.Formatter("%(message)s"))


def _resolve_level(level: Optional[str]) -> int:
    name = (level or os.environ.get("MONEYXFER_LOG_LEVEL") or "INFO").strip().upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def configure_structured_logging(level: Optional[str] = None, *, stream: Optional[TextIO] = None) -> JsonLineHandler:
    """Install the JSON-lines handler on the root logger (stdout by default).

    Level comes from `level`, else MONEYXFER_LOG_LEVEL, else INFO. Calling it
    again only adjusts the level; handlers added by others are left alone.
    """
    resolved = _resolve_level(level)
    root = logging.getLogger()
    root.setLevel(resolved)

    for h in root.handlers:
        if isinstance(h, JsonLineHandler):
            return h

    handler = JsonLineHandler(stream)
    root.addHandler(handler)
    return handler


def event_line(event: str, fields: Json) -> str:
    """Render one event as canonical JSON. Values JSON can't encode are repr()'d."""
    payload: Json = dict(fields)
    payload["event"] = str(event)
    payload["ts_ms"] = int(time.time() * 1000)
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=repr)


def log_event(logger: logging.Logger, event: str, *, level: int = logging.INFO, **fields: Any) -> None:
    if logger.isEnabledFor(level):
        logger.log(level, event_line(event, fields))
