from __future__ import annotations

import io
import json
import logging
from typing import Iterator

import pytest

from moneyxfer.structured_logging import JsonLineHandler, configure_structured_logging, event_line, log_event


@pytest.fixture
def root_logger() -> Iterator[logging.Logger]:
    root = logging.getLogger()
    level = root.level
    yield root
    for h in [h for h in root.handlers if isinstance(h, JsonLineHandler)]:
        root.removeHandler(h)
    root.setLevel(level)


def test_configure_installs_one_handler_and_keeps_others(root_logger: logging.Logger) -> None:
    other = logging.NullHandler()
    root_logger.addHandler(other)
    out = io.StringIO()

    first = configure_structured_logging("debug", stream=out)
    second = configure_structured_logging("warning")

    assert first is second
    assert other in root_logger.handlers
    assert sum(isinstance(h, JsonLineHandler) for h in root_logger.handlers) == 1
    assert root_logger.level == logging.WARNING
    root_logger.removeHandler(other)


def test_level_falls_back_to_env_then_info(root_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MONEYXFER_LOG_LEVEL", "error")
    configure_structured_logging(stream=io.StringIO())
    assert root_logger.level == logging.ERROR

    monkeypatch.setenv("MONEYXFER_LOG_LEVEL", "chatty")
    configure_structured_logging()
    assert root_logger.level == logging.INFO


def test_log_event_writes_one_json_line(root_logger: logging.Logger) -> None:
    out = io.StringIO()
    configure_structured_logging("info", stream=out)

    log_event(logging.getLogger("moneyxfer.test"), "transfer_committed", from_id=1, to_id=2, amount=5)
    log_event(logging.getLogger("moneyxfer.test"), "hidden", level=logging.DEBUG)

    lines = out.getvalue().splitlines()
    assert len(lines) == 1
    payload = json.loads(lines[0])
    assert payload["event"] == "transfer_committed"
    assert (payload["from_id"], payload["to_id"], payload["amount"]) == (1, 2, 5)
    assert isinstance(payload["ts_ms"], int)


def test_event_line_is_canonical_and_tolerates_odd_values() -> None:
    line = event_line("x", {"b": 2, "a": {1, 2}})

    assert line.startswith('{"a":')
    assert " " not in line.replace("{1, 2}", "")
    assert json.loads(line)["a"] == "{1, 2}"
