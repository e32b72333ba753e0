import json
import logging

import pytest

from heartqr.logging import (
    AUDIT,
    ConsoleFormatter,
    JsonFormatter,
    audit,
    get_logger,
    setup_logging,
    trace,
)


def test_get_logger_namespaces():
    assert get_logger("compositor").name == "heartqr.compositor"
    assert get_logger("heartqr.verify").name == "heartqr.verify"


def test_audit_record_carries_event_and_context(caplog):
    log = get_logger("test")
    with caplog.at_level(AUDIT, logger="heartqr"):
        audit("render.done", logger=log, modules=29)
    record = caplog.records[-1]
    assert record.levelname == "AUDIT"
    assert record.event == "render.done"
    assert record.ctx == {"modules": 29}


def test_formatters():
    log = get_logger("test")
    record = log.makeRecord(log.name, AUDIT, "", 0, "", (), None)
    record.event = "grid.planned"
    record.ctx = {"n": 29}
    record.duration_ms = 1.234

    entry = json.loads(JsonFormatter().format(record))
    assert entry["event"] == "grid.planned"
    assert entry["ctx"] == {"n": 29}
    assert entry["duration_ms"] == 1.23

    line = ConsoleFormatter(color=False).format(record)
    assert "grid.planned" in line
    assert "n=29" in line
    assert "(1.2ms)" in line


def test_trace_logs_and_reraises(caplog):
    @trace(logger_name="test")
    def boom():
        raise RuntimeError("nope")

    @trace(logger_name="test")
    def fine(x):
        return x * 2

    with caplog.at_level(logging.DEBUG, logger="heartqr"):
        assert fine(21) == 42
        with pytest.raises(RuntimeError):
            boom()

    events = [getattr(r, "event", None) for r in caplog.records]
    assert "fine.enter" in events
    assert "fine.done" in events
    assert "boom.error" in events


def test_setup_logging_writes_json_file(tmp_path):
    path = tmp_path / "heartqr.log"
    root = setup_logging("INFO", log_file=str(path))
    audit("cli.start", command="render")
    for handler in root.handlers:
        handler.flush()
    lines = path.read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[-1])["event"] == "cli.start"
