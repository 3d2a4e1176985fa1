"""Structured logging: JSON lines on stderr with canonical keys."""

from __future__ import annotations

import json
import logging

from classifai_providers.base.log_support.json_formatter import REDACTED, redact
from classifai_providers.base.logging import (
    BASE_LOGGER_NAME,
    LogContext,
    configure_logger,
    get_logger,
    log_event,
    normalized_log_event,
)


def _last_json_line(err: str) -> dict:
    lines = [line for line in err.strip().splitlines() if line.startswith("{")]
    return json.loads(lines[-1])


def test_child_loggers_live_under_shared_base() -> None:
    logger = get_logger("features.classification")
    assert logger.name == f"{BASE_LOGGER_NAME}.features.classification"  # nosec B101
    assert logger.propagate is True  # nosec B101
    base = logging.getLogger(BASE_LOGGER_NAME)
    assert base.propagate is False and len(base.handlers) >= 1  # nosec B101


def test_normalized_event_ok_has_phase_and_outcome(capsys) -> None:
    logger = get_logger("tests.logging")
    normalized_log_event(
        logger, "feature.run", LogContext(feature="classification", provider="watson_nlu"), phase="run", outcome="ok"
    )
    rec = _last_json_line(capsys.readouterr().err)
    assert rec["event"] == "feature.run"  # nosec B101
    assert rec["phase"] == "run" and rec["outcome"] == "ok"  # nosec B101
    assert rec["feature"] == "classification" and rec["provider"] == "watson_nlu"  # nosec B101
    assert rec["level"] == "INFO"  # nosec B101
    assert "error_kind" not in rec  # nosec B101


def test_normalized_event_failure_logs_warning(capsys) -> None:
    logger = get_logger("tests.logging")
    normalized_log_event(
        logger, "provider.connect", LogContext(provider="aws_polly"), phase="connect", outcome="error",
        error_kind="connection_error", message=None,
    )
    rec = _last_json_line(capsys.readouterr().err)
    assert rec["level"] == "WARNING"  # nosec B101
    assert rec["error_kind"] == "connection_error"  # nosec B101
    assert "message" not in rec  # nosec B101


def test_log_event_drops_none_unless_requested(capsys) -> None:
    logger = get_logger("tests.logging")
    log_event(logger, "x.event", None, a=1, b=None)
    rec = _last_json_line(capsys.readouterr().err)
    assert rec["a"] == 1 and "b" not in rec  # nosec B101


def test_configure_logger_adds_and_removes_file_handler(tmp_path) -> None:
    path = tmp_path / "logs" / "classifai.log"
    logger = configure_logger(level="DEBUG", file_path=str(path))
    try:
        get_logger("tests.file").info("hello file")
        for handler in logger.handlers:
            handler.flush()
        assert path.exists() and "hello file" in path.read_text(encoding="utf-8")  # nosec B101
    finally:
        configure_logger(level="INFO", file_path=None)
    assert not [h for h in logger.handlers if getattr(h, "baseFilename", None) == str(path)]  # nosec B101


def test_credentials_are_redacted_in_events(capsys) -> None:
    logger = get_logger("tests.logging")
    log_event(logger, "x.event", None, block={"username": "apikey", "password": "secret-1", "api_key": ""})
    rec = _last_json_line(capsys.readouterr().err)
    assert rec["block"] == {"username": "apikey", "password": REDACTED, "api_key": ""}  # nosec B101
    assert "secret-1" not in json.dumps(rec)  # nosec B101


def test_plain_messages_and_extra_attributes(capsys) -> None:
    get_logger("tests.logging").info("plain text", extra={"feature": "speech_to_text"})
    rec = _last_json_line(capsys.readouterr().err)
    assert rec["msg"] == "plain text" and rec["feature"] == "speech_to_text"  # nosec B101


def test_redact_walks_nested_lists() -> None:
    assert redact([{"secret_access_key": "x"}, {"voice": "Joanna"}]) == [  # nosec B101
        {"secret_access_key": REDACTED},
        {"voice": "Joanna"},
    ]
