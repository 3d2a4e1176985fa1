"""CLI commands against a prewired container.

stdout carries exactly one JSON document per command; structured log events
go to stderr, so tests parse ``capsys`` stdout only.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from classifai_providers.service.cli import main
from classifai_providers.service.cli.cli_actions import parse_assignments, parse_value


def _out(capsys: pytest.CaptureFixture[str]) -> Dict[str, Any]:
    return json.loads(capsys.readouterr().out)


def test_parse_assignments_nests_provider_keys() -> None:
    raw = parse_assignments(["enabled=true", "watson_nlu.username=apikey", "watson_nlu.password=secret-1", "length=40"])
    assert raw == {  # nosec B101 - pytest assertion in tests
        "enabled": True,
        "watson_nlu": {"username": "apikey", "password": "secret-1"},  # pragma: allowlist secret
        "length": 40,
    }


def test_parse_assignments_requires_equals() -> None:
    with pytest.raises(ValueError):
        parse_assignments(["enabled"])


def test_parse_value_keeps_plain_strings() -> None:
    assert parse_value("Joanna") == "Joanna"  # nosec B101
    assert parse_value('{"post": 1}') == {"post": 1}  # nosec B101


def test_features_command(container, capsys) -> None:
    assert main(["features"], container=container) == 0  # nosec B101
    rows = {row["id"]: row for row in _out(capsys)["features"]}
    assert rows["text_to_speech"]["provider"] == "aws_polly"  # nosec B101
    assert rows["text_to_speech"]["state"] == "disabled"  # nosec B101


def test_settings_set_then_show_masks_password(container, capsys) -> None:
    code = main(
        [
            "settings", "set", "classification",
            "--set", "enabled=1",
            "--set", "watson_nlu.endpoint_url=https://nlu.example.test",
            "--set", "watson_nlu.username=apikey",
            "--set", "watson_nlu.password=secret-1",
        ],
        container=container,
    )
    saved = _out(capsys)
    assert code == 0 and saved["state"] == "enabled_authenticated"  # nosec B101
    assert saved["settings"]["watson_nlu"]["password"] == "********"  # nosec B101

    assert main(["settings", "show", "classification"], container=container) == 0  # nosec B101
    shown = _out(capsys)["settings"]
    assert shown["watson_nlu"]["password"] == "********"  # nosec B101
    assert shown["enabled"] is True  # nosec B101


def test_settings_set_accepts_json_data(container, capsys) -> None:
    data = json.dumps({"length": 25, "openai_chatgpt": {"api_key": "sk-1"}})
    assert main(["settings", "set", "excerpt_generation", "--data", data], container=container) == 0  # nosec B101
    assert _out(capsys)["settings"]["length"] == 25  # nosec B101


def test_settings_validation_failure_exits_1(container, capsys) -> None:
    code = main(["settings", "set", "classification", "--set", "classification_mode=bogus"], container=container)
    assert code == 1  # nosec B101
    assert _out(capsys)["error"]["kind"] == "validation_error"  # nosec B101


def test_usage_errors_exit_2(container, capsys) -> None:
    assert main(["settings", "show", "image_cropping"], container=container) == 2  # nosec B101
    assert main(["settings", "set", "classification", "--set", "enabled"], container=container) == 2  # nosec B101
    assert main(["settings", "set", "classification", "--data", "[1]"], container=container) == 2  # nosec B101
    assert main(["reset", "image_cropping"], container=container) == 2  # nosec B101


def test_enable_disable_and_reset(container, capsys) -> None:
    assert main(["enable", "speech_to_text"], container=container) == 0  # nosec B101
    assert _out(capsys)["result"]["state"] == "enabled_unauthenticated"  # nosec B101
    assert main(["disable", "speech_to_text"], container=container) == 0  # nosec B101
    assert _out(capsys)["result"]["enabled"] is False  # nosec B101
    assert main(["reset", "speech_to_text"], container=container) == 0  # nosec B101
    assert _out(capsys)["settings"]["provider"] == "openai_whisper"  # nosec B101


def test_dispatch_rejections_exit_1(container, capsys) -> None:
    assert main(["dispatch", "classification", "1"], container=container) == 1  # nosec B101
    assert _out(capsys)["error"]["kind"] == "not_enabled"  # nosec B101
    assert main(["dispatch", "image_cropping", "1"], container=container) == 1  # nosec B101
    assert _out(capsys)["error"]["kind"] == "configuration_error"  # nosec B101


def test_dispatch_runs_feature(container, capsys) -> None:
    main(["settings", "set", "excerpt_generation", "--set", "enabled=1", "--set", "openai_chatgpt.api_key=sk-1"], container=container)
    capsys.readouterr()
    assert main(["dispatch", "excerpt_generation", "2", "--actor", "editor"], container=container) == 0  # nosec B101
    assert _out(capsys)["result"]["excerpt"] == "A short teaser about the post."  # nosec B101


def test_debug_command(container, capsys) -> None:
    assert main(["debug", "text_to_speech"], container=container) == 0  # nosec B101
    assert _out(capsys)["debug"]["Provider"] == "aws_polly"  # nosec B101


def test_main_builds_sqlite_container(tmp_path: Path, capsys) -> None:
    items = tmp_path / "items.json"
    items.write_text(json.dumps({"7": {"type": "post", "status": "publish", "content": "Hi"}}), encoding="utf-8")
    db = str(tmp_path / "settings.db")
    assert main(["--db", db, "features"], container=None) == 0  # nosec B101
    capsys.readouterr()
    assert main(["--db", db, "dispatch", "classification", "7", "--items", str(items)]) == 1  # nosec B101
    assert _out(capsys)["error"]["kind"] == "not_enabled"  # nosec B101


def test_main_rejects_unreadable_items_file(tmp_path: Path, capsys) -> None:
    code = main(["--db", str(tmp_path / "s.db"), "dispatch", "classification", "1", "--items", str(tmp_path / "missing.json")])
    assert code == 2  # nosec B101
    assert "cannot read items file" in json.loads(capsys.readouterr().err.strip().splitlines()[-1])["error"]  # nosec B101
