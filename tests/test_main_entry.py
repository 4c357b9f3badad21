"""Lightweight integration checks for the CLI entry point.

Updates:
  v0.1.2 - 2026-10-18 - Cover the watch command.
  v0.1.1 - 2026-10-15 - Cover migrate command and exit codes.
  v0.1.0 - 2026-10-10 - Cover prompt CRUD and response commands.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

import main
from cli.commands import run_watch
from config import load_settings
from core.factory import build_context

if TYPE_CHECKING:
    from tests.conftest import RecordingScheduler


@pytest.fixture(autouse=True)
def _work_in_tmp(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main.main([]) == 0

    assert "usage: prompt-journal" in capsys.readouterr().out


def test_print_settings_summary(capsys: pytest.CaptureFixture[str]) -> None:
    assert main.main(["--print-settings"]) == 0

    output = capsys.readouterr().out
    assert "Prompt Journal configuration summary" in output
    assert "prompt_journal.db" in output


def test_invalid_settings_exit_with_code_two(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PROMPT_JOURNAL_CAMPAIGN_HORIZON_DAYS", "0")

    assert main.main(["list"]) == 2


def test_add_list_and_show(capsys: pytest.CaptureFixture[str]) -> None:
    assert (
        main.main(
            [
                "add",
                "Did you stretch?",
                "--uuid",
                "stretch",
                "--response-type",
                "yesNo",
                "--days",
                "monday,friday",
                "--count",
                "2",
            ]
        )
        == 0
    )
    assert main.main(["list"]) == 0
    assert main.main(["show", "stretch"]) == 0

    output = capsys.readouterr().out
    assert "Saved prompt stretch" in output
    assert "Did you stretch?" in output
    assert "type=yesNo" in output
    assert "days=monday, friday" in output
    assert "upcoming reminders" in output


def test_add_with_invalid_window_fails(capsys: pytest.CaptureFixture[str]) -> None:
    assert main.main(["add", "Late?", "--start", "20:00", "--end", "09:00"]) == 1
    assert main.main(["list"]) == 0

    assert "No prompts stored." in capsys.readouterr().out


def test_show_and_delete_unknown_prompt_fail() -> None:
    assert main.main(["show", "missing"]) == 1
    assert main.main(["delete", "missing"]) == 1


def test_respond_and_list_responses(capsys: pytest.CaptureFixture[str]) -> None:
    main.main(["add", "Mood?", "--uuid", "mood"])

    assert main.main(["respond", "mood", "calm", "--trigger-ts", "1700000000"]) == 0
    assert main.main(["responses", "mood"]) == 0

    output = capsys.readouterr().out
    assert "calm" in output
    assert "triggered 2023-11-14T22:13:20+00:00" in output


def test_respond_to_unknown_prompt_fails() -> None:
    assert main.main(["respond", "missing", "calm"]) == 1


def test_delete_removes_prompt(capsys: pytest.CaptureFixture[str]) -> None:
    main.main(["add", "Mood?", "--uuid", "mood"])

    assert main.main(["delete", "mood"]) == 0

    assert "0 prompt(s) remain" in capsys.readouterr().out


def test_migrate_without_legacy_data(capsys: pytest.CaptureFixture[str]) -> None:
    assert main.main(["migrate"]) == 0

    assert "nothing to migrate" in capsys.readouterr().out


def test_migrate_imports_legacy_export(capsys: pytest.CaptureFixture[str]) -> None:
    legacy_path = Path("data") / "legacy_store.json"
    legacy_path.parent.mkdir(parents=True)
    legacy_path.write_text(
        json.dumps(
            {
                "prompts": json.dumps([{"promptText": "How do you feel?"}]),
                "events": json.dumps(
                    [
                        {
                            "event": {"name": "Fusion: How do you feel?", "value": "great"},
                            "startTimestamp": 1700000000,
                        }
                    ]
                ),
            }
        ),
        encoding="utf-8",
    )

    assert main.main(["migrate"]) == 0
    assert main.main(["migrate"]) == 0

    output = capsys.readouterr().out
    assert "1 created" in output
    assert "1 matched existing" in output


def test_watch_schedules_stored_prompts_and_stops(capsys: pytest.CaptureFixture[str]) -> None:
    main.main(["add", "Mood?", "--uuid", "mood"])
    main.main(["add", "Sleep?", "--uuid", "sleep"])

    assert main.main(["watch", "--duration", "0"]) == 0

    assert "Watching 2 prompt(s)" in capsys.readouterr().out


def test_watch_rejects_negative_duration() -> None:
    with pytest.raises(SystemExit):
        main.main(["watch", "--duration", "-1"])


def test_watch_requires_campaign_scheduler(
    tmp_path: Path,
    scheduler: RecordingScheduler,
) -> None:
    context = build_context(
        load_settings(db_path=str(tmp_path / "journal.db")),
        scheduler=scheduler,
    )
    args = argparse.Namespace(duration=0.0)

    assert run_watch(context, args, logging.getLogger("test")) == 1
