"""Pytest configuration for shared test fixtures.

Updates:
  v0.2.0 - 2026-10-13 - Provide store, repository, scheduler, and host fakes.
  v0.1.0 - 2026-10-05 - Isolate settings from the developer environment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from core.analytics import UsageTracker
from core.notifications import NotificationCenter
from core.prompt_repository import PromptRepository
from core.repository import RelationalStore

if TYPE_CHECKING:
    from pathlib import Path

    from models.prompt_model import Prompt


class RecordingScheduler:
    """Scheduler fake that records calls and can be told to fail."""

    def __init__(self) -> None:
        self.scheduled: list[Prompt] = []
        self.cancelled: list[str] = []
        self.fail_schedule = False
        self.fail_cancel = False

    def schedule_campaign(self, prompt: Prompt) -> None:
        if self.fail_schedule:
            raise RuntimeError("notification permission denied")
        self.scheduled.append(prompt)

    def cancel_campaign(self, prompt_uuid: str) -> None:
        if self.fail_cancel:
            raise RuntimeError("notification service unavailable")
        self.cancelled.append(prompt_uuid)


class RecordingHost:
    """App host fake counting restart requests."""

    def __init__(self) -> None:
        self.restart_requests = 0

    def request_restart(self) -> None:
        self.restart_requests += 1


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "PROMPT_JOURNAL_CONFIG_JSON",
        "PROMPT_JOURNAL_ENV_FILE",
        "PROMPT_JOURNAL_DB_PATH",
        "PROMPT_JOURNAL_LEGACY_STORE_PATH",
        "PROMPT_JOURNAL_USAGE_LOG_PATH",
        "PROMPT_JOURNAL_ANALYTICS_ENABLED",
        "PROMPT_JOURNAL_CAMPAIGN_HORIZON_DAYS",
        "PROMPT_JOURNAL_DEDUPE_MIGRATED_RESPONSES",
        "PROMPT_JOURNAL_REMINDER_TIMEZONE",
        "PROMPT_JOURNAL_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def store(tmp_path: Path) -> RelationalStore:
    return RelationalStore(tmp_path / "journal.db")


@pytest.fixture()
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture()
def tracker(tmp_path: Path) -> UsageTracker:
    return UsageTracker(tmp_path / "logs" / "usage.jsonl")


@pytest.fixture()
def repository(
    store: RelationalStore,
    scheduler: RecordingScheduler,
    tracker: UsageTracker,
) -> PromptRepository:
    return PromptRepository(store, scheduler, tracker)


@pytest.fixture()
def notifications() -> NotificationCenter:
    return NotificationCenter()


@pytest.fixture()
def host() -> RecordingHost:
    return RecordingHost()
