"""Tests for the prompt repository service layer.

Updates:
  v0.1.3 - 2026-10-18 - Cover cancel-on-missing delete, corrupt day flags, and large timestamps.
  v0.1.2 - 2026-10-13 - Cover scheduler rollback on create and update.
  v0.1.1 - 2026-10-11 - Assert prompt_saved analytics payloads.
  v0.1.0 - 2026-10-06 - Cover CRUD, lookups, and response normalisation.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from core.analytics import mask_prompt_id
from core.exceptions import (
    PromptCorruptionError,
    PromptNotFoundError,
    PromptStorageError,
    PromptValidationError,
    SchedulerError,
)
from core.repository import StoreError, _connect
from models.prompt_model import WEEKDAYS, Prompt, PromptResponse, ResponseType

if TYPE_CHECKING:
    from core.analytics import UsageTracker
    from core.prompt_repository import PromptRepository
    from core.repository import RelationalStore
    from tests.conftest import RecordingScheduler


def _make_prompt(**overrides: object) -> Prompt:
    payload: dict[str, object] = {
        "prompt_text": "How focused were you today?",
        "response_type": ResponseType.NUMBER,
    }
    payload.update(overrides)
    return Prompt(**payload)  # type: ignore[arg-type]


def test_read_all_prompts_on_empty_store_returns_empty_list(
    repository: PromptRepository,
) -> None:
    assert repository.read_all_prompts() == []


def test_save_prompt_generates_uuid_and_schedules(
    repository: PromptRepository,
    scheduler: RecordingScheduler,
) -> None:
    prompt = _make_prompt()

    assert repository.save_prompt(prompt) is True

    assert prompt.uuid
    stored = repository.read_all_prompts()
    assert [item.uuid for item in stored] == [prompt.uuid]
    assert [item.uuid for item in scheduler.scheduled] == [prompt.uuid]


def test_save_prompt_with_existing_uuid_updates_in_place(
    repository: PromptRepository,
    scheduler: RecordingScheduler,
) -> None:
    prompt = _make_prompt(uuid="fixed-uuid")
    repository.save_prompt(prompt)

    updated = _make_prompt(
        uuid="fixed-uuid",
        prompt_text="How focused were you this afternoon?",
        start_time="12:00",
        count_per_day=1,
    )
    repository.save_prompt(updated)

    stored = repository.read_all_prompts()
    assert len(stored) == 1
    assert stored[0].prompt_text == "How focused were you this afternoon?"
    assert stored[0].start_time == "12:00"
    assert stored[0].count_per_day == 1
    assert len(scheduler.scheduled) == 2
    assert scheduler.scheduled[-1].start_time == "12:00"


def test_save_prompt_round_trips_every_field(repository: PromptRepository) -> None:
    days = {day: day not in {"saturday", "sunday"} for day in WEEKDAYS}
    prompt = _make_prompt(
        uuid="round-trip",
        response_type=ResponseType.CUSTOM_OPTIONS,
        notification_days=days,
        start_time="07:30",
        end_time="21:15",
        count_per_day=5,
    )
    repository.save_prompt(prompt)

    fetched = repository.get_prompt("round-trip")

    assert fetched == prompt


def test_save_prompt_tracks_create_then_update(
    repository: PromptRepository,
    tracker: UsageTracker,
) -> None:
    prompt = _make_prompt(uuid="tracked")
    repository.save_prompt(prompt)
    repository.save_prompt(prompt)

    events = [event for event in tracker.read_events() if event["event"] == "prompt_saved"]

    assert [event["action_type"] for event in events] == ["create", "update"]
    first = events[0]
    assert first["identifier"] == mask_prompt_id("tracked")
    assert "tracked" not in json.dumps(first)
    assert first["response_type"] == "number"
    assert json.loads(first["notification_config"]) == prompt.notification_snapshot()


@pytest.mark.parametrize(
    "overrides",
    [
        {"prompt_text": ""},
        {"start_time": "18:00", "end_time": "08:00"},
        {"start_time": "8am"},
        {"count_per_day": 0},
        {"response_type": "slider"},
    ],
)
def test_save_prompt_rejects_invalid_prompts_before_writing(
    repository: PromptRepository,
    scheduler: RecordingScheduler,
    overrides: dict[str, object],
) -> None:
    with pytest.raises(PromptValidationError):
        repository.save_prompt(_make_prompt(**overrides))

    assert repository.read_all_prompts() == []
    assert scheduler.scheduled == []


def test_save_prompt_rolls_back_new_row_when_scheduler_fails(
    repository: PromptRepository,
    scheduler: RecordingScheduler,
    tracker: UsageTracker,
) -> None:
    scheduler.fail_schedule = True
    prompt = _make_prompt(uuid="unschedulable")

    with pytest.raises(SchedulerError) as excinfo:
        repository.save_prompt(prompt)

    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert repository.get_prompt("unschedulable") is None
    assert tracker.read_events() == []


def test_save_prompt_restores_previous_row_when_scheduler_fails(
    repository: PromptRepository,
    scheduler: RecordingScheduler,
) -> None:
    repository.save_prompt(_make_prompt(uuid="stable", count_per_day=2))
    scheduler.fail_schedule = True

    with pytest.raises(SchedulerError):
        repository.save_prompt(_make_prompt(uuid="stable", count_per_day=6))

    stored = repository.get_prompt("stable")
    assert stored is not None
    assert stored.count_per_day == 2


def test_save_prompt_reports_failed_rollback(
    repository: PromptRepository,
    scheduler: RecordingScheduler,
    store: RelationalStore,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    scheduler.fail_schedule = True

    def _broken_restore(*_: object) -> None:
        raise StoreError("disk I/O error")

    monkeypatch.setattr(store, "restore_prompt_row", _broken_restore)

    with pytest.raises(SchedulerError, match="rollback failed"):
        repository.save_prompt(_make_prompt(uuid="stranded"))


def test_save_prompt_wraps_storage_failures(
    repository: PromptRepository,
    store: RelationalStore,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def _broken_upsert(*_: object) -> bool:
        raise StoreError("database is locked")

    monkeypatch.setattr(store, "upsert_prompt", _broken_upsert)

    with pytest.raises(PromptStorageError):
        repository.save_prompt(_make_prompt())


def test_get_prompt_returns_none_for_unknown_uuid(repository: PromptRepository) -> None:
    assert repository.get_prompt("missing") is None


def test_find_prompts_by_text_returns_uuid_mappings(repository: PromptRepository) -> None:
    repository.save_prompt(_make_prompt(uuid="first"))
    repository.save_prompt(_make_prompt(uuid="other", prompt_text="Something else"))

    assert repository.find_prompts_by_text("How focused were you today?") == [{"uuid": "first"}]
    assert repository.find_prompts_by_text("Unknown") == []


def test_delete_prompt_cancels_before_removing(
    repository: PromptRepository,
    scheduler: RecordingScheduler,
    tracker: UsageTracker,
) -> None:
    repository.save_prompt(_make_prompt(uuid="keep", prompt_text="Keep me"))
    repository.save_prompt(_make_prompt(uuid="drop", prompt_text="Drop me"))

    remaining = repository.delete_prompt("drop")

    assert scheduler.cancelled == ["drop"]
    assert [prompt.uuid for prompt in remaining] == ["keep"]
    assert [event["event"] for event in tracker.read_events()][-1] == "prompt_deleted"


def test_delete_prompt_unknown_uuid_raises_not_found(
    repository: PromptRepository,
    scheduler: RecordingScheduler,
) -> None:
    with pytest.raises(PromptNotFoundError):
        repository.delete_prompt("missing")

    assert scheduler.cancelled == ["missing"]


def test_delete_prompt_keeps_row_when_cancel_fails(
    repository: PromptRepository,
    scheduler: RecordingScheduler,
) -> None:
    repository.save_prompt(_make_prompt(uuid="sticky"))
    scheduler.fail_cancel = True

    with pytest.raises(SchedulerError):
        repository.delete_prompt("sticky")

    assert repository.get_prompt("sticky") is not None


def test_read_all_prompts_reports_corrupt_rows(
    repository: PromptRepository,
    store: RelationalStore,
) -> None:
    repository.save_prompt(_make_prompt(uuid="corrupt"))
    with _connect(store.db_path) as conn:
        conn.execute("UPDATE prompts SET responseType = 'hologram';")

    with pytest.raises(PromptCorruptionError):
        repository.read_all_prompts()


@pytest.mark.parametrize("days", ["not json", "[1, 2]", '{"monday": true}'])
def test_get_prompt_reports_malformed_notification_days(
    repository: PromptRepository,
    store: RelationalStore,
    days: str,
) -> None:
    repository.save_prompt(_make_prompt(uuid="bad-days"))
    with _connect(store.db_path) as conn:
        conn.execute("UPDATE prompts SET notificationConfig_days = ?;", (days,))

    with pytest.raises(PromptCorruptionError):
        repository.get_prompt("bad-days")


def test_save_prompt_response_normalises_second_timestamps(
    repository: PromptRepository,
) -> None:
    response = PromptResponse(
        prompt_uuid="p-1",
        value="7",
        trigger_timestamp=1_700_000_000,
        response_timestamp=1_700_000_030,
    )

    assert repository.save_prompt_response(response) is True

    stored = repository.get_prompt_responses("p-1")
    assert len(stored) == 1
    assert stored[0].trigger_timestamp == 1_700_000_000_000
    assert stored[0].response_timestamp == 1_700_000_030_000


def test_save_prompt_response_keeps_millisecond_timestamps(
    repository: PromptRepository,
) -> None:
    repository.save_prompt_response(
        PromptResponse(
            prompt_uuid="p-1",
            value="yes",
            trigger_timestamp=1_700_000_000_123,
            response_timestamp=1_700_000_000_456,
        )
    )

    stored = repository.get_prompt_responses("p-1")[0]
    assert stored.trigger_timestamp == 1_700_000_000_123
    assert stored.response_timestamp == 1_700_000_000_456


def test_save_prompt_response_always_inserts(repository: PromptRepository) -> None:
    response = PromptResponse("p-1", "same", 1_700_000_000_000, 1_700_000_000_000)

    repository.save_prompt_response(response)
    repository.save_prompt_response(response)

    assert len(repository.get_prompt_responses("p-1")) == 2
    assert repository.has_prompt_response(response) is True


def test_save_prompt_response_requires_prompt_uuid(repository: PromptRepository) -> None:
    with pytest.raises(PromptValidationError):
        repository.save_prompt_response(PromptResponse("", "x", 1, 1))


def test_get_prompt_responses_unknown_prompt_is_empty(repository: PromptRepository) -> None:
    assert repository.get_prompt_responses("nobody") == []


def test_has_prompt_response_compares_normalised_timestamps(
    repository: PromptRepository,
) -> None:
    repository.save_prompt_response(PromptResponse("p-1", "ok", 1_700_000_000, 1_700_000_000))

    assert repository.has_prompt_response(
        PromptResponse("p-1", "ok", 1_700_000_000_000, 1_700_000_000_000)
    )
    assert not repository.has_prompt_response(
        PromptResponse("p-1", "different", 1_700_000_000, 1_700_000_000)
    )


def test_save_prompt_response_rejects_out_of_range_timestamps(
    repository: PromptRepository,
) -> None:
    with pytest.raises(PromptValidationError):
        repository.save_prompt_response(PromptResponse("u", "v", 10**19, 10**19))

    assert repository.get_prompt_responses("u") == []
