"""Tests for prompt model validation and row conversion.

Updates:
  v0.1.1 - 2026-10-12 - Cover window ordering and weekday flag validation.
  v0.1.0 - 2026-10-05 - Cover record conversion for prompts and responses.
"""

from __future__ import annotations

import json

import pytest

from models.prompt_model import (
    WEEKDAYS,
    Prompt,
    PromptResponse,
    ResponseType,
    default_notification_config,
    deserialize_notification_days,
    parse_time_of_day,
)


def _make_prompt(**overrides: object) -> Prompt:
    payload: dict[str, object] = {
        "prompt_text": "How energetic do you feel?",
        "response_type": ResponseType.NUMBER,
        "uuid": "5b3a4c1e-0000-4000-8000-000000000001",
    }
    payload.update(overrides)
    return Prompt(**payload)  # type: ignore[arg-type]


def test_default_notification_config_activates_every_day() -> None:
    config = default_notification_config()

    assert config["notification_days"] == {day: True for day in WEEKDAYS}
    assert config["start_time"] == "08:00"
    assert config["end_time"] == "18:00"
    assert config["count_per_day"] == 3


def test_default_notification_config_returns_fresh_mapping() -> None:
    first = default_notification_config()
    first["notification_days"]["monday"] = False

    assert default_notification_config()["notification_days"]["monday"] is True


@pytest.mark.parametrize("value", ["yesNo", "YESNO", " yesno "])
def test_response_type_parse_is_case_insensitive(value: str) -> None:
    assert ResponseType.parse(value) is ResponseType.YES_NO


def test_response_type_parse_rejects_unknown_values() -> None:
    with pytest.raises(ValueError, match="Unsupported response type"):
        ResponseType.parse("slider")


@pytest.mark.parametrize("value", ["8:00", "24:00", "12:60", "noon", ""])
def test_parse_time_of_day_rejects_malformed_values(value: str) -> None:
    with pytest.raises(ValueError):
        parse_time_of_day(value)


def test_validate_normalises_response_type_string() -> None:
    prompt = _make_prompt(response_type="customOptions")

    prompt.validate()

    assert prompt.response_type is ResponseType.CUSTOM_OPTIONS


def test_validate_rejects_window_that_ends_before_it_starts() -> None:
    prompt = _make_prompt(start_time="19:00", end_time="09:00")

    with pytest.raises(ValueError, match="after end"):
        prompt.validate()


def test_validate_rejects_zero_reminders_per_day() -> None:
    with pytest.raises(ValueError, match="at least 1"):
        _make_prompt(count_per_day=0).validate()


def test_validate_rejects_blank_prompt_text() -> None:
    with pytest.raises(ValueError, match="must not be empty"):
        _make_prompt(prompt_text="   ").validate()


def test_validate_requires_all_weekday_flags() -> None:
    prompt = _make_prompt(notification_days={"monday": True})

    with pytest.raises(ValueError, match="missing flags"):
        prompt.validate()


def test_validate_rejects_non_boolean_weekday_flags() -> None:
    days: dict[str, object] = {day: True for day in WEEKDAYS}
    days["friday"] = "yes"

    with pytest.raises(ValueError, match="must be a boolean"):
        _make_prompt(notification_days=days).validate()


def test_prompt_record_uses_column_names() -> None:
    days = {day: day in {"monday", "wednesday"} for day in WEEKDAYS}
    prompt = _make_prompt(notification_days=days, count_per_day=2)

    record = prompt.to_record()

    assert record["uuid"] == prompt.uuid
    assert record["promptText"] == "How energetic do you feel?"
    assert record["responseType"] == "number"
    assert json.loads(record["notificationConfig_days"]) == days
    assert record["notificationConfig_countPerDay"] == 2
    assert Prompt.from_record(record) == prompt


def test_from_record_rejects_corrupt_day_flags() -> None:
    record = _make_prompt().to_record()
    record["notificationConfig_days"] = "{not json"

    with pytest.raises(ValueError, match="not valid JSON"):
        Prompt.from_record(record)


def test_deserialize_notification_days_rejects_missing_value() -> None:
    with pytest.raises(ValueError):
        deserialize_notification_days(None)


def test_active_days_follow_weekday_order() -> None:
    days = {day: day in {"saturday", "sunday"} for day in WEEKDAYS}

    assert _make_prompt(notification_days=days).active_days == ["sunday", "saturday"]


def test_prompt_response_record_conversion() -> None:
    response = PromptResponse(
        prompt_uuid="abc",
        value="great",
        trigger_timestamp=1_700_000_000_000,
        response_timestamp=1_700_000_060_000,
    )

    record = response.to_record()

    assert record == {
        "promptUuid": "abc",
        "value": "great",
        "triggerTimestamp": 1_700_000_000_000,
        "responseTimestamp": 1_700_000_060_000,
    }
    assert PromptResponse.from_record(record) == response
