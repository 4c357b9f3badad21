"""Prompt and prompt response data model definitions.

Updates: v0.2.0 - 2026-10-12 - Validate time windows, weekday flags, and response types.
Updates: v0.1.0 - 2026-10-05 - Initial Prompt/PromptResponse schema with row helpers.
"""
from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

WEEKDAYS: tuple[str, ...] = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class ResponseType(str, Enum):
    """Expected answer shape for a prompt."""

    TEXT = "text"
    NUMBER = "number"
    YES_NO = "yesNo"
    CUSTOM_OPTIONS = "customOptions"

    @classmethod
    def parse(cls, value: Any) -> ResponseType:
        """Return the enum member for *value*, raising ``ValueError`` when unknown."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip()
        for member in cls:
            if member.value.lower() == text.lower():
                return member
        allowed = ", ".join(member.value for member in cls)
        raise ValueError(f"Unsupported response type {value!r}; expected one of: {allowed}")


def default_notification_days() -> dict[str, bool]:
    """Return weekday flags with every day active."""
    return {day: True for day in WEEKDAYS}


def default_notification_config() -> dict[str, Any]:
    """Return the reminder settings applied to prompts that carry none."""
    return {
        "notification_days": default_notification_days(),
        "start_time": "08:00",
        "end_time": "18:00",
        "count_per_day": 3,
    }


def parse_time_of_day(value: str) -> tuple[int, int]:
    """Return ``(hour, minute)`` for an ``HH:MM`` string."""
    match = _TIME_PATTERN.match(str(value).strip())
    if match is None:
        raise ValueError(f"Invalid time of day {value!r}; expected HH:MM")
    return int(match.group(1)), int(match.group(2))


def coerce_notification_days(value: Any) -> dict[str, bool]:
    """Return a complete weekday flag mapping, raising ``ValueError`` on bad shapes."""
    if not isinstance(value, Mapping):
        raise ValueError("Notification days must be a mapping of weekday flags")
    flags: dict[str, bool] = {}
    for key, raw in value.items():
        day = str(key).strip().lower()
        if day not in WEEKDAYS:
            raise ValueError(f"Unknown weekday {key!r} in notification days")
        if not isinstance(raw, bool):
            raise ValueError(f"Weekday flag for {day} must be a boolean")
        flags[day] = raw
    missing = [day for day in WEEKDAYS if day not in flags]
    if missing:
        raise ValueError(f"Notification days missing flags for: {', '.join(missing)}")
    return {day: flags[day] for day in WEEKDAYS}


def serialize_notification_days(days: Mapping[str, bool]) -> str:
    """Serialise weekday flags for the ``notificationConfig_days`` column."""
    return json.dumps(coerce_notification_days(days), ensure_ascii=False)


def deserialize_notification_days(value: str | None) -> dict[str, bool]:
    """Parse a stored ``notificationConfig_days`` value."""
    if value is None:
        raise ValueError("Notification days column is empty")
    try:
        parsed: object = json.loads(value)
    except (TypeError, json.JSONDecodeError) as exc:
        raise ValueError(f"Notification days are not valid JSON: {value!r}") from exc
    return coerce_notification_days(parsed)


@dataclass(slots=True)
class Prompt:
    """A user-configured recurring question with its reminder window."""

    prompt_text: str
    response_type: ResponseType = ResponseType.TEXT
    notification_days: dict[str, bool] = field(default_factory=default_notification_days)
    start_time: str = "08:00"
    end_time: str = "18:00"
    count_per_day: int = 3
    uuid: str | None = None

    @property
    def active_days(self) -> list[str]:
        """Return the weekdays on which reminders fire, Sunday first."""
        return [day for day in WEEKDAYS if self.notification_days.get(day)]

    def validate(self) -> None:
        """Raise ``ValueError`` when the prompt violates a stored invariant."""
        if not str(self.prompt_text or "").strip():
            raise ValueError("Prompt text must not be empty")
        self.response_type = ResponseType.parse(self.response_type)
        self.notification_days = coerce_notification_days(self.notification_days)
        start = parse_time_of_day(self.start_time)
        end = parse_time_of_day(self.end_time)
        if start > end:
            raise ValueError(
                f"Notification window start {self.start_time} is after end {self.end_time}"
            )
        if isinstance(self.count_per_day, bool) or not isinstance(self.count_per_day, int):
            raise ValueError("Reminder count per day must be an integer")
        if self.count_per_day < 1:
            raise ValueError("Reminder count per day must be at least 1")

    def notification_snapshot(self) -> dict[str, Any]:
        """Return a serialisable snapshot of the notification configuration."""
        return {
            "days": dict(self.notification_days),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "count_per_day": self.count_per_day,
        }

    def to_record(self) -> dict[str, Any]:
        """Return a mapping keyed by ``prompts`` column names."""
        return {
            "uuid": self.uuid,
            "promptText": self.prompt_text,
            "responseType": ResponseType.parse(self.response_type).value,
            "notificationConfig_days": serialize_notification_days(self.notification_days),
            "notificationConfig_startTime": self.start_time,
            "notificationConfig_endTime": self.end_time,
            "notificationConfig_countPerDay": self.count_per_day,
        }

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> Prompt:
        """Hydrate a Prompt from a stored row mapping.

        Raises ``ValueError`` when the weekday flags or response type are malformed.
        """
        count = data.get("notificationConfig_countPerDay")
        return cls(
            uuid=str(data["uuid"]),
            prompt_text=str(data.get("promptText") or ""),
            response_type=ResponseType.parse(data.get("responseType")),
            notification_days=deserialize_notification_days(data.get("notificationConfig_days")),
            start_time=str(data.get("notificationConfig_startTime") or ""),
            end_time=str(data.get("notificationConfig_endTime") or ""),
            count_per_day=int(count) if count is not None else 0,
        )


@dataclass(slots=True)
class PromptResponse:
    """One recorded answer to a prompt at a point in time."""

    prompt_uuid: str
    value: str
    trigger_timestamp: int
    response_timestamp: int

    def to_record(self) -> dict[str, Any]:
        """Return a mapping keyed by ``prompt_responses`` column names."""
        return {
            "promptUuid": self.prompt_uuid,
            "value": self.value,
            "triggerTimestamp": self.trigger_timestamp,
            "responseTimestamp": self.response_timestamp,
        }

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> PromptResponse:
        """Hydrate a PromptResponse from a stored row mapping."""
        return cls(
            prompt_uuid=str(data["promptUuid"]),
            value=str(data["value"]) if data.get("value") is not None else "",
            trigger_timestamp=int(data["triggerTimestamp"]),
            response_timestamp=int(data["responseTimestamp"]),
        )


__all__ = [
    "WEEKDAYS",
    "Prompt",
    "PromptResponse",
    "ResponseType",
    "coerce_notification_days",
    "default_notification_config",
    "default_notification_days",
    "deserialize_notification_days",
    "parse_time_of_day",
    "serialize_notification_days",
]
