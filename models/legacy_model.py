"""Strict models for the legacy key-value snapshot consumed by the migration.

The legacy store kept two JSON blobs: a list of prompts under ``"prompts"``
and a list of tracked events under ``"events"``. Both are validated here with
pydantic so the migration never works with half-parsed shapes.

Updates: v0.1.0 - 2026-10-08 - Add legacy prompt/event models and snapshot container.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

LEGACY_EVENT_PREFIX = "Fusion: "


class LegacyPrompt(BaseModel):
    """Prompt entry as stored by the legacy key-value store."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    uuid: str | None = None
    prompt_text: str = Field(alias="promptText", min_length=1)
    response_type: str = Field(default="text", alias="responseType")

    @field_validator("uuid", mode="before")
    @classmethod
    def _blank_uuid_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("response_type", mode="before")
    @classmethod
    def _missing_type_is_text(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return "text"
        return value

    @property
    def event_name(self) -> str:
        """Return the legacy event name that tags responses to this prompt."""
        return f"{LEGACY_EVENT_PREFIX}{self.prompt_text}"


class LegacyEventBody(BaseModel):
    """Inner ``event`` payload of a legacy tracked event."""

    model_config = ConfigDict(extra="ignore")

    name: str
    value: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def _stringify_value(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float, bool)):
            return str(value)
        return value


class LegacyEvent(BaseModel):
    """Legacy tracked event; responses are events named ``"Fusion: <prompt text>"``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    event: LegacyEventBody
    start_timestamp: int | float = Field(alias="startTimestamp")


class LegacySnapshot(BaseModel):
    """Versioned one-shot view over the legacy store contents."""

    version: int = 1
    prompts: list[Any] = Field(default_factory=list)
    events: list[LegacyEvent] = Field(default_factory=list)
    skipped_events: int = 0
    events_error: str | None = None

    def events_for(self, prompt: LegacyPrompt) -> list[LegacyEvent]:
        """Return events whose name exactly matches the prompt's legacy tag."""
        name = prompt.event_name
        return [entry for entry in self.events if entry.event.name == name]


__all__ = [
    "LEGACY_EVENT_PREFIX",
    "LegacyEvent",
    "LegacyEventBody",
    "LegacyPrompt",
    "LegacySnapshot",
]
