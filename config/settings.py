"""Settings management utilities for Prompt Journal configuration.

Updates:
  v0.2.2 - 2026-10-18 - Add IANA timezone for reminder schedules.
  v0.2.1 - 2026-10-15 - Add toggle for deduplicating migrated responses.
  v0.2.0 - 2026-10-10 - Read legacy store, analytics, and scheduler horizon settings.
  v0.1.0 - 2026-10-04 - Pydantic settings with JSON config file and .env support.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, cast
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import dotenv_values
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

_DOTENV_FALLBACK_PATH = ".env"
_ENV_PREFIX = "PROMPT_JOURNAL_"
_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}

logger = logging.getLogger("prompt_journal.settings")


def _read_dotenv_values() -> dict[str, str]:
    """Load ``.env`` entries into a mapping without mutating ``os.environ``."""
    env_file_override = os.getenv(f"{_ENV_PREFIX}ENV_FILE")
    if env_file_override is not None:
        candidate = env_file_override.strip()
        if not candidate:
            return {}
        path = Path(candidate).expanduser()
    else:
        path = Path(_DOTENV_FALLBACK_PATH).expanduser()
    if not path.is_file():
        return {}
    raw_values = dotenv_values(str(path))
    return {str(key): str(value) for key, value in raw_values.items() if value is not None}


class SettingsError(Exception):
    """Raised when Prompt Journal configuration cannot be loaded or validated."""


class PromptJournalSettings(BaseSettings):
    """Application configuration sourced from keyword overrides, JSON, or the environment."""

    db_path: Path = Field(default=Path("data") / "prompt_journal.db")
    legacy_store_path: Path = Field(
        default=Path("data") / "legacy_store.json",
        description="JSON export of the legacy key-value store consumed by migrations.",
    )
    usage_log_path: Path = Field(default=Path("data") / "logs" / "usage.jsonl")
    analytics_enabled: bool = True
    campaign_horizon_days: int = Field(
        default=7,
        ge=1,
        le=60,
        description="Number of days of reminders expanded per prompt campaign.",
    )
    dedupe_migrated_responses: bool = Field(
        default=False,
        description="Skip replayed legacy responses already stored with the same values.",
    )
    reminder_timezone: str | None = Field(
        default=None,
        description="IANA zone reminder windows are interpreted in; the system zone when unset.",
    )
    log_level: str = "INFO"

    model_config = cast(
        "SettingsConfigDict",
        {
            "env_prefix": _ENV_PREFIX,
            "case_sensitive": False,
            "populate_by_name": True,
            "extra": "ignore",
        },
    )

    @field_validator("db_path", "legacy_store_path", "usage_log_path", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Any:
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValueError("Paths must not be empty")
            return Path(stripped).expanduser()
        return value

    @field_validator("reminder_timezone", mode="before")
    @classmethod
    def _validate_timezone(cls, value: Any) -> Any:
        if value is None:
            return None
        name = str(value).strip()
        if not name:
            return None
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown reminder timezone {name!r}") from exc
        return name

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: Any) -> str:
        level = str(value or "").strip().upper()
        if level not in _LOG_LEVELS:
            allowed = ", ".join(sorted(_LOG_LEVELS))
            raise ValueError(f"log_level must be one of: {allowed}")
        return level

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
    ]:
        """Define configuration source precedence.

        Order (highest → lowest):
            1. Explicit keyword arguments (e.g. load_settings(db_path="...")).
            2. JSON configuration file.
            3. Environment variables, then ``.env`` entries.
            4. File secrets.
        """

        def env_with_dotenv(_: BaseSettings | None = None) -> dict[str, Any]:
            data: dict[str, Any] = {}
            dotenv_data = _read_dotenv_values()
            for field_name in cls.model_fields:
                key = f"{_ENV_PREFIX}{field_name.upper()}"
                value = os.getenv(key)
                if value is None:
                    value = dotenv_data.get(key)
                if value is None:
                    continue
                stripped_value = str(value).strip()
                if stripped_value:
                    data[field_name] = stripped_value
            return data

        return (
            init_settings,
            cls._json_config_settings_source(settings_cls),
            cast("PydanticBaseSettingsSource", env_with_dotenv),
            file_secret_settings,
        )

    @classmethod
    def _json_config_settings_source(
        cls,
        _: type[BaseSettings],
    ) -> PydanticBaseSettingsSource:
        """Return settings extracted from an optional JSON config file."""

        def _loader(_: BaseSettings | None = None) -> dict[str, Any]:
            explicit_path = os.getenv(f"{_ENV_PREFIX}CONFIG_JSON")
            candidates: list[Path] = []
            if explicit_path:
                candidates.append(Path(explicit_path).expanduser())
            candidates.append(Path("config") / "config.json")

            for path in candidates:
                if not path.exists():
                    if explicit_path and path == candidates[0]:
                        raise SettingsError(f"Configuration file not found: {path}")
                    continue
                try:
                    raw_contents = path.read_text(encoding="utf-8")
                except OSError as exc:  # pragma: no cover - filesystem failure is env-specific
                    raise SettingsError(f"Unable to read configuration file: {path}") from exc
                try:
                    data = json.loads(raw_contents)
                except json.JSONDecodeError as exc:
                    raise SettingsError(f"Invalid JSON in configuration file: {path}") from exc
                if not isinstance(data, dict):
                    raise SettingsError(f"Configuration file {path} must contain a JSON object")
                mapping_data = cast("Mapping[object, Any]", data)
                known = set(cls.model_fields)
                mapped = {
                    str(key): value for key, value in mapping_data.items() if str(key) in known
                }
                ignored = sorted(str(key) for key in mapping_data if str(key) not in known)
                if ignored:
                    logger.warning(
                        "Ignoring unknown key(s) %s in configuration file %s",
                        ", ".join(ignored),
                        path,
                    )
                return mapped
            return {}

        return cast("PydanticBaseSettingsSource", _loader)


def load_settings(**overrides: Any) -> PromptJournalSettings:
    """Return validated settings, raising SettingsError on failure."""
    try:
        return PromptJournalSettings(**overrides)
    except SettingsError:
        raise
    except ValidationError as exc:
        raise SettingsError("Invalid Prompt Journal configuration") from exc


__all__ = ["PromptJournalSettings", "SettingsError", "load_settings"]
