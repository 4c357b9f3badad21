"""Printable summaries for Prompt Journal configuration.

Updates:
  v0.1.1 - 2026-10-18 - Show the reminder timezone.
  v0.1.0 - 2026-10-10 - Extract CLI settings summary rendering.
"""

from __future__ import annotations

from config import PromptJournalSettings

from .utils import describe_path


def print_settings_summary(settings: PromptJournalSettings) -> None:
    """Emit a readable summary of storage, migration, and analytics configuration."""
    lines = [
        "Prompt Journal configuration summary",
        "------------------------------------",
        "Database path: "
        + describe_path(settings.db_path, expect_directory=False, allow_missing_file=True),
        "Legacy store: "
        + describe_path(settings.legacy_store_path, expect_directory=False),
        f"Reminder horizon (days): {settings.campaign_horizon_days}",
        f"Reminder timezone: {settings.reminder_timezone or 'system default'}",
        f"Deduplicate migrated responses: {'yes' if settings.dedupe_migrated_responses else 'no'}",
        "",
        "Analytics",
        "---------",
        f"Enabled: {'yes' if settings.analytics_enabled else 'no'}",
        "Usage log: "
        + describe_path(settings.usage_log_path, expect_directory=False, allow_missing_file=True),
        f"Log level: {settings.log_level}",
    ]
    print("\n".join(lines))
