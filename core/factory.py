"""Factories for constructing a PromptJournalContext from validated settings.

Updates:
  v0.1.2 - 2026-10-18 - Announce fired reminders and honour the reminder timezone.
  v0.1.1 - 2026-10-15 - Pass response dedup preference through to migrations.
  v0.1.0 - 2026-10-10 - Build default store, scheduler, tracker, and legacy wiring.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from zoneinfo import ZoneInfo

from .analytics import UsageTracker
from .context import PromptJournalContext
from .exceptions import PromptStorageError
from .legacy import JsonFileLegacyStore
from .migration import LoggingAppHost
from .notifications import NotificationCenter
from .notifications import notification_center as default_notification_center
from .repository import RelationalStore, StoreError
from .scheduler import CampaignOccurrence, CampaignScheduler

if TYPE_CHECKING:  # pragma: no cover - typing only
    from collections.abc import Callable

    from config import PromptJournalSettings

factory_logger = logging.getLogger("prompt_journal.factory")

_OVERRIDABLE = {"store", "scheduler", "tracker", "notifications", "legacy_store", "host"}

REMINDER_TITLE = "Time to check in"


def reminder_announcer(
    notifications: NotificationCenter,
) -> Callable[[CampaignOccurrence], None]:
    """Return a callback that publishes fired reminders to *notifications*."""

    def _announce(occurrence: CampaignOccurrence) -> None:
        notifications.announce(
            title=REMINDER_TITLE,
            message=occurrence.prompt_text,
            metadata={
                "prompt_uuid": occurrence.prompt_uuid,
                "fire_at": occurrence.fire_at.isoformat(),
            },
        )

    return _announce


def build_context(settings: PromptJournalSettings, **overrides: Any) -> PromptJournalContext:
    """Return a context wired from *settings*.

    Any capability named in ``store``, ``scheduler``, ``tracker``,
    ``notifications``, ``legacy_store`` or ``host`` may be passed as a
    keyword override, which is how tests substitute fakes.
    """
    unknown = set(overrides) - _OVERRIDABLE
    if unknown:
        raise TypeError(f"Unknown context override(s): {', '.join(sorted(unknown))}")

    store = overrides.get("store")
    if store is None:
        try:
            store = RelationalStore(settings.db_path)
        except StoreError as exc:
            raise PromptStorageError(f"Unable to open prompt database {settings.db_path}") from exc

    notifications = overrides.get("notifications") or default_notification_center
    scheduler = overrides.get("scheduler")
    if scheduler is None:
        timezone = ZoneInfo(settings.reminder_timezone) if settings.reminder_timezone else None
        scheduler = CampaignScheduler(
            horizon_days=settings.campaign_horizon_days,
            timezone=timezone,
            on_reminder=reminder_announcer(notifications),
        )
    tracker = overrides.get("tracker")
    if tracker is None:
        tracker = UsageTracker(settings.usage_log_path, enabled=settings.analytics_enabled)

    context = PromptJournalContext(
        store=store,
        scheduler=scheduler,
        notifications=notifications,
        legacy_store=overrides.get("legacy_store")
        or JsonFileLegacyStore(settings.legacy_store_path),
        host=overrides.get("host") or LoggingAppHost(),
        tracker=tracker,
        dedupe_migrated_responses=settings.dedupe_migrated_responses,
    )
    factory_logger.debug(
        "Prompt journal context built",
        extra={"db_path": str(settings.db_path), "analytics": settings.analytics_enabled},
    )
    return context


__all__ = ["REMINDER_TITLE", "build_context", "reminder_announcer"]
