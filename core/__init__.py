"""Core service layer for Prompt Journal.

Updates:
  v0.2.0 - 2026-10-10 - Export context factory, migration coordinator, and scheduler.
  v0.1.0 - 2026-10-05 - Surface RelationalStore and the initial PromptRepository API.
"""

from .analytics import UsageTracker, mask_prompt_id
from .context import PromptJournalContext
from .exceptions import (
    CorruptionError,
    NotFoundError,
    PromptCorruptionError,
    PromptJournalError,
    PromptNotFoundError,
    PromptStorageError,
    PromptValidationError,
    SchedulerError,
    StorageError,
)
from .factory import build_context
from .legacy import JsonFileLegacyStore, LegacyStore, MappingLegacyStore, load_legacy_snapshot
from .migration import AppHost, LoggingAppHost, MigrationCoordinator, MigrationReport
from .notifications import (
    Notification,
    NotificationCenter,
    NotificationLevel,
    NotificationStatus,
    notification_center,
)
from .prompt_repository import PromptRepository
from .repository import RelationalStore
from .scheduler import CampaignScheduler, NotificationScheduler
from .utils import new_prompt_uuid, normalize_timestamp_ms

__all__ = [
    "AppHost",
    "CampaignScheduler",
    "CorruptionError",
    "JsonFileLegacyStore",
    "LegacyStore",
    "LoggingAppHost",
    "MappingLegacyStore",
    "MigrationCoordinator",
    "MigrationReport",
    "NotFoundError",
    "Notification",
    "NotificationCenter",
    "NotificationLevel",
    "NotificationScheduler",
    "NotificationStatus",
    "PromptCorruptionError",
    "PromptJournalContext",
    "PromptJournalError",
    "PromptNotFoundError",
    "PromptRepository",
    "PromptStorageError",
    "PromptValidationError",
    "RelationalStore",
    "SchedulerError",
    "StorageError",
    "UsageTracker",
    "build_context",
    "load_legacy_snapshot",
    "mask_prompt_id",
    "new_prompt_uuid",
    "normalize_timestamp_ms",
    "notification_center",
]
