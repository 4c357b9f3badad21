"""Explicit wiring of the capabilities the prompt journal depends on.

Updates: v0.1.0 - 2026-10-10 - Replace global singletons with an injected context.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .migration import MigrationCoordinator
from .prompt_repository import PromptRepository

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from .analytics import UsageTracker
    from .legacy import LegacyStore
    from .migration import AppHost
    from .notifications import NotificationCenter
    from .repository import RelationalStore
    from .scheduler import NotificationScheduler


@dataclass(slots=True)
class PromptJournalContext:
    """Bundle of storage, scheduling, analytics, and host capabilities."""

    store: RelationalStore
    scheduler: NotificationScheduler
    notifications: NotificationCenter
    legacy_store: LegacyStore
    host: AppHost
    tracker: UsageTracker | None = None
    dedupe_migrated_responses: bool = False
    _repository: PromptRepository | None = field(default=None, init=False, repr=False)

    @property
    def repository(self) -> PromptRepository:
        """Return the prompt repository bound to this context, built on first use."""
        if self._repository is None:
            self._repository = PromptRepository(self.store, self.scheduler, self.tracker)
        return self._repository

    @property
    def migration(self) -> MigrationCoordinator:
        """Return a migration coordinator sharing this context's repository."""
        return MigrationCoordinator(
            self.repository,
            self.legacy_store,
            self.notifications,
            self.host,
            self.tracker,
            dedupe_responses=self.dedupe_migrated_responses,
        )


__all__ = ["PromptJournalContext"]
