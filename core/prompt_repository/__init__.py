"""Prompt repository façade composed from lifecycle and response mixins.

The repository is the only writer of prompt state. It validates entries before
they reach SQLite, keeps the notification scheduler in step with every prompt
write, and reports storage failures as :mod:`core.exceptions` errors.

Updates:
  v0.1.1 - 2026-10-13 - Serialise prompt writes with the scheduler call under one lock.
  v0.1.0 - 2026-10-06 - Compose PromptRepository from lifecycle and response mixins.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from .lifecycle import PromptLifecycleMixin
from .responses import PromptResponseMixin

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from ..analytics import UsageTracker
    from ..repository import RelationalStore
    from ..scheduler import NotificationScheduler

__all__ = ["PromptRepository"]


class PromptRepository(PromptLifecycleMixin, PromptResponseMixin):
    """CRUD over prompts and responses backed by :class:`RelationalStore`."""

    def __init__(
        self,
        store: RelationalStore,
        scheduler: NotificationScheduler,
        tracker: UsageTracker | None = None,
    ) -> None:
        """Initialise the repository.

        Args:
            store: Relational store that owns the SQLite tables.
            scheduler: Reminder scheduler kept in sync with prompt writes.
            tracker: Optional analytics sink; ``None`` disables tracking.
        """
        self._store = store
        self._scheduler = scheduler
        self._tracker = tracker
        self._write_lock = threading.RLock()

    @property
    def store(self) -> RelationalStore:
        """Return the underlying relational store."""
        return self._store

    @property
    def scheduler(self) -> NotificationScheduler:
        """Return the scheduler kept in sync with prompt writes."""
        return self._scheduler
