"""In-app notification hub for user-visible confirmations and task progress.

The UI layer subscribes to :data:`notification_center` (or an injected
:class:`NotificationCenter`) to present messages such as the migration
completion notice; the core never renders anything itself.

Updates:
  v0.1.1 - 2026-10-14 - Add announce helper for one-off confirmations.
  v0.1.0 - 2026-10-08 - Publish/subscribe hub with task tracking helpers.
"""
from __future__ import annotations

import logging
import threading
import time
import uuid
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

logger = logging.getLogger("prompt_journal.notifications")


class NotificationLevel(str, Enum):
    """Severity levels communicated to listeners."""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class NotificationStatus(str, Enum):
    """Lifecycle stage of the task a notification belongs to."""
    STARTED = "started"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    COMPLETED = "completed"


@dataclass(slots=True)
class Notification:
    """Payload delivered to subscribers."""
    id: uuid.UUID
    title: str
    message: str
    level: NotificationLevel
    status: NotificationStatus
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    task_id: str | None = None
    duration_ms: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return a serialisable representation of the notification."""
        return {
            "id": str(self.id),
            "title": self.title,
            "message": self.message,
            "level": self.level.value,
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
            "task_id": self.task_id,
            "duration_ms": self.duration_ms,
            "metadata": dict(self.metadata),
        }


class NotificationSubscription:
    """Handle that detaches its callback when closed."""
    def __init__(
        self,
        center: NotificationCenter,
        callback: Callable[[Notification], None],
    ) -> None:
        self._center = center
        self._callback = callback
        self._closed = False

    def close(self) -> None:
        """Detach the callback if it is still attached."""
        if self._closed:
            return
        self._closed = True
        self._center.unsubscribe(self._callback)

    def __enter__(self) -> NotificationSubscription:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()


class NotificationCenter:
    """Thread-safe publish/subscribe hub with a bounded history."""
    def __init__(self, history_limit: int = 100) -> None:
        self._subscribers: list[Callable[[Notification], None]] = []
        self._lock = threading.RLock()
        self._history: deque[Notification] = deque(maxlen=history_limit)

    def subscribe(self, callback: Callable[[Notification], None]) -> NotificationSubscription:
        """Register *callback* for future notifications."""
        with self._lock:
            self._subscribers.append(callback)
        return NotificationSubscription(self, callback)

    def unsubscribe(self, callback: Callable[[Notification], None]) -> None:
        """Remove *callback* if it is registered."""
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def publish(self, notification: Notification) -> None:
        """Record *notification* and deliver it to every subscriber."""
        with self._lock:
            self._history.append(notification)
            subscribers = list(self._subscribers)

        logger.debug(
            "Notification event",
            extra={
                "title": notification.title,
                "status": notification.status.value,
                "level": notification.level.value,
                "task_id": notification.task_id,
            },
        )

        for callback in subscribers:
            try:
                callback(notification)
            except Exception:  # pragma: no cover - a broken listener must not break writers
                logger.exception("Notification subscriber raised an exception")

    def announce(
        self,
        *,
        title: str,
        message: str,
        level: NotificationLevel = NotificationLevel.INFO,
        metadata: dict[str, Any] | None = None,
    ) -> Notification:
        """Publish a standalone user-facing message and return it."""
        notification = Notification(
            id=uuid.uuid4(),
            title=title,
            message=message,
            level=level,
            status=NotificationStatus.COMPLETED,
            metadata=dict(metadata or {}),
        )
        self.publish(notification)
        return notification

    def history(self) -> tuple[Notification, ...]:
        """Return a snapshot of stored notifications."""
        with self._lock:
            return tuple(self._history)

    @contextmanager
    def track_task(
        self,
        *,
        title: str,
        start_message: str,
        success_message: str,
        failure_message: str | None = None,
        task_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Iterator[None]:
        """Emit started/succeeded/failed events around the wrapped block."""
        resolved_task_id = task_id or f"task:{uuid.uuid4()}"
        started_at = time.perf_counter()
        self.publish(
            Notification(
                id=uuid.uuid4(),
                title=title,
                message=start_message,
                level=NotificationLevel.INFO,
                status=NotificationStatus.STARTED,
                task_id=resolved_task_id,
                metadata=dict(metadata or {}),
            )
        )
        try:
            yield
        except Exception as exc:
            self.publish(
                Notification(
                    id=uuid.uuid4(),
                    title=title,
                    message=f"{failure_message or f'{title} failed'}: {exc}",
                    level=NotificationLevel.ERROR,
                    status=NotificationStatus.FAILED,
                    task_id=resolved_task_id,
                    duration_ms=int((time.perf_counter() - started_at) * 1000),
                    metadata=dict(metadata or {}),
                )
            )
            raise
        self.publish(
            Notification(
                id=uuid.uuid4(),
                title=title,
                message=success_message,
                level=NotificationLevel.SUCCESS,
                status=NotificationStatus.SUCCEEDED,
                task_id=resolved_task_id,
                duration_ms=int((time.perf_counter() - started_at) * 1000),
                metadata=dict(metadata or {}),
            )
        )


notification_center = NotificationCenter()


__all__ = [
    "Notification",
    "NotificationCenter",
    "NotificationLevel",
    "NotificationStatus",
    "NotificationSubscription",
    "notification_center",
]
