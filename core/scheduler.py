"""Reminder campaign scheduling for prompts.

The repository depends only on the :class:`NotificationScheduler` protocol.
:class:`CampaignScheduler` is the in-process implementation used by the CLI
and the default context. It turns a prompt's notification configuration into
APScheduler cron jobs, one per reminder time of day, restricted to the prompt's
active weekdays. Jobs are registered immediately and fire once the background
scheduler has been started.

Updates:
  v0.2.0 - 2026-10-18 - Back campaigns with APScheduler cron jobs; collapse duplicate times.
  v0.1.1 - 2026-10-13 - Raise SchedulerError for prompts without identity or with bad windows.
  v0.1.0 - 2026-10-07 - Introduce scheduler protocol and in-memory campaign scheduler.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import TYPE_CHECKING, Protocol

from apscheduler.jobstores.base import ConflictingIdError, JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from models.prompt_model import WEEKDAYS, parse_time_of_day

from .exceptions import SchedulerError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from datetime import tzinfo

    from apscheduler.job import Job

    from models.prompt_model import Prompt

logger = logging.getLogger("prompt_journal.scheduler")

_CRON_DAYS = {
    "sunday": "sun",
    "monday": "mon",
    "tuesday": "tue",
    "wednesday": "wed",
    "thursday": "thu",
    "friday": "fri",
    "saturday": "sat",
}


class NotificationScheduler(Protocol):
    """Capability that keeps reminder campaigns in sync with stored prompts."""

    def schedule_campaign(self, prompt: Prompt) -> None:
        """(Re)schedule the campaign for *prompt*'s current configuration."""
        ...

    def cancel_campaign(self, prompt_uuid: str) -> None:
        """Cancel the campaign for *prompt_uuid*; a no-op when none exists."""
        ...


@dataclass(slots=True, frozen=True)
class CampaignOccurrence:
    """Single scheduled reminder for a prompt."""

    prompt_uuid: str
    fire_at: datetime
    prompt_text: str


def reminder_times(start_time: str, end_time: str, count_per_day: int) -> list[time]:
    """Spread *count_per_day* reminders evenly across the inclusive window.

    Reminders that land on the same minute are collapsed, so a zero-width
    window always yields a single reminder.
    """
    start_hour, start_minute = parse_time_of_day(start_time)
    end_hour, end_minute = parse_time_of_day(end_time)
    start = start_hour * 60 + start_minute
    end = end_hour * 60 + end_minute
    if count_per_day < 1:
        return []
    if count_per_day == 1 or end <= start:
        offsets = [start]
    else:
        step = (end - start) / (count_per_day - 1)
        offsets = [round(start + step * index) for index in range(count_per_day)]
    return [time(hour=minute // 60, minute=minute % 60) for minute in dict.fromkeys(offsets)]


def build_triggers(prompt: Prompt, timezone: tzinfo) -> list[CronTrigger]:
    """Return one cron trigger per reminder time on the prompt's active weekdays."""
    if not prompt.uuid:
        raise SchedulerError("Cannot schedule a campaign for a prompt without a uuid")
    try:
        times = reminder_times(prompt.start_time, prompt.end_time, prompt.count_per_day)
    except ValueError as exc:
        raise SchedulerError(f"Invalid notification window for prompt {prompt.uuid}") from exc
    days = ",".join(_CRON_DAYS[day] for day in WEEKDAYS if prompt.notification_days.get(day))
    if not days:
        return []
    return [
        CronTrigger(day_of_week=days, hour=moment.hour, minute=moment.minute, timezone=timezone)
        for moment in times
    ]


def expand_triggers(
    prompt_uuid: str,
    prompt_text: str,
    triggers: Iterable[CronTrigger],
    *,
    now: datetime,
    horizon_days: int,
) -> list[CampaignOccurrence]:
    """Return fire times of *triggers* from *now* until the end of the horizon."""
    until = datetime.combine(now.date() + timedelta(days=horizon_days), time(), tzinfo=now.tzinfo)
    occurrences: list[CampaignOccurrence] = []
    for trigger in triggers:
        fire_at: datetime | None = trigger.get_next_fire_time(None, now)
        while fire_at is not None and fire_at < until:
            if fire_at > now:
                occurrences.append(CampaignOccurrence(prompt_uuid, fire_at, prompt_text))
            fire_at = trigger.get_next_fire_time(fire_at, fire_at + timedelta(microseconds=1))
    return sorted(occurrences, key=lambda item: item.fire_at)


def build_campaign(
    prompt: Prompt,
    *,
    now: datetime,
    horizon_days: int,
) -> list[CampaignOccurrence]:
    """Return future reminder occurrences for *prompt* within the horizon.

    *now* must be timezone-aware; its zone is the zone reminders fire in.
    """
    if now.tzinfo is None:
        raise SchedulerError("Campaign clock must be timezone-aware")
    triggers = build_triggers(prompt, now.tzinfo)
    return expand_triggers(
        str(prompt.uuid),
        prompt.prompt_text,
        triggers,
        now=now,
        horizon_days=horizon_days,
    )


def _job_id(prompt_uuid: str, index: int) -> str:
    return f"{prompt_uuid}:{index}"


def _job_owner(job: Job) -> str:
    return job.id.rsplit(":", 1)[0]


class CampaignScheduler:
    """Reminder scheduler backed by an APScheduler :class:`BackgroundScheduler`.

    Each reminder time of a prompt becomes a cron job with id
    ``"<prompt uuid>:<index>"``. When a job fires, the scheduler logs it and
    hands a :class:`CampaignOccurrence` to ``on_reminder``.
    """

    def __init__(
        self,
        *,
        horizon_days: int = 7,
        clock: Callable[[], datetime] | None = None,
        timezone: tzinfo | str | None = None,
        on_reminder: Callable[[CampaignOccurrence], None] | None = None,
    ) -> None:
        if horizon_days < 1:
            raise ValueError("horizon_days must be at least 1")
        self._horizon_days = horizon_days
        self._scheduler = BackgroundScheduler(timezone=timezone)
        self._timezone: tzinfo = self._scheduler.timezone
        self._clock = clock
        self._on_reminder = on_reminder
        self._lock = threading.Lock()

    @property
    def timezone(self) -> tzinfo:
        """Return the zone reminder times are interpreted in."""
        return self._timezone

    @property
    def running(self) -> bool:
        return bool(self._scheduler.running)

    def start(self) -> None:
        """Start firing scheduled reminders in a background thread."""
        if not self._scheduler.running:
            self._scheduler.start()
            logger.info("Reminder scheduler started", extra={"timezone": str(self._timezone)})

    def shutdown(self) -> None:
        """Stop firing reminders and join the background thread."""
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Reminder scheduler stopped")

    def schedule_campaign(self, prompt: Prompt) -> None:
        """Replace any existing campaign for *prompt* with a fresh one."""
        triggers = build_triggers(prompt, self._timezone)
        prompt_uuid = str(prompt.uuid)
        with self._lock:
            self._remove_jobs(prompt_uuid)
            try:
                for index, trigger in enumerate(triggers):
                    self._scheduler.add_job(
                        self._fire_reminder,
                        trigger,
                        args=[prompt_uuid, prompt.prompt_text],
                        id=_job_id(prompt_uuid, index),
                        name=f"Reminder for prompt {prompt_uuid}",
                        replace_existing=True,
                        coalesce=True,
                    )
            except (ValueError, ConflictingIdError) as exc:
                self._remove_jobs(prompt_uuid)
                raise SchedulerError(f"Unable to schedule reminders for {prompt_uuid}") from exc
        logger.info(
            "Scheduled reminder campaign",
            extra={"prompt_uuid": prompt_uuid, "reminder_jobs": len(triggers)},
        )

    def cancel_campaign(self, prompt_uuid: str) -> None:
        """Remove the jobs for *prompt_uuid* if any are scheduled."""
        with self._lock:
            removed = self._remove_jobs(prompt_uuid)
        if removed:
            logger.info(
                "Cancelled reminder campaign",
                extra={"prompt_uuid": prompt_uuid, "reminder_jobs": removed},
            )

    def jobs(self, prompt_uuid: str) -> list[Job]:
        """Return the APScheduler jobs registered for *prompt_uuid*."""
        return [job for job in self._scheduler.get_jobs() if _job_owner(job) == prompt_uuid]

    def preview(self, prompt: Prompt) -> list[CampaignOccurrence]:
        """Return the occurrences a campaign for *prompt* would hold, without storing them."""
        now = self._now()
        return expand_triggers(
            str(prompt.uuid),
            prompt.prompt_text,
            build_triggers(prompt, self._timezone),
            now=now,
            horizon_days=self._horizon_days,
        )

    def campaigns(self) -> dict[str, list[CampaignOccurrence]]:
        """Return upcoming occurrences grouped by prompt uuid."""
        grouped: dict[str, list[Job]] = {}
        for job in self._scheduler.get_jobs():
            grouped.setdefault(_job_owner(job), []).append(job)
        return {prompt_uuid: self._expand_jobs(jobs) for prompt_uuid, jobs in grouped.items()}

    def occurrences(self, prompt_uuid: str) -> list[CampaignOccurrence]:
        """Return upcoming occurrences for *prompt_uuid* ordered by time."""
        return self._expand_jobs(self.jobs(prompt_uuid))

    def _expand_jobs(self, jobs: list[Job]) -> list[CampaignOccurrence]:
        now = self._now()
        occurrences: list[CampaignOccurrence] = []
        for job in jobs:
            prompt_uuid, prompt_text = job.args
            occurrences.extend(
                expand_triggers(
                    prompt_uuid,
                    prompt_text,
                    [job.trigger],
                    now=now,
                    horizon_days=self._horizon_days,
                )
            )
        return sorted(occurrences, key=lambda item: item.fire_at)

    def _remove_jobs(self, prompt_uuid: str) -> int:
        removed = 0
        for job in self.jobs(prompt_uuid):
            try:
                self._scheduler.remove_job(job.id)
            except JobLookupError:
                continue
            removed += 1
        return removed

    def _fire_reminder(self, prompt_uuid: str, prompt_text: str) -> None:
        occurrence = CampaignOccurrence(prompt_uuid, self._now(), prompt_text)
        logger.info("Reminder due", extra={"prompt_uuid": prompt_uuid})
        if self._on_reminder is not None:
            self._on_reminder(occurrence)

    def _now(self) -> datetime:
        now = self._clock() if self._clock is not None else datetime.now(self._timezone)
        if now.tzinfo is None:
            now = now.replace(tzinfo=self._timezone)
        return now


__all__ = [
    "CampaignOccurrence",
    "CampaignScheduler",
    "NotificationScheduler",
    "build_campaign",
    "build_triggers",
    "expand_triggers",
    "reminder_times",
]
