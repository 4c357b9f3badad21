"""CLI command handlers for Prompt Journal.

Updates:
  v0.1.3 - 2026-10-18 - Add watch handler that runs the reminder scheduler.
  v0.1.2 - 2026-10-15 - Print migration report counters and failures.
  v0.1.1 - 2026-10-13 - Show scheduled reminders alongside prompt details.
  v0.1.0 - 2026-10-10 - Prompt CRUD and response recording handlers.
"""

from __future__ import annotations

import argparse
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from core.scheduler import CampaignScheduler
from models.prompt_model import WEEKDAYS, Prompt, PromptResponse, ResponseType

from .utils import format_timestamp_ms, print_and_log

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from core.context import PromptJournalContext
    from core.notifications import Notification

CommandHandler = Callable[["PromptJournalContext", argparse.Namespace, logging.Logger], int]


@dataclass(frozen=True)
class CommandSpec:
    """Metadata for dispatching CLI command handlers."""

    handler: CommandHandler


def _describe_prompt(prompt: Prompt) -> str:
    days = ", ".join(prompt.active_days) or "none"
    return (
        f"{prompt.uuid}  {prompt.prompt_text}\n"
        f"    type={prompt.response_type.value} window={prompt.start_time}-{prompt.end_time} "
        f"count={prompt.count_per_day} days={days}"
    )


def run_list(
    context: PromptJournalContext,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del args
    prompts = context.repository.read_all_prompts()
    if not prompts:
        print_and_log(logger, logging.INFO, "No prompts stored.")
        return 0
    for prompt in prompts:
        print(_describe_prompt(prompt))
    return 0


def run_show(
    context: PromptJournalContext,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    prompt = context.repository.get_prompt(args.uuid)
    if prompt is None:
        print_and_log(logger, logging.ERROR, f"Prompt {args.uuid} not found.")
        return 1
    print(_describe_prompt(prompt))
    scheduler = context.scheduler
    if isinstance(scheduler, CampaignScheduler):
        occurrences = scheduler.occurrences(args.uuid) or scheduler.preview(prompt)
        if occurrences:
            print("    upcoming reminders:")
            for occurrence in occurrences:
                print(f"      {occurrence.fire_at.isoformat(timespec='minutes')}")
    return 0


def run_add(
    context: PromptJournalContext,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    days = args.days
    notification_days = (
        {day: True for day in WEEKDAYS}
        if days is None
        else {day: day in days for day in WEEKDAYS}
    )
    prompt = Prompt(
        prompt_text=args.text,
        response_type=ResponseType.parse(args.response_type),
        notification_days=notification_days,
        start_time=args.start,
        end_time=args.end,
        count_per_day=args.count,
        uuid=args.uuid,
    )
    context.repository.save_prompt(prompt)
    print_and_log(logger, logging.INFO, f"Saved prompt {prompt.uuid}")
    return 0


def run_delete(
    context: PromptJournalContext,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    remaining = context.repository.delete_prompt(args.uuid)
    print_and_log(
        logger,
        logging.INFO,
        f"Deleted prompt {args.uuid}; {len(remaining)} prompt(s) remain.",
    )
    return 0


def run_respond(
    context: PromptJournalContext,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    repository = context.repository
    if repository.get_prompt(args.uuid) is None:
        print_and_log(logger, logging.ERROR, f"Prompt {args.uuid} not found.")
        return 1
    now_ms = int(time.time() * 1000)
    trigger = args.trigger_ts if args.trigger_ts is not None else now_ms
    response = PromptResponse(
        prompt_uuid=args.uuid,
        value=args.value,
        trigger_timestamp=trigger,
        response_timestamp=args.response_ts if args.response_ts is not None else now_ms,
    )
    repository.save_prompt_response(response)
    print_and_log(logger, logging.INFO, f"Recorded response for prompt {args.uuid}")
    return 0


def run_responses(
    context: PromptJournalContext,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    responses = context.repository.get_prompt_responses(args.uuid)
    if not responses:
        print_and_log(logger, logging.INFO, f"No responses recorded for prompt {args.uuid}.")
        return 0
    for response in responses:
        print(
            f"{format_timestamp_ms(response.response_timestamp)}  {response.value}"
            f"  (triggered {format_timestamp_ms(response.trigger_timestamp)})"
        )
    return 0


def run_migrate(
    context: PromptJournalContext,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    del args
    report = context.migration.run_migration()
    if not report.completed:
        print_and_log(logger, logging.INFO, "No legacy prompts found; nothing to migrate.")
        return 0
    print(
        f"Processed {report.prompts_processed} legacy prompt(s): "
        f"{report.prompts_created} created, {report.prompts_deduplicated} matched existing, "
        f"{report.responses_replayed} response(s) replayed, "
        f"{report.responses_skipped} skipped."
    )
    for prompt_text, message in report.failures:
        print_and_log(logger, logging.WARNING, f"Failed to migrate {prompt_text!r}: {message}")
    return 0 if report.succeeded else 1


def run_watch(
    context: PromptJournalContext,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    scheduler = context.scheduler
    if not isinstance(scheduler, CampaignScheduler):
        print_and_log(logger, logging.ERROR, "The configured scheduler cannot run reminders here.")
        return 1
    prompts = context.repository.read_all_prompts()
    for prompt in prompts:
        scheduler.schedule_campaign(prompt)

    def _print_notification(notification: Notification) -> None:
        stamp = notification.timestamp.astimezone().strftime("%H:%M")
        print(f"[{stamp}] {notification.title}: {notification.message}", flush=True)

    with context.notifications.subscribe(_print_notification):
        scheduler.start()
        print_and_log(
            logger,
            logging.INFO,
            f"Watching {len(prompts)} prompt(s); press Ctrl+C to stop.",
        )
        try:
            threading.Event().wait(args.duration)
        except KeyboardInterrupt:
            print_and_log(logger, logging.INFO, "Stopping reminders.")
        finally:
            scheduler.shutdown()
    return 0


COMMAND_SPECS: dict[str, CommandSpec] = {
    "list": CommandSpec(run_list),
    "show": CommandSpec(run_show),
    "add": CommandSpec(run_add),
    "delete": CommandSpec(run_delete),
    "respond": CommandSpec(run_respond),
    "responses": CommandSpec(run_responses),
    "migrate": CommandSpec(run_migrate),
    "watch": CommandSpec(run_watch),
}


__all__ = ["CommandSpec", "COMMAND_SPECS"]
