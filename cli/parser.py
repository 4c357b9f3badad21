"""Argument parser for the Prompt Journal CLI.

Updates:
  v0.1.2 - 2026-10-18 - Add watch subcommand that fires reminders until stopped.
  v0.1.1 - 2026-10-15 - Add migrate and responses subcommands.
  v0.1.0 - 2026-10-10 - Prompt CRUD and response recording subcommands.
"""

from __future__ import annotations

import argparse
import math
from collections.abc import Sequence
from pathlib import Path

from models.prompt_model import WEEKDAYS, ResponseType


def _day_list(value: str) -> list[str]:
    days = [item.strip().lower() for item in value.split(",") if item.strip()]
    if not days:
        raise argparse.ArgumentTypeError("Provide at least one weekday")
    unknown = [day for day in days if day not in WEEKDAYS]
    if unknown:
        raise argparse.ArgumentTypeError(f"Unknown weekday(s): {', '.join(unknown)}")
    return days


def _non_negative_seconds(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid duration {value!r}") from exc
    if not math.isfinite(seconds) or seconds < 0:
        raise argparse.ArgumentTypeError("Duration must be a non-negative number of seconds")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the Prompt Journal CLI."""
    parser = argparse.ArgumentParser(
        prog="prompt-journal",
        description="Manage scheduled self-report prompts and their responses.",
    )
    parser.add_argument(
        "--logging-config",
        type=Path,
        default=None,
        help="Path to logging configuration file (INI format)",
    )
    parser.add_argument(
        "--print-settings",
        action="store_true",
        help="Print resolved settings and exit",
    )

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("list", help="List stored prompts.")

    show_parser = subparsers.add_parser("show", help="Show one prompt and its reminders.")
    show_parser.add_argument("uuid", help="Prompt identifier.")

    add_parser = subparsers.add_parser("add", help="Create or update a prompt.")
    add_parser.add_argument("text", help="Question shown to the user.")
    add_parser.add_argument(
        "--uuid",
        default=None,
        help="Existing prompt identifier to update (a new one is generated when omitted).",
    )
    add_parser.add_argument(
        "--response-type",
        choices=[member.value for member in ResponseType],
        default=ResponseType.TEXT.value,
        help="Expected answer shape (default: text).",
    )
    add_parser.add_argument(
        "--days",
        type=_day_list,
        default=None,
        help="Comma-separated weekdays on which reminders fire (default: every day).",
    )
    add_parser.add_argument("--start", default="08:00", help="Window start, HH:MM.")
    add_parser.add_argument("--end", default="18:00", help="Window end, HH:MM.")
    add_parser.add_argument("--count", type=int, default=3, help="Reminders per day.")

    delete_parser = subparsers.add_parser("delete", help="Delete a prompt.")
    delete_parser.add_argument("uuid", help="Prompt identifier.")

    respond_parser = subparsers.add_parser("respond", help="Record a response to a prompt.")
    respond_parser.add_argument("uuid", help="Prompt identifier.")
    respond_parser.add_argument("value", help="Recorded answer.")
    respond_parser.add_argument(
        "--trigger-ts",
        type=int,
        default=None,
        help="Reminder time in seconds or milliseconds since epoch (default: now).",
    )
    respond_parser.add_argument(
        "--response-ts",
        type=int,
        default=None,
        help="Answer time in seconds or milliseconds since epoch (default: now).",
    )

    responses_parser = subparsers.add_parser("responses", help="List responses for a prompt.")
    responses_parser.add_argument("uuid", help="Prompt identifier.")

    subparsers.add_parser(
        "migrate",
        help="Import prompts and responses from the legacy key-value store.",
    )

    watch_parser = subparsers.add_parser(
        "watch",
        help="Schedule every stored prompt and print reminders as they fire.",
    )
    watch_parser.add_argument(
        "--duration",
        type=_non_negative_seconds,
        default=None,
        help="Stop after this many seconds (default: run until interrupted).",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed CLI arguments."""
    return build_parser().parse_args(argv)
