"""Application entry point for Prompt Journal.

Updates:
  v0.1.1 - 2026-10-15 - Map domain failures to exit code 1 and settings failures to 2.
  v0.1.0 - 2026-10-10 - Wire settings, context, and CLI command dispatch.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from cli.commands import COMMAND_SPECS
from cli.parser import build_parser
from cli.runtime import setup_logging
from cli.settings_summary import print_settings_summary
from config import SettingsError, load_settings
from core import PromptJournalError, build_context


def main(argv: Sequence[str] | None = None) -> int:
    """Entrypoint that wires settings, services, and CLI commands."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = logging.getLogger("prompt_journal.main")
    try:
        settings = load_settings()
    except SettingsError as exc:
        setup_logging(args.logging_config)
        logger.error("Failed to load settings: %s", exc)
        return 2
    setup_logging(args.logging_config, settings.log_level)

    if args.print_settings:
        print_settings_summary(settings)
        return 0

    command = getattr(args, "command", None)
    spec = COMMAND_SPECS.get(command) if command else None
    if spec is None:
        parser.print_help()
        return 0

    try:
        context = build_context(settings)
        return spec.handler(context, args, logger)
    except PromptJournalError as exc:
        logger.error("%s failed: %s", command, exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
