"""Runtime boot helpers for the Prompt Journal CLI.

Updates:
  v0.1.1 - 2026-10-12 - Honour the configured log level for the basic fallback.
  v0.1.0 - 2026-10-10 - Extract logging configuration helpers.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path


def setup_logging(logging_conf_path: Path | None, level: str = "INFO") -> None:
    """Configure logging using *logging_conf_path* when available."""
    path = logging_conf_path or Path("config/logging.conf")
    if path.exists():
        try:
            logging.config.fileConfig(path, disable_existing_loggers=False)
            return
        except (OSError, KeyError, ValueError):  # pragma: no cover - configuration fallback
            logging.getLogger("prompt_journal.main").warning(
                "Ignoring unusable logging configuration %s", path
            )
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
