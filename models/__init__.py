"""Data models for Prompt Journal.

Updates: v0.2.0 - 2026-10-08 - Export legacy snapshot models.
Updates: v0.1.0 - 2026-10-05 - Export Prompt and PromptResponse dataclasses.
"""

from .legacy_model import LegacyEvent, LegacyPrompt, LegacySnapshot
from .prompt_model import WEEKDAYS, Prompt, PromptResponse, ResponseType

__all__ = [
    "LegacyEvent",
    "LegacyPrompt",
    "LegacySnapshot",
    "Prompt",
    "PromptResponse",
    "ResponseType",
    "WEEKDAYS",
]
