"""Configuration helpers for Prompt Journal.

Updates: v0.1.1 - 2026-10-10 - Expose settings loader and configuration error types.
Updates: v0.1.0 - 2026-10-04 - Package scaffold.
"""

from .settings import PromptJournalSettings, SettingsError, load_settings

__all__ = [
    "PromptJournalSettings",
    "SettingsError",
    "load_settings",
]
