"""Common exception classes for the core package.

Every failure surfaced by the prompt repository, the notification scheduler,
or the legacy migration derives from :class:`PromptJournalError`, so callers
can catch a single base class while still distinguishing the individual
categories below.

The relational store raises its own :class:`core.repository.StoreError`
family; the repository layer translates those into the classes defined here.

Updates:
  v0.2.0 - 2026-10-12 - Add validation error for repository boundary checks.
  v0.1.0 - 2026-10-05 - Created module with storage, lookup, corruption, and scheduler errors.
"""

from __future__ import annotations


class PromptJournalError(Exception):
    """Base exception for Prompt Journal failures."""


class PromptStorageError(PromptJournalError):
    """Raised when a transaction or other I/O against persistent storage fails."""


class PromptNotFoundError(PromptJournalError):
    """Raised when an operation targets a prompt uuid that does not exist."""


class PromptCorruptionError(PromptJournalError):
    """Raised when stored or legacy serialised data fails to parse."""


class SchedulerError(PromptJournalError):
    """Raised when scheduling or cancelling a notification campaign fails."""


class PromptValidationError(PromptJournalError):
    """Raised when a prompt or response violates a repository invariant."""


StorageError = PromptStorageError
NotFoundError = PromptNotFoundError
CorruptionError = PromptCorruptionError


__all__ = [
    "CorruptionError",
    "NotFoundError",
    "PromptCorruptionError",
    "PromptJournalError",
    "PromptNotFoundError",
    "PromptStorageError",
    "PromptValidationError",
    "SchedulerError",
    "StorageError",
]
