"""Companion error taxonomy.

Every workflow failure reaches the caller as one of these, with its tag intact.

- ValidationError: bad input, never retried automatically
- ConflictError: concurrent mutation or uniqueness violation, retry after re-reading
  (RetirementFailedError: adoption blocked because the old companion is still stored)
- NotFoundError: the companion no longer exists
- StorageError: transport/backing-store failure, caller may retry with backoff
"""


class CompanionError(Exception):
    """Base class for all companion failures."""

    tag = "companion_error"

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(CompanionError):
    tag = "validation_error"


class ConflictError(CompanionError):
    tag = "conflict"


class ReplacementNotConfirmedError(ConflictError):
    """Owner already has a companion and did not confirm the replacement."""

    tag = "replacement_not_confirmed"


class NotFoundError(CompanionError):
    tag = "not_found"


class PermissionDeniedError(CompanionError):
    tag = "permission_denied"


class StorageError(CompanionError):
    tag = "storage_error"


class StorageTimeoutError(StorageError):
    tag = "storage_timeout"


class RetirementFailedError(ConflictError):
    """The previous companion could not be retired, so the new one was not created."""

    tag = "retirement_failed"
