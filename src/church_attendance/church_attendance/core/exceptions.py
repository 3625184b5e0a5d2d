from __future__ import annotations

from typing import Iterable, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "domain_error"
    user_message = "The request could not be completed."


class ValidationError(DomainError):
    """Raised when input data is invalid (bad month name, bad date, ...)."""

    kind = "validation_error"
    user_message = "Please check the submitted values and try again."


class NotFoundError(DomainError):
    kind = "not_found"
    user_message = "The requested record no longer exists."


class StoreError(DomainError):
    """Opaque failure of the underlying record store; keeps the original message."""

    kind = "store_error"
    user_message = "The database rejected the request. Please retry."


class CannotCreateFieldError(StoreError):
    """Provisioning a new attendance field failed (often a missing schema privilege)."""

    kind = "cannot_create_field"
    user_message = "Cannot create the attendance column for this date. Ask an administrator to check database permissions."


class NotReadyError(DomainError):
    """A table or field is still not queryable after the retry budget."""

    kind = "not_ready"
    user_message = "The new month is still being prepared. Wait a moment and try again."


class MonthIncompleteError(DomainError):
    """Badge processing attempted before every Sunday has attendance recorded."""

    kind = "month_incomplete"
    user_message = "Month is not complete yet. All Sundays must have attendance data."

    def __init__(self, message: str, *, missing_dates: Iterable = ()):
        super().__init__(message)
        self.missing_dates = list(missing_dates)


class PartialFailure(DomainError):
    """Bulk operation where some rows failed; succeeded rows keep their update."""

    kind = "partial_failure"
    user_message = "Some records could not be updated. Retry the listed records."

    def __init__(self, message: str, *, failed_ids: Iterable[int], succeeded_ids: Optional[Iterable[int]] = None):
        super().__init__(message)
        self.failed_ids = list(failed_ids)
        self.succeeded_ids = list(succeeded_ids or [])


class ProcessingInProgressError(DomainError):
    """Badge processing for the month is already running in this process."""

    kind = "in_progress"
    user_message = "Badge processing is already running for this month."
