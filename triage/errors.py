"""Exceptions raised by the triage core."""

from enum import Enum


class TriageError(Exception):
    """Base class for triage errors."""


class RejectionReason(Enum):
    EMPTY_NAME = "empty name"
    INVALID_PRIORITY = "priority out of range"


class AdmissionRejected(TriageError, ValueError):
    """An admission was declined at the session boundary; nothing was changed."""

    def __init__(self, reason: RejectionReason, detail: str = ""):
        self.reason = reason
        self.detail = detail
        message = f"rejected: {reason.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class StateStoreError(TriageError):
    """The backing state file could not be written."""
