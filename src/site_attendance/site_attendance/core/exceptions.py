from __future__ import annotations

from typing import Any, Optional

from .enums import RejectReason


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class StorageError(DomainError):
    """Raised when the mark store, lookup tables or blob store cannot be reached."""


class CheckinRejected(DomainError):
    """Terminal rejection of a check-in or token request.

    ``details`` carries diagnostics for the client (field name, distance, radius).
    """

    def __init__(self, reason: RejectReason, details: Optional[dict[str, Any]] = None):
        self.reason = reason
        self.details = dict(details or {})
        super().__init__(reason.value)
