"""
Error taxonomy shared by the services.

Services raise these; `duech.main` maps them onto the error envelope
(error, message, request_id, details) with the class' HTTP status.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class DictionaryError(Exception):
    """Base error for dictionary operations."""

    status_code = 500
    error = "internal_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def envelope(self, request_id: Optional[str]) -> Dict[str, Any]:
        return {
            "error": self.error,
            "message": self.message,
            "request_id": request_id,
            "details": self.details,
        }


class ValidationError(DictionaryError):
    """Empty or missing required field, unknown status, bad filter value."""

    status_code = 400
    error = "validation_error"


class AuthorizationError(DictionaryError):
    status_code = 403
    error = "forbidden"


class NotFoundError(DictionaryError):
    status_code = 404
    error = "not_found"


class ConflictError(DictionaryError):
    """Duplicate lemma."""

    status_code = 409
    error = "conflict"


class IntegrityError(DictionaryError):
    """A freshly written row could not be read back: storage inconsistency."""

    status_code = 500
    error = "integrity_error"
