from __future__ import annotations

from typing import Any


class GigdraftError(Exception):
    """Base error carrying the HTTP status it maps to and a caller-safe message."""

    status_code: int = 500
    code: str = "internal"

    def __init__(self, message: str, *, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        error: dict[str, Any] = {"message": self.message}
        if self.details is not None:
            error["details"] = self.details
        return {"error": error}


class ValidationError(GigdraftError):
    status_code = 400
    code = "invalid-argument"


class UnauthenticatedError(GigdraftError):
    status_code = 401
    code = "unauthenticated"


class NotFoundError(GigdraftError):
    status_code = 404
    code = "not-found"


class PreconditionError(GigdraftError):
    status_code = 412
    code = "failed-precondition"


class ExtractionError(GigdraftError):
    status_code = 422
    code = "extraction-failed"


class EmptyContentError(ExtractionError):
    code = "empty-content"


class MalformedAIResponseError(GigdraftError):
    status_code = 502
    code = "malformed-ai-response"


class GenerationError(GigdraftError):
    status_code = 502
    code = "generation-failed"


class InternalError(GigdraftError):
    status_code = 500
    code = "internal"
