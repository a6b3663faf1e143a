"""
Shared error handling for the rate-limit isolation harness.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error payload written to logs and failure output."""

    run_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class HarnessException(Exception):
    """Base exception for the harness."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self, run_id: Optional[str] = None) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            run_id=run_id,
            code=self.code,
            message=self.message,
            details=self.details,
        )


class AuthenticationError(HarnessException):
    """Login did not produce a usable credential. Fatal for the run."""

    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("AUTHENTICATION_ERROR", message, details)


class MissingFieldError(AuthenticationError):
    """A response body could not be decoded into the expected shape."""

    def __init__(self, field: str, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.field = field
        super().__init__(message or f"Response is missing field '{field}'", details)
        self.code = "MISSING_FIELD_ERROR"


class ValidationError(HarnessException):
    """Invalid harness parameters."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class AssertionFailure(HarnessException):
    """One or more isolation checks evaluated false."""

    def __init__(self, failed: List[str], summary: Optional[Dict[str, Any]] = None):
        self.failed = list(failed)
        self.summary = summary or {}
        super().__init__(
            "ASSERTION_FAILURE",
            "rate-limit assertions failed: " + "; ".join(self.failed),
            {"failed": self.failed, "summary": self.summary},
        )
