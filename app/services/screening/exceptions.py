"""Error taxonomy for proposal screening."""

from typing import Any, Dict, Optional, Tuple

GENERIC_EVALUATION_ERROR = "Failed to evaluate proposal"


class ScreeningError(Exception):
    """Base exception for all screening errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ValidationError(ScreeningError):
    """Raised when proposal input is missing, malformed or oversized."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message, {"field": field})
        self.field = field


class RateLimitError(ScreeningError):
    """Raised when an anonymous client has used up its quota."""

    def __init__(self, retry_after: int, limit: int) -> None:
        super().__init__(
            f"You've reached the limit of {limit} free evaluations. "
            f"Please try again in {-(-retry_after // 60)} minutes or "
            "authenticate for unlimited evaluations.",
            {"retry_after": retry_after, "limit": limit},
        )
        self.retry_after = retry_after
        self.limit = limit


class AuthError(ScreeningError):
    """Raised by identity providers when a credential cannot be verified.

    Never surfaced to callers; the identity resolver degrades to anonymous.
    """


class EvaluationError(ScreeningError):
    """Raised when the external evaluation service fails."""


class EvaluationTimeoutError(EvaluationError):
    """The evaluation service did not answer within the configured timeout."""


class MalformedResponseError(EvaluationError):
    """The evaluation service answered with a document that fails the schema."""


class UpstreamStatusError(EvaluationError):
    """The evaluation service answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        response_body: Optional[str] = None,
    ) -> None:
        details: Dict[str, Any] = {"status_code": status_code}
        if response_body is not None:
            details["response_body"] = response_body
        super().__init__(message, details)
        self.status_code = status_code
        self.response_body = response_body


def screening_error_response(
    error: Exception, fallback_message: str = GENERIC_EVALUATION_ERROR
) -> Tuple[int, Dict[str, Any]]:
    """Map an exception to an HTTP status code and JSON body.

    Validation and rate-limit errors carry caller-actionable detail; every
    other failure collapses to a generic message.
    """
    if isinstance(error, ValidationError):
        return 400, {"error": error.message}
    if isinstance(error, RateLimitError):
        return 429, {
            "error": "Rate limit exceeded",
            "message": error.message,
            "retryAfter": error.retry_after,
        }
    if isinstance(error, EvaluationError):
        return 502, {"error": fallback_message}
    return 500, {"error": fallback_message}
