"""
Error taxonomy for story generation.

Every error carries an HTTP status and a user-facing message code. The
original exception text is kept on ``detail`` and is only surfaced when
ENVIRONMENT is "development".
"""

from typing import Optional


# User-friendly error messages (not exposing internal details)
ERROR_MESSAGES = {
    "PROMPT_REQUIRED": "Prompt is required",
    "PROMPT_TOO_LONG": "Prompt is too long (maximum {limit} characters)",
    "INVALID_REQUEST": "Invalid request body",
    "INVALID_AGE": "Age must be a whole number between 1 and 18",
    "PAYLOAD_TOO_LARGE": "Request body is too large (maximum {limit} bytes)",
    "AUTH_FAILED": "Story service is not configured correctly. Please contact the administrator.",
    "RATE_LIMITED": "Too many requests. Please try again in a moment.",
    "GENERATION_ERROR": "Failed to generate story.",
    "NOT_FOUND": "Endpoint not found",
}


def get_user_friendly_error(error_type: str, **params) -> str:
    """
    Get user-friendly error message without exposing internal details.
    Unknown codes fall back to the generic generation message.
    """
    message = ERROR_MESSAGES.get(error_type, ERROR_MESSAGES["GENERATION_ERROR"])
    return message.format(**params) if params else message


class StoryError(Exception):
    status_code = 500
    error_type = "GENERATION_ERROR"

    def __init__(self, detail: Optional[str] = None, **params):
        self.detail = detail
        self.params = params
        super().__init__(detail or self.error_type)

    @property
    def user_message(self) -> str:
        return get_user_friendly_error(self.error_type, **self.params)


class StoryValidationError(StoryError):
    """Request rejected before any upstream call."""
    status_code = 400
    error_type = "INVALID_REQUEST"

    def __init__(self, error_type: str = "INVALID_REQUEST", detail: Optional[str] = None, **params):
        self.error_type = error_type
        super().__init__(detail, **params)


class PayloadTooLargeError(StoryValidationError):
    status_code = 413

    def __init__(self, detail: Optional[str] = None, **params):
        super().__init__("PAYLOAD_TOO_LARGE", detail, **params)


class UpstreamError(StoryError):
    """The language model failed for a reason we do not classify."""


class UpstreamAuthError(UpstreamError):
    error_type = "AUTH_FAILED"


class UpstreamRateLimitError(UpstreamError):
    status_code = 429
    error_type = "RATE_LIMITED"
