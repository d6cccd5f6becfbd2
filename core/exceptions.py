"""
Error taxonomy for the API.
Services raise these; the handlers registered in main.py render them as
{"error": ..., "details": ...} with the matching status code.
"""
from typing import Optional
from fastapi import status


class AppError(Exception):
    """Base class for errors that are safe to report to the caller."""
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(AppError):
    """Malformed or missing input. Always fixable by the caller."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class AuthenticationError(AppError):
    """Missing or invalid caller credential."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class AuthorizationError(AppError):
    """Role too low, or a protected invariant would be violated."""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Permission denied"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User not found"


class ConflictError(AppError):
    """Store-level rejection (duplicate email, constraint failure). Message is passed through."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request conflicts with existing data"


class RateLimitError(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Rate limit exceeded, please try again later"


class PaymentRequiredError(AppError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_message = "Please add credits to use AI features"


class InternalError(AppError):
    """Anything unexpected. The caller only ever sees the generic message."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, details: Optional[str] = None):
        # Details are for server-side logs only
        super().__init__(self.default_message)
        self.log_details = details


class StoreError(Exception):
    """Raised by the store functions when a read or write is rejected.

    `message` is a short, caller-safe description; the original database
    exception is chained as __cause__ for logging.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
