"""
Error types raised by resolvers.

Every error carries a stable ``code`` which the GraphQL layer copies into the
error's ``extensions`` so clients can branch without parsing messages.
"""

from __future__ import annotations

from typing import Any


class SickFitsError(Exception):
    """Base class for all errors surfaced to API callers."""

    code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.code
        self.details = details or {}

    @property
    def extensions(self) -> dict[str, Any]:
        """GraphQL error extensions, picked up when the error is wrapped."""
        return {"code": self.code, **self.details}

    def to_dict(self) -> dict[str, Any]:
        """Convert the error to a dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class UnauthorizedError(SickFitsError):
    """No authenticated session."""

    code = "UNAUTHORIZED"

    def __init__(self, message: str = "You must be logged in to do that!"):
        super().__init__(message)


class ForbiddenError(SickFitsError):
    """Session present but ownership or role is insufficient."""

    code = "FORBIDDEN"


class NotFoundError(SickFitsError):
    """A lookup found nothing."""

    code = "NOT_FOUND"


class ValidationError(SickFitsError):
    """Input failed validation."""

    code = "VALIDATION_ERROR"


class InvalidCredentialsError(SickFitsError):
    """Password did not match the stored hash."""

    code = "INVALID_CREDENTIALS"

    def __init__(self, message: str = "Invalid password"):
        super().__init__(message)


class InvalidOrExpiredTokenError(SickFitsError):
    """Password reset token unknown or outside its validity window."""

    code = "INVALID_OR_EXPIRED_TOKEN"

    def __init__(self, message: str = "This token is either invalid or expired."):
        super().__init__(message)


class PaymentFailedError(SickFitsError):
    """The payment processor refused or failed to charge."""

    code = "PAYMENT_FAILED"

    def __init__(self, message: str, processor_error: str | None = None):
        super().__init__(
            message,
            details={"processor_error": processor_error} if processor_error else {},
        )


class ChargedButNotRecordedError(SickFitsError):
    """The charge succeeded but the order could not be written."""

    code = "CHARGED_NOT_RECORDED"

    def __init__(self, charge_id: str, amount: int):
        super().__init__(
            f"Payment {charge_id} was taken but the order could not be recorded",
            details={"charge_id": charge_id, "amount": amount},
        )


class StoreError(SickFitsError):
    """Pass-through for failures of the underlying data store."""

    code = "STORE_ERROR"
