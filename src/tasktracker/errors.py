from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found.

    Also raised when the resource exists but belongs to another user,
    so callers cannot tell the two cases apart.
    """

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when credentials or the session are missing, invalid or expired."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class InvalidOrExpiredTokenError(ValidationError):
    """Raised when a password reset token was never issued, does not match, or has expired."""

    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message)


class ConflictError(UserError):
    """Raised when a unique value is already taken."""


class TooManyRequestsError(UserError):
    """Raised when a client exceeds a rate limit."""

    def __init__(self, retry_after: int, message: str = "Too many requests, please try again later") -> None:
        super().__init__(message)
        self.retry_after = retry_after


class InvalidTokenError(Exception):
    """Raised when a signed token fails verification."""


class MailDeliveryError(Exception):
    """Raised when an email cannot be handed to the mail server."""
