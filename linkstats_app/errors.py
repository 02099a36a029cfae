"""
Application error taxonomy.

Services raise these; the handlers registered in ``main.py`` turn them into
``{"error": message}`` JSON responses with the matching status code.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed URL, alias or missing fields."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFoundError(AppError):
    """Unknown short code."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Short URL not found"


class ConflictError(AppError):
    """Alias already taken."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Alias already exists"


class InternalError(AppError):
    """
    Storage or unexpected failure.

    The message is logged; clients always receive the generic default.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    @property
    def public_message(self) -> str:
        return self.default_message


class StorageError(InternalError):
    """Raised by storage backends when the underlying store fails."""


class ShortCodeExhaustedError(InternalError):
    """Every random short code attempt collided and the policy is "fail"."""
