"""
Error types raised by the service layer.

Services signal business-rule failures by raising one of the
``ServiceError`` subclasses below.  Each class carries the HTTP status
it maps to; the handlers registered in ``main.create_app`` turn them
into ``{"error": "<message>"}`` JSON responses.  ``ServiceError``
derives from ``ValueError`` so callers that only care about "the
request was rejected" can keep catching ``ValueError``.
"""

from fastapi import status


class ServiceError(ValueError):
    """Base class for expected, user-facing failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationError(ServiceError):
    """Missing, malformed, forged or expired credential."""

    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(ServiceError):
    """Authenticated, but not the owner of the record."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidRequestError(ServiceError):
    """A required field is missing or empty."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(ServiceError):
    """The request repeats a state that already holds.

    Duplicate subscriptions, reactions and playlist members, deleting a
    playlist that still has videos, or registering a taken e-mail.
    """

    status_code = status.HTTP_400_BAD_REQUEST
