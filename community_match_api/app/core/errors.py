"""
Error taxonomy shared by services and endpoints.

Services raise these exceptions; ``main.create_app`` registers
handlers that turn them into JSON responses of the form
``{"detail": "..."}`` with the status code carried by each class.
Storage failures are translated by ``core.db.transaction``.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors reported to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(AppError):
    """A unique key (email, service name) is already taken."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Already exists"


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"


class ForbiddenError(AuthError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class InternalError(AppError):
    """Unexpected failure; the cause is logged, never returned."""
