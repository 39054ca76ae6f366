"""Error taxonomy shared by services and routes.

Every error carries a human-readable ``message`` and the HTTP status it maps to.
The handlers in ``app.main`` render them as ``{"success": false, "message": ...}``.
"""


class AppError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(AppError):
    """Malformed input: missing fields, shape or length checks."""

    status_code = 400


class ConflictError(AppError):
    """Nickname already taken."""

    status_code = 400


class InvalidRoleError(ValidationError):
    """Role outside admin | moderator | user."""


class AuthenticationError(AppError):
    """Missing, invalid or expired credential."""

    status_code = 401


class AuthorizationError(AppError):
    """Caller lacks the role required for the operation."""

    status_code = 403


class NotFoundError(AppError):
    """Target identity absent from the directory."""

    status_code = 404


class UpstreamError(AppError):
    """External directory or provider call failed."""

    status_code = 500


class ServiceUnavailableError(UpstreamError):
    """External call timed out or the provider is unreachable. Surfaces as 500 like any upstream failure."""
