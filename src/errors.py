"""Application exceptions and their HTTP status mapping."""

from fastapi import status


class AppError(Exception):
    """Base exception for errors that are reported to the client as-is."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, headers: dict[str, str] | None = None):
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)


class ValidationError(AppError):
    """Raised when request data fails validation."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Unauthenticated(AppError):
    """Raised when a token or credential check fails."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required. Please log in."

    def __init__(self, message: str | None = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class NotFound(AppError):
    """Raised when a resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class Conflict(AppError):
    """Raised when a unique value is already taken."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class DependencyUnavailable(AppError):
    """Raised when the database (or another backing service) is unreachable."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Database connection failed. Please try again."


def describe_validation_errors(errors) -> str:
    """First validation error as "<field>: <reason>" for the response message."""
    if not errors:
        return ValidationError.default_message
    error = errors[0]
    location = [
        str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")
    ]
    message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
    if location:
        return f"{'.'.join(location)}: {message}"
    return message
