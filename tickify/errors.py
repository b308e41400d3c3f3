"""API error taxonomy.

Every error raised by services derives from ApiError and carries the HTTP
status code and the {code, message, details} body it is rendered as at the
HTTP boundary (see tickify.main).
"""

from typing import Any, Optional


class ApiError(Exception):
    """Base class for errors that map to a fixed HTTP response."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred."
    default_details: Optional[str] = None

    def __init__(self, details: Any = None):
        self.details = details if details is not None else self.default_details
        super().__init__(self.message if details is None else f"{self.message} {details}")

    def to_dict(self) -> dict:
        """Render the error as a response body."""
        return {"code": self.code, "message": self.message, "details": self.details}


class DatabaseError(ApiError):
    status_code = 500
    code = "DATABASE_ERROR"
    message = "An unexpected database error occurred."
    default_details = "Please try again later or contact support."

    def to_dict(self) -> dict:
        # Driver messages may leak schema details
        return {"code": self.code, "message": self.message, "details": self.default_details}


class ValidationError(ApiError):
    status_code = 400
    code = "VALIDATION_ERROR"
    message = "One or more validation errors occurred."


class EncryptionError(ApiError):
    status_code = 500
    code = "ENCRYPT_ERROR"
    message = "One or more encryption errors occurred."


class JWTError(ApiError):
    status_code = 401
    code = "JWT_ERROR"
    message = "One or more JWT errors occurred."


class AuthError(ApiError):
    status_code = 401
    code = "AUTH_ERROR"
    message = "Authentication failed."


class MissingToken(AuthError):
    message = "Authorization token is missing in the request. Please provide a valid JWT token."


class EmptyHeader(AuthError):
    message = "Authorization header cannot be empty. Please provide a valid JWT token."


class InvalidToken(AuthError):
    message = "Invalid JWT token. Please provide a valid token."


class ExportError(ApiError):
    status_code = 500
    code = "EXPORT_ERROR"
    message = "Failed to generate the export file."


class ConfigError(ApiError):
    status_code = 500
    code = "CONFIG_ERROR"
    message = "The server configuration is missing or malformed."


class NotFound(ApiError):
    status_code = 404
    code = "NOT_FOUND"
    message = "The data provided does not exist."
    default_details = "Please check if the data is correct and try again."


class AlreadyExists(ApiError):
    status_code = 409
    code = "ALREADY_EXISTS"
    message = "A resource with the provided details already exists."
    default_details = "Please choose a different name."


class NotModified(ApiError):
    status_code = 304
    code = "NOT_MODIFIED"
    message = "No updates were made for the provided ID."
    default_details = "No fields were supplied. Please verify the update values."


class Unauthorized(ApiError):
    status_code = 401
    code = "UNAUTHORIZED"
    message = "You are not allowed to continue."
    default_details = "Please try again later."


class WrongPassword(ApiError):
    status_code = 401
    code = "WRONG_PASSWORD"
    message = "Incorrect password! Try again."
    default_details = "Please try again."
