from typing import Any, Mapping, Optional


class RecipeShareError(Exception):
    """Base class for errors raised by the service layer.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, validation info)
        code: machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_message = "Server error"
    default_code = "SERVER_ERROR"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
        code: Optional[str] = None,
    ):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "status": self.http_status,
        }
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(RecipeShareError):
    """Raised when input data is invalid or a precondition for a service call is not met."""

    http_status = 400
    default_message = "Invalid input"
    default_code = "VALIDATION_ERROR"


class UnauthorizedError(RecipeShareError):
    """Raised when the caller could not be authenticated."""

    http_status = 401
    default_message = "Not authorized to access this route"
    default_code = "UNAUTHORIZED"


class ForbiddenError(RecipeShareError):
    """Raised when the caller is neither the owner nor an administrator."""

    http_status = 403
    default_message = "Not authorized to perform this action"
    default_code = "FORBIDDEN"


class NotFoundError(RecipeShareError):
    """Raised when a requested resource was not found."""

    http_status = 404
    default_message = "Not found"
    default_code = "NOT_FOUND"


class ConflictError(RecipeShareError):
    """Raised when a write collides with existing state."""

    http_status = 409
    default_message = "Conflict"
    default_code = "CONFLICT"
