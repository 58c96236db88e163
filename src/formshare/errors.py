from __future__ import annotations


class FormShareError(Exception):
    """Base class for errors that map onto an HTTP status and a public message."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(FormShareError):
    """Raised when a formId or shareId does not resolve to a form."""

    status_code = 404
    default_message = "Form not found"


class ForbiddenError(FormShareError):
    """Raised when the supplied edit key does not match the stored one."""

    status_code = 403
    default_message = "Invalid edit key"


class ValidationError(FormShareError):
    """Raised when a request payload has the wrong shape."""

    status_code = 400
    default_message = "Invalid payload"


class InternalError(FormShareError):
    """Raised when the store fails; the detail is logged, never returned."""

    status_code = 500


class StorageError(Exception):
    """Raised by repositories when the underlying store fails."""


class DuplicateKeyError(StorageError):
    """Raised when an insert collides with a unique identifier."""
