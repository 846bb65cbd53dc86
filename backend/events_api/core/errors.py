"""
Error taxonomy for the events API.

ApiError subclasses are answered with their own status and a JSON body of
the form {"error": message, **extra}. InternalFailure is never shown to the
caller: the request middleware logs it and answers 500.
"""

from typing import Any, Optional


class ApiError(Exception):
    """Base class for errors surfaced to the caller."""

    http_status: int = 400

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_response(self) -> dict:
        return {"error": self.message, **self.extra}


class ValidationError(ApiError):
    """A single payload field failed validation."""

    http_status = 400

    def __init__(self, field: str, message: str, code: str, **extra: Any):
        super().__init__(message, field=field, code=code, **extra)
        self.field = field
        self.code = code


class MalformedInputError(ApiError):
    """The request body could not be read as a JSON object."""

    http_status = 400


class NotFoundError(ApiError):
    http_status = 404

    def __init__(self, message: str = "Not Found", **extra: Any):
        super().__init__(message, **extra)


class ConflictError(ApiError):
    http_status = 409


class InternalFailure(Exception):
    """Unexpected failure of a collaborator (store, blob storage, config)."""

    def __init__(self, detail: str, cause: Optional[BaseException] = None):
        super().__init__(detail)
        self.detail = detail
        self.cause = cause


class ConfigurationError(InternalFailure):
    pass
