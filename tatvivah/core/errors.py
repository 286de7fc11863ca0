"""
Application error type.

``ApiError`` is the single operational error raised by services and
dependencies. The exception handlers in ``tatvivah.server.exception_handlers``
turn it into the JSON error envelope.
"""

from __future__ import annotations

from typing import Any, Optional


class ApiError(Exception):
    """An error with an HTTP status code that is safe to show to clients."""

    def __init__(
        self,
        status_code: int,
        message: str,
        details: Optional[Any] = None,
        is_operational: bool = True,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details
        self.is_operational = is_operational

    def __repr__(self) -> str:
        return f"ApiError(status_code={self.status_code}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        error: dict[str, Any] = {"message": self.message, "statusCode": self.status_code}
        if self.details is not None:
            error["details"] = self.details
        return {"success": False, "error": error}

    @classmethod
    def bad_request(cls, message: str, details: Optional[Any] = None) -> "ApiError":
        return cls(400, message, details)

    @classmethod
    def unauthorized(cls, message: str = "Unauthorized") -> "ApiError":
        return cls(401, message)

    @classmethod
    def forbidden(cls, message: str = "Forbidden") -> "ApiError":
        return cls(403, message)

    @classmethod
    def not_found(cls, message: str = "Resource not found") -> "ApiError":
        return cls(404, message)

    @classmethod
    def conflict(cls, message: str) -> "ApiError":
        return cls(409, message)

    @classmethod
    def unprocessable_entity(cls, message: str, details: Optional[Any] = None) -> "ApiError":
        return cls(422, message, details)

    @classmethod
    def internal(cls, message: str = "Internal server error") -> "ApiError":
        return cls(500, message, is_operational=False)
