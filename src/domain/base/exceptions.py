"""Exception hierarchy shared by every layer of the runtime.

Every exception carries a human readable message, an optional error code and a
``details`` mapping so handlers can log structured context without string
parsing.
"""

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from domain.http.error_info import ErrorInfo
    from domain.http.request import HttpRequest


class DomainException(Exception):
    """Base class for all runtime exceptions."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details: dict[str, Any] = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainException):
    """Raised when a value object or request fails validation."""


class ConfigurationError(DomainException):
    """Raised when runtime configuration is missing or invalid."""


class InfrastructureError(DomainException):
    """Raised for failures in infrastructure collaborators."""


class TransportError(InfrastructureError):
    """Connection or timeout failure below HTTP. Never decoded."""

    def __init__(self, message: str, url: Optional[str] = None, **details: Any) -> None:
        if url:
            details["url"] = url
        super().__init__(message, details=details)
        self.url = url


class DecodingError(InfrastructureError):
    """Raised when an XML document cannot be decoded into its result."""

    def __init__(
        self,
        message: str,
        element: Optional[str] = None,
        value: Optional[str] = None,
    ) -> None:
        details: dict[str, Any] = {}
        if element is not None:
            details["element"] = element
        if value is not None:
            details["value"] = value
        super().__init__(message, details=details)
        self.element = element
        self.value = value


class CommandError(DomainException):
    """Base class for command lifecycle and outcome errors."""


class CommandStateError(CommandError):
    """Raised on an illegal command transition, e.g. settling twice."""


class CommandCancelledError(CommandError):
    """Settles a command that was cancelled after it was dispatched."""


class HttpResponseError(CommandError):
    """A request completed with a failure status.

    Always carries an ``ErrorInfo``; when the error body could not be decoded
    the info only holds the identifiers found in the response headers.
    """

    def __init__(
        self,
        error_info: "ErrorInfo",
        status_code: int,
        request: Optional["HttpRequest"] = None,
    ) -> None:
        if request is not None:
            message = f"{request.method} {request.uri} failed with status {status_code}"
        else:
            message = f"Request failed with status {status_code}"
        if error_info.code:
            message += f": {error_info.code}"
            if error_info.message:
                message += f" - {error_info.message}"
        super().__init__(
            message,
            error_code=error_info.code,
            details={
                "status_code": status_code,
                "request_id": error_info.request_id,
                "request_token": error_info.request_token,
            },
        )
        self.error_info = error_info
        self.status_code = status_code
        self.request = request
