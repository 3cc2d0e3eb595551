"""Exception hierarchy for corral."""

from typing import Any, Dict, Iterable, Optional, Type


class CorralError(Exception):
    """Base class for all corral errors."""
    pass


class InvalidArgument(CorralError, ValueError):
    """Raised before any request is made when caller input is unusable."""
    pass


class ImageIdentifierRequired(InvalidArgument):
    """No alias, fingerprint, properties or empty flag was given."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "An image alias, fingerprint or properties must be given, or empty=True"
        )


class InvalidImageAttributes(InvalidArgument):
    """An image attribute was supplied where it has no meaning."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        super().__init__(f"Invalid image attribute {field}={value!r}: {reason}")


class InvalidProtocol(InvalidImageAttributes):
    """The remote image protocol is not one the control plane speaks."""

    def __init__(self, value: Any, allowed: Iterable[str]):
        self.allowed = tuple(allowed)
        super().__init__(
            "protocol", value, f"expected one of {', '.join(self.allowed)}"
        )


class MissingProfiles(InvalidArgument):
    """Profiles of a migrating container are unknown to the target instance."""

    def __init__(self, missing: Iterable[str], available: Iterable[str]):
        self.missing = list(missing)
        self.available = list(available)
        super().__init__(
            f"Profiles missing on target: {', '.join(self.missing)}"
        )


class ApiError(CorralError):
    """The control plane reported an error."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        operation_id: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.operation_id = operation_id
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code is not None:
            parts.append(f"(status {self.status_code})")
        if self.operation_id:
            parts.append(f"[operation {self.operation_id}]")
        return " ".join(parts)


class ClientError(ApiError):
    """4xx response."""


class BadRequest(ClientError):
    """The server rejected the action."""


class Forbidden(ClientError):
    pass


class NotFound(ClientError):
    pass


class Conflict(ClientError):
    pass


class ServerError(ApiError):
    """5xx response."""


class InternalServerError(ServerError):
    pass


class Timeout(ApiError):
    """An operation did not reach a terminal state in time."""


class Cancelled(ApiError):
    """An operation ended in the Cancelled state."""


_STATUS_ERRORS: Dict[int, Type[ApiError]] = {
    400: BadRequest,
    403: Forbidden,
    404: NotFound,
    409: Conflict,
    500: InternalServerError,
}


def error_for(
    status_code: int,
    message: str,
    operation_id: Optional[str] = None,
) -> ApiError:
    """Build the error matching a server status code."""
    error_class = _STATUS_ERRORS.get(status_code)
    if error_class is None:
        error_class = ServerError if status_code >= 500 else ClientError
    return error_class(message, status_code=status_code, operation_id=operation_id)
