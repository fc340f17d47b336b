"""Error taxonomy shared by the service layer and the HTTP surface."""

from __future__ import annotations

from enum import IntEnum

INTERNAL_ERROR_MESSAGE = "internal error"


class ErrorCode(IntEnum):
    BAD_REQUEST = 1
    UNAUTHORIZED = 2
    FORBIDDEN = 3
    NOT_FOUND = 4
    INTERNAL = 5


class ServiceError(Exception):
    """Failure returned to callers of the service layer.

    ``reason`` is kept for server-side diagnostics. The display text returned
    by ``str()`` and ``message`` hides it for internal errors.
    """

    code: ErrorCode = ErrorCode.INTERNAL

    def __init__(self, reason: str, code: ErrorCode | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        if code is not None:
            self.code = code

    @property
    def message(self) -> str:
        if self.code == ErrorCode.INTERNAL:
            return INTERNAL_ERROR_MESSAGE
        return self.reason

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, int | str]:
        return {"code": int(self.code), "message": self.message}


class InvalidArgument(ServiceError):
    code = ErrorCode.BAD_REQUEST


class NotFound(ServiceError):
    code = ErrorCode.NOT_FOUND


class Internal(ServiceError):
    code = ErrorCode.INTERNAL

    def __init__(self, reason: str = INTERNAL_ERROR_MESSAGE) -> None:
        super().__init__(reason)


class RecordNotFound(LookupError):
    """Raised by the store when the target row does not exist."""


class WeatherProviderError(RuntimeError):
    """Raised by the weather client for transport, status or payload failures."""


class DeadlineExceeded(TimeoutError):
    """Raised when the request deadline expires before or during an I/O call."""


__all__ = [
    "INTERNAL_ERROR_MESSAGE",
    "ErrorCode",
    "ServiceError",
    "InvalidArgument",
    "NotFound",
    "Internal",
    "RecordNotFound",
    "WeatherProviderError",
    "DeadlineExceeded",
]
