"""Errors raised by the Pocket API client.

Every failure surfaces as a single ``PocketError`` whose ``kind`` tells the
caller what went wrong. The underlying exception, when there is one, is
chained as ``__cause__``.
"""

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"  # required input is empty, no request made
    ENCODING = "encoding"  # request body could not be serialized
    TRANSPORT = "transport"  # DNS, connection, timeout
    REMOTE_API = "remote_api"  # non-200 status from Pocket
    DECODING = "decoding"  # unreadable body or missing field


class PocketError(Exception):
    """Raised for any failed Pocket API operation."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        status_code: int | None = None,
        error_code: str | None = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(message)

    def __str__(self) -> str:
        if self.__cause__ is not None:
            return f"{self.message}: {self.__cause__}"
        return self.message

    def __repr__(self) -> str:
        return f"PocketError(kind={self.kind.value!r}, message={self.message!r})"


def validation_error(message: str) -> PocketError:
    return PocketError(ErrorKind.VALIDATION, message)
