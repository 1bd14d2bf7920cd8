"""Classified upstream errors shared by the retry policy and callers."""

from __future__ import annotations

from enum import Enum

__all__ = ["ErrorKind", "ClassifiedError", "error_envelope"]


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    CLIENT = "client"
    RATE_LIMIT_OR_SERVER = "rate_limit_or_server"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"


class ClassifiedError(Exception):
    """Typed failure crossing the fetcher boundary.

    ``http_status`` is the status the HTTP layer should answer with and
    ``retryable`` tells the retry policy whether another attempt may help.
    Instances are built by :mod:`tmdb_fetch.classifier` only.
    """

    def __init__(
        self, kind: ErrorKind, http_status: int, message: str, retryable: bool
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.http_status = http_status
        self.message = message
        self.retryable = retryable
        # Number of upstream attempts made before this error crossed the fetcher
        self.attempts = 1

    def __repr__(self) -> str:
        return (
            f"ClassifiedError(kind={self.kind.value}, http_status={self.http_status}, "
            f"message={self.message!r}, retryable={self.retryable})"
        )

    def to_envelope(self) -> dict[str, object]:
        return error_envelope(self.message)


def error_envelope(message: str) -> dict[str, object]:
    """JSON body returned to clients for a failed request."""
    return {"success": False, "message": message}
