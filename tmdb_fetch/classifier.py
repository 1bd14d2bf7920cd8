"""Map upstream failures to :class:`ClassifiedError`.

This is the only module that decides which HTTP status a failed fetch
surfaces with. The retry policy reads ``retryable`` and the fetcher
propagates the error as-is.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from .errors import ClassifiedError, ErrorKind

logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = "Upstream Service Timeout"
MISSING_KEY_MESSAGE = "TMDB API key is not configured"
INVALID_PAYLOAD_MESSAGE = "TMDB returned an invalid JSON payload"
INVALID_URL_MESSAGE = "Invalid upstream URL"


def is_retryable_status(status: int) -> bool:
    """Return False for 4xx client errors other than 429, True otherwise."""
    return not (400 <= status < 500 and status != 429)


def missing_credentials() -> ClassifiedError:
    return ClassifiedError(ErrorKind.CONFIGURATION, 500, MISSING_KEY_MESSAGE, False)


def _status_text(response: httpx.Response) -> str:
    if response.reason_phrase:
        return response.reason_phrase
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("status_message"), str):
        return body["status_message"]
    return f"HTTP {response.status_code}"


def from_response(response: httpx.Response) -> ClassifiedError:
    """Classify an upstream response that carried a non-success status."""
    status = response.status_code
    retryable = is_retryable_status(status)
    kind = ErrorKind.RATE_LIMIT_OR_SERVER if retryable else ErrorKind.CLIENT
    return ClassifiedError(kind, status, f"TMDB Error: {_status_text(response)}", retryable)


def from_exception(exc: BaseException) -> ClassifiedError:
    """Classify a transport-level failure (no usable response)."""
    if isinstance(exc, ClassifiedError):
        return exc
    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
        return ClassifiedError(ErrorKind.TIMEOUT, 504, TIMEOUT_MESSAGE, True)
    if isinstance(exc, httpx.HTTPStatusError):
        return from_response(exc.response)
    if isinstance(exc, httpx.TransportError):
        message = str(exc) or exc.__class__.__name__
        return ClassifiedError(ErrorKind.TRANSPORT, 500, message, True)
    if isinstance(exc, httpx.InvalidURL):
        # Retrying a malformed URL cannot help
        return ClassifiedError(
            ErrorKind.CONFIGURATION, 500, f"{INVALID_URL_MESSAGE}: {exc}", False
        )
    if isinstance(exc, ValueError):
        # json.JSONDecodeError on a 2xx body
        return ClassifiedError(ErrorKind.TRANSPORT, 500, INVALID_PAYLOAD_MESSAGE, True)
    logger.debug("Unclassified upstream failure: %r", exc)
    return ClassifiedError(ErrorKind.TRANSPORT, 500, str(exc) or "Upstream request failed", True)
