"""
Error Classification

Defines the failure types raised by bridge adapters. Adapter failures are
absorbed by the aggregator and surfaced as ``BridgeError`` records; they are
never fatal to a route request.
"""

from enum import Enum
from typing import Optional

import httpx


class ErrorCategory(str, Enum):
    """Categories of adapter failures."""

    NETWORK = "network"           # Network/connectivity issues
    RATE_LIMIT = "rate_limit"     # API rate limits
    TIMEOUT = "timeout"           # Adapter exceeded the request window
    PROVIDER = "provider"         # Provider returned an error status
    BAD_RESPONSE = "bad_response"  # Payload could not be interpreted
    UNSUPPORTED = "unsupported"   # Chain pair or token not served
    UNKNOWN = "unknown"


class AdapterError(Exception):
    """Base class for failures raised while fetching routes from a provider."""

    default_code: Optional[str] = None
    default_category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        *,
        provider: Optional[str] = None,
        code: Optional[str] = None,
        category: Optional[ErrorCategory] = None,
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.code = code or self.default_code
        self.category = category or self.default_category


class AdapterTimeoutError(AdapterError):
    """Adapter did not answer within the configured window."""

    default_code = "TIMEOUT"
    default_category = ErrorCategory.TIMEOUT

    def __init__(
        self,
        message: str = "Request timeout",
        *,
        provider: Optional[str] = None,
        timeout_ms: Optional[int] = None,
    ):
        super().__init__(message, provider=provider)
        self.timeout_ms = timeout_ms


class ProviderResponseError(AdapterError):
    """Provider answered, but the payload is not a usable route list."""

    default_code = "BAD_RESPONSE"
    default_category = ErrorCategory.BAD_RESPONSE


class ProviderHTTPError(AdapterError):
    """Provider answered with a non-success HTTP status."""

    default_category = ErrorCategory.PROVIDER

    def __init__(
        self,
        message: str,
        *,
        provider: Optional[str] = None,
        status_code: int,
    ):
        category = ErrorCategory.RATE_LIMIT if status_code == 429 else ErrorCategory.PROVIDER
        super().__init__(
            message,
            provider=provider,
            code=f"HTTP_{status_code}",
            category=category,
        )
        self.status_code = status_code


def classify_error(error: BaseException) -> ErrorCategory:
    """
    Classify an exception raised by an adapter.

    Adapter errors carry their own category; anything else is classified
    from its type and message.
    """
    if isinstance(error, AdapterError):
        return error.category

    if isinstance(error, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT
    if isinstance(error, httpx.HTTPStatusError):
        if error.response.status_code == 429:
            return ErrorCategory.RATE_LIMIT
        return ErrorCategory.PROVIDER
    if isinstance(error, httpx.RequestError):
        return ErrorCategory.NETWORK

    message = str(error).lower()

    rate_limit_patterns = [
        "rate limit",
        "too many requests",
        "429",
        "throttl",
        "quota exceeded",
    ]
    if any(p in message for p in rate_limit_patterns):
        return ErrorCategory.RATE_LIMIT

    timeout_patterns = ["timeout", "timed out", "deadline"]
    if any(p in message for p in timeout_patterns):
        return ErrorCategory.TIMEOUT

    network_patterns = [
        "connection",
        "network",
        "unreachable",
        "refused",
        "dns",
        "socket",
        "ssl",
    ]
    if any(p in message for p in network_patterns):
        return ErrorCategory.NETWORK

    return ErrorCategory.UNKNOWN


def error_code(error: BaseException) -> Optional[str]:
    """Return the machine-readable code carried by ``error``, if any."""

    code = getattr(error, "code", None)
    if code is not None:
        return str(code)
    if isinstance(error, httpx.HTTPStatusError):
        return f"HTTP_{error.response.status_code}"
    return None


def error_message(error: BaseException) -> str:
    """Human-readable message for a failed adapter call."""

    message = getattr(error, "message", None) or str(error)
    return message or "Unknown error"
