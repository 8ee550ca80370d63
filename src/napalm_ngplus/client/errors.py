"""Custom exceptions for the napalm-ngplus client.

Every failure mode of the login protocol and the authenticated request path
has its own exception type so callers can branch on cause rather than on
message text.
"""

from __future__ import annotations

from dataclasses import dataclass


class NGPlusError(Exception):
    """Base exception for all napalm-ngplus errors."""


class ModelNotDetectedError(NGPlusError):
    """Raised when no known switch model marker is found in the root page."""


class SeedNotFoundError(NGPlusError):
    """Raised when the login page carries no recognisable ``rand`` seed."""


class InvalidCredentialsError(NGPlusError):
    """Raised when the switch answers a login POST without a session token."""


class NotAuthenticatedError(NGPlusError):
    """Raised when an authenticated request is issued for a host with no token."""


class SessionExpiredError(NGPlusError):
    """Raised when an authenticated response is the switch's login page."""


class PasswordNotFoundError(NGPlusError):
    """Raised when no password can be resolved for a host."""


class TokenCorruptError(NGPlusError):
    """Raised when a persisted token record cannot be decoded."""


class NGPlusParseError(NGPlusError):
    """Raised when HTML parsing fails or expected elements are not found."""


class NGPlusRequestError(NGPlusError):
    """Raised when a network-level error occurs (connection refused, timeout, etc.)."""

    def __init__(self, url: str, cause: Exception) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"Request to {url!r} failed: {cause}")


class NGPlusResponseError(NGPlusError):
    """Raised when the switch returns a non-2xx HTTP status code."""

    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"HTTP {status_code} for {url!r}")


@dataclass
class OperationNotSupportedError(NGPlusError):
    """Raised when a logical operation has no endpoint on a hardware family.

    Attributes:
        family: Value of the :class:`~napalm_ngplus.vendor.netgear.models.HardwareFamily`.
        operation: Value of the :class:`~napalm_ngplus.vendor.netgear.endpoints.Operation`.
    """

    family: str
    operation: str

    def __post_init__(self) -> None:
        super().__init__(
            f"{self.operation} operation not supported on {self.family} models"
        )


@dataclass
class NGPlusOperationError(NGPlusError):
    """Raised when the switch rejects a write request.

    Attributes:
        host: Switch address the request was sent to.
        endpoint: URL path of the rejected request.
        message: Response body returned instead of ``SUCCESS``.
    """

    host: str
    endpoint: str
    message: str

    def __post_init__(self) -> None:
        super().__init__(
            f"Switch {self.host!r} rejected request to {self.endpoint!r}: "
            f"{self.message[:200]!r}"
        )
