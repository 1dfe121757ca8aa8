"""
WaifuVault SDK Exceptions

Custom exception classes for local validation failures and WaifuVault API errors.
"""

from typing import Optional


class WaifuVaultError(Exception):
    """Base exception for WaifuVault SDK errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")
        if self.error_code:
            parts.append(f"[{self.error_code}]")
        return " ".join(parts)


class ValidationError(WaifuVaultError):
    """Raised when a request is malformed or contradictory, before anything is sent."""

    pass


class IoError(WaifuVaultError):
    """Raised when a local file cannot be read for upload."""

    pass


class DecodeError(WaifuVaultError):
    """Raised when a successful response body does not match the expected schema."""

    pass


class TransportError(WaifuVaultError):
    """Raised when the HTTP exchange itself fails (timeout, connection reset, ...)."""

    pass


class ApiError(WaifuVaultError):
    """Raised when the server answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        error_code: Optional[str] = None,
    ) -> None:
        super().__init__(message, status_code, error_code)

    @property
    def name(self) -> Optional[str]:
        """Error name from the server envelope, e.g. ``NotFoundError``."""
        return self.error_code


class BadRequestError(ApiError):
    """Raised when the server rejects the request parameters."""

    pass


class PasswordRequiredError(ApiError):
    """Raised when content is password protected and no or a wrong password was given."""

    pass


class NotFoundError(ApiError):
    """Raised when a file, bucket or album token is unknown or expired."""

    pass


class FileTooLargeError(ApiError):
    """Raised when an upload exceeds the server's size limit."""

    pass


class RateLimitError(ApiError):
    """Raised when rate limit is exceeded."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        status_code: int = 429,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
    ) -> None:
        super().__init__(message, status_code, error_code)
        self.retry_after = retry_after


def raise_for_status(
    status_code: int,
    message: str,
    error_code: Optional[str] = None,
    retry_after: Optional[int] = None,
) -> None:
    """
    Raise appropriate exception based on HTTP status code.

    Args:
        status_code: HTTP status code
        message: Error message from the response envelope
        error_code: Error name from the response envelope
        retry_after: Seconds from the Retry-After header, if any

    Raises:
        Appropriate ApiError subclass for any status outside 2xx
    """
    if 200 <= status_code < 300:
        return
    if status_code == 400:
        raise BadRequestError(message, status_code, error_code)
    elif status_code in (401, 403):
        raise PasswordRequiredError(message, status_code, error_code)
    elif status_code == 404:
        raise NotFoundError(message, status_code, error_code)
    elif status_code == 413:
        raise FileTooLargeError(message, status_code, error_code)
    elif status_code == 429:
        raise RateLimitError(message, status_code, error_code, retry_after)
    raise ApiError(message, status_code, error_code)
