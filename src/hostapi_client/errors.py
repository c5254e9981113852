"""
Exception types raised by the hosting API client.
"""

from typing import Optional


class HostApiError(Exception):
    """Base exception for hosting API client errors."""
    pass


class ConfigurationError(HostApiError, ValueError):
    """Required client configuration is missing or invalid."""
    pass


class TokenError(HostApiError):
    """A credential string could not be turned into a Token."""
    pass


class MalformedTokenError(TokenError):
    """The credential string does not have exactly three non-empty segments."""
    pass


class EncodingError(TokenError):
    """The payload segment is not valid base64url text."""
    pass


class PayloadError(TokenError):
    """The decoded payload is not a JSON object with a numeric ``exp`` claim."""
    pass


class SigningError(HostApiError):
    """The private key is unusable or there is nothing to sign."""
    pass


class AuthFailedError(HostApiError):
    """Token issuance failed. Never retried internally."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class APIError(HostApiError):
    """The API answered an authenticated call with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class LegacyAPIError(HostApiError):
    """The legacy SOAP endpoint returned a fault or an unreadable envelope."""

    def __init__(self, message: str, fault_code: Optional[str] = None):
        super().__init__(message)
        self.fault_code = fault_code


class CacheCorruptionWarning(UserWarning):
    """A persisted token cache entry could not be read and was ignored."""
    pass
