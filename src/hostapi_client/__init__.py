"""
Client for the hosting provider's API.

Provides bearer token authentication with cached, single-flight token
acquisition, a REST client, and the legacy signed SOAP calling convention.
"""

__version__ = "1.0.0"

from hostapi_client.auth import AuthCoordinator, FileTokenCache, MemoryTokenCache, Signer, Token
from hostapi_client.client import ApiClient, create_auth_coordinator, create_client, create_soap_client
from hostapi_client.errors import (
    APIError,
    AuthFailedError,
    CacheCorruptionWarning,
    ConfigurationError,
    EncodingError,
    HostApiError,
    LegacyAPIError,
    MalformedTokenError,
    PayloadError,
    SigningError,
    TokenError,
)
from hostapi_client.utils.config import ClientConfig, load_config
