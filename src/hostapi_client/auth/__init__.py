"""
Authentication for the hosting API.

This package turns an account's private key (or a previously issued token)
into short-lived bearer tokens, caches them, and signs token requests.
"""

from hostapi_client.auth.coordinator import AuthCoordinator
from hostapi_client.auth.signer import Signer, encode_signature
from hostapi_client.auth.token import Token
from hostapi_client.auth.token_cache import (
    CacheEntry,
    FileTokenCache,
    MemoryTokenCache,
    TokenCache,
)
from hostapi_client.auth.token_request import TokenRequest, TokenRequestBuilder

__all__ = [
    "AuthCoordinator",
    "CacheEntry",
    "FileTokenCache",
    "MemoryTokenCache",
    "Signer",
    "Token",
    "TokenCache",
    "TokenRequest",
    "TokenRequestBuilder",
    "encode_signature",
]
