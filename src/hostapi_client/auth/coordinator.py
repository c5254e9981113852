"""
Token acquisition for authenticated API calls.

The coordinator hands out a valid bearer token for every outgoing call. It
reuses a cached token while it is unexpired and otherwise requests a new one
from the authentication endpoint, making sure that concurrent callers asking
for the same cache key share a single network fetch.
"""

import json
import threading
import time
from typing import Dict, Optional

import requests

from hostapi_client.auth.signer import Signer
from hostapi_client.auth.token import Token
from hostapi_client.auth.token_cache import MemoryTokenCache, TokenCache
from hostapi_client.auth.token_request import TokenRequestBuilder
from hostapi_client.errors import AuthFailedError, TokenError
from hostapi_client.security.secret_store import PrivateKeyHandle
from hostapi_client.utils.logging import LogMetrics, get_logger

logger = get_logger(__name__)

# Header carrying the signature of the token request body
SIGNATURE_HEADER = "Signature"
AUTH_ENDPOINT = "/auth"
CONTENT_TYPE = "application/json"


def error_message_from_response(response: requests.Response) -> str:
    """Extract the server's error message from an error response.

    Error bodies look like ``{"error": "<message>"}``.
    """
    if not response.content:
        return f"error response without body from api server status code '{response.status_code}'"

    try:
        body = response.json()
    except ValueError:
        return f"error response from api server status code '{response.status_code}': {response.text[:500]}"

    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"error response from api server status code '{response.status_code}'"


class AuthCoordinator:
    """Hand out valid tokens, fetching at most once per key at a time.

    Args:
        token_request_builder: Builds the body of each token request.
        private_key: Key used to sign token requests. Without it only a
            static token can be used.
        base_url: API base URL; token requests go to ``base_url + "/auth"``.
        cache: Token cache. Defaults to a new in-memory cache.
        signer: Signer for token requests.
        session: HTTP executor used for token requests.
        static_token: Previously issued token used while it is unexpired.
        timeout: Default deadline in seconds for a token fetch.
        cache_key: Default cache key; derived from account and mode if unset.
    """

    def __init__(
        self,
        token_request_builder: TokenRequestBuilder,
        private_key: Optional[PrivateKeyHandle] = None,
        base_url: str = "",
        cache: Optional[TokenCache] = None,
        signer: Optional[Signer] = None,
        session: Optional[requests.Session] = None,
        static_token: Optional[Token] = None,
        timeout: Optional[float] = 30,
        cache_key: Optional[str] = None,
    ):
        self.token_request_builder = token_request_builder
        self.auth_url = base_url.rstrip("/") + AUTH_ENDPOINT
        self.cache = cache if cache is not None else MemoryTokenCache()
        self.signer = signer or Signer()
        self.session = session or requests.Session()
        self.static_token = static_token
        self.timeout = timeout
        self.default_cache_key = cache_key or self._derive_cache_key(token_request_builder)
        self._private_key = private_key

        self._locks: Dict[str, threading.Lock] = {}
        self._lock_users: Dict[str, int] = {}
        self._locks_lock = threading.Lock()

    @staticmethod
    def _derive_cache_key(builder: TokenRequestBuilder) -> str:
        mode = "readonly" if builder.read_only else "readwrite"
        return f"{builder.label_prefix}-{builder.login or 'anonymous'}-{mode}"

    @property
    def has_private_key(self) -> bool:
        return self._private_key is not None

    def _lock_for(self, cache_key: str) -> threading.Lock:
        """Return the fetch lock for ``cache_key`` and register the caller as a user."""
        with self._locks_lock:
            if cache_key not in self._locks:
                self._locks[cache_key] = threading.Lock()
                self._lock_users[cache_key] = 0
            self._lock_users[cache_key] += 1
            return self._locks[cache_key]

    def _forget_lock(self, cache_key: str) -> None:
        # A lock is dropped only once no caller holds or waits on it
        with self._locks_lock:
            self._lock_users[cache_key] -= 1
            if not self._lock_users[cache_key]:
                del self._lock_users[cache_key]
                del self._locks[cache_key]

    def _cached(self, cache_key: str) -> Optional[Token]:
        token = self.cache.get(cache_key)
        if token is not None and not token.is_expired():
            return token
        return None

    def acquire(self, cache_key: Optional[str] = None, timeout: Optional[float] = None) -> Token:
        """Return a valid token for ``cache_key``.

        Args:
            cache_key: Cache key to look up; defaults to ``default_cache_key``.
            timeout: Deadline in seconds for waiting on another caller's fetch
                and for the network fetch itself. Defaults to ``self.timeout``.

        Raises:
            AuthFailedError: If no valid token exists and none could be issued.
            SigningError: If the private key cannot sign the token request.
        """
        cache_key = cache_key or self.default_cache_key
        timeout = self.timeout if timeout is None else timeout

        if self.static_token is not None and not self.static_token.is_expired():
            return self.static_token

        token = self._cached(cache_key)
        if token is not None:
            return token

        if self._private_key is None:
            raise AuthFailedError("token expired and no private key is set")

        deadline = None
        if timeout is not None:
            timeout = max(timeout, 0)
            deadline = time.monotonic() + timeout

        lock = self._lock_for(cache_key)
        try:
            acquired = lock.acquire(timeout=timeout) if timeout is not None else lock.acquire()
            if not acquired:
                raise AuthFailedError(f"timed out waiting for token acquisition for {cache_key!r}")

            try:
                # Another caller may have fetched while we waited
                token = self._cached(cache_key)
                if token is not None:
                    logger.debug("Using token fetched by concurrent caller", cache_key=cache_key)
                    return token

                remaining = None
                if deadline is not None:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        raise AuthFailedError(f"timed out waiting for token acquisition for {cache_key!r}")
                token = self.request_new_token(timeout=remaining)
                try:
                    self.cache.set(cache_key, token)
                except OSError as e:
                    logger.warning("Could not store token in cache", cache_key=cache_key, error=str(e))
                return token
            finally:
                lock.release()
        finally:
            self._forget_lock(cache_key)

    def request_new_token(self, timeout: Optional[float] = None) -> Token:
        """Request a new token from the authentication endpoint.

        This always performs a network call; use ``acquire`` for cached access.

        Raises:
            AuthFailedError: On transport errors, error responses and unusable tokens.
            SigningError: If the private key cannot sign the request.
        """
        token_request = self.token_request_builder.build()
        body = token_request.canonical_bytes()
        signature = self.signer.sign_encoded(body, self._private_key)

        headers = {
            "Content-Type": CONTENT_TYPE,
            "Accept": CONTENT_TYPE,
            SIGNATURE_HEADER: signature,
        }

        logger.info(
            "Requesting new token",
            url=self.auth_url,
            login=token_request.login,
            read_only=token_request.read_only,
            label=token_request.label,
        )

        try:
            with LogMetrics(logger, "token request"):
                response = self.session.post(self.auth_url, data=body, headers=headers, timeout=timeout)
        except requests.RequestException as e:
            logger.error("Token request failed", url=self.auth_url, error=str(e))
            raise AuthFailedError(f"request error: {e}") from e

        if not response.ok:
            message = error_message_from_response(response)
            logger.error("Token request rejected", status_code=response.status_code, error=message)
            raise AuthFailedError(message, status_code=response.status_code)

        try:
            token = Token.parse(self._token_from_response(response))
        except TokenError as e:
            raise AuthFailedError(f"authentication server returned an unusable token: {e}") from e

        logger.info("Obtained new token", expiry=token.expiry)
        return token

    @staticmethod
    def _token_from_response(response: requests.Response) -> str:
        text = response.text.strip()
        try:
            body = json.loads(text)
        except ValueError:
            # Bare credential string
            return text

        if isinstance(body, dict):
            return body.get("token") or body.get("Token") or ""
        if isinstance(body, str):
            return body
        return ""
