"""
REST API client for the hosting provider.

Every call carries a bearer token obtained from an AuthCoordinator. Factory
functions build clients, coordinators and legacy SOAP clients from a
ClientConfig, so no token cache or key outlives the client that owns it.
"""

from typing import Any, Dict, Optional

import requests
from tenacity import (
    Retrying,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from hostapi_client.auth.coordinator import AuthCoordinator, error_message_from_response
from hostapi_client.auth.token import Token
from hostapi_client.auth.token_cache import FileTokenCache, MemoryTokenCache, TokenCache
from hostapi_client.auth.token_request import TokenRequestBuilder
from hostapi_client.errors import APIError, ConfigurationError, TokenError
from hostapi_client.legacy.soap import SoapClient
from hostapi_client.security.secret_store import load_private_key
from hostapi_client.utils.config import ClientConfig
from hostapi_client.utils.logging import get_logger

logger = get_logger(__name__)

USER_AGENT = "hostapi-client-python"


def _is_server_error(response: requests.Response) -> bool:
    return response.status_code >= 500


class ApiClient:
    """Client for the REST API.

    Args:
        base_url: API base URL, e.g. ``https://api.transip.nl/v6``.
        coordinator: Source of bearer tokens.
        session: HTTP executor.
        timeout: Request timeout in seconds.
        max_retries: Retries of a GET after connection errors or 5xx responses.
        retry_backoff_factor: Multiplier of the exponential wait between retries.
    """

    def __init__(
        self,
        base_url: str,
        coordinator: AuthCoordinator,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
        max_retries: int = 3,
        retry_backoff_factor: float = 1.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.coordinator = coordinator
        self.session = session or requests.Session()
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_backoff_factor = retry_backoff_factor

        logger.info("Initialized API client", base_url=self.base_url)

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers with authentication.

        Raises:
            AuthFailedError: If no valid token can be obtained.
        """
        token = self.coordinator.acquire()
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
            "Authorization": token.authorization_header_value(),
        }

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.retry_backoff_factor, max=10),
            retry=(
                retry_if_exception_type((requests.ConnectionError, requests.Timeout))
                | retry_if_result(_is_server_error)
            ),
            # Hand back the last 5xx response so that it becomes an APIError
            retry_error_callback=lambda state: state.outcome.result(),
            reraise=True,
        )

    def _handle_response(self, response: requests.Response) -> Any:
        """Return the decoded body of a successful response.

        Raises:
            APIError: If the response has an error status.
        """
        if not response.ok:
            message = error_message_from_response(response)
            logger.error("API error", status_code=response.status_code, error=message)
            raise APIError(message, status_code=response.status_code)

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise APIError(f"could not decode response body: {e}", status_code=response.status_code) from e

    def request(
        self,
        method: str,
        endpoint: str,
        body: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send an authenticated request to ``endpoint``.

        Only GET requests are retried.

        Raises:
            AuthFailedError: If no valid token can be obtained.
            APIError: On transport errors and error responses.
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        headers = self._get_headers()

        logger.info("Calling API", method=method, endpoint=endpoint)

        kwargs = {"headers": headers, "params": params, "timeout": self.timeout}
        if body is not None:
            kwargs["json"] = body

        try:
            if method == "GET":
                response = self._retrying()(self.session.request, method, url, **kwargs)
            else:
                response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error("API request failed", method=method, endpoint=endpoint, error=str(e))
            raise APIError(f"request error: {e}") from e

        return self._handle_response(response)

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, body: Optional[Any] = None) -> Any:
        return self.request("POST", endpoint, body=body)

    def put(self, endpoint: str, body: Optional[Any] = None) -> Any:
        return self.request("PUT", endpoint, body=body)

    def patch(self, endpoint: str, body: Optional[Any] = None) -> Any:
        return self.request("PATCH", endpoint, body=body)

    def delete(self, endpoint: str, body: Optional[Any] = None) -> Any:
        return self.request("DELETE", endpoint, body=body)


def create_token_cache(config: ClientConfig) -> TokenCache:
    if config.token_cache_path:
        return FileTokenCache(config.token_cache_path)
    return MemoryTokenCache()


def create_auth_coordinator(
    config: ClientConfig, session: Optional[requests.Session] = None
) -> AuthCoordinator:
    """Build a coordinator from configuration.

    Raises:
        ConfigurationError: If neither a private key nor a token is configured,
            a key is configured without an account name, or the configured
            token cannot be parsed.
    """
    private_key = load_private_key(config.private_key, config.private_key_path)

    static_token = None
    if config.token:
        try:
            static_token = Token.parse(config.token)
        except TokenError as e:
            raise ConfigurationError(f"configured token is invalid: {e}") from e

    if private_key is None and static_token is None:
        raise ConfigurationError("a private key or a token is required")
    if private_key is not None and not config.account_name:
        raise ConfigurationError("account name is required when using a private key")

    builder = TokenRequestBuilder(
        login=config.account_name,
        read_only=config.read_only,
        whitelisted=config.whitelisted,
        lifetime=config.token_lifetime_seconds,
        label_prefix=config.label_prefix,
    )
    return AuthCoordinator(
        builder,
        private_key=private_key,
        base_url=config.base_url,
        cache=create_token_cache(config),
        session=session,
        static_token=static_token,
        timeout=config.timeout_seconds,
    )


def create_client(config: ClientConfig, session: Optional[requests.Session] = None) -> ApiClient:
    """Build a REST client and its coordinator from configuration."""
    session = session or requests.Session()
    return ApiClient(
        config.base_url,
        create_auth_coordinator(config, session=session),
        session=session,
        timeout=config.timeout_seconds,
        max_retries=config.max_retries,
    )


def create_soap_client(config: ClientConfig, session: Optional[requests.Session] = None) -> SoapClient:
    """Build a legacy SOAP client from configuration.

    Raises:
        ConfigurationError: If no private key is configured.
    """
    private_key = load_private_key(config.private_key, config.private_key_path)
    if private_key is None:
        raise ConfigurationError("legacy calls require a private key")
    return SoapClient(
        config.account_name,
        private_key,
        mode=config.mode,
        hostname=config.soap_hostname,
        session=session,
        timeout=config.timeout_seconds,
    )
