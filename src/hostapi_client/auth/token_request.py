"""
Token request construction.

A token request describes the token the client wants issued. It is built
fresh for every acquisition attempt so that each one carries its own nonce,
and it is serialised to the exact JSON bytes that are both signed and sent.
"""

import json
import secrets
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from hostapi_client.errors import ConfigurationError

# Issued tokens are valid for a day unless configured otherwise
DEFAULT_TOKEN_LIFETIME = 24 * 60 * 60
DEFAULT_LABEL_PREFIX = "hostapi-client"


@dataclass(frozen=True)
class TokenRequest:
    """Body of a request to the authentication endpoint."""

    login: str
    nonce: str
    read_only: bool = False
    expiration_time: int = 0
    label: str = ""
    allow_any_source: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation; optional fields are left out when unset."""
        body: Dict[str, Any] = {"login": self.login, "nonce": self.nonce}
        if self.label:
            body["label"] = self.label
        if self.read_only:
            body["read_only"] = True
        if self.expiration_time:
            body["expiration_time"] = self.expiration_time
        if self.allow_any_source:
            body["global_key"] = True
        return body

    def canonical_bytes(self) -> bytes:
        """Compact JSON in fixed key order. These bytes are signed and sent as-is."""
        return json.dumps(self.to_dict(), separators=(",", ":")).encode("utf-8")


class TokenRequestBuilder:
    """Build token requests for one account.

    Args:
        login: Account name the token is issued for.
        read_only: Request a token that can only read.
        whitelisted: Restrict the token to the requesting source address.
        lifetime: Requested token lifetime in seconds.
        label_prefix: Prefix of the human readable label shown in the
            provider's control panel.
    """

    def __init__(
        self,
        login: Optional[str],
        read_only: bool = False,
        whitelisted: bool = False,
        lifetime: int = DEFAULT_TOKEN_LIFETIME,
        label_prefix: str = DEFAULT_LABEL_PREFIX,
    ):
        self.login = login
        self.read_only = read_only
        self.whitelisted = whitelisted
        self.lifetime = lifetime
        self.label_prefix = label_prefix

    @staticmethod
    def new_nonce() -> str:
        """16 random hex characters, unique per request."""
        return secrets.token_hex(8)

    def build(self, now: Optional[float] = None) -> TokenRequest:
        """Create a new token request with a fresh nonce.

        Raises:
            ConfigurationError: If no account name is configured.
        """
        if not self.login:
            raise ConfigurationError("account name is required to request a token")

        now = int(now if now is not None else time.time())
        return TokenRequest(
            login=self.login,
            nonce=self.new_nonce(),
            read_only=self.read_only,
            expiration_time=now + self.lifetime,
            label=f"{self.label_prefix}-{now}",
            allow_any_source=not self.whitelisted,
        )
