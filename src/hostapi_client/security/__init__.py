"""Secret handling for private keys and tokens."""

from hostapi_client.security.secret_store import (
    PrivateKeyHandle,
    SecretValue,
    load_private_key,
)

__all__ = ["PrivateKeyHandle", "SecretValue", "load_private_key"]
