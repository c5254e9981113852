"""
Secret store module for secure handling of sensitive information.

This module provides containers for API tokens and private keys that never
print or log their values.
"""

from pathlib import Path
from typing import Any, Optional, Union

from hostapi_client.errors import ConfigurationError


class SecretValue:
    """Container for secret values that prevents accidental printing."""

    def __init__(self, value: Any):
        self._value = value

    def get(self) -> Any:
        """Get the actual secret value."""
        return self._value

    def __repr__(self) -> str:
        """Return a masked representation of the secret."""
        return "***SECRET***"

    def __str__(self) -> str:
        """Return a masked string representation of the secret."""
        return "***SECRET***"


class PrivateKeyHandle(SecretValue):
    """PEM encoded private key, loaded once and shared read-only.

    The handle only carries the key bytes; parsing and validation happen in
    the signer so that a bad key surfaces as a ``SigningError`` at the first
    signing attempt.
    """

    def __init__(self, value: Union[str, bytes]):
        if isinstance(value, str):
            value = value.encode("utf-8")
        super().__init__(bytes(value))

    def get(self) -> bytes:
        return self._value

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "PrivateKeyHandle":
        """Read a private key from a file.

        Raises:
            ConfigurationError: If the file cannot be read.
        """
        path = Path(path).expanduser()
        try:
            return cls(path.read_bytes())
        except OSError as e:
            raise ConfigurationError(f"error while reading private key: {e}") from e


def load_private_key(
    private_key: Optional[str] = None,
    private_key_path: Optional[Union[str, Path]] = None,
) -> Optional[PrivateKeyHandle]:
    """Build a key handle from inline PEM text or a key file path.

    Inline PEM text wins over a path. Returns None when neither is given.
    """
    if private_key:
        return PrivateKeyHandle(private_key)
    if private_key_path:
        return PrivateKeyHandle.from_file(private_key_path)
    return None
