"""
Request signing with the account's RSA private key.

Both the token request and the legacy signed parameter convention are
authenticated with an RSA PKCS#1 v1.5 signature over a SHA-512 digest of the
exact bytes that are sent (or, for the legacy convention, of the encoded
parameter string).
"""

import base64
from urllib.parse import quote_plus

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from hostapi_client.errors import SigningError
from hostapi_client.security.secret_store import PrivateKeyHandle
from hostapi_client.utils.logging import get_logger

logger = get_logger(__name__)

# Smallest RSA modulus accepted for SHA-512 signatures
MIN_KEY_SIZE = 2048


class Signer:
    """Produce signatures for token requests and legacy calls.

    A signer holds no state; the same payload and key always yield the same
    signature because PKCS#1 v1.5 padding is deterministic.
    """

    def sign(self, payload: bytes, key: PrivateKeyHandle) -> bytes:
        """Sign a payload with the given private key.

        Args:
            payload: Bytes to sign, exactly as they are sent.
            key: Handle of the PEM encoded RSA private key.

        Returns:
            Raw signature bytes.

        Raises:
            SigningError: If the payload is empty or the key is malformed,
                not an RSA key, or smaller than MIN_KEY_SIZE bits.
        """
        if not payload:
            raise SigningError("nothing to sign, payload is empty")

        private_key = self._load_key(key)
        return private_key.sign(payload, padding.PKCS1v15(), hashes.SHA512())

    def sign_encoded(self, payload: bytes, key: PrivateKeyHandle) -> str:
        """Sign a payload and return the signature in its wire form."""
        return encode_signature(self.sign(payload, key))

    @staticmethod
    def _load_key(key: PrivateKeyHandle) -> rsa.RSAPrivateKey:
        if key is None:
            raise SigningError("no private key is set")

        try:
            private_key = serialization.load_pem_private_key(key.get(), password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            logger.debug("Private key could not be loaded", error=type(e).__name__)
            raise SigningError("could not decode private key") from e

        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise SigningError(
                f"unsupported private key type {type(private_key).__name__}, an RSA key is required"
            )

        if private_key.key_size < MIN_KEY_SIZE:
            raise SigningError(
                f"private key of {private_key.key_size} bits is too small, "
                f"at least {MIN_KEY_SIZE} bits are required"
            )

        return private_key


def encode_signature(signature: bytes) -> str:
    """Base64 encode a signature and escape it for use in headers and cookies."""
    return quote_plus(base64.b64encode(signature).decode("ascii"), safe="")
