"""
Bearer token value object.

A token is the three segment ``header.payload.signature`` credential string
returned by the authentication endpoint. Only the expiry claim of the payload
is read; the token's signature is not verified by the client.
"""

import base64
import binascii
import json
import math
import time
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Dict, Optional, Union

from hostapi_client.errors import EncodingError, MalformedTokenError, PayloadError

AUTHORIZATION_SCHEME = "Bearer"


def _decode_segment(segment: str) -> bytes:
    """Strictly decode one unpadded base64url segment."""
    padded = segment + "=" * (-len(segment) % 4)
    try:
        return base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise EncodingError("could not decode token, invalid base64") from e


@dataclass(frozen=True)
class Token:
    """Immutable bearer token with the expiry claimed by its payload."""

    raw: str = field(repr=False)
    expiry: Union[int, float]
    claims: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def parse(cls, raw: str) -> "Token":
        """Parse a raw credential string.

        Raises:
            MalformedTokenError: Unless there are exactly three non-empty segments.
            EncodingError: If the payload segment is not valid base64url.
            PayloadError: If the payload is not a JSON object with a numeric ``exp``.
        """
        if not isinstance(raw, str) or not raw:
            raise MalformedTokenError("no token given, a token should be set")

        parts = raw.split(".")
        if len(parts) != 3 or not all(parts):
            raise MalformedTokenError(
                f"invalid token given, expected 3 non-empty segments, got {len(parts)}"
            )

        body = _decode_segment(parts[1])

        try:
            claims = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise PayloadError("could not read token body, invalid json") from e

        if not isinstance(claims, dict):
            raise PayloadError("token body is not a json object")

        expiry = claims.get("exp")
        # bool is a subclass of int but never a timestamp
        if isinstance(expiry, bool) or not isinstance(expiry, Real):
            raise PayloadError("token body has no numeric 'exp' claim")
        # json accepts NaN, Infinity and out of range literals such as 1e400
        if not math.isfinite(expiry):
            raise PayloadError(f"token body has a non-finite 'exp' claim: {expiry!r}")
        if isinstance(expiry, float) and expiry.is_integer():
            expiry = int(expiry)

        return cls(raw=raw, expiry=expiry, claims=claims)

    def is_expired(self, now: Optional[float] = None) -> bool:
        """True once ``now`` (default: current time) is past the expiry claim."""
        if now is None:
            now = time.time()
        return now > self.expiry

    def authorization_header_value(self) -> str:
        """Value for the ``Authorization`` header."""
        return f"{AUTHORIZATION_SCHEME} {self.raw}"
