"""
Common test fixtures and utilities for the hosting API client tests.
"""

import base64
import json
import os
import time

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from hostapi_client.auth.token_request import TokenRequestBuilder
from hostapi_client.security.secret_store import PrivateKeyHandle

TEST_ACCOUNT = "test-account"
TEST_BASE_URL = "https://api.example.test/v6"


def _pem(private_key) -> bytes:
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def make_token(expiry=None, **claims) -> str:
    """Build an unsigned three segment token with the given expiry claim."""
    if expiry is None:
        expiry = int(time.time()) + 3600
    header = _b64url(json.dumps({"typ": "JWT", "alg": "RS512"}).encode())
    payload = _b64url(json.dumps({"iss": "api.example.test", "exp": expiry, **claims}).encode())
    return f"{header}.{payload}.{_b64url(b'signature')}"


@pytest.fixture(scope="session")
def rsa_private_key():
    """2048 bit RSA key, generated once per test session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def rsa_private_key_pem(rsa_private_key):
    return _pem(rsa_private_key)


@pytest.fixture
def private_key_handle(rsa_private_key_pem):
    return PrivateKeyHandle(rsa_private_key_pem)


@pytest.fixture(scope="session")
def small_rsa_key_pem():
    return _pem(rsa.generate_private_key(public_exponent=65537, key_size=1024))


@pytest.fixture(scope="session")
def ec_key_pem():
    return _pem(ec.generate_private_key(ec.SECP256R1()))


@pytest.fixture
def private_key_file(tmp_path, rsa_private_key_pem):
    path = tmp_path / "signature.key"
    path.write_bytes(rsa_private_key_pem)
    return path


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def valid_token_raw():
    return make_token(int(time.time()) + 3600)


@pytest.fixture
def expired_token_raw():
    return make_token(int(time.time()) - 3600)


@pytest.fixture
def token_request_builder():
    return TokenRequestBuilder(login=TEST_ACCOUNT)


@pytest.fixture
def cache_path(tmp_path):
    return tmp_path / "cache" / "tokens.json"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep HOSTAPI_* variables of the developer's shell out of the tests."""
    for name in list(os.environ):
        if name.startswith("HOSTAPI_"):
            monkeypatch.delenv(name, raising=False)
