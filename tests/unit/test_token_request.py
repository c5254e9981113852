"""
Unit tests for token request construction.
"""

import json

import pytest

from hostapi_client.auth.token_request import (
    DEFAULT_LABEL_PREFIX,
    DEFAULT_TOKEN_LIFETIME,
    TokenRequest,
    TokenRequestBuilder,
)
from hostapi_client.errors import ConfigurationError


class TestTokenRequestBuilder:
    """Test suite for TokenRequestBuilder."""

    def test_build_populates_fields(self):
        builder = TokenRequestBuilder(login="test-account", read_only=True, lifetime=600)

        request = builder.build(now=1700000000)

        assert request.login == "test-account"
        assert request.read_only is True
        assert request.expiration_time == 1700000600
        assert request.label == f"{DEFAULT_LABEL_PREFIX}-1700000000"
        assert len(request.nonce) == 16
        int(request.nonce, 16)

    def test_default_lifetime_is_one_day(self, token_request_builder):
        request = token_request_builder.build(now=0)
        assert request.expiration_time == DEFAULT_TOKEN_LIFETIME == 86400

    def test_nonce_differs_per_request(self, token_request_builder):
        nonces = {token_request_builder.build().nonce for _ in range(50)}
        assert len(nonces) == 50

    def test_whitelisted_restricts_source(self):
        assert TokenRequestBuilder("a", whitelisted=False).build().allow_any_source is True
        assert TokenRequestBuilder("a", whitelisted=True).build().allow_any_source is False

    def test_custom_label_prefix(self):
        request = TokenRequestBuilder("a", label_prefix="deploy-bot").build(now=42)
        assert request.label == "deploy-bot-42"

    @pytest.mark.parametrize("login", [None, ""])
    def test_missing_login(self, login):
        with pytest.raises(ConfigurationError, match="account name is required"):
            TokenRequestBuilder(login).build()


class TestTokenRequest:
    """Test suite for the wire form of a token request."""

    def test_canonical_bytes_key_order(self):
        request = TokenRequest(
            login="test-account",
            nonce="0123456789abcdef",
            read_only=True,
            expiration_time=1700086400,
            label="hostapi-client-1700000000",
            allow_any_source=True,
        )

        assert request.canonical_bytes() == (
            b'{"login":"test-account","nonce":"0123456789abcdef",'
            b'"label":"hostapi-client-1700000000","read_only":true,'
            b'"expiration_time":1700086400,"global_key":true}'
        )

    def test_unset_optional_fields_are_omitted(self):
        request = TokenRequest(login="test-account", nonce="0123456789abcdef")
        assert json.loads(request.canonical_bytes()) == {
            "login": "test-account",
            "nonce": "0123456789abcdef",
        }

    def test_canonical_bytes_are_stable(self):
        request = TokenRequest(login="a", nonce="b", label="c", expiration_time=1)
        assert request.canonical_bytes() == request.canonical_bytes()
