"""
Unit tests for the auth token CLI.
"""

import json

import responses

from hostapi_client.cli.auth_token import main
from hostapi_client.utils.config import DEMO_TOKEN


class TestAuthTokenCli:
    """Test suite for hostapi-get-token."""

    def test_demo_token_text(self, capsys):
        assert main(["--demo"]) == 0

        captured = capsys.readouterr()
        assert captured.out.strip() == DEMO_TOKEN
        assert "Expires At: 2037-02-20" in captured.err

    def test_demo_token_json_with_claims(self, capsys):
        assert main(["--demo", "--output", "json", "--claims"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["token"] == DEMO_TOKEN
        assert output["expiry"] == 2118745550
        assert output["header"]["alg"] == "RS256"
        assert output["claims"]["iss"] == "api.transip.nl"

    @responses.activate
    def test_token_from_private_key(self, capsys, private_key_file, valid_token_raw):
        responses.add(responses.POST, "https://api.transip.nl/v6/auth", json={"token": valid_token_raw}, status=201)

        code = main(["--account-name", "test-account", "--private-key-path", str(private_key_file)])

        assert code == 0
        assert capsys.readouterr().out.strip() == valid_token_raw

    def test_missing_credentials(self, capsys):
        assert main(["--output", "json"]) == 1
        assert "private key or a token" in json.loads(capsys.readouterr().out)["error"]

    @responses.activate
    def test_auth_failure(self, capsys, private_key_file):
        responses.add(responses.POST, "https://api.transip.nl/v6/auth", json={"error": "Invalid signature"}, status=401)

        code = main(["--account-name", "test-account", "--private-key-path", str(private_key_file)])

        assert code == 1
        assert "Invalid signature" in capsys.readouterr().err
