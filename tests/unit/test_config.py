"""
Unit tests for configuration loading.
"""

import importlib
import json
import warnings

import pytest
import yaml

from hostapi_client.errors import ConfigurationError
from hostapi_client.utils import config as config_module
from hostapi_client.utils.config import DEMO_TOKEN, ClientConfig, load_config


class TestClientConfig:
    """Test suite for the ClientConfig model."""

    def test_defaults(self):
        config = ClientConfig()

        assert config.base_url == "https://api.transip.nl/v6"
        assert config.token_lifetime_seconds == 86400
        assert config.label_prefix == "hostapi-client"
        assert config.mode == "readwrite"
        assert config.token is None

    def test_model_definition_has_no_deprecation_warnings(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            module = importlib.reload(config_module)

            assert module.ClientConfig(demo_mode=True).token == DEMO_TOKEN

    def test_read_only_mode(self):
        assert ClientConfig(read_only=True).mode == "readonly"

    def test_demo_mode_sets_token(self):
        assert ClientConfig(demo_mode=True).token == DEMO_TOKEN
        assert ClientConfig(demo_mode=True, token="other").token == DEMO_TOKEN

    def test_normalizes_environment_and_log_level(self):
        config = ClientConfig(environment="DEV", log_level="debug")

        assert config.environment == "dev"
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "field,value",
        [
            ("environment", "staging"),
            ("log_level", "LOUD"),
            ("token_lifetime_seconds", 0),
            ("timeout_seconds", -1),
            ("max_retries", -1),
        ],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ValueError):
            ClientConfig(**{field: value})


class TestLoadConfig:
    """Test suite for load_config."""

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"account_name": "from-file", "read_only": True}))

        config = load_config(path)

        assert config.account_name == "from-file"
        assert config.read_only is True

    def test_json_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"account_name": "from-json"}))

        assert load_config(path).account_name == "from-json"

    def test_missing_file_is_ignored(self, tmp_path):
        assert load_config(tmp_path / "missing.yaml").account_name is None

    def test_unparsable_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("account_name: [unclosed")

        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_file_must_contain_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(path)

    def test_invalid_values_raise_configuration_error(self):
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(environment="staging")

    def test_priority(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"account_name": "from-file", "base_url": "https://file.test"}))
        monkeypatch.setenv("HOSTAPI_ACCOUNT_NAME", "from-env")
        monkeypatch.setenv("HOSTAPI_READ_ONLY", "true")

        config = load_config(path, account_name="from-override", base_url=None)

        assert config.account_name == "from-override"
        assert config.base_url == "https://file.test"
        assert config.read_only is True

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("HOSTAPI_TOKEN", DEMO_TOKEN)
        monkeypatch.setenv("HOSTAPI_TOKEN_CACHE_PATH", "/tmp/tokens.json")

        config = load_config()

        assert config.token == DEMO_TOKEN
        assert config.token_cache_path == "/tmp/tokens.json"
