"""
Configuration management for the hosting API client.

Configuration is a pydantic model assembled from a YAML or JSON file,
environment variables and explicit overrides, in that order of priority.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from hostapi_client.auth.token_request import DEFAULT_LABEL_PREFIX, DEFAULT_TOKEN_LIFETIME
from hostapi_client.errors import ConfigurationError
from hostapi_client.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.transip.nl/v6"
DEFAULT_SOAP_HOSTNAME = "api.transip.nl"

# Published demo token of the provider; expires in 2037
DEMO_TOKEN = (
    "eyJ0eXAiOiJKV1QiLCJhbGciOiJSUzI1NiIsImp0aSI6ImN3MiFSbDU2eDNoUnkjelM4YmdOIn0."
    "eyJpc3MiOiJhcGkudHJhbnNpcC5ubCIsImF1ZCI6ImFwaS50cmFuc2lwLm5sIiwianRpIjoiY3cyIVJsNTZ4M2hS"
    "eSN6UzhiZ04iLCJpYXQiOjE1ODIyMDE1NTAsIm5iZiI6MTU4MjIwMTU1MCwiZXhwIjoyMTE4NzQ1NTUwLCJjaWQi"
    "OiI2MDQ0OSIsInJvIjpmYWxzZSwiZ2siOmZhbHNlLCJrdiI6dHJ1ZX0."
    "fYBWV4O5WPXxGuWG-vcrFWqmRHBm9yp0PHiYh_oAWxWxCaZX2Rf6WJfc13AxEeZ67-lY0TA2kSaOCp0PggBb_MGj"
    "73t4cH8gdwDJzANVxkiPL1Saqiw2NgZ3IHASJnisUWNnZp8HnrhLLe5ficvb1D9WOUOItmFC2ZgfGObNhlL2y-AM"
    "NLT4X7oNgrNTGm-mespo0jD_qH9dK5_evSzS3K8o03gu6p19jxfsnIh8TIVRvNdluYC2wo4qDl5EW5BEZ8OSuJ12"
    "1ncOT1oRpzXB0cVZ9e5_UVAEr9X3f26_Eomg52-PjrgcRJ_jPIUYbrlo06KjjX2h0fzMr21ZE023Gw"
)

# Environment variable -> config field
ENVIRONMENT_VARIABLES = {
    "HOSTAPI_ACCOUNT_NAME": "account_name",
    "HOSTAPI_PRIVATE_KEY_PATH": "private_key_path",
    "HOSTAPI_PRIVATE_KEY": "private_key",
    "HOSTAPI_TOKEN": "token",
    "HOSTAPI_BASE_URL": "base_url",
    "HOSTAPI_TOKEN_CACHE_PATH": "token_cache_path",
    "HOSTAPI_READ_ONLY": "read_only",
    "HOSTAPI_ENVIRONMENT": "environment",
    "HOSTAPI_LOG_LEVEL": "log_level",
}


class ClientConfig(BaseModel):
    """Configuration of an API client."""
    account_name: Optional[str] = Field(default=None, description="Account name tokens are issued for")
    private_key_path: Optional[str] = Field(default=None, description="Path of the PEM encoded private key")
    private_key: Optional[str] = Field(default=None, description="PEM encoded private key")
    demo_mode: bool = Field(default=False, description="Use the provider's demo token")
    token: Optional[str] = Field(default=None, description="Previously issued bearer token")
    read_only: bool = Field(default=False, description="Request read-only tokens")
    whitelisted: bool = Field(default=False, description="Restrict tokens to whitelisted addresses")
    token_lifetime_seconds: int = Field(default=DEFAULT_TOKEN_LIFETIME, description="Requested token lifetime")
    label_prefix: str = Field(default=DEFAULT_LABEL_PREFIX, description="Prefix of token labels")
    token_cache_path: Optional[str] = Field(default=None, description="File used to cache tokens")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="REST API base URL")
    soap_hostname: str = Field(default=DEFAULT_SOAP_HOSTNAME, description="Legacy SOAP API host")
    timeout_seconds: int = Field(default=30, description="API timeout in seconds")
    max_retries: int = Field(default=3, description="Maximum number of retries for GET requests")

    environment: str = Field(default="prod", description="Environment (dev, test, prod)")
    log_level: str = Field(default="INFO", description="Default log level")

    @model_validator(mode="after")
    def use_demo_token(self):
        """Substitute the demo token in demo mode."""
        if self.demo_mode:
            self.token = DEMO_TOKEN
        return self

    @field_validator("token_lifetime_seconds", "timeout_seconds")
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("must be a positive number of seconds")
        return v

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, v):
        if v < 0:
            raise ValueError("must not be negative")
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment."""
        allowed = ["dev", "test", "prod"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of {allowed}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of {allowed}")
        return v.upper()

    @property
    def mode(self) -> str:
        return "readonly" if self.read_only else "readwrite"


def load_config_from_environment() -> Dict[str, Any]:
    """Load configuration from environment variables."""
    config = {}
    for variable, field_name in ENVIRONMENT_VARIABLES.items():
        value = os.environ.get(variable)
        if value:
            config[field_name] = value
    return config


def load_config_from_file(file_path: Union[str, Path]) -> Dict[str, Any]:
    """Load configuration from a YAML or JSON file.

    Raises:
        ConfigurationError: If the file exists but cannot be parsed.
    """
    file_path = Path(file_path).expanduser()
    if not file_path.exists():
        logger.warning("Config file not found", path=str(file_path))
        return {}

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            if file_path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Error loading config file {file_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {file_path} must contain a mapping")
    return data


def load_config(file_path: Optional[Union[str, Path]] = None, **overrides) -> ClientConfig:
    """Build a client configuration.

    Sources, lowest priority first: ``file_path``, environment variables,
    keyword overrides.

    Raises:
        ConfigurationError: If a source is invalid.
    """
    config_dict: Dict[str, Any] = {}
    if file_path is not None:
        config_dict.update(load_config_from_file(file_path))
    config_dict.update(load_config_from_environment())
    config_dict.update({k: v for k, v in overrides.items() if v is not None})

    try:
        config = ClientConfig(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    logger.debug(
        "Configuration loaded",
        environment=config.environment,
        account_name=config.account_name,
        mode=config.mode,
    )
    return config
