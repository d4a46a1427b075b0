"""Provider configuration loading for the S3 presigner.

Supports two configuration sources:
1. Environment variables (for CI/CD) - takes priority
2. config.json file (for local development)

Environment Variable Format:
    PROVIDER_{KEY}=Name|Endpoint|Region
    {KEY}_ACCESS_KEY=xxx
    {KEY}_SECRET_KEY=xxx
    {KEY}_BUCKET=xxx

Example:
    PROVIDER_R2=Cloudflare R2|https://123.r2.cloudflarestorage.com|auto
    R2_ACCESS_KEY=your-access-key
    R2_SECRET_KEY=your-secret-key
    R2_BUCKET=your-bucket-name
"""

import json
import os
from datetime import datetime
from pathlib import Path

from s3presign.models import REQUEST_DEFAULTS, KeySource, ProviderConfig, SigningRequest


class ConfigError(Exception):
    """Raised when configuration loading fails."""

    pass


# Required fields for a provider configuration
REQUIRED_FIELDS = [
    "provider_name",
    "endpoint_url",
    "aws_access_key_id",
    "aws_secret_access_key",
    "bucket_name",
]


def load_from_json(config_path: str) -> dict[str, ProviderConfig]:
    """Load provider configurations from a JSON file.

    Args:
        config_path: Path to the config.json file.

    Returns:
        Dictionary mapping provider keys to ProviderConfig objects.
        Only enabled providers are included.

    Raises:
        ConfigError: If file doesn't exist, contains invalid JSON,
                    or is missing required fields.
    """
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a JSON object of providers")

    providers: dict[str, ProviderConfig] = {}

    for key, config in data.items():
        if not isinstance(config, dict):
            raise ConfigError(f"Provider '{key}' must be a JSON object")

        if not config.get("enabled", True):
            continue

        for field in REQUIRED_FIELDS:
            if field not in config:
                raise ConfigError(
                    f"Missing required field '{field}' for provider '{key}'"
                )

        providers[key] = ProviderConfig(
            key=key,
            provider_name=config["provider_name"],
            endpoint_url=config["endpoint_url"],
            aws_access_key_id=config["aws_access_key_id"],
            aws_secret_access_key=config["aws_secret_access_key"],
            bucket_name=config["bucket_name"],
            region_name=config.get("region_name", REQUEST_DEFAULTS["region"]),
            enabled=True,
        )

    return providers


def load_from_env() -> dict[str, ProviderConfig]:
    """Load provider configurations from environment variables.

    Discovers providers by looking for PROVIDER_* environment variables.
    For each provider, expects corresponding credential variables.

    Returns:
        Dictionary mapping provider keys to ProviderConfig objects.

    Raises:
        ConfigError: If environment variables are malformed or
                    required credential variables are missing.
    """
    providers: dict[str, ProviderConfig] = {}

    for env_key, env_value in os.environ.items():
        if not env_key.startswith("PROVIDER_"):
            continue

        # "PROVIDER_R2" -> "R2"
        provider_key = env_key[len("PROVIDER_"):]

        parts = env_value.split("|")
        if len(parts) != 3:
            raise ConfigError(
                f"Invalid format for {env_key}. Expected: Name|Endpoint|Region"
            )

        name, endpoint, region = parts

        values = {}
        for suffix in ("ACCESS_KEY", "SECRET_KEY", "BUCKET"):
            var = f"{provider_key}_{suffix}"
            value = os.environ.get(var)
            if not value:
                raise ConfigError(f"Missing environment variable: {var}")
            values[suffix] = value

        providers[provider_key] = ProviderConfig(
            key=provider_key,
            provider_name=name,
            endpoint_url=endpoint,
            aws_access_key_id=values["ACCESS_KEY"],
            aws_secret_access_key=values["SECRET_KEY"],
            bucket_name=values["BUCKET"],
            region_name=region or REQUEST_DEFAULTS["region"],
            enabled=True,
        )

    return providers


def has_env_providers() -> bool:
    """Check if any PROVIDER_* environment variables exist."""
    return any(key.startswith("PROVIDER_") for key in os.environ)


def load_providers(
    config_path: str = "config.json",
) -> dict[str, ProviderConfig]:
    """Load provider configurations with environment priority.

    Priority order:
    1. Environment variables (if any PROVIDER_* vars exist)
    2. config.json file

    Raises:
        ConfigError: If no providers are configured or all are disabled.
    """
    providers: dict[str, ProviderConfig] = {}

    if has_env_providers():
        providers = load_from_env()
    elif Path(config_path).exists():
        providers = load_from_json(config_path)

    if not providers:
        raise ConfigError(
            "No providers configured. Set PROVIDER_* environment variables "
            "or create a config.json file with at least one enabled provider."
        )

    return providers


def request_for(
    config: ProviderConfig,
    object_key: str,
    timestamp: datetime,
    http_method: str = REQUEST_DEFAULTS["http_method"],
    expires_in: int = REQUEST_DEFAULTS["expires_in"],
    signing_key: KeySource = REQUEST_DEFAULTS["signing_key"],
) -> SigningRequest:
    """Build a signing request for an object stored with a provider."""
    return SigningRequest(
        object_key=object_key,
        http_method=http_method,
        region=config.region_name,
        expires_in=expires_in,
        timestamp=timestamp,
        bucket=config.bucket_name,
        access_key_id=config.aws_access_key_id,
        secret_access_key=config.aws_secret_access_key,
        endpoint_host=config.endpoint_host,
        signing_key=signing_key,
    )
