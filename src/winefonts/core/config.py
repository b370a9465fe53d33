"""Configuration management for the font catalog build system."""

import re
from pathlib import Path

import yaml
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import (
    ConfigFileNotFoundError,
    ConfigLoadError,
    EmptyConfigFileError,
    EmptyCredentialError,
    InvalidEndpointUrlError,
    InvalidUrlPrefixError,
    InvalidVersionError,
    InvalidYamlError,
)

SEMVER_PATTERN = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)


class BuildConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="WINEFONTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    """Manifest build configuration.

    ``version`` and ``url_prefix`` are read from the unprefixed ``VERSION``
    and ``URL_PREFIX`` variables, everything else uses ``WINEFONTS_``.
    """

    version: str = Field(
        "0.0.0",
        validation_alias=AliasChoices("version", "winefonts_version"),
        description="Version written into the compiled manifest",
    )
    url_prefix: str = Field(
        "https://example.com/",
        validation_alias=AliasChoices("url_prefix", "winefonts_url_prefix"),
        description="Public URL prefix for locally sourced assets",
    )

    # Paths
    catalog_path: Path = Field(Path("fonts.json"), description="Source catalog")
    output_dir: Path = Field(Path("dist"), description="Output directory")
    manifest_filename: str = Field("fonts.json", description="Compiled manifest file name")

    # Download settings
    timeout_seconds: int = Field(300, gt=0, description="HTTP timeout")
    chunk_size: int = Field(8192, gt=0, description="Streaming chunk size in bytes")
    user_agent: str = Field("winefonts/1.0.0", description="HTTP user agent")
    show_progress: bool = Field(True, description="Show download progress bars")

    @field_validator("version")
    @classmethod
    def validate_version(cls, v):
        if not SEMVER_PATTERN.match(v):
            raise InvalidVersionError(v)
        return v

    @field_validator("url_prefix")
    @classmethod
    def validate_url_prefix(cls, v):
        if not v.startswith(("https://", "http://")):
            raise InvalidUrlPrefixError()
        return v

    @property
    def catalog_root(self) -> Path:
        """Directory that local dependency paths are relative to."""
        return self.catalog_path.parent


class StorageConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="S3_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    """S3-compatible storage configuration (Cloudflare R2, MinIO, AWS)."""

    endpoint_url: str = Field(..., description="S3 endpoint URL")
    access_key_id: str = Field(..., description="Access key ID", repr=False)
    secret_access_key: str = Field(..., description="Secret access key", repr=False)
    bucket_name: str = Field(..., description="Bucket name")
    region: str = Field("auto", description="Region")
    base_url: str = Field(..., description="Public URL the bucket is served from")

    @field_validator("access_key_id", "secret_access_key")
    @classmethod
    def validate_credentials(cls, v):
        if not v or len(v.strip()) == 0:
            raise EmptyCredentialError()
        return v.strip()

    @field_validator("endpoint_url", "base_url")
    @classmethod
    def validate_endpoint_url(cls, v):
        if not v.startswith(("https://", "http://")):
            raise InvalidEndpointUrlError()
        return v

    def __repr__(self) -> str:
        """Custom repr that masks sensitive fields."""
        return (
            f"StorageConfig(endpoint_url='{self.endpoint_url}', bucket_name='{self.bucket_name}', "
            f"region='{self.region}', access_key_id='***', secret_access_key='***')"
        )

    def to_safe_dict(self) -> dict:
        """Export configuration with sensitive fields masked."""
        config_dict = self.model_dump()
        config_dict["access_key_id"] = "***MASKED***"
        config_dict["secret_access_key"] = "***MASKED***"
        return config_dict


def load_config_from_yaml(config_path: str | Path, config_class: type) -> BaseSettings:
    """Load configuration from YAML file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigFileNotFoundError(str(config_path))

    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidYamlError(str(config_path), str(e)) from e

    if config_data is None:
        raise EmptyConfigFileError(str(config_path))

    # YAML values win; .env is not consulted for YAML-based configs
    class YamlConfig(config_class):
        model_config = SettingsConfigDict(
            env_file=None,
            case_sensitive=False,
            extra="ignore",
        )

    try:
        return YamlConfig(**config_data)
    except Exception as e:
        raise ConfigLoadError(str(e)) from e


def _add_yaml_methods():
    """Add YAML loading methods to configuration classes."""

    @classmethod
    def from_yaml(cls, config_path: str | Path):
        """Load configuration from YAML file."""
        return load_config_from_yaml(config_path, cls)

    @classmethod
    def from_env_and_yaml(cls, yaml_path: str | Path | None = None, env_file: str = ".env"):
        """Load configuration from environment variables and optionally override with YAML."""
        if yaml_path and Path(yaml_path).exists():
            return cls.from_yaml(yaml_path)
        return cls(_env_file=env_file if Path(env_file).exists() else None)

    for config_class in [BuildConfig, StorageConfig]:
        config_class.from_yaml = from_yaml
        config_class.from_env_and_yaml = from_env_and_yaml


_add_yaml_methods()
