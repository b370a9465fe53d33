"""Custom exceptions for the font catalog build system."""

from typing import Any


class CatalogError(Exception):
    """Base exception for all catalog build errors."""

    def __init__(self, message: str, details: Any | None = None):
        super().__init__(message)
        self.details = details


class InputError(CatalogError):
    """Exception raised when the source catalog cannot be compiled as given."""


class FetchError(CatalogError):
    """Exception raised when a dependency cannot be retrieved."""


class HashComputationError(CatalogError):
    """Exception raised when resolved bytes cannot be read for hashing."""


class ConfigurationError(CatalogError):
    """Exception raised for configuration errors."""


class OutputError(CatalogError):
    """Exception raised when the build output cannot be written."""


class PublishError(CatalogError):
    """Exception raised for storage upload errors."""


# Input errors
class CatalogNotFoundError(InputError):
    """Exception raised when the catalog file does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Catalog file not found: {path}")


class InvalidCatalogError(InputError):
    """Exception raised when the catalog is not valid JSON or fails validation."""

    def __init__(self, path: str, error: str):
        super().__init__(f"Invalid catalog {path}: {error}")


class LocalResourceNotFoundError(InputError):
    """Exception raised when a local dependency is missing or not a regular file."""

    def __init__(self, path: str):
        super().__init__(f"Local resource not found: {path}")


class InvalidUrlError(InputError):
    """Exception raised for dependency URLs that are not absolute http(s) URLs."""

    def __init__(self, url: str):
        super().__init__(f"Not an absolute http(s) URL: {url}")


class PlaceholderIdError(InputError):
    """Exception raised when a font still carries the placeholder id at build time."""

    def __init__(self, name: str):
        super().__init__(f"Unexpected placeholder id for font: {name}")


class DuplicateFontIdError(InputError):
    """Exception raised when two fonts share one id."""

    def __init__(self, font_id: str):
        super().__init__(f"Font id used more than once: {font_id}")


class ConflictingDependencyError(ValueError):
    """Exception raised when an installation names both a local path and a URL."""

    def __init__(self):
        super().__init__("installation must reference either _localPath or _url, not both")


class InvalidIdentifierError(ValueError):
    """Exception raised for ids that are neither a UUID nor the placeholder."""

    def __init__(self, value: str):
        super().__init__(f"id must be a UUID or the <UUID> placeholder: {value}")


class UnknownInstallationTypeError(ValueError):
    """Exception raised for installation types without a registered variant."""

    def __init__(self, installation_type: str):
        super().__init__(f"Unknown installation type: {installation_type}")


# Fetch and hash errors
class DownloadFailedError(FetchError):
    """Exception raised when a remote dependency cannot be downloaded."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to download {url}: {reason}", details={"url": url})
        self.url = url


class ResourceReadError(HashComputationError):
    """Exception raised when a resolved file cannot be read."""

    def __init__(self, path: str, error: str):
        super().__init__(f"Failed to read {path}: {error}")


# Output errors
class OutputWriteError(OutputError):
    """Exception raised when the output directory cannot be replaced."""

    def __init__(self, path: str, error: str):
        super().__init__(f"Failed to write output to {path}: {error}")


# Configuration errors
class InvalidVersionError(ValueError):
    """Exception raised for version strings that are not semantic versions."""

    def __init__(self, version: str):
        super().__init__(f"Version must be a semantic version (MAJOR.MINOR.PATCH): {version}")


class InvalidUrlPrefixError(ValueError):
    """Exception raised for invalid URL prefixes."""

    def __init__(self):
        super().__init__("URL prefix must start with https:// or http://")


class InvalidEndpointUrlError(ValueError):
    """Exception raised for invalid endpoint URLs."""

    def __init__(self):
        super().__init__("Endpoint URL must start with https:// or http://")


class EmptyCredentialError(ValueError):
    """Exception raised for empty credentials."""

    def __init__(self):
        super().__init__("Credential cannot be empty")


class ConfigFileNotFoundError(ConfigurationError):
    """Exception raised when configuration file is not found."""

    def __init__(self, config_path: str):
        super().__init__(f"Configuration file not found: {config_path}")


class EmptyConfigFileError(ConfigurationError):
    """Exception raised when configuration file is empty."""

    def __init__(self, config_path: str):
        super().__init__(f"Empty configuration file: {config_path}")


class InvalidYamlError(ConfigurationError):
    """Exception raised for invalid YAML content."""

    def __init__(self, config_path: str, error: str):
        super().__init__(f"Invalid YAML in {config_path}: {error}")


class ConfigLoadError(ConfigurationError):
    """Exception raised when configuration loading fails."""

    def __init__(self, error: str):
        super().__init__(f"Failed to load configuration: {error}")


# Publish errors
class UploadFailedError(PublishError):
    """Exception raised when an object cannot be uploaded."""

    def __init__(self, key: str, error: str):
        super().__init__(f"Failed to upload {key}: {error}")


class CorruptIndexError(PublishError):
    """Exception raised when a stored JSON index cannot be parsed."""

    def __init__(self, key: str, error: str):
        super().__init__(f"Failed to parse {key}: {error}")
