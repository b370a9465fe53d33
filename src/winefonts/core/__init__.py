"""Core components for the font catalog build system."""

from .config import BuildConfig, StorageConfig
from .exceptions import (
    CatalogError,
    ConfigurationError,
    FetchError,
    HashComputationError,
    InputError,
    OutputError,
    PublishError,
)
from .models import (
    PLACEHOLDER_ID,
    CabextractInstallation,
    CompiledManifest,
    Download,
    Font,
    FontCategory,
    Group,
    Installation,
    SourceCatalog,
)

__all__ = [
    "PLACEHOLDER_ID",
    "BuildConfig",
    "CabextractInstallation",
    "CatalogError",
    "CompiledManifest",
    "ConfigurationError",
    "Download",
    "FetchError",
    "Font",
    "FontCategory",
    "Group",
    "HashComputationError",
    "InputError",
    "Installation",
    "OutputError",
    "PublishError",
    "SourceCatalog",
    "StorageConfig",
]
