"""Wine Fonts Catalog
==================

Compiles the hand-maintained font catalog into a versioned, content-addressed
distribution manifest:
- Deduplicates binary dependencies by canonical local path or URL
- Records SHA-256 hash and size of every download
- Emits fonts and downloads in a deterministic order
- Publishes builds to S3-compatible storage such as Cloudflare R2
"""

__version__ = "1.0.0"

from .catalog import CatalogLinter, LintIssue, format_catalog, lint_catalog, load_catalog
from .core.config import BuildConfig, StorageConfig
from .core.exceptions import CatalogError, FetchError, HashComputationError, InputError
from .core.models import CompiledManifest, Download, Font, Group, SourceCatalog
from .manifest import BuildResult, ManifestCompiler, build_manifest

__all__ = [
    "BuildConfig",
    "BuildResult",
    "CatalogError",
    "CatalogLinter",
    "CompiledManifest",
    "Download",
    "FetchError",
    "Font",
    "Group",
    "HashComputationError",
    "InputError",
    "LintIssue",
    "ManifestCompiler",
    "SourceCatalog",
    "StorageConfig",
    "build_manifest",
    "format_catalog",
    "lint_catalog",
    "load_catalog",
]
