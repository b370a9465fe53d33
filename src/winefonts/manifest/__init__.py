"""Manifest Compilation Module
===========================

Resolves, deduplicates and hashes font dependencies and writes the versioned
distribution manifest.
"""

from .builder import BuildResult, build_manifest
from .compiler import ManifestCompiler
from .fetcher import ContentFetcher
from .hashing import compute_file_hash, file_size
from .identity import CanonicalKey, KeyKind, canonical_key, normalize_local_path, normalize_url
from .registry import DownloadRegistry, ResolvedContent
from .writer import OutputWriter

__all__ = [
    "BuildResult",
    "CanonicalKey",
    "ContentFetcher",
    "DownloadRegistry",
    "KeyKind",
    "ManifestCompiler",
    "OutputWriter",
    "ResolvedContent",
    "build_manifest",
    "canonical_key",
    "compute_file_hash",
    "file_size",
    "normalize_local_path",
    "normalize_url",
]
