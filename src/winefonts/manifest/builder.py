"""
Manifest Build Pipeline
=======================

Loads the catalog, compiles it against a staging directory and hands the
result to the output writer. Any failure leaves the output directory as it
was.
"""

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path

from winefonts.catalog.loader import load_catalog
from winefonts.core.config import BuildConfig
from winefonts.core.models import CompiledManifest, SourceCatalog

from .compiler import ManifestCompiler
from .fetcher import TEMP_DIR_PREFIX, ContentFetcher
from .registry import IdFactory
from .writer import OutputWriter

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Outcome of a successful build."""

    manifest: CompiledManifest
    manifest_path: Path

    @property
    def output_dir(self) -> Path:
        return self.manifest_path.parent


def build_manifest(
    config: BuildConfig,
    catalog: SourceCatalog | None = None,
    fetcher: ContentFetcher | None = None,
    id_factory: IdFactory | None = None,
) -> BuildResult:
    """
    Compile the configured catalog and write the output directory.

    Args:
        config: Build configuration
        catalog: Already loaded catalog (defaults to ``config.catalog_path``)
        fetcher: Content fetcher (defaults to one built from ``config``)
        id_factory: Download id generator (defaults to random UUIDs)

    Returns:
        BuildResult with the compiled manifest and where it was written
    """
    if catalog is None:
        catalog = load_catalog(config.catalog_path)

    owns_fetcher = fetcher is None
    if fetcher is None:
        fetcher = ContentFetcher.from_config(config)

    logger.info(f"Building version {config.version} from {config.catalog_path}")

    try:
        with tempfile.TemporaryDirectory(prefix=TEMP_DIR_PREFIX) as staging:
            staging_dir = Path(staging)
            compiler = ManifestCompiler(fetcher, staging_dir, config.url_prefix, id_factory)
            manifest = compiler.compile(catalog, config.version)

            writer = OutputWriter(config.output_dir, config.manifest_filename)
            manifest_path = writer.write(manifest, staging_dir)
    finally:
        if owns_fetcher:
            fetcher.close()

    return BuildResult(manifest=manifest, manifest_path=manifest_path)
