"""
Manifest Compiler
=================

Turns a source catalog into a versioned manifest: every installation's
dependency is resolved through a download registry, replaced by a download
id, and everything is put into canonical order.
"""

import logging
from pathlib import Path, PurePosixPath
from urllib.parse import quote

from winefonts.core.exceptions import (
    DuplicateFontIdError,
    PlaceholderIdError,
)
from winefonts.core.models import CompiledManifest, Installation, SourceCatalog

from .fetcher import ContentFetcher
from .hashing import compute_file_hash, file_size
from .identity import CanonicalKey, KeyKind, canonical_key
from .registry import DownloadRegistry, IdFactory, ResolvedContent, Resolver

logger = logging.getLogger(__name__)

def installation_sort_key(installation: Installation) -> tuple[str, str]:
    return (installation.type, installation.download or "")

class ManifestCompiler:
    """
    Compiles source catalogs into distribution manifests.

    Each ``compile`` call owns a fresh ``DownloadRegistry``; nothing is
    shared between calls. Local dependencies are staged in ``staging_dir``
    as ``<downloadId><extension>``.
    """

    def __init__(
        self,
        fetcher: ContentFetcher,
        staging_dir: Path,
        url_prefix: str,
        id_factory: IdFactory | None = None,
    ):
        self.fetcher = fetcher
        self.staging_dir = Path(staging_dir)
        self.url_prefix = url_prefix
        self.id_factory = id_factory

    def compile(self, catalog: SourceCatalog, version: str) -> CompiledManifest:
        """
        Compile ``catalog`` into a manifest for ``version``.

        The catalog's fonts and installations are rewritten in place.

        Raises:
            InputError: placeholder or duplicate font ids, missing local files
            FetchError: a remote dependency could not be downloaded
            HashComputationError: resolved bytes could not be read
        """
        self._check_font_ids(catalog)
        registry = DownloadRegistry(self.id_factory)

        for font in catalog.fonts:
            for installation in font.installations:
                key = canonical_key(installation)
                if key is not None:
                    download_id = registry.resolve(key, self._resolver_for(installation, key))
                    installation.bind_download(download_id)
                else:
                    logger.debug(f"Passing through {installation.type} installation of {font.name}")
                installation.sort_payload()

            font.installations.sort(key=installation_sort_key)
            font.categories.sort(key=lambda category: category.value)

        fonts = sorted(catalog.fonts, key=lambda font: font.name)
        downloads = sorted(registry.list_all(), key=lambda download: download.id)

        logger.info(f"Compiled {len(fonts)} fonts with {len(downloads)} downloads")
        return CompiledManifest(version=version, downloads=downloads, fonts=fonts)

    def _check_font_ids(self, catalog: SourceCatalog) -> None:
        seen: set[str] = set()
        for font in catalog.fonts:
            if font.has_placeholder_id:
                raise PlaceholderIdError(font.name)
            if font.id in seen:
                raise DuplicateFontIdError(font.id)
            seen.add(font.id)

    def _resolver_for(self, installation: Installation, key: CanonicalKey) -> Resolver:
        if key.kind is KeyKind.LOCAL_FILE:
            return self._local_resolver(key.value)
        return self._remote_resolver(installation.url)

    def _local_resolver(self, relative_path: str) -> Resolver:
        extension = PurePosixPath(relative_path).suffix

        def resolve(download_id: str) -> ResolvedContent:
            staged_name = f"{download_id}{extension}"
            staged = self.fetcher.copy_local(relative_path, self.staging_dir / staged_name)
            return ResolvedContent(
                download_url=self.url_prefix + quote(staged_name, safe=""),
                file_size=file_size(staged),
                hash=compute_file_hash(staged),
            )

        return resolve

    def _remote_resolver(self, url: str) -> Resolver:
        def resolve(_download_id: str) -> ResolvedContent:
            with self.fetcher.fetch_remote(url) as downloaded:
                return ResolvedContent(
                    download_url=url,
                    file_size=file_size(downloaded),
                    hash=compute_file_hash(downloaded),
                )

        return resolve
