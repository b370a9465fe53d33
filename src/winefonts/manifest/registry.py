"""
Download Registry
=================

Deduplicates dependencies by canonical identity key and hands out one
download record per distinct key.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

from winefonts.core.models import Download, generate_uuid

from .identity import CanonicalKey

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]


@dataclass(frozen=True)
class ResolvedContent:
    """What a resolver learned about a dependency's bytes."""

    download_url: str
    file_size: int
    hash: str


@dataclass(frozen=True)
class DownloadRecord:
    """A stored download together with the key it was registered under."""

    id: str
    download_url: str
    file_size: int
    hash: str
    key: CanonicalKey

    def to_download(self) -> Download:
        return Download(
            id=self.id,
            download_url=self.download_url,
            file_size=self.file_size,
            hash=self.hash,
        )


Resolver = Callable[[str], ResolvedContent]


class DownloadRegistry:
    """
    Mapping from canonical identity key to download record.

    ``resolve`` is atomic per key: concurrent callers with an equal key wait
    for the first one and receive its id, so at most one record exists per
    key. A resolver that raises leaves no record behind.
    """

    def __init__(self, id_factory: IdFactory | None = None):
        self.id_factory = id_factory or generate_uuid
        self._records: dict[CanonicalKey, DownloadRecord] = {}
        self._key_locks: dict[CanonicalKey, threading.Lock] = {}
        self._lock = threading.Lock()

    def resolve(self, key: CanonicalKey, resolver: Resolver) -> str:
        """Return the download id for ``key``, calling ``resolver`` on first sight.

        Args:
            key: Canonical identity key of the dependency
            resolver: Called with the new download id; fetches, hashes and
                sizes the content

        Returns:
            The download id registered for ``key``
        """
        with self._lock:
            record = self._records.get(key)
            if record is not None:
                logger.debug(f"Reusing download {record.id} for {key.value}")
                return record.id
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            with self._lock:
                record = self._records.get(key)
            if record is not None:
                return record.id

            download_id = self.id_factory()
            content = resolver(download_id)
            record = DownloadRecord(
                id=download_id,
                download_url=content.download_url,
                file_size=content.file_size,
                hash=content.hash,
                key=key,
            )

            with self._lock:
                self._records[key] = record

        logger.info(f"Registered download {download_id} for {key.value} ({content.file_size} bytes)")
        return download_id

    def get(self, key: CanonicalKey) -> DownloadRecord | None:
        with self._lock:
            return self._records.get(key)

    def list_all(self) -> list[Download]:
        """Every registered download, without identity keys."""
        with self._lock:
            records = list(self._records.values())
        return [record.to_download() for record in records]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, key: CanonicalKey) -> bool:
        with self._lock:
            return key in self._records
