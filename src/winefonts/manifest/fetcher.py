"""
Content Fetcher
===============

Resolves dependency references to readable local files: local files are
copied into a staging directory, remote files are streamed into a private
temporary directory that is removed when the caller is done with it.
"""

import logging
import shutil
import tempfile
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import requests
from tqdm import tqdm

from winefonts.core.config import BuildConfig
from winefonts.core.exceptions import (
    DownloadFailedError,
    LocalResourceNotFoundError,
    ResourceReadError,
)

logger = logging.getLogger(__name__)

TEMP_DIR_PREFIX = "winefonts-"


class DownloadProgress:
    """Progress tracker for downloads."""

    def __init__(self, total_size: int, description: str = "Downloading", disable: bool = False):
        self.total_size = total_size
        self.downloaded = 0
        self.start_time = time.time()
        self.pbar = tqdm(
            total=total_size or None,
            unit="B",
            unit_scale=True,
            unit_divisor=1024,
            desc=description,
            disable=disable,
        )

    def update(self, chunk_size: int):
        """Update progress."""
        self.downloaded += chunk_size
        self.pbar.update(chunk_size)

    def close(self):
        """Close progress bar."""
        self.pbar.close()

    @property
    def elapsed_time(self) -> float:
        """Get elapsed time in seconds."""
        return time.time() - self.start_time


class ContentFetcher:
    """
    Produces local copies of dependency content.

    Local paths are resolved against ``base_path`` (the catalog's directory).
    Remote URLs are fetched with ``Accept: application/octet-stream``; any
    transport error or non-success status raises ``DownloadFailedError``.
    """

    def __init__(
        self,
        base_path: Path,
        timeout_seconds: int = 300,
        chunk_size: int = 8192,
        user_agent: str = "winefonts/1.0.0",
        show_progress: bool = True,
        session: requests.Session | None = None,
    ):
        self.base_path = Path(base_path)
        self.timeout_seconds = timeout_seconds
        self.chunk_size = chunk_size
        self.user_agent = user_agent
        self.show_progress = show_progress
        self.session = session or self._create_session()

    @classmethod
    def from_config(cls, config: BuildConfig, session: requests.Session | None = None):
        return cls(
            base_path=config.catalog_root,
            timeout_seconds=config.timeout_seconds,
            chunk_size=config.chunk_size,
            user_agent=config.user_agent,
            show_progress=config.show_progress,
            session=session,
        )

    def _create_session(self) -> requests.Session:
        """Create HTTP session with appropriate configuration."""
        session = requests.Session()
        session.headers.update({"User-Agent": self.user_agent})
        return session

    def resolve_local(self, relative_path: str) -> Path:
        """Return the absolute location of a catalog-relative file, which must exist."""
        source = self.base_path / relative_path
        if not source.is_file():
            raise LocalResourceNotFoundError(str(source))
        return source

    def copy_local(self, relative_path: str, destination: Path) -> Path:
        """Copy a catalog-relative file byte-for-byte to ``destination``."""
        source = self.resolve_local(relative_path)
        destination.parent.mkdir(parents=True, exist_ok=True)

        try:
            shutil.copyfile(source, destination)
        except OSError as e:
            raise ResourceReadError(str(source), str(e)) from e

        logger.debug(f"Staged {source} as {destination.name}")
        return destination

    @contextmanager
    def fetch_remote(self, url: str) -> Iterator[Path]:
        """Download ``url`` and yield the path of the downloaded file.

        The file lives in a temporary directory that is deleted when the
        context exits, whether or not the download succeeded.
        """
        with tempfile.TemporaryDirectory(prefix=TEMP_DIR_PREFIX) as temp_dir:
            target = Path(temp_dir) / "download"
            self._download(url, target)
            yield target

    def _download(self, url: str, target: Path) -> None:
        logger.info(f"Downloading {url}")

        try:
            response = self.session.get(
                url,
                headers={"Accept": "application/octet-stream"},
                stream=True,
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as e:
            logger.error(f"Failed to download file from URL: {url}")
            raise DownloadFailedError(url, str(e)) from e

        try:
            response.raise_for_status()
            total_size = int(response.headers.get("content-length") or 0)
            progress = DownloadProgress(total_size, url.rsplit("/", 1)[-1], not self.show_progress)

            try:
                with target.open("wb") as f:
                    for chunk in response.iter_content(chunk_size=self.chunk_size):
                        if chunk:
                            f.write(chunk)
                            progress.update(len(chunk))
            finally:
                progress.close()

            # Content-Length counts encoded bytes when the body is compressed
            if (
                total_size > 0
                and not response.headers.get("content-encoding")
                and progress.downloaded != total_size
            ):
                raise DownloadFailedError(
                    url, f"expected {total_size} bytes, received {progress.downloaded}"
                )

            logger.info(
                f"Download completed: {progress.downloaded} bytes in {progress.elapsed_time:.2f}s"
            )
        except requests.RequestException as e:
            logger.error(f"Failed to download file from URL: {url}")
            raise DownloadFailedError(url, str(e)) from e
        except OSError as e:
            raise DownloadFailedError(url, str(e)) from e
        finally:
            response.close()

    def close(self):
        """Release the HTTP session."""
        self.session.close()
