"""
Content Fetcher Tests
=====================

Tests for staging local files and downloading remote ones with a mocked HTTP
session.
"""

from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

from conftest import ARIAL_BYTES, REMOTE_BYTES, make_response
from winefonts.core.config import BuildConfig
from winefonts.core.exceptions import (
    DownloadFailedError,
    FetchError,
    InputError,
    LocalResourceNotFoundError,
)
from winefonts.manifest.fetcher import TEMP_DIR_PREFIX, ContentFetcher


@pytest.fixture
def fetcher(catalog_dir, mock_session):
    return ContentFetcher(catalog_dir, show_progress=False, session=mock_session)


class TestLocalContent:
    """Test local dependency handling."""

    def test_copy_local(self, fetcher, temp_dir):
        """Test that local files are copied byte for byte."""
        destination = temp_dir / "staging" / "id.exe"

        staged = fetcher.copy_local("fonts/arial32.exe", destination)

        assert staged == destination
        assert staged.read_bytes() == ARIAL_BYTES

    def test_missing_local_file(self, fetcher, temp_dir):
        """Test that a missing file is an input error."""
        with pytest.raises(LocalResourceNotFoundError) as exc_info:
            fetcher.copy_local("fonts/missing.exe", temp_dir / "x.exe")

        assert isinstance(exc_info.value, InputError)

    def test_directory_is_not_a_resource(self, fetcher):
        """Test that a directory cannot stand in for a file."""
        with pytest.raises(LocalResourceNotFoundError):
            fetcher.resolve_local("fonts")


class TestRemoteContent:
    """Test remote downloads."""

    def test_fetch_remote(self, fetcher, mock_session):
        """Test that the downloaded bytes are available inside the context."""
        with fetcher.fetch_remote("https://example.org/tahoma32.cab") as path:
            assert path.read_bytes() == REMOTE_BYTES
            temp_dir = path.parent
            assert temp_dir.name.startswith(TEMP_DIR_PREFIX)

        assert not temp_dir.exists()

        args, kwargs = mock_session.get.call_args
        assert args == ("https://example.org/tahoma32.cab",)
        assert kwargs["headers"] == {"Accept": "application/octet-stream"}
        assert kwargs["stream"] is True

    def test_http_error_status(self, catalog_dir):
        """Test that a non-success status raises a fetch error and cleans up."""
        session = Mock(spec=requests.Session)
        response = make_response(status_code=404)
        session.get.return_value = response
        fetcher = ContentFetcher(catalog_dir, show_progress=False, session=session)
        created = []

        with pytest.raises(DownloadFailedError) as exc_info:
            with fetcher.fetch_remote("https://example.org/missing.cab") as path:
                created.append(path)

        assert isinstance(exc_info.value, FetchError)
        assert exc_info.value.url == "https://example.org/missing.cab"
        assert created == []
        response.close.assert_called_once()

    def test_transport_error(self, catalog_dir):
        """Test that connection errors raise a fetch error."""
        session = Mock(spec=requests.Session)
        session.get.side_effect = requests.ConnectionError("connection refused")
        fetcher = ContentFetcher(catalog_dir, show_progress=False, session=session)

        with pytest.raises(DownloadFailedError, match="connection refused"):
            with fetcher.fetch_remote("https://example.org/a.cab"):
                pass

    def test_truncated_body(self, catalog_dir):
        """Test that a body shorter than Content-Length is rejected."""
        session = Mock(spec=requests.Session)
        session.get.return_value = make_response(
            b"short", headers={"content-length": "100"}
        )
        fetcher = ContentFetcher(catalog_dir, show_progress=False, session=session)

        with pytest.raises(DownloadFailedError, match="expected 100 bytes"):
            with fetcher.fetch_remote("https://example.org/a.cab"):
                pass

    def test_compressed_body_skips_length_check(self, catalog_dir):
        """Test that Content-Length is not compared for encoded bodies."""
        session = Mock(spec=requests.Session)
        session.get.return_value = make_response(
            b"decoded bytes", headers={"content-length": "4", "content-encoding": "gzip"}
        )
        fetcher = ContentFetcher(catalog_dir, show_progress=False, session=session)

        with fetcher.fetch_remote("https://example.org/a.cab") as path:
            assert path.read_bytes() == b"decoded bytes"


class TestFetcherConfig:
    """Test construction from build configuration."""

    def test_from_config(self, build_config, mock_session):
        """Test that paths and HTTP settings come from the configuration."""
        fetcher = ContentFetcher.from_config(build_config, session=mock_session)

        assert fetcher.base_path == Path(build_config.catalog_path).parent
        assert fetcher.timeout_seconds == build_config.timeout_seconds
        assert fetcher.show_progress is False
        assert fetcher.session is mock_session

    def test_default_session_user_agent(self, catalog_dir):
        """Test that the default session sends the configured user agent."""
        fetcher = ContentFetcher(catalog_dir, user_agent="winefonts-test/0.1")

        assert fetcher.session.headers["User-Agent"] == "winefonts-test/0.1"
        fetcher.close()

    def test_config_defaults(self, monkeypatch, temp_dir):
        """Test the documented configuration defaults."""
        monkeypatch.chdir(temp_dir)
        for name in ("VERSION", "URL_PREFIX", "WINEFONTS_CATALOG_PATH", "WINEFONTS_OUTPUT_DIR"):
            monkeypatch.delenv(name, raising=False)

        config = BuildConfig()

        assert config.version == "0.0.0"
        assert config.url_prefix == "https://example.com/"
        assert config.catalog_path == Path("fonts.json")
        assert config.output_dir == Path("dist")
