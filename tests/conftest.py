"""
Pytest configuration and fixtures for font catalog tests.
"""

import itertools
import json
import tempfile
import uuid
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

from winefonts.core.config import BuildConfig
from winefonts.core.models import SourceCatalog

ARIAL_BYTES = b"arial font installer bytes"
TAHOMA_BYTES = b"tahoma cabinet bytes" * 64
REMOTE_BYTES = b"remote cabinet payload"

FONT_A_ID = "11111111-1111-4111-8111-111111111111"
FONT_B_ID = "22222222-2222-4222-8222-222222222222"
FONT_C_ID = "33333333-3333-4333-8333-333333333333"
GROUP_ID = "44444444-4444-4444-8444-444444444444"


def make_font(name, installations, font_id=FONT_A_ID, short_name=None, categories=None):
    """Build a raw catalog font entry."""
    return {
        "id": font_id,
        "name": name,
        "shortName": short_name or name,
        "publisher": "Microsoft",
        "categories": categories or ["sans-serif"],
        "installations": installations,
    }


def cab(files, local_path=None, url=None):
    """Build a raw cabextract installation."""
    installation = {"type": "cabextract", "files": list(files)}
    if local_path is not None:
        installation["_localPath"] = local_path
    if url is not None:
        installation["_url"] = url
    return installation


def make_response(content=b"", status_code=200, headers=None):
    """Mock streaming response as returned by ``requests.Session.get``."""
    response = Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.headers = headers if headers is not None else {"content-length": str(len(content))}
    response.iter_content.return_value = [content] if content else []
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    return response


@pytest.fixture
def temp_dir():
    """Create temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def catalog_dir(temp_dir):
    """Directory holding a catalog's local font files."""
    fonts_dir = temp_dir / "fonts"
    fonts_dir.mkdir()
    (fonts_dir / "arial32.exe").write_bytes(ARIAL_BYTES)
    (fonts_dir / "tahoma32.cab").write_bytes(TAHOMA_BYTES)
    return temp_dir


@pytest.fixture
def sequential_ids():
    """Deterministic id factory: 00000000-...-000000000001, ...002 and so on."""
    counter = itertools.count(1)
    return lambda: str(uuid.UUID(int=next(counter)))


@pytest.fixture
def mock_session():
    """HTTP session whose ``get`` serves ``REMOTE_BYTES``."""
    session = Mock(spec=requests.Session)
    session.get.side_effect = lambda *args, **kwargs: make_response(REMOTE_BYTES)
    return session


@pytest.fixture
def sample_catalog_data():
    """Two fonts sharing one local installer and one font fetched remotely."""
    return {
        "groups": [
            {"id": GROUP_ID, "name": "Core Fonts", "fonts": ["Arial", "Arial Black"]},
        ],
        "fonts": [
            make_font(
                "Arial",
                [cab(["arial.ttf", "arialbd.ttf"], local_path="fonts/arial32.exe")],
                font_id=FONT_A_ID,
            ),
            make_font(
                "Arial Black",
                [cab(["ariblk.ttf"], local_path="./fonts/arial32.exe")],
                font_id=FONT_B_ID,
            ),
            make_font(
                "Tahoma",
                [cab(["tahoma.ttf"], url="https://example.org/tahoma32.cab")],
                font_id=FONT_C_ID,
            ),
        ],
    }


@pytest.fixture
def sample_catalog(sample_catalog_data):
    return SourceCatalog.model_validate(sample_catalog_data)


@pytest.fixture
def catalog_file(catalog_dir, sample_catalog_data):
    """The sample catalog written as ``fonts.json`` beside its font files."""
    path = catalog_dir / "fonts.json"
    path.write_text(json.dumps(sample_catalog_data, indent=4), encoding="utf-8")
    return path


@pytest.fixture
def build_config(catalog_file):
    return BuildConfig(
        version="1.2.3",
        url_prefix="https://cdn.example.com/fonts/",
        catalog_path=catalog_file,
        output_dir=catalog_file.parent / "dist",
        show_progress=False,
    )


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers."""
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
