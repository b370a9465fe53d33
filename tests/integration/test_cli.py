"""
CLI Integration Tests
=====================

Tests the complete CLI interface: command parsing, configuration loading and
the build, format, lint and publish commands on real catalog files.
"""

import json
from unittest.mock import Mock, patch

import pytest
import requests
import yaml
from click.testing import CliRunner

from conftest import (
    ARIAL_BYTES,
    FONT_A_ID,
    REMOTE_BYTES,
    cab,
    make_font,
    make_response,
)
from main import cli
from winefonts.core.models import PLACEHOLDER_ID


@pytest.fixture
def runner():
    """Click test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, temp_dir):
    """Keep real environment settings and .env files out of the commands."""
    monkeypatch.chdir(temp_dir)
    for name in ("VERSION", "URL_PREFIX"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("WINEFONTS_SHOW_PROGRESS", "false")


@pytest.fixture
def http_session():
    """Patch the HTTP session used for remote downloads."""
    session = Mock(spec=requests.Session)
    session.headers = {}
    session.get.side_effect = lambda *args, **kwargs: make_response(REMOTE_BYTES)
    with patch("winefonts.manifest.fetcher.requests.Session", return_value=session):
        yield session


class TestCLIHelp:
    """Test command discovery."""

    def test_help(self, runner):
        """Test that every command is listed."""
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("build", "format", "lint", "publish"):
            assert command in result.output


class TestBuildCommand:
    """Test the build command."""

    def test_build(self, runner, catalog_file, http_session):
        """Test a successful build from command line options."""
        output = catalog_file.parent / "dist"

        result = runner.invoke(
            cli,
            [
                "build",
                "--catalog",
                str(catalog_file),
                "--output",
                str(output),
                "--version",
                "1.5.0",
                "--url-prefix",
                "https://cdn.example.com/",
            ],
        )

        assert result.exit_code == 0, result.output
        data = json.loads((output / "fonts.json").read_text())
        assert data["version"] == "1.5.0"
        assert len(data["downloads"]) == 2

        local = next(d for d in data["downloads"] if d["downloadURL"].startswith("https://cdn."))
        asset = output / local["downloadURL"].rsplit("/", 1)[-1]
        assert asset.read_bytes() == ARIAL_BYTES

    def test_build_from_yaml(self, runner, catalog_file, temp_dir, http_session):
        """Test that a YAML configuration file is honoured."""
        config_path = temp_dir / "build.yaml"
        config_path.write_text(
            yaml.dump(
                {
                    "version": "2.0.0",
                    "catalog_path": str(catalog_file),
                    "output_dir": str(temp_dir / "public"),
                    "show_progress": False,
                }
            )
        )

        result = runner.invoke(cli, ["build", "--config", str(config_path)])

        assert result.exit_code == 0, result.output
        data = json.loads((temp_dir / "public" / "fonts.json").read_text())
        assert data["version"] == "2.0.0"

    def test_lint_issues_block_build(self, runner, temp_dir):
        """Test that a catalog with lint issues is not built."""
        catalog = temp_dir / "fonts.json"
        catalog.write_text(
            json.dumps({"fonts": [make_font("Zz", [cab(["a.ttf"], local_path="x.exe")])]})
        )

        result = runner.invoke(cli, ["build", "--catalog", str(catalog)])

        assert result.exit_code == 1
        assert not (temp_dir / "dist").exists()

    def test_invalid_version_option(self, runner, catalog_file):
        """Test that a bad version fails cleanly."""
        result = runner.invoke(
            cli, ["build", "--catalog", str(catalog_file), "--version", "latest"]
        )

        assert result.exit_code == 1


class TestFormatCommand:
    """Test the format command."""

    def test_format_generates_ids(self, runner, temp_dir):
        """Test that placeholders are filled and listed in newUUIDs.json."""
        catalog = temp_dir / "fonts.json"
        catalog.write_text(
            json.dumps(
                {
                    "fonts": [
                        make_font("Verdana", [cab(["v.ttf"], url="https://x.org/v.cab")]),
                        make_font(
                            "Arial", [cab(["a.ttf"], url="https://x.org/a.cab")], PLACEHOLDER_ID
                        ),
                    ]
                }
            )
        )

        result = runner.invoke(cli, ["format", "--catalog", str(catalog)])

        assert result.exit_code == 0, result.output
        data = json.loads(catalog.read_text())
        assert [font["name"] for font in data["fonts"]] == ["Arial", "Verdana"]
        new_ids = json.loads((temp_dir / "newUUIDs.json").read_text())
        assert new_ids == [data["fonts"][0]["id"]]
        assert data["fonts"][1]["id"] == FONT_A_ID

    def test_format_without_new_ids(self, runner, catalog_file):
        """Test that no id list is written when nothing was generated."""
        result = runner.invoke(cli, ["format", "--catalog", str(catalog_file)])

        assert result.exit_code == 0, result.output
        assert not (catalog_file.parent / "newUUIDs.json").exists()

    def test_format_invalid_catalog(self, runner, temp_dir):
        """Test that an invalid catalog exits with status 1."""
        catalog = temp_dir / "fonts.json"
        catalog.write_text("[]")

        result = runner.invoke(cli, ["format", "--catalog", str(catalog)])

        assert result.exit_code == 1


class TestLintCommand:
    """Test the lint command."""

    def test_clean_catalog(self, runner, catalog_file):
        """Test that a clean catalog passes without remote checks."""
        result = runner.invoke(cli, ["lint", "--catalog", str(catalog_file)])

        assert result.exit_code == 0, result.output

    def test_fix_then_lint(self, runner, catalog_file, sample_catalog_data):
        """Test that --fix sorts the catalog before linting it."""
        sample_catalog_data["fonts"].reverse()
        catalog_file.write_text(json.dumps(sample_catalog_data))

        unfixed = runner.invoke(cli, ["lint", "--catalog", str(catalog_file)])
        fixed = runner.invoke(cli, ["lint", "--catalog", str(catalog_file), "--fix"])

        assert unfixed.exit_code == 1
        assert fixed.exit_code == 0, fixed.output


class TestPublishCommand:
    """Test the publish command."""

    def test_publish(self, runner, temp_dir, monkeypatch):
        """Test that publishing uploads assets and the manifest."""
        output = temp_dir / "dist"
        output.mkdir()
        (output / "fonts.json").write_text('{"version":"1.0.0","downloads":[],"fonts":[]}')
        (output / "id.exe").write_bytes(b"exe")
        for name, value in {
            "S3_ENDPOINT_URL": "https://account.r2.cloudflarestorage.com",
            "S3_ACCESS_KEY_ID": "key",
            "S3_SECRET_ACCESS_KEY": "secret",
            "S3_BUCKET_NAME": "fonts",
            "S3_BASE_URL": "https://fonts.example.com",
        }.items():
            monkeypatch.setenv(name, value)

        client = Mock()
        client.get_object.return_value = {"Body": Mock(read=Mock(return_value=b"[]"))}
        session = Mock()
        session.client.return_value = client

        with patch("winefonts.storage.publisher.boto3.Session", return_value=session):
            result = runner.invoke(
                cli, ["publish", "--output", str(output), "--version", "1.0.0"]
            )

        assert result.exit_code == 0, result.output
        keys = [call.args[2] for call in client.upload_file.call_args_list]
        assert keys[0] == "downloads/id.exe"
        assert keys[1].startswith("versions/")
        client.put_object.assert_called_once()

    def test_publish_without_storage_settings(self, runner, temp_dir, monkeypatch):
        """Test that missing storage settings exit with status 1."""
        for name in ("S3_ENDPOINT_URL", "S3_ACCESS_KEY_ID", "S3_BUCKET_NAME"):
            monkeypatch.delenv(name, raising=False)
        output = temp_dir / "dist"
        output.mkdir()

        result = runner.invoke(cli, ["publish", "--output", str(output)])

        assert result.exit_code == 1
