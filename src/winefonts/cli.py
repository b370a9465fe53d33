"""
Command Line Interface
======================

Commands to format, lint, build and publish the font catalog.
"""

import json
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from winefonts.catalog import format_catalog, lint_catalog, load_catalog, save_catalog
from winefonts.core.config import BuildConfig, StorageConfig
from winefonts.core.exceptions import CatalogError
from winefonts.manifest import build_manifest
from winefonts.storage import S3Publisher

logger = logging.getLogger(__name__)

NEW_IDS_FILENAME = "newUUIDs.json"


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def load_build_config(config_path: Path | None, **overrides) -> BuildConfig:
    """Environment (or YAML) settings with command line overrides applied."""
    config = BuildConfig.from_env_and_yaml(yaml_path=config_path)
    overrides = {name: value for name, value in overrides.items() if value is not None}
    if not overrides:
        return config
    return type(config).model_validate({**config.model_dump(), **overrides})


def report_issues(issues) -> None:
    for issue in issues:
        logger.error(str(issue))
    logger.error(f"Found {len(issues)} lint issues")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose):
    """Font catalog manifest tools."""
    configure_logging(verbose)


@cli.command()
@click.option(
    "--catalog",
    "-i",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Source catalog (default: WINEFONTS_CATALOG_PATH or fonts.json)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    help="Output directory (default: WINEFONTS_OUTPUT_DIR or dist)",
)
@click.option("--version", "version", type=str, help="Manifest version (default: VERSION)")
@click.option("--url-prefix", type=str, help="Public URL prefix (default: URL_PREFIX)")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to build configuration YAML file",
)
@click.option("--check-remote", is_flag=True, help="Check external resources while linting")
@click.option("--skip-lint", is_flag=True, help="Build without linting the catalog first")
def build(catalog, output, version, url_prefix, config, check_remote, skip_lint):
    """Compile the catalog into a versioned manifest directory."""
    try:
        build_config = load_build_config(
            config,
            catalog_path=catalog,
            output_dir=output,
            version=version,
            url_prefix=url_prefix,
        )
        source = load_catalog(build_config.catalog_path)

        if not skip_lint:
            issues = lint_catalog(
                source, build_config.catalog_root, check_remote=check_remote
            )
            if issues:
                report_issues(issues)
                logger.error("Refusing to build; fix the issues or pass --skip-lint")
                sys.exit(1)

        result = build_manifest(build_config, catalog=source)
        logger.info(
            f"Built version {result.manifest.version} with "
            f"{len(result.manifest.downloads)} downloads in {result.output_dir}"
        )
    except CatalogError as e:
        logger.exception(f"Build failed: {e}")
        sys.exit(1)
    except ValidationError as e:
        logger.exception(f"Invalid configuration: {e}")
        sys.exit(1)


@cli.command(name="format")
@click.option(
    "--catalog",
    "-i",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=Path("fonts.json"),
    show_default=True,
    help="Source catalog to format in place",
)
def format_command(catalog):
    """Sort the catalog and fill in placeholder ids."""
    try:
        run_format(catalog)
    except CatalogError as e:
        logger.exception(f"Format failed: {e}")
        sys.exit(1)


def run_format(catalog_path: Path) -> list[str]:
    result = format_catalog(load_catalog(catalog_path))
    save_catalog(result.catalog, catalog_path)

    if result.changed_ids:
        new_ids_path = catalog_path.parent / NEW_IDS_FILENAME
        new_ids_path.write_text(json.dumps(result.new_ids, indent=4) + "\n", encoding="utf-8")
        logger.info(f"Generated {len(result.new_ids)} ids, listed in {new_ids_path}")

    return result.new_ids


@cli.command()
@click.option(
    "--catalog",
    "-i",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=Path("fonts.json"),
    show_default=True,
    help="Source catalog to lint",
)
@click.option("--fix", is_flag=True, help="Format the catalog before linting")
@click.option("--check-remote", is_flag=True, help="Issue a GET for every external resource")
def lint(catalog, fix, check_remote):
    """Report problems in the catalog."""
    try:
        if fix:
            run_format(catalog)

        issues = lint_catalog(load_catalog(catalog), catalog.parent, check_remote=check_remote)
        if issues:
            report_issues(issues)
            sys.exit(1)
        logger.info("No lint issues found")
    except CatalogError as e:
        logger.exception(f"Lint failed: {e}")
        sys.exit(1)


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Built output directory (default: WINEFONTS_OUTPUT_DIR or dist)",
)
@click.option("--version", "version", type=str, help="Published version (default: VERSION)")
def publish(output, version):
    """Upload a built output directory to S3-compatible storage."""
    try:
        build_config = load_build_config(None, output_dir=output, version=version)
        storage_config = StorageConfig.from_env_and_yaml()
        logger.info(f"Publishing with {storage_config!r}")

        publisher = S3Publisher(storage_config)
        info = publisher.publish(
            build_config.output_dir, build_config.version, build_config.manifest_filename
        )
        logger.info(f"Published {info.version} at {info.download_url}")
    except CatalogError as e:
        logger.exception(f"Publish failed: {e}")
        sys.exit(1)
    except ValidationError as e:
        logger.exception(f"Invalid configuration: {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
