#!/usr/bin/env python3
"""
Main CLI for the Wine Fonts Catalog
===================================

Format, lint, build and publish the font catalog.
"""

import logging
import sys

logger = logging.getLogger(__name__)

try:
    from winefonts.cli import cli
except ImportError as e:
    logging.basicConfig(level=logging.INFO)
    logger.exception(f"Import failed: {e}")
    logger.exception("Make sure the project is installed with `pip install -e .`")
    sys.exit(1)


if __name__ == "__main__":
    cli()
