"""Reading and writing source catalogs."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from winefonts.core.exceptions import CatalogNotFoundError, InvalidCatalogError
from winefonts.core.models import SourceCatalog

logger = logging.getLogger(__name__)


def load_catalog(path: str | Path) -> SourceCatalog:
    """Load and validate a source catalog (``fonts.json``)."""
    path = Path(path)

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise CatalogNotFoundError(str(path)) from None
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidCatalogError(str(path), str(e)) from e

    try:
        catalog = SourceCatalog.model_validate(data)
    except ValidationError as e:
        raise InvalidCatalogError(str(path), str(e)) from e

    logger.debug(f"Loaded {len(catalog.fonts)} fonts and {len(catalog.groups)} groups from {path}")
    return catalog


def save_catalog(catalog: SourceCatalog, path: str | Path) -> None:
    """Write a source catalog back as 4-space indented JSON."""
    path = Path(path)
    with path.open("w", encoding="utf-8") as f:
        json.dump(catalog.to_json_dict(), f, indent=4, ensure_ascii=False)
        f.write("\n")
    logger.info(f"Wrote catalog to {path}")
