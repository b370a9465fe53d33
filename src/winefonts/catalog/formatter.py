"""
Catalog Formatting
==================

Puts a hand-edited catalog into canonical order and fills in ``<UUID>``
placeholders. Dependency references and content are never changed.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from winefonts.core.models import Installation, SourceCatalog, generate_uuid

logger = logging.getLogger(__name__)


@dataclass
class FormatResult:
    """A formatted catalog and the ids generated for placeholders."""

    catalog: SourceCatalog
    new_ids: list[str] = field(default_factory=list)

    @property
    def changed_ids(self) -> bool:
        return bool(self.new_ids)


def source_sort_key(installation: Installation) -> tuple[str, int, str]:
    """Order installations by type, then URL references before local paths."""
    if installation.url is not None:
        return (installation.type, 0, installation.url)
    if installation.local_path is not None:
        return (installation.type, 1, installation.local_path)
    return (installation.type, 2, installation.download or "")


def format_catalog(
    catalog: SourceCatalog, id_factory: Callable[[], str] | None = None
) -> FormatResult:
    """Sort every list of ``catalog`` in place and replace placeholder ids."""
    id_factory = id_factory or generate_uuid
    new_ids: list[str] = []

    for font in catalog.fonts:
        if font.has_placeholder_id:
            font.id = id_factory()
            new_ids.append(font.id)
            logger.info(f"Assigned id {font.id} to font {font.name}")

        for installation in font.installations:
            installation.sort_payload()
        font.installations.sort(key=source_sort_key)
        font.categories.sort(key=lambda category: category.value)

    catalog.fonts.sort(key=lambda font: font.name)

    for group in catalog.groups:
        if group.has_placeholder_id:
            group.id = id_factory()
            new_ids.append(group.id)
            logger.info(f"Assigned id {group.id} to group {group.name}")
        group.fonts.sort()

    catalog.groups.sort(key=lambda group: group.name)

    return FormatResult(catalog=catalog, new_ids=new_ids)
