"""
Catalog Linter
==============

Checks a source catalog for the problems that would make a build fail or
produce a confusing manifest: reused or missing ids, duplicate or badly sized
names, unsorted lists, dangling group members and unreachable dependencies.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TypeVar
from urllib.parse import urlsplit

import requests

from winefonts.core.exceptions import DownloadFailedError
from winefonts.core.models import SourceCatalog

from .formatter import source_sort_key

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 50
MIN_NAME_LENGTH = 3

T = TypeVar("T")


class LintCode(Enum):
    """Kinds of lint findings."""

    REUSED_UUID = "reused-uuid"
    MISSING_UUID = "missing-uuid"
    DUPLICATED_NAME = "duplicated-name"
    NAME_TOO_LONG = "name-too-long"
    NAME_TOO_SHORT = "name-too-short"
    UNSORTED_LIST = "unsorted-list"
    GROUP_EMPTY = "group-empty"
    GROUP_DUPLICATE_FONT = "group-duplicate-font"
    GROUP_UNKNOWN_FONT = "group-unknown-font"
    FONT_EMPTY = "font-empty"
    MISSING_DEPENDENCY = "missing-dependency"
    LOCAL_RESOURCE_MISSING = "local-resource-missing"
    EXTERNAL_RESOURCE_NOT_HTTPS = "external-resource-not-https"
    EXTERNAL_RESOURCE_ERROR = "external-resource-error"


@dataclass(frozen=True)
class LintIssue:
    """A single lint finding."""

    code: LintCode
    context: str
    message: str

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.context}: {self.message}"


def font_context(name: str) -> str:
    return f"fonts -> {name}"


def group_context(name: str) -> str:
    return f"groups -> {name}"


def is_sorted(items: Sequence[T], key: Callable[[T], object]) -> bool:
    return all(key(a) <= key(b) for a, b in zip(items, items[1:]))


class CatalogLinter:
    """
    Collects lint issues for a catalog without modifying it.

    Args:
        base_path: Directory local dependency paths are relative to
        check_remote: Issue a GET for every external resource
        session: HTTP session used for remote checks
        timeout_seconds: Timeout for remote checks
    """

    def __init__(
        self,
        base_path: Path,
        check_remote: bool = True,
        session: requests.Session | None = None,
        timeout_seconds: int = 30,
    ):
        self.base_path = Path(base_path)
        self.check_remote = check_remote
        self.session = session
        self._owns_session = session is None
        self.timeout_seconds = timeout_seconds
        self.issues: list[LintIssue] = []
        self._uuids: set[str] = set()

    def lint(self, catalog: SourceCatalog) -> list[LintIssue]:
        self.issues = []
        self._uuids = set()

        self._lint_groups(catalog)
        self._lint_fonts(catalog)
        self._lint_dependencies(catalog)

        logger.debug(f"Lint finished with {len(self.issues)} issues")
        return self.issues

    def _add(self, code: LintCode, context: str, message: str) -> None:
        self.issues.append(LintIssue(code, context, message))

    def _check_name(self, name: str, context: str) -> None:
        if len(name) > MAX_NAME_LENGTH:
            self._add(LintCode.NAME_TOO_LONG, context, f"The name {name!r} is too long")
        elif len(name) < MIN_NAME_LENGTH:
            self._add(LintCode.NAME_TOO_SHORT, context, f"The name {name!r} is too short")

    def _check_uuid(self, value: str, is_placeholder: bool, context: str) -> None:
        if is_placeholder:
            self._add(LintCode.MISSING_UUID, context, "Missing UUID")
        elif value in self._uuids:
            self._add(LintCode.REUSED_UUID, context, f"The UUID {value} has been reused")
        else:
            self._uuids.add(value)

    def _lint_groups(self, catalog: SourceCatalog) -> None:
        if not is_sorted(catalog.groups, key=lambda group: group.name):
            self._add(LintCode.UNSORTED_LIST, "groups", "The list of groups is not sorted")

        font_names = {font.name for font in catalog.fonts}
        group_names: set[str] = set()

        for group in catalog.groups:
            context = group_context(group.name)

            if group.name in group_names:
                self._add(LintCode.DUPLICATED_NAME, context, f"The name {group.name!r} is reused")
            group_names.add(group.name)

            self._check_name(group.name, context)

            if not group.fonts:
                self._add(LintCode.GROUP_EMPTY, context, "The group has no fonts")

            self._check_uuid(group.id, group.has_placeholder_id, context)

            members: set[str] = set()
            for font_name in group.fonts:
                if font_name in members:
                    self._add(
                        LintCode.GROUP_DUPLICATE_FONT,
                        context,
                        f"The font {font_name!r} is listed more than once",
                    )
                members.add(font_name)

                if font_name not in font_names:
                    self._add(
                        LintCode.GROUP_UNKNOWN_FONT,
                        context,
                        f"The font {font_name!r} doesn't exist",
                    )

            if not is_sorted(group.fonts, key=lambda name: name):
                self._add(LintCode.UNSORTED_LIST, context, "The group's fonts are not sorted")

    def _lint_fonts(self, catalog: SourceCatalog) -> None:
        if not is_sorted(catalog.fonts, key=lambda font: font.name):
            self._add(LintCode.UNSORTED_LIST, "fonts", "The list of fonts is not sorted")

        names: set[str] = set()

        for font in catalog.fonts:
            context = font_context(font.name)

            if font.name in names:
                self._add(LintCode.DUPLICATED_NAME, context, f"The name {font.name!r} is reused")
            if font.short_name != font.name and font.short_name in names:
                self._add(
                    LintCode.DUPLICATED_NAME,
                    context,
                    f"The short name {font.short_name!r} is reused",
                )

            self._check_name(font.name, context)
            self._check_name(font.short_name, context)
            self._check_name(font.publisher, context)
            self._check_uuid(font.id, font.has_placeholder_id, context)

            if not font.installations:
                self._add(LintCode.FONT_EMPTY, context, "There are no installations")
            elif not is_sorted(font.installations, key=source_sort_key):
                self._add(LintCode.UNSORTED_LIST, context, "The installations are not sorted")

            if not is_sorted(font.categories, key=lambda category: category.value):
                self._add(LintCode.UNSORTED_LIST, context, "The categories are not sorted")

            for installation in font.installations:
                files = getattr(installation, "files", None)
                if files is not None and not is_sorted(files, key=lambda name: name):
                    self._add(
                        LintCode.UNSORTED_LIST,
                        context,
                        f"The files of the {installation.type} installation are not sorted",
                    )
                if not installation.has_dependency:
                    self._add(
                        LintCode.MISSING_DEPENDENCY,
                        context,
                        f"The {installation.type} installation has no _localPath or _url",
                    )

            names.add(font.name)
            names.add(font.short_name)

    def _lint_dependencies(self, catalog: SourceCatalog) -> None:
        checked_urls: set[str] = set()

        for font in catalog.fonts:
            context = font_context(font.name)
            for installation in font.installations:
                if installation.local_path is not None:
                    path = self.base_path / installation.local_path
                    if not path.is_file():
                        self._add(
                            LintCode.LOCAL_RESOURCE_MISSING,
                            context,
                            f"The local resource doesn't exist at {path}",
                        )
                elif installation.url is not None:
                    url = installation.url
                    if urlsplit(url).scheme.lower() != "https":
                        self._add(
                            LintCode.EXTERNAL_RESOURCE_NOT_HTTPS,
                            context,
                            f"The external resource isn't https at {url}",
                        )
                    if self.check_remote and url not in checked_urls:
                        checked_urls.add(url)
                        self._check_remote(url, context)

    def _check_remote(self, url: str, context: str) -> None:
        if self.session is None:
            self.session = requests.Session()

        try:
            response = self.session.get(url, stream=True, timeout=self.timeout_seconds)
        except requests.RequestException as e:
            logger.error(f"Failed to get external resource: {e}")
            raise DownloadFailedError(url, str(e)) from e

        try:
            if not response.ok:
                self._add(
                    LintCode.EXTERNAL_RESOURCE_ERROR,
                    context,
                    f"Failed to download the external resource at {url} "
                    f"with status code {response.status_code}",
                )
        finally:
            response.close()

    def close(self):
        """Release the HTTP session if the linter opened it."""
        if self._owns_session and self.session is not None:
            self.session.close()
            self.session = None


def lint_catalog(
    catalog: SourceCatalog,
    base_path: Path,
    check_remote: bool = True,
    session: requests.Session | None = None,
) -> list[LintIssue]:
    """Return every lint issue found in ``catalog``."""
    linter = CatalogLinter(base_path, check_remote=check_remote, session=session)
    try:
        return linter.lint(catalog)
    finally:
        linter.close()
