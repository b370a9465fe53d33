"""Source catalog loading, formatting and linting."""

from .formatter import FormatResult, format_catalog, source_sort_key
from .linter import CatalogLinter, LintCode, LintIssue, lint_catalog
from .loader import load_catalog, save_catalog

__all__ = [
    "CatalogLinter",
    "FormatResult",
    "LintCode",
    "LintIssue",
    "format_catalog",
    "lint_catalog",
    "load_catalog",
    "save_catalog",
    "source_sort_key",
]
