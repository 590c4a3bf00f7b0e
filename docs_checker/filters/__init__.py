"""File filtering for Markdown discovery.

This module provides pathspec-based gitignore filtering using
the mature pathspec library.
"""

from docs_checker.filters.pathspec_filter import (
    PathspecFilter,
    DEFAULT_IGNORE_PATTERNS,
)

__all__ = [
    "PathspecFilter",
    "DEFAULT_IGNORE_PATTERNS",
]
