"""Pathspec-based file filtering for Markdown discovery.

This module uses the pathspec library for proper gitignore handling,
supporting negation patterns and double-star globs.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

import pathspec

from docs_checker.errors import DocumentReadError

logger = logging.getLogger(__name__)


# Always applied, with or without a .gitignore
DEFAULT_IGNORE_PATTERNS: list[str] = [
    ".git/",
    ".hg/",
    ".svn/",
    "node_modules/",
    "venv/",
    ".venv/",
    "__pycache__/",
    ".tox/",
    ".nox/",
    ".pytest_cache/",
    ".mypy_cache/",
    "*.egg-info/",
    "site-packages/",
]


class PathspecFilter:
    """File filter combining default patterns, the root .gitignore and extra patterns."""

    def __init__(
        self,
        root: Path,
        extra_patterns: Optional[Iterable[str]] = None,
        use_gitignore: bool = True,
    ):
        """
        Initialize the filter.

        Args:
            root: Corpus root directory
            extra_patterns: Additional gitwildmatch patterns (e.g. from --exclude)
            use_gitignore: Whether to honour the root .gitignore file
        """
        self.root = root
        self._patterns: list[str] = list(DEFAULT_IGNORE_PATTERNS)
        if use_gitignore:
            self._patterns.extend(self._load_gitignore())
        if extra_patterns:
            self._patterns.extend(extra_patterns)
        self._spec = pathspec.PathSpec.from_lines("gitwildmatch", self._patterns)

    def _load_gitignore(self) -> list[str]:
        """Load root .gitignore lines; a missing file contributes nothing.

        Raises:
            DocumentReadError: The file exists but cannot be read as UTF-8
        """
        gitignore_path = self.root / ".gitignore"
        if not gitignore_path.is_file():
            return []

        try:
            with open(gitignore_path, encoding="utf-8") as f:
                lines = f.read().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentReadError(gitignore_path, e) from e

        logger.debug(f"Loaded {len(lines)} lines from {gitignore_path}")
        return lines

    def should_ignore(self, relative_path: str) -> bool:
        """Check whether a root-relative POSIX path is excluded."""
        return self._spec.match_file(relative_path)
