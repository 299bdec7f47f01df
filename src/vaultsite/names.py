"""Original-Name Index: normalized vault path -> segment name as cased on disk.

Built by a single recursive walk of the vault root.  Titles and tree nodes
consult it so a folder called ``iPad Notes`` keeps that exact spelling instead
of whatever the title heuristic would produce from its slug.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType

from vaultsite.slugs import has_markdown_ext, slugify_segment, strip_markdown_ext

logger = logging.getLogger(__name__)


class OriginalNameIndex(Mapping[str, str]):
    """Read-only mapping of ``normalized/path`` to the original segment name."""

    def __init__(self, names: Mapping[str, str] | None = None) -> None:
        self._names: Mapping[str, str] = MappingProxyType(dict(names or {}))

    @classmethod
    def empty(cls) -> "OriginalNameIndex":
        return cls()

    def __getitem__(self, key: str) -> str:
        return self._names[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"OriginalNameIndex({len(self)} names)"


def _walk(directory: Path, prefix: str, names: dict[str, str]) -> None:
    try:
        children = sorted(directory.iterdir())
    except OSError as exc:
        logger.warning("Could not read vault directory %s: %s", directory, exc)
        return

    for child in children:
        if child.name.startswith("."):
            continue
        if child.is_symlink() and child.is_dir():
            # The note loader does not descend into linked directories either
            logger.debug("Not following symlinked directory %s", child)
            continue
        if child.is_dir():
            key = f"{prefix}{slugify_segment(child.name)}"
            names[key] = child.name
            _walk(child, f"{key}/", names)
        elif child.is_file() and has_markdown_ext(child.name):
            stem = strip_markdown_ext(child.name)
            names[f"{prefix}{slugify_segment(stem)}"] = stem


def build_original_name_index(root: Path) -> OriginalNameIndex:
    """Scan *root* once and return the index.

    A missing root or unreadable directories are logged and skipped; the
    build never fails because of them.
    """
    root = Path(root)
    names: dict[str, str] = {}
    if not root.is_dir():
        logger.warning("Vault directory %s does not exist; original names unavailable", root)
        return OriginalNameIndex(names)
    _walk(root, "", names)
    logger.debug("Indexed %d original names under %s", len(names), root)
    return OriginalNameIndex(names)


@lru_cache(maxsize=None)
def get_original_name_index(root: Path) -> OriginalNameIndex:
    """Process-wide cached index for *root*; there is no refresh hook."""
    return build_original_name_index(root)
