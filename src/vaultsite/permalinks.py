"""Permalink table: vault file path -> canonical route.

Markdown files route to ``/vault/<slug>`` using the same slug rule as the
tree builder; attachments keep their exact relative path so the
case-sensitive attachment route can find them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from vaultsite.slugs import has_markdown_ext, normalize_vault_slug, strip_markdown_ext

logger = logging.getLogger(__name__)

ROUTE_PREFIX = "/vault"
PERMALINK_SUFFIXES = frozenset({".md", ".mdx", ".jpg", ".jpeg", ".png", ".webp", ".gif", ".svg"})


def route_for(rel_path: str) -> str:
    """Canonical route of one vault-relative file path."""
    if has_markdown_ext(rel_path):
        return f"{ROUTE_PREFIX}/{normalize_vault_slug(rel_path)}"
    return f"{ROUTE_PREFIX}/{rel_path}"


class PermalinkTable(Mapping[str, str]):
    """Read-only mapping of vault-relative file path to route."""

    def __init__(self, routes: Mapping[str, str] | None = None) -> None:
        self._routes: Mapping[str, str] = MappingProxyType(dict(routes or {}))

    @classmethod
    def from_paths(cls, rel_paths: Iterable[str]) -> "PermalinkTable":
        return cls({p: route_for(p) for p in rel_paths})

    def __getitem__(self, key: str) -> str:
        return self._routes[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def resolve(self, target: str) -> str | None:
        """Resolve a wiki-link *target* to a route.

        ``target`` may be a bare file name or a trailing part of the path,
        with or without extension; matching ignores case.  When several files
        match, the one with the shortest path wins.
        """
        wanted = target.strip().strip("/").lower()
        if not wanted:
            return None
        matches = []
        for path in self._routes:
            lowered = path.lower()
            for candidate in (lowered, strip_markdown_ext(lowered)):
                if candidate == wanted or candidate.endswith("/" + wanted):
                    matches.append(path)
                    break
        if not matches:
            return None
        return self._routes[min(matches, key=lambda p: (len(p), p))]


def build_permalinks(vault_dir: Path) -> PermalinkTable:
    """Scan *vault_dir* for notes and attachments and build the table."""
    vault_dir = Path(vault_dir)
    if not vault_dir.is_dir():
        logger.warning("Vault directory %s does not exist; permalink table is empty", vault_dir)
        return PermalinkTable()
    rel_paths = sorted(
        p.relative_to(vault_dir).as_posix()
        for p in vault_dir.rglob("*")
        if p.is_file() and p.suffix in PERMALINK_SUFFIXES
        and not any(part.startswith(".") for part in p.relative_to(vault_dir).parts)
    )
    return PermalinkTable.from_paths(rel_paths)
