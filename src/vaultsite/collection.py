"""Collection enrichment: publish filter, resolved titles, slug collisions."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import replace

from vaultsite.errors import DuplicateSlugError
from vaultsite.names import OriginalNameIndex
from vaultsite.note import NoteEntry
from vaultsite.slugs import normalize_vault_slug, resolve_title, strip_markdown_ext

logger = logging.getLogger(__name__)

# index.md, README.mdx, ... supply content for their containing folder
FOLDER_NOTE_RE = re.compile(r"^(index|README)\.(md|mdx)$", re.IGNORECASE)


def is_folder_note(filename: str) -> bool:
    return FOLDER_NOTE_RE.match(filename) is not None


def tree_path(entry_id: str) -> list[str]:
    """Raw segments of the tree node *entry_id* contributes to.

    ``a/b.md`` -> ``["a", "b"]``; ``a/index.md`` -> ``["a"]``.
    """
    parts = entry_id.split("/")
    if is_folder_note(parts[-1]):
        return parts[:-1]
    return [*parts[:-1], strip_markdown_ext(parts[-1])]


def filter_published(entries: Iterable[NoteEntry], production: bool) -> list[NoteEntry]:
    """Drop ``publish: false`` notes, but only for production builds."""
    if not production:
        return list(entries)
    return [e for e in entries if e.data.publish is not False]


def _display_title(entry: NoteEntry, names: OriginalNameIndex | None) -> str:
    if entry.data.title:
        return entry.data.title
    segments = tree_path(entry.id)
    if not segments:
        # Vault-root index.md / README.md
        return resolve_title(names, "", strip_markdown_ext(entry.filename))
    return resolve_title(names, normalize_vault_slug("/".join(segments)), segments[-1])


def check_unique_slugs(entries: Iterable[NoteEntry]) -> None:
    """Raise :class:`DuplicateSlugError` if two ids share one slug."""
    by_slug: dict[str, list[str]] = {}
    for entry in entries:
        by_slug.setdefault(entry.slug, []).append(entry.id)
    collisions = {slug: ids for slug, ids in by_slug.items() if len(ids) > 1}
    if collisions:
        raise DuplicateSlugError(collisions)


def enrich_collection(
    entries: Iterable[NoteEntry],
    names: OriginalNameIndex | None = None,
    *,
    production: bool = False,
    strict_slugs: bool = True,
) -> list[NoteEntry]:
    """Return the publish-filtered entries with their display titles resolved.

    An explicit frontmatter title wins; otherwise the Original-Name Index is
    consulted for the node the entry lands on (the enclosing folder for an
    ``index``/``README`` note), then the title heuristic.
    """
    enriched = [
        replace(entry, title=_display_title(entry, names))
        for entry in filter_published(entries, production)
    ]
    try:
        check_unique_slugs(enriched)
    except DuplicateSlugError as exc:
        if strict_slugs:
            raise
        logger.warning("%s; later entries win", exc)
    return enriched
