"""VaultSite: everything the site needs from one vault directory."""

from __future__ import annotations

import logging
from pathlib import Path

from vaultsite.collection import enrich_collection, filter_published
from vaultsite.names import OriginalNameIndex, build_original_name_index
from vaultsite.note import NoteEntry
from vaultsite.parser import load_notes
from vaultsite.permalinks import ROUTE_PREFIX, PermalinkTable, build_permalinks
from vaultsite.render import MarkdownRenderer
from vaultsite.tags import get_unique_tags, get_unique_tags_with_count
from vaultsite.tree import FlatItem, VaultNode, build_vault_tree, get_vault_flat_list
from vaultsite.wikilinks import parse_wikilinks

logger = logging.getLogger(__name__)


class VaultSite:
    """Scans a vault directory and builds its names, tree, permalinks, backlinks and tags.

    The Original-Name Index is built once, on the first :meth:`build`, and
    kept for the lifetime of the object.
    """

    def __init__(
        self,
        vault_dir: Path,
        *,
        production: bool = False,
        strict_slugs: bool = True,
        link_rule: str = "reduced",
        names: OriginalNameIndex | None = None,
    ) -> None:
        self.vault_dir = Path(vault_dir)
        self.production = production
        self.strict_slugs = strict_slugs
        self.link_rule = link_rule
        self.names = names
        self.entries: list[NoteEntry] = []
        self.by_slug: dict[str, NoteEntry] = {}
        self.tree: list[VaultNode] = []
        self.permalinks = PermalinkTable()
        #: target slug -> slugs of the notes that wiki-link to it
        self.backlinks: dict[str, list[str]] = {}

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build(self) -> "VaultSite":
        """Load notes and rebuild the derived views."""
        if self.names is None:
            self.names = build_original_name_index(self.vault_dir)
        raw = load_notes(self.vault_dir)
        self.entries = enrich_collection(
            raw, self.names, production=self.production, strict_slugs=self.strict_slugs
        )
        # Later ids win when strict_slugs is off
        self.by_slug = {e.slug: e for e in self.entries}
        self.tree = build_vault_tree(self.entries, self.names)
        self.permalinks = build_permalinks(self.vault_dir)
        self._build_backlinks()
        logger.info("Built vault %s: %d notes, %d top-level nodes", self.vault_dir, len(self.entries), len(self.tree))
        return self

    def _build_backlinks(self) -> None:
        self.backlinks = {slug: [] for slug in self.by_slug}
        prefix = ROUTE_PREFIX + "/"
        for slug, entry in self.by_slug.items():
            for target in parse_wikilinks(entry.body):
                route = self.permalinks.resolve(target)
                if route is None or not route.startswith(prefix):
                    continue
                target_slug = route[len(prefix) :]
                if target_slug in self.backlinks and slug not in self.backlinks[target_slug]:
                    self.backlinks[target_slug].append(slug)

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    def flat_list(self) -> list[FlatItem]:
        return get_vault_flat_list(self.tree)

    def get(self, slug: str) -> NoteEntry | None:
        return self.by_slug.get(slug.strip("/"))

    def published_entries(self) -> list[NoteEntry]:
        return filter_published(self.entries, self.production)

    def unique_tags(self) -> set[str]:
        return get_unique_tags(self.published_entries())

    def tags_with_count(self) -> list[tuple[str, int]]:
        return get_unique_tags_with_count(self.published_entries())

    def notes_with_tag(self, tag: str) -> list[NoteEntry]:
        wanted = tag.lower()
        return [e for e in self.published_entries() if wanted in (t.lower() for t in e.data.tags)]

    def backlinks_for(self, slug: str) -> list[NoteEntry]:
        """Notes whose wiki links resolve to the note at *slug*."""
        return [self.by_slug[s] for s in self.backlinks.get(slug.strip("/"), [])]

    def renderer(self) -> MarkdownRenderer:
        return MarkdownRenderer(self.permalinks, link_rule=self.link_rule)

    def render(self, slug: str) -> str | None:
        entry = self.get(slug)
        if entry is None:
            return None
        return self.renderer().render_page(entry.title, entry.body)
