"""Vault navigation tree and its flattened view.

Entries are placed in a trie keyed by raw path segments, then converted into
sorted :class:`VaultNode` lists.  A folder that has an ``index``/``README``
note becomes a single node carrying both the note (``entry``/``slug``) and the
folder's other documents (``children``).
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from vaultsite.collection import tree_path
from vaultsite.names import OriginalNameIndex
from vaultsite.note import DEFAULT_ORDER, NoteEntry
from vaultsite.slugs import placeholder_title, slugify_segment

logger = logging.getLogger(__name__)


class NodeKind(enum.Enum):
    CONTAINER = "container"
    DOCUMENT = "document"
    FOLDER_NOTE = "folder_note"


@dataclass
class VaultNode:
    """One entry of the navigation tree."""

    title: str
    slug: str | None = None
    children: list["VaultNode"] = field(default_factory=list)
    order: int | float = DEFAULT_ORDER
    entry: NoteEntry | None = field(default=None, repr=False, compare=False)
    # Presentation state, never set while building
    active: bool = False
    is_open: bool = False

    @property
    def is_folder(self) -> bool:
        return len(self.children) > 0

    @property
    def kind(self) -> NodeKind:
        if self.entry is None:
            return NodeKind.CONTAINER
        return NodeKind.FOLDER_NOTE if self.children else NodeKind.DOCUMENT

    def walk(self) -> Iterator["VaultNode"]:
        """Yield this node and its descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "slug": self.slug,
            "order": self.order,
            "kind": self.kind.value,
            "children": [c.to_dict() for c in self.children],
        }


@dataclass(frozen=True)
class FlatItem:
    title: str
    slug: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "slug": self.slug}


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


@dataclass
class _TrieNode:
    title: str
    order: int | float = DEFAULT_ORDER
    entry: NoteEntry | None = None
    children: dict[str, "_TrieNode"] = field(default_factory=dict)


def _sort_key(node: VaultNode) -> tuple[int | float, int, str]:
    return (node.order, 0 if node.is_folder else 1, node.title.lower())


def _convert(children: dict[str, _TrieNode]) -> list[VaultNode]:
    nodes = [
        VaultNode(
            title=trie.title,
            slug=trie.entry.slug if trie.entry is not None else None,
            children=_convert(trie.children),
            order=trie.order,
            entry=trie.entry,
        )
        for trie in children.values()
    ]
    return sorted(nodes, key=_sort_key)


def build_vault_tree(
    entries: Iterable[NoteEntry],
    names: OriginalNameIndex | None = None,
) -> list[VaultNode]:
    """Build the sorted navigation tree for already-enriched *entries*.

    Siblings sort by ``order`` (999 when unset), then folders before leaves,
    then case-insensitive title.
    """
    root = _TrieNode(title="")

    for entry in entries:
        current = root
        normalized: list[str] = []
        for part in tree_path(entry.id):
            normalized.append(slugify_segment(part))
            child = current.children.get(part)
            if child is None:
                key = "/".join(normalized)
                original = names.get(key) if names is not None else None
                child = _TrieNode(title=original or placeholder_title(part))
                current.children[part] = child
            current = child

        if current is root:
            # A vault-root index/README has no folder to attach to
            logger.warning("Vault root note %s has no tree position; skipped", entry.id)
            continue
        if current.entry is not None:
            logger.warning("%s replaces %s at the same tree position", entry.id, current.entry.id)
        current.entry = entry
        title = entry.title or entry.data.title
        if title:
            current.title = title
        if entry.data.order is not None:
            current.order = entry.data.order

    return _convert(root.children)


# ---------------------------------------------------------------------------
# Flat list
# ---------------------------------------------------------------------------


def get_vault_flat_list(tree: Iterable[VaultNode]) -> list[FlatItem]:
    """Pre-order list of every node that has its own document."""
    return [
        FlatItem(title=node.title, slug=node.slug)
        for top in tree
        for node in top.walk()
        if node.slug
    ]


def find_node(tree: Iterable[VaultNode], slug: str) -> VaultNode | None:
    for top in tree:
        for node in top.walk():
            if node.slug == slug:
                return node
    return None
