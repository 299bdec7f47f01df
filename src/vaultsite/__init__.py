"""Vault ingestion pipeline for a static personal site."""

from vaultsite.blog import Blog, BlogPost
from vaultsite.collection import enrich_collection
from vaultsite.index import VaultSite
from vaultsite.links import normalize_link_url
from vaultsite.names import OriginalNameIndex, build_original_name_index
from vaultsite.note import NoteData, NoteEntry
from vaultsite.permalinks import PermalinkTable, build_permalinks
from vaultsite.slugs import format_vault_title, normalize_vault_slug, slugify_segment
from vaultsite.tags import get_unique_tags, get_unique_tags_with_count
from vaultsite.tree import NodeKind, VaultNode, build_vault_tree, get_vault_flat_list
from vaultsite.wikilinks import parse_wikilinks

__all__ = [
    "Blog",
    "BlogPost",
    "NoteData",
    "NoteEntry",
    "NodeKind",
    "OriginalNameIndex",
    "PermalinkTable",
    "VaultNode",
    "VaultSite",
    "build_original_name_index",
    "build_permalinks",
    "build_vault_tree",
    "enrich_collection",
    "format_vault_title",
    "get_unique_tags",
    "get_unique_tags_with_count",
    "get_vault_flat_list",
    "normalize_link_url",
    "normalize_vault_slug",
    "parse_wikilinks",
    "slugify_segment",
]
