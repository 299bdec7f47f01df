"""Slug and display-title rules shared by every part of the vault pipeline.

Permalinks, entry slugs, Original-Name Index keys and the link normalizer all
import their segment rules from here.  The full rule and the reduced link rule
are composed from the same step helpers so they cannot drift apart.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vaultsite.names import OriginalNameIndex

# Trailing markdown extension
_MD_EXT_RE = re.compile(r"\.(md|mdx)$")
_BRACKETS_RE = re.compile(r"[&()\[\]{}]")
_PUNCT_RE = re.compile(r"[,;:!?@#$%^*+=|\\/<>\"'`~]")
_WHITESPACE_RE = re.compile(r"\s+")
_MULTI_DASH_RE = re.compile(r"--+")
_EDGE_DASH_RE = re.compile(r"^-+|-+$")
# Title word separators
_WORD_SPLIT_RE = re.compile(r"[-_\s]+")
_PLAIN_WORD_RE = re.compile(r"^[a-z0-9]+$")


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


def strip_markdown_ext(name: str) -> str:
    """Remove a trailing ``.md`` / ``.mdx`` extension, if any."""
    return _MD_EXT_RE.sub("", name)


def has_markdown_ext(name: str) -> bool:
    return _MD_EXT_RE.search(name) is not None


def _dash_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub("-", text)


def _collapse_dashes(text: str) -> str:
    return _MULTI_DASH_RE.sub("-", text)


# ---------------------------------------------------------------------------
# Segment rules
# ---------------------------------------------------------------------------


def slugify_segment(segment: str) -> str:
    """Return the URL-safe form of one path segment.

    Lowercase, drop brackets and punctuation, turn whitespace runs into a
    dash, collapse repeated dashes, trim dashes from both ends.
    """
    text = segment.lower()
    text = _BRACKETS_RE.sub("", text)
    text = _PUNCT_RE.sub("", text)
    text = _dash_whitespace(text)
    text = _collapse_dashes(text)
    return _EDGE_DASH_RE.sub("", text)


def reduce_segment(segment: str) -> str:
    """Reduced rule used for hand-written links: no punctuation stripping."""
    return _collapse_dashes(_dash_whitespace(segment.lower()))


def normalize_vault_slug(path_id: str) -> str:
    """Turn a vault-relative file path into its canonical slug.

    >>> normalize_vault_slug("Projects/My Note (draft).md")
    'projects/my-note-draft'
    """
    return "/".join(slugify_segment(part) for part in strip_markdown_ext(path_id).split("/"))


# ---------------------------------------------------------------------------
# Titles
# ---------------------------------------------------------------------------


def format_vault_title(segment: str, original: str | None = None) -> str:
    """Return a human display title for a filename-derived *segment*.

    An *original* name (as cased on disk) always wins.  Otherwise words made
    only of lowercase letters and digits are capitalised and every other word
    (``iPad``, ``API``, ``v1.2``) is kept as written.
    """
    if original:
        return original
    name = strip_markdown_ext(segment)
    words = [w for w in _WORD_SPLIT_RE.split(name) if w]
    return " ".join(w[0].upper() + w[1:] if _PLAIN_WORD_RE.match(w) else w for w in words)


def placeholder_title(segment: str) -> str:
    """Light transform used for tree nodes before entry data arrives."""
    return segment.replace("_", " ").replace("-", " ")


def resolve_title(names: "OriginalNameIndex | None", normalized_path: str, segment: str) -> str:
    """Look *normalized_path* up in *names*, falling back to the heuristic."""
    original = names.get(normalized_path) if names is not None else None
    return format_vault_title(segment, original)
