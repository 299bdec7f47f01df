"""Tag aggregation over notes and blog posts.

Every helper lowercases tags, so ``Rust`` and ``rust`` count as one tag.
Callers apply the publish/draft filter first.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable


def _tags_of(item: object) -> Iterable[str]:
    data = getattr(item, "data", None)
    if data is not None and hasattr(data, "tags"):
        return data.tags
    return getattr(item, "tags", ())


def get_all_tags(items: Iterable[object]) -> list[str]:
    """Flattened, lowercased tags of *items* in encounter order (with repeats)."""
    return [str(tag).lower() for item in items for tag in _tags_of(item)]


def get_unique_tags(items: Iterable[object]) -> set[str]:
    return set(get_all_tags(items))


def get_unique_tags_with_count(items: Iterable[object]) -> list[tuple[str, int]]:
    """``(tag, count)`` pairs, most used first; ties keep encounter order."""
    counts = Counter(get_all_tags(items))
    return sorted(counts.items(), key=lambda pair: pair[1], reverse=True)
