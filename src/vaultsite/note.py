"""Core note entry dataclasses."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from vaultsite.slugs import normalize_vault_slug

DEFAULT_ORDER = 999

_KNOWN_KEYS = {"title", "order", "tags", "publish"}


def _as_order(value: Any) -> int | float | None:
    # YAML booleans are ints in Python; NaN cannot be sorted
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


@dataclass(frozen=True)
class NoteData:
    """Frontmatter payload of a note."""

    title: str | None = None
    order: int | float | None = None
    tags: tuple[str, ...] = ()
    publish: bool = True
    #: Every other frontmatter key, untouched
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_frontmatter(cls, meta: dict[str, Any]) -> "NoteData":
        title = meta.get("title")
        tags = meta.get("tags") or []
        if isinstance(tags, str):
            tags = [t.strip() for t in tags.split(",") if t.strip()]
        return cls(
            title=str(title) if title not in (None, "") else None,
            order=_as_order(meta.get("order")),
            tags=tuple(str(t) for t in tags if t is not None),
            publish=meta.get("publish") is not False,
            extra={k: v for k, v in meta.items() if k not in _KNOWN_KEYS},
        )


@dataclass(frozen=True)
class NoteEntry:
    """A single markdown note in the vault, keyed by its vault-relative path."""

    id: str
    data: NoteData = field(default_factory=NoteData)
    body: str = ""
    #: Resolved display title, filled in by collection enrichment
    title: str = ""

    @property
    def slug(self) -> str:
        """Canonical URL slug derived from :attr:`id`."""
        return normalize_vault_slug(self.id)

    @property
    def filename(self) -> str:
        return self.id.rsplit("/", 1)[-1]

    @property
    def order(self) -> int | float:
        return self.data.order if self.data.order is not None else DEFAULT_ORDER

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "slug": self.slug,
            "title": self.title or self.data.title,
            "order": self.order,
            "tags": list(self.data.tags),
            "publish": self.data.publish,
        }
