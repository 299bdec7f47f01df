"""Blog collection: draft filtering, date ordering, year grouping and pagination."""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from vaultsite.parser import parse_frontmatter
from vaultsite.tags import get_unique_tags_with_count

logger = logging.getLogger(__name__)


def _as_date(value: Any) -> dt.date | None:
    if value is None or value == "":
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    try:
        return dt.date.fromisoformat(str(value)[:10])
    except ValueError:
        logger.warning("Ignoring unparseable date %r", value)
        return None


@dataclass(frozen=True)
class BlogPost:
    id: str
    title: str
    publish_date: dt.date | None = None
    updated_date: dt.date | None = None
    draft: bool = False
    tags: tuple[str, ...] = ()
    body: str = ""
    description: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def date(self) -> dt.date | None:
        return self.updated_date or self.publish_date

    @classmethod
    def from_frontmatter(cls, post_id: str, meta: dict[str, Any], body: str) -> "BlogPost":
        tags = meta.get("tags") or []
        if isinstance(tags, str):
            tags = [t.strip() for t in tags.split(",") if t.strip()]
        known = {"title", "publishDate", "updatedDate", "draft", "tags", "description"}
        return cls(
            id=post_id,
            title=str(meta.get("title") or Path(post_id).stem),
            publish_date=_as_date(meta.get("publishDate")),
            updated_date=_as_date(meta.get("updatedDate")),
            draft=meta.get("draft") is True,
            tags=tuple(str(t) for t in tags),
            body=body,
            description=str(meta.get("description") or ""),
            extra={k: v for k, v in meta.items() if k not in known},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "publishDate": self.publish_date.isoformat() if self.publish_date else None,
            "updatedDate": self.updated_date.isoformat() if self.updated_date else None,
            "draft": self.draft,
            "tags": list(self.tags),
        }


def load_posts(blog_dir: Path) -> list[BlogPost]:
    blog_dir = Path(blog_dir)
    if not blog_dir.is_dir():
        return []
    posts: list[BlogPost] = []
    for path in sorted(p for pattern in ("**/*.md", "**/*.mdx") for p in blog_dir.glob(pattern)):
        try:
            meta, body = parse_frontmatter(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping unreadable post %s: %s", path, exc)
            continue
        posts.append(BlogPost.from_frontmatter(path.relative_to(blog_dir).as_posix(), meta, body))
    return posts


def get_blog_collection(posts: list[BlogPost], production: bool) -> list[BlogPost]:
    """Drafts are hidden in production builds only."""
    return [p for p in posts if not (production and p.draft)]


def sort_by_date(posts: list[BlogPost]) -> list[BlogPost]:
    """Newest first by ``updated_date``, falling back to ``publish_date``."""
    return sorted(posts, key=lambda p: p.date or dt.date.min, reverse=True)


def group_by_year(posts: list[BlogPost]) -> list[tuple[int, list[BlogPost]]]:
    """``[(year, posts)]`` newest year first; undated posts are left out."""
    groups: dict[int, list[BlogPost]] = {}
    for post in posts:
        if post.date is not None:
            groups.setdefault(post.date.year, []).append(post)
    return sorted(groups.items(), key=lambda item: item[0], reverse=True)


def paginate(posts: list[BlogPost], page_size: int) -> list[list[BlogPost]]:
    """Split *posts* into pages of *page_size*; an empty list has no pages."""
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")
    return [posts[i : i + page_size] for i in range(0, len(posts), page_size)]


class Blog:
    """The blog collection of one content root, filtered and sorted once on :meth:`build`."""

    def __init__(self, blog_dir: Path, *, production: bool = False) -> None:
        self.blog_dir = Path(blog_dir)
        self.production = production
        self.posts: list[BlogPost] = []

    def build(self) -> "Blog":
        self.posts = sort_by_date(get_blog_collection(load_posts(self.blog_dir), self.production))
        logger.info("Built blog %s: %d posts", self.blog_dir, len(self.posts))
        return self

    def pages(self, page_size: int) -> list[list[BlogPost]]:
        return paginate(self.posts, page_size)

    def by_year(self) -> list[tuple[int, list[BlogPost]]]:
        return group_by_year(self.posts)

    def tags_with_count(self) -> list[tuple[str, int]]:
        return get_unique_tags_with_count(self.posts)
