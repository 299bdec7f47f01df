"""``[[WikiLink]]`` resolution for rendered documents.

Supports ``[[Target]]``, ``[[Target|Alias]]``, ``[[Target#Heading]]``,
``[[#Heading]]`` and embeds such as ``![[diagram.png]]``.  Targets are looked
up in the :class:`~vaultsite.permalinks.PermalinkTable`; unresolved targets
still get a ``/vault/<slug>`` href and the ``new`` CSS class.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from xml.etree import ElementTree as etree

from markdown import Markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor
from markdown.util import AtomicString

from vaultsite.permalinks import ROUTE_PREFIX, PermalinkTable
from vaultsite.slugs import normalize_vault_slug, slugify_segment

WIKILINK_PATTERN = r"(!)?\[\[([^\]|#]*)(?:#([^\]|]*))?(?:\|([^\]]*))?\]\]"
_WIKILINK_RE = re.compile(WIKILINK_PATTERN)
_IMAGE_RE = re.compile(r"\.(png|jpe?g|gif|webp|svg)$", re.IGNORECASE)


@dataclass(frozen=True)
class WikiLink:
    target: str
    heading: str | None = None
    alias: str | None = None
    embed: bool = False

    @property
    def label(self) -> str:
        if self.alias:
            return self.alias
        if self.target and self.heading:
            return f"{self.target} > {self.heading}"
        return self.target or self.heading or ""


@dataclass(frozen=True)
class ResolvedLink:
    href: str
    exists: bool


def _link_from_match(m: re.Match[str]) -> WikiLink:
    return WikiLink(
        target=m.group(2).strip(),
        heading=(m.group(3) or "").strip() or None,
        alias=(m.group(4) or "").strip() or None,
        embed=m.group(1) is not None,
    )


def parse_wikilinks(text: str) -> list[str]:
    """Return the targets of all wiki links and embeds in *text*.

    Targets are de-duplicated in order of first appearance; same-page
    ``[[#Heading]]`` links have no target and are left out.
    """
    seen: dict[str, None] = {}
    for m in _WIKILINK_RE.finditer(text):
        target = _link_from_match(m).target
        if target:
            seen.setdefault(target, None)
    return list(seen)


def resolve_wikilink(link: WikiLink, permalinks: PermalinkTable) -> ResolvedLink:
    fragment = f"#{slugify_segment(link.heading)}" if link.heading else ""
    if not link.target:
        return ResolvedLink(href=fragment or "#", exists=True)
    route = permalinks.resolve(link.target)
    if route is None:
        return ResolvedLink(href=f"{ROUTE_PREFIX}/{normalize_vault_slug(link.target)}{fragment}", exists=False)
    return ResolvedLink(href=route + fragment, exists=True)


class WikiLinkInlineProcessor(InlineProcessor):
    def __init__(self, pattern: str, md: Markdown, permalinks: PermalinkTable) -> None:
        super().__init__(pattern, md)
        self.permalinks = permalinks

    def handleMatch(self, m: re.Match[str], data: str):  # noqa: N802
        link = _link_from_match(m)
        if not link.target and not link.heading:
            return None, None, None

        resolved = resolve_wikilink(link, self.permalinks)
        if link.embed and _IMAGE_RE.search(link.target):
            el = etree.Element("img")
            el.set("src", resolved.href)
            el.set("alt", link.alias or link.target)
            return el, m.start(0), m.end(0)

        el = etree.Element("a")
        el.set("href", resolved.href)
        el.set("class", "internal" if resolved.exists else "internal new")
        el.text = AtomicString(link.label)
        return el, m.start(0), m.end(0)


class WikiLinkExtension(Extension):
    def __init__(self, **kwargs) -> None:
        self.config = {"permalinks": [PermalinkTable(), "PermalinkTable used to resolve targets"]}
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:  # noqa: N802
        processor = WikiLinkInlineProcessor(WIKILINK_PATTERN, md, self.getConfig("permalinks"))
        # Ahead of the standard link/image patterns (priority 160 and below)
        md.inlinePatterns.register(processor, "vault_wikilink", 175)
