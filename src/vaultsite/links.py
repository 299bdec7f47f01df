"""Link normalizer: rewrite hand-written internal links to vault slugs.

Runs over every ``<a>`` element of a parsed document (as a Python-Markdown
tree processor) so that ``[see](./Notes/My Note.md)`` ends up pointing at
``./notes/my-note``.  External links, same-page anchors and asset links are
left exactly as written; asset paths are case-sensitive on disk.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from xml.etree.ElementTree import Element

from markdown import Markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from vaultsite.errors import LinkDecodeError
from vaultsite.slugs import has_markdown_ext, reduce_segment, slugify_segment, strip_markdown_ext

logger = logging.getLogger(__name__)

_EXTERNAL_RE = re.compile(r"^(https?:|mailto:|tel:)")
_ASSET_RE = re.compile(r"\.(png|jpg|jpeg|gif|webp|svg|pdf)$", re.IGNORECASE)
_ESCAPE_RUN_RE = re.compile(r"(?:%[0-9A-Fa-f]{2})+")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
# Characters decodeURI leaves escaped
_RESERVED = frozenset(";/?:@&=+$,#")

SEGMENT_RULES: dict[str, Callable[[str], str]] = {
    "reduced": reduce_segment,
    "full": slugify_segment,
}


def decode_uri(url: str) -> str:
    """Decode percent-escapes the way a browser's ``decodeURI`` does.

    Escapes of reserved characters (``%23``, ``%2F``, ...) stay encoded.
    Raises :class:`LinkDecodeError` for malformed escapes or invalid UTF-8.
    """
    if _BAD_ESCAPE_RE.search(url):
        raise LinkDecodeError(f"malformed percent-escape in {url!r}")

    def _decode(match: re.Match[str]) -> str:
        run = match.group(0)
        try:
            text = bytes.fromhex(run.replace("%", "")).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise LinkDecodeError(f"invalid UTF-8 escape {run!r} in {url!r}") from exc
        return "".join(f"%{ord(ch):02X}" if ch in _RESERVED else ch for ch in text)

    return _ESCAPE_RUN_RE.sub(_decode, url)


def _should_skip(url: str) -> bool:
    return not url or _EXTERNAL_RE.match(url) is not None or url.startswith("#")


def normalize_link_url(url: str, rule: str = "reduced") -> str:
    """Return *url* rewritten to the vault slug form, or unchanged.

    Raises :class:`LinkDecodeError` when the URL cannot be decoded.
    """
    if _should_skip(url):
        return url

    decoded = decode_uri(url)
    path, sep, fragment = decoded.partition("#")
    if _ASSET_RE.search(path):
        return url
    if not (has_markdown_ext(path) or path.startswith("/vault/") or not path.startswith("/")):
        return url

    segment_rule = SEGMENT_RULES[rule]
    parts = [
        part if part in (".", "..") else segment_rule(part)
        for part in strip_markdown_ext(path).split("/")
    ]
    return "/".join(parts) + (sep + fragment if fragment else "")


def normalize_links(elements: list[Element], rule: str = "reduced", attr: str = "href") -> int:
    """Rewrite *attr* on each element in place; return how many changed.

    A link that fails to decode keeps its original URL and is logged.
    """
    changed = 0
    for element in elements:
        url = element.get(attr)
        if not url:
            continue
        try:
            new_url = normalize_link_url(url, rule)
        except LinkDecodeError as exc:
            logger.warning("Failed to normalize link %r: %s", url, exc)
            continue
        if new_url != url:
            element.set(attr, new_url)
            changed += 1
    return changed


# ---------------------------------------------------------------------------
# Python-Markdown integration
# ---------------------------------------------------------------------------


class NormalizeLinksTreeprocessor(Treeprocessor):
    def __init__(self, md: Markdown, rule: str) -> None:
        super().__init__(md)
        self.rule = rule

    def run(self, root: Element) -> None:
        normalize_links(list(root.iter("a")), self.rule)


class NormalizeLinksExtension(Extension):
    """Install :class:`NormalizeLinksTreeprocessor` on a Markdown instance."""

    def __init__(self, **kwargs) -> None:
        self.config = {"rule": ["reduced", "Segment rule: 'reduced' or 'full'"]}
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:  # noqa: N802
        rule = self.getConfig("rule")
        if rule not in SEGMENT_RULES:
            raise ValueError(f"unknown link rule {rule!r}")
        # Priority 5: after inline patterns (wiki links included) have run
        md.treeprocessors.register(NormalizeLinksTreeprocessor(md, rule), "vault_normalize_links", 5)
