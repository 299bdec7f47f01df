"""Markdown -> HTML for vault documents."""

from __future__ import annotations

import html

import markdown as md

from vaultsite.links import NormalizeLinksExtension
from vaultsite.permalinks import PermalinkTable
from vaultsite.wikilinks import WikiLinkExtension


class MarkdownRenderer:
    def __init__(self, permalinks: PermalinkTable | None = None, *, link_rule: str = "reduced") -> None:
        self.permalinks = permalinks if permalinks is not None else PermalinkTable()
        self.link_rule = link_rule

    def _markdown(self) -> md.Markdown:
        # Markdown instances keep state between calls, so one per document
        return md.Markdown(
            extensions=[
                "fenced_code",
                "tables",
                "toc",
                WikiLinkExtension(permalinks=self.permalinks),
                NormalizeLinksExtension(rule=self.link_rule),
            ]
        )

    def render(self, text: str) -> str:
        return self._markdown().convert(text)

    def render_page(self, title: str, text: str) -> str:
        rendered = self.render(text)
        return f"""\
<!doctype html>
<html>
<head>
  <meta charset="utf-8"/>
  <title>{html.escape(title)}</title>
</head>
<body>
<article>
<h1>{html.escape(title)}</h1>
{rendered}
</article>
</body>
</html>
"""
