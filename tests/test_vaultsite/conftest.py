"""Shared fixtures for the HTTP and CLI tests.

``content_dir`` lays out a content root the way a site keeps it: notes under
``vault/``, images under ``vault/attachments/`` and posts (one of them a
draft) under ``blog/``.
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest


@pytest.fixture()
def content_dir(tmp_path: Path) -> Path:
    root = tmp_path / "content"
    vault = root / "vault"
    (vault / "Guides").mkdir(parents=True)
    (vault / "attachments").mkdir()
    (root / "blog").mkdir()

    (vault / "Guides" / "README.md").write_text(
        textwrap.dedent("""\
            ---
            order: 2
            tags: [docs]
            ---
            Guides overview.
        """),
        encoding="utf-8",
    )
    (vault / "Guides" / "Install Notes.md").write_text(
        textwrap.dedent("""\
            ---
            tags: [Docs, setup]
            ---
            See ![[diagram.png]] and [the readme](./README.md).
        """),
        encoding="utf-8",
    )
    (vault / "About Me.md").write_text("# About\n", encoding="utf-8")
    (vault / "attachments" / "diagram.png").write_bytes(b"\x89PNG")
    (root / "blog" / "hello.md").write_text(
        "---\ntitle: Hello\npublishDate: 2024-01-05\ntags: [Intro]\n---\nHi.\n", encoding="utf-8"
    )
    (root / "blog" / "wip.md").write_text(
        "---\ntitle: Work in Progress\npublishDate: 2025-03-01\ndraft: true\ntags: [intro, astro]\n---\nSoon.\n",
        encoding="utf-8",
    )
    return root
