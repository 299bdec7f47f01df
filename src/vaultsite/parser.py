"""YAML-frontmatter parser and the note file loader."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from vaultsite.note import NoteData, NoteEntry

logger = logging.getLogger(__name__)

# YAML front-matter block
_FRONTMATTER_RE = re.compile(r"^---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|$)", re.DOTALL)


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Split YAML front-matter from body text.

    Returns ``(metadata_dict, body)``; ``metadata_dict`` is empty when there
    is no front-matter block or the block is not a valid YAML mapping.
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return {}, content
    try:
        meta = yaml.safe_load(match.group(1) or "") or {}
    except yaml.YAMLError as exc:
        logger.warning("Ignoring invalid frontmatter: %s", exc)
        meta = {}
    if not isinstance(meta, dict):
        meta = {}
    return meta, content[match.end() :]


def parse_note(path: Path, root: Path) -> NoteEntry:
    """Read a ``.md``/``.mdx`` file below *root* and return its :class:`NoteEntry`."""
    content = path.read_text(encoding="utf-8")
    frontmatter, body = parse_frontmatter(content)
    note_id = path.relative_to(root).as_posix()
    return NoteEntry(id=note_id, data=NoteData.from_frontmatter(frontmatter), body=body)


def load_notes(root: Path) -> list[NoteEntry]:
    """Load every markdown note below *root*, sorted by id.

    Dot-directories and dotfiles are skipped; unreadable files are logged and
    left out.
    """
    root = Path(root)
    if not root.is_dir():
        logger.warning("Vault directory %s does not exist; no notes loaded", root)
        return []
    entries: list[NoteEntry] = []
    for path in sorted(p for pattern in ("**/*.md", "**/*.mdx") for p in root.glob(pattern)):
        rel_parts = path.relative_to(root).parts
        if any(part.startswith(".") for part in rel_parts) or not path.is_file():
            continue
        try:
            entries.append(parse_note(path, root))
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping unreadable note %s: %s", path, exc)
    return entries
