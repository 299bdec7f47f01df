"""Binary attachments served from the vault's attachments directory."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)

MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
}
DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class Attachment:
    path: Path
    content: bytes
    media_type: str


def mime_type_for(filename: str) -> str:
    return MIME_TYPES.get(PurePosixPath(filename).suffix.lower(), DEFAULT_MIME_TYPE)


def list_attachments(attachments_dir: Path) -> list[str]:
    """Image files directly inside *attachments_dir*, for static pre-rendering."""
    attachments_dir = Path(attachments_dir)
    if not attachments_dir.is_dir():
        return []
    return sorted(
        p.name for p in attachments_dir.iterdir() if p.is_file() and p.suffix.lower() in MIME_TYPES
    )


def resolve_attachment(attachments_dir: Path, rel_path: str) -> Path | None:
    """Return the file for *rel_path*, or ``None`` if absent or outside the directory.

    Lookup is case-sensitive on case-sensitive filesystems: the path is used
    exactly as given.
    """
    root = Path(attachments_dir).resolve()
    candidate = (root / PurePosixPath(rel_path)).resolve()
    if root not in candidate.parents:
        logger.warning("Rejected attachment path outside %s: %s", root, rel_path)
        return None
    if not candidate.is_file():
        return None
    return candidate


def read_attachment(attachments_dir: Path, rel_path: str) -> Attachment | None:
    path = resolve_attachment(attachments_dir, rel_path)
    if path is None:
        return None
    return Attachment(path=path, content=path.read_bytes(), media_type=mime_type_for(path.name))
