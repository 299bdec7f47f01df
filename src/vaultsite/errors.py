"""Exception types raised by vaultsite."""

from __future__ import annotations


class VaultSiteError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(VaultSiteError, ValueError):
    """Site configuration is malformed; raised at load time."""


class LinkDecodeError(VaultSiteError, ValueError):
    """A link URL contains malformed percent-escapes."""


class DuplicateSlugError(VaultSiteError):
    """Two or more note ids normalize to the same slug."""

    def __init__(self, collisions: dict[str, list[str]]) -> None:
        self.collisions = collisions
        detail = "; ".join(f"{slug!r} <- {', '.join(ids)}" for slug, ids in sorted(collisions.items()))
        super().__init__(f"Duplicate vault slugs: {detail}")
