"""Runtime settings and site configuration.

Runtime settings come from environment variables (explicit keyword arguments
take precedence)::

    VAULTSITE_CONTENT_DIR   : content root holding ``vault/`` and ``blog/`` (default ./src/content)
    VAULTSITE_ENV           : ``production`` hides unpublished notes and drafts
    VAULTSITE_STRICT_SLUGS  : ``false`` downgrades duplicate slugs to a warning
    VAULTSITE_LINK_RULE     : ``reduced`` (default) or ``full`` segment rule for links
    VAULTSITE_CONFIG        : optional path to the site TOML file
    SITE_URL                : public base URL (default http://localhost:4321)

The site TOML file is validated on load; anything malformed raises
:class:`~vaultsite.errors.ConfigError` before a build starts::

    [site]
    title     = "0xnhl"
    author    = "Nahil Rasheed"
    favicon   = "/favicon/favicon.ico"
    prerender = true
    pagefind  = true
    blog_page_size = 8

    [[site.menu]]
    title = "Vault"
    link  = "/vault"
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from vaultsite.errors import ConfigError

FAVICON_TYPES = {
    ".ico": "image/x-icon",
    ".gif": "image/gif",
    ".jpeg": "image/jpeg",
    ".jpg": "image/jpeg",
    ".png": "image/png",
    ".svg": "image/svg+xml",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


# ---------------------------------------------------------------------------
# Runtime settings
# ---------------------------------------------------------------------------


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    content_dir: Path
    production: bool = False
    strict_slugs: bool = True
    link_rule: str = "reduced"
    site_url: str = "http://localhost:4321"
    config_path: Path | None = None

    @property
    def vault_dir(self) -> Path:
        return self.content_dir / "vault"

    @property
    def blog_dir(self) -> Path:
        return self.content_dir / "blog"

    @property
    def attachments_dir(self) -> Path:
        return self.vault_dir / "attachments"


def load_settings(
    content_dir: Path | str | None = None,
    *,
    production: bool | None = None,
    strict_slugs: bool | None = None,
    link_rule: str | None = None,
    site_url: str | None = None,
    config_path: Path | str | None = None,
) -> Settings:
    content = Path(content_dir or os.getenv("VAULTSITE_CONTENT_DIR", "./src/content")).expanduser()
    rule = link_rule or os.getenv("VAULTSITE_LINK_RULE", "reduced")
    if rule not in {"reduced", "full"}:
        raise ConfigError(f"VAULTSITE_LINK_RULE must be 'reduced' or 'full', got {rule!r}")
    cfg = config_path or os.getenv("VAULTSITE_CONFIG")
    return Settings(
        content_dir=content,
        production=(
            production
            if production is not None
            else os.getenv("VAULTSITE_ENV", "development").strip().lower() == "production"
        ),
        strict_slugs=strict_slugs if strict_slugs is not None else _env_bool("VAULTSITE_STRICT_SLUGS", True),
        link_rule=rule,
        site_url=(site_url or os.getenv("SITE_URL", "http://localhost:4321")).rstrip("/"),
        config_path=Path(cfg).expanduser() if cfg else None,
    )


# ---------------------------------------------------------------------------
# Site configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Favicon:
    href: str
    type: str

    @classmethod
    def parse(cls, href: str) -> "Favicon":
        # favicon may be an absolute URL or a site path
        path = urlsplit(href).path
        dot = path.rfind(".")
        ext = path[dot:].lower() if dot != -1 else ""
        if ext not in FAVICON_TYPES:
            raise ConfigError("favicon must be a .ico, .gif, .jpg, .png, or .svg file")
        return cls(href=href, type=FAVICON_TYPES[ext])


@dataclass(frozen=True)
class MenuItem:
    title: str
    link: str


@dataclass(frozen=True)
class SiteConfig:
    title: str = "Vault Site"
    author: str = ""
    description: str = ""
    favicon: Favicon = field(default_factory=lambda: Favicon.parse("/favicon/favicon.svg"))
    prerender: bool = True
    pagefind: bool = True
    blog_page_size: int = 8
    menu: tuple[MenuItem, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SiteConfig":
        site = data.get("site", data)
        if not isinstance(site, dict):
            raise ConfigError("[site] must be a table")

        def _typed(key: str, kind: type, default: Any) -> Any:
            value = site.get(key, default)
            if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
                raise ConfigError(f"site.{key} must be of type {kind.__name__}, got {value!r}")
            return value

        prerender = _typed("prerender", bool, True)
        pagefind = site.get("pagefind")
        if pagefind is None:
            # Pagefind defaults to on only when pages are prerendered
            pagefind = prerender
        elif not isinstance(pagefind, bool):
            raise ConfigError(f"site.pagefind must be of type bool, got {pagefind!r}")
        if pagefind and not prerender:
            raise ConfigError("Pagefind search is not supported with prerendering disabled.")

        page_size = _typed("blog_page_size", int, 8)
        if page_size < 1:
            raise ConfigError("site.blog_page_size must be at least 1")

        menu_raw = site.get("menu", [])
        if not isinstance(menu_raw, list):
            raise ConfigError("site.menu must be an array of tables")
        try:
            menu = tuple(MenuItem(title=str(m["title"]), link=str(m["link"])) for m in menu_raw)
        except (KeyError, TypeError) as exc:
            raise ConfigError(f"site.menu entries need 'title' and 'link': {exc}") from exc

        return cls(
            title=_typed("title", str, cls.title),
            author=_typed("author", str, cls.author),
            description=_typed("description", str, cls.description),
            favicon=Favicon.parse(_typed("favicon", str, "/favicon/favicon.svg")),
            prerender=prerender,
            pagefind=pagefind,
            blog_page_size=page_size,
            menu=menu,
        )


def load_site_config(path: Path | None) -> SiteConfig:
    """Load and validate the site TOML file; defaults when *path* is ``None``."""
    if path is None:
        return SiteConfig()
    try:
        with open(path, "rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError as exc:
        raise ConfigError(f"site config {path} not found") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"site config {path} is not valid TOML: {exc}") from exc
    return SiteConfig.from_dict(data)
