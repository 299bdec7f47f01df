"""HTTP routes for the vault section of the site.

Documents live at ``/vault/<slug>`` and attachments at
``/vault/attachments/<path>``.  JSON views sit under ``/api/`` so no note name
can shadow them.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse, Response

from vaultsite.attachments import read_attachment
from vaultsite.blog import Blog
from vaultsite.config import Settings, load_settings, load_site_config
from vaultsite.index import VaultSite
from vaultsite.names import get_original_name_index

logger = logging.getLogger(__name__)


def build_site(settings: Settings) -> VaultSite:
    return VaultSite(
        settings.vault_dir,
        production=settings.production,
        strict_slugs=settings.strict_slugs,
        link_rule=settings.link_rule,
        names=get_original_name_index(settings.vault_dir.resolve()),
    ).build()


def build_blog(settings: Settings) -> Blog:
    return Blog(settings.blog_dir, production=settings.production).build()


def create_app(
    settings: Settings | None = None,
    site: VaultSite | None = None,
    blog: Blog | None = None,
) -> FastAPI:
    settings = settings or load_settings()
    # Fails fast on a bad site config
    site_config = load_site_config(settings.config_path)
    site = site or build_site(settings)
    blog = blog or build_blog(settings)

    app = FastAPI(title=site_config.title)
    app.state.settings = settings
    app.state.site_config = site_config
    app.state.site = site
    app.state.blog = blog

    # ------------------------------------------------------------------
    # JSON views
    # ------------------------------------------------------------------

    @app.get("/api/vault/tree")
    def vault_tree() -> list[dict]:
        return [node.to_dict() for node in site.tree]

    @app.get("/api/vault/list")
    def vault_list() -> list[dict]:
        return [item.to_dict() for item in site.flat_list()]

    @app.get("/api/vault/tags")
    def vault_tags() -> list[dict]:
        return [{"tag": tag, "count": count} for tag, count in site.tags_with_count()]

    @app.get("/api/vault/backlinks/{slug:path}")
    def vault_backlinks(slug: str) -> list[dict]:
        if site.get(slug) is None:
            raise HTTPException(status_code=404, detail=f"No vault note at {slug!r}")
        return [{"title": e.title, "slug": e.slug} for e in site.backlinks_for(slug)]

    @app.get("/api/blog")
    def blog_page(page: int = Query(1, ge=1)) -> dict:
        pages = blog.pages(site_config.blog_page_size)
        if page > max(len(pages), 1):
            raise HTTPException(status_code=404, detail=f"No blog page {page}")
        posts = pages[page - 1] if pages else []
        return {"page": page, "pages": len(pages), "posts": [p.to_dict() for p in posts]}

    @app.get("/api/blog/tags")
    def blog_tags() -> list[dict]:
        return [{"tag": tag, "count": count} for tag, count in blog.tags_with_count()]

    # ------------------------------------------------------------------
    # Documents and attachments
    # ------------------------------------------------------------------

    @app.get("/vault/attachments/{path:path}")
    def vault_attachment(path: str) -> Response:
        attachment = read_attachment(settings.attachments_dir, path)
        if attachment is not None:
            return Response(attachment.content, media_type=attachment.media_type)
        # Notes kept inside the attachments folder still have a page
        page = site.render(f"attachments/{path}")
        if page is not None:
            return HTMLResponse(page)
        return Response("Not Found", status_code=404, media_type="text/plain")

    @app.get("/vault/{slug:path}", response_class=HTMLResponse)
    def vault_page(slug: str) -> HTMLResponse:
        page = site.render(slug)
        if page is None:
            raise HTTPException(status_code=404, detail=f"No vault note at {slug!r}")
        return HTMLResponse(page)

    return app
