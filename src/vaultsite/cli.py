"""Command line entry point: inspect, build and serve the vault."""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from vaultsite.attachments import list_attachments
from vaultsite.blog import Blog
from vaultsite.config import Settings, SiteConfig, load_settings, load_site_config
from vaultsite.errors import VaultSiteError
from vaultsite.index import VaultSite
from vaultsite.logging_setup import configure_logging
from vaultsite.tree import VaultNode

app = typer.Typer(name="vaultsite", help="Build the vault section of the site", no_args_is_help=True)
console = Console()

ContentOption = typer.Option(None, "--content", "-c", help="Content root holding vault/ and blog/")


def _fail(exc: VaultSiteError) -> typer.Exit:
    console.print(f"[red]Error:[/red] {exc}")
    return typer.Exit(code=1)


def _configure(content: Optional[Path], production: bool = False) -> tuple[Settings, SiteConfig]:
    try:
        settings = load_settings(content, production=production or None)
        return settings, load_site_config(settings.config_path)
    except VaultSiteError as exc:
        raise _fail(exc) from exc


def _load(settings: Settings) -> VaultSite:
    try:
        return VaultSite(
            settings.vault_dir,
            production=settings.production,
            strict_slugs=settings.strict_slugs,
            link_rule=settings.link_rule,
        ).build()
    except VaultSiteError as exc:
        raise _fail(exc) from exc


def _add_nodes(branch: Tree, nodes: list[VaultNode]) -> None:
    for node in nodes:
        label = node.title if node.slug is None else f"{node.title} [dim]/vault/{node.slug}[/dim]"
        _add_nodes(branch.add(label), node.children)


def _write_json(path: Path, data: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")) -> None:
    configure_logging(logging.DEBUG if verbose else logging.INFO)


@app.command()
def tree(content: Optional[Path] = ContentOption) -> None:
    """Print the navigation tree."""
    settings, _ = _configure(content)
    site = _load(settings)
    root = Tree("[bold]vault[/bold]")
    _add_nodes(root, site.tree)
    console.print(root)


@app.command()
def tags(content: Optional[Path] = ContentOption) -> None:
    """Print vault tags by usage count."""
    settings, _ = _configure(content)
    site = _load(settings)
    table = Table(title="Tags", show_header=True, header_style="bold cyan")
    table.add_column("Tag", style="green")
    table.add_column("Notes", justify="right")
    for tag, count in site.tags_with_count():
        table.add_row(tag, str(count))
    console.print(table)


@app.command()
def posts(
    content: Optional[Path] = ContentOption,
    production: bool = typer.Option(False, "--production", help="Hide drafts"),
) -> None:
    """Print blog posts grouped by year, newest first."""
    settings, _ = _configure(content, production)
    blog = Blog(settings.blog_dir, production=settings.production).build()
    table = Table(title="Posts", show_header=True, header_style="bold cyan")
    table.add_column("Year", style="magenta")
    table.add_column("Date")
    table.add_column("Title", style="green")
    for year, year_posts in blog.by_year():
        for post in year_posts:
            table.add_row(str(year), post.date.isoformat(), post.title + (" (draft)" if post.draft else ""))
    console.print(table)


@app.command()
def build(
    out_dir: Path = typer.Argument(..., help="Output directory"),
    content: Optional[Path] = ContentOption,
    production: bool = typer.Option(False, "--production", help="Hide unpublished notes and drafts"),
) -> None:
    """Write the tree, list, tags, one HTML page per note, the attachments and the blog index."""
    settings, site_config = _configure(content, production)
    site = _load(settings)
    blog = Blog(settings.blog_dir, production=settings.production).build()

    out_dir.mkdir(parents=True, exist_ok=True)
    _write_json(out_dir / "tree.json", [n.to_dict() for n in site.tree])
    _write_json(out_dir / "list.json", [i.to_dict() for i in site.flat_list()])
    _write_json(out_dir / "tags.json", site.tags_with_count())
    _write_json(out_dir / "backlinks.json", site.backlinks)

    renderer = site.renderer()
    for entry in site.entries:
        page_dir = out_dir / "vault" / entry.slug
        page_dir.mkdir(parents=True, exist_ok=True)
        (page_dir / "index.html").write_text(renderer.render_page(entry.title, entry.body), encoding="utf-8")

    attachments_dir = settings.attachments_dir
    copied = list_attachments(attachments_dir)
    if copied:
        target = out_dir / "vault" / "attachments"
        target.mkdir(parents=True, exist_ok=True)
        for name in copied:
            shutil.copy2(attachments_dir / name, target / name)

    pages = blog.pages(site_config.blog_page_size)
    for number, page_posts in enumerate(pages, start=1):
        _write_json(
            out_dir / "blog" / f"page-{number}.json",
            {"page": number, "pages": len(pages), "posts": [p.to_dict() for p in page_posts]},
        )
    _write_json(out_dir / "blog" / "tags.json", blog.tags_with_count())

    console.print(
        f"[green]Built[/green] {len(site.entries)} notes, {len(copied)} attachments "
        f"and {len(blog.posts)} posts into {out_dir}"
    )


@app.command()
def serve(
    content: Optional[Path] = ContentOption,
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(4321, help="Port"),
) -> None:
    """Serve the vault routes with uvicorn."""
    import uvicorn

    from vaultsite.app import create_app

    settings, _ = _configure(content)
    try:
        web_app = create_app(settings)
    except VaultSiteError as exc:
        raise _fail(exc) from exc
    uvicorn.run(web_app, host=host, port=port)


if __name__ == "__main__":
    app()
