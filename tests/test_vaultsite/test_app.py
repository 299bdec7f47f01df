"""HTTP tests for vaultsite.app using FastAPI's TestClient."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from vaultsite.app import create_app
from vaultsite.config import load_settings
from vaultsite.errors import ConfigError


@pytest.fixture()
def client(content_dir: Path) -> TestClient:
    return TestClient(create_app(load_settings(content_dir, production=False)))


# ---------------------------------------------------------------------------
# JSON views
# ---------------------------------------------------------------------------


class TestNavigation:
    def test_tree(self, client: TestClient):
        response = client.get("/api/vault/tree")
        assert response.status_code == 200
        tree = response.json()
        assert [n["title"] for n in tree] == ["Guides", "About Me"]
        guides = tree[0]
        assert guides["kind"] == "folder_note"
        assert guides["slug"] == "guides/readme"
        assert guides["order"] == 2
        assert [c["slug"] for c in guides["children"]] == ["guides/install-notes"]

    def test_list(self, client: TestClient):
        assert client.get("/api/vault/list").json() == [
            {"title": "Guides", "slug": "guides/readme"},
            {"title": "Install Notes", "slug": "guides/install-notes"},
            {"title": "About Me", "slug": "about-me"},
        ]

    def test_tags(self, client: TestClient):
        assert client.get("/api/vault/tags").json() == [
            {"tag": "docs", "count": 2},
            {"tag": "setup", "count": 1},
        ]

    def test_backlinks(self, content_dir: Path):
        (content_dir / "vault" / "About Me.md").write_text("See [[Install Notes]].\n", encoding="utf-8")
        client = TestClient(create_app(load_settings(content_dir, production=False)))
        assert client.get("/api/vault/backlinks/guides/install-notes").json() == [
            {"title": "About Me", "slug": "about-me"},
        ]
        assert client.get("/api/vault/backlinks/about-me").json() == []
        assert client.get("/api/vault/backlinks/missing").status_code == 404


class TestBlog:
    def test_first_page_newest_first(self, client: TestClient):
        data = client.get("/api/blog").json()
        assert data["page"] == 1
        assert data["pages"] == 1
        assert [p["title"] for p in data["posts"]] == ["Work in Progress", "Hello"]
        assert data["posts"][1]["publishDate"] == "2024-01-05"

    def test_page_size_from_site_config(self, content_dir: Path, tmp_path: Path):
        config = tmp_path / "site.toml"
        config.write_text("[site]\nblog_page_size = 1\n", encoding="utf-8")
        client = TestClient(create_app(load_settings(content_dir, production=False, config_path=config)))
        second = client.get("/api/blog", params={"page": 2}).json()
        assert second["pages"] == 2
        assert [p["title"] for p in second["posts"]] == ["Hello"]
        assert client.get("/api/blog", params={"page": 3}).status_code == 404

    def test_drafts_hidden_in_production(self, content_dir: Path):
        client = TestClient(create_app(load_settings(content_dir, production=True)))
        assert [p["title"] for p in client.get("/api/blog").json()["posts"]] == ["Hello"]
        assert client.get("/api/blog/tags").json() == [{"tag": "intro", "count": 1}]

    def test_tags(self, client: TestClient):
        assert client.get("/api/blog/tags").json() == [
            {"tag": "intro", "count": 2},
            {"tag": "astro", "count": 1},
        ]

    def test_invalid_page(self, client: TestClient):
        assert client.get("/api/blog", params={"page": 0}).status_code == 422


# ---------------------------------------------------------------------------
# Documents and attachments
# ---------------------------------------------------------------------------


class TestAttachments:
    def test_served_with_mime_type(self, client: TestClient):
        response = client.get("/vault/attachments/diagram.png")
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content == b"\x89PNG"

    def test_missing(self, client: TestClient):
        response = client.get("/vault/attachments/nope.png")
        assert response.status_code == 404
        assert response.text == "Not Found"

    def test_note_inside_attachments_folder_still_rendered(self, content_dir: Path):
        (content_dir / "vault" / "attachments" / "Sources.md").write_text("Image credits.\n", encoding="utf-8")
        client = TestClient(create_app(load_settings(content_dir, production=False)))
        response = client.get("/vault/attachments/sources")
        assert response.status_code == 200
        assert "<title>Sources</title>" in response.text


class TestPages:
    def test_page_rendered(self, client: TestClient):
        response = client.get("/vault/guides/install-notes")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "<title>Install Notes</title>" in response.text
        assert 'src="/vault/attachments/diagram.png"' in response.text
        assert 'href="./readme"' in response.text

    def test_unknown_page(self, client: TestClient):
        assert client.get("/vault/does-not-exist").status_code == 404

    @pytest.mark.parametrize("name", ["tree", "list", "tags"])
    def test_notes_named_like_json_views_are_reachable(self, content_dir: Path, name: str):
        (content_dir / "vault" / f"{name}.md").write_text("A note, not JSON.\n", encoding="utf-8")
        client = TestClient(create_app(load_settings(content_dir, production=False)))
        response = client.get(f"/vault/{name}")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "A note, not JSON." in response.text


class TestAppConfig:
    def test_site_config_on_state(self, content_dir: Path, tmp_path: Path):
        config = tmp_path / "site.toml"
        config.write_text('[site]\ntitle = "My Vault"\n', encoding="utf-8")
        app = create_app(load_settings(content_dir, config_path=config))
        assert app.title == "My Vault"
        assert app.state.site_config.title == "My Vault"

    def test_bad_config_fails_fast(self, content_dir: Path, tmp_path: Path):
        config = tmp_path / "site.toml"
        config.write_text("[site]\nprerender = false\npagefind = true\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Pagefind"):
            create_app(load_settings(content_dir, config_path=config))
