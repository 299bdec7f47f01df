"""Unit tests for vaultsite.parser."""

import textwrap
from pathlib import Path

from vaultsite.note import NoteData
from vaultsite.parser import load_notes, parse_frontmatter, parse_note

# ---------------------------------------------------------------------------
# parse_frontmatter
# ---------------------------------------------------------------------------


class TestParseFrontmatter:
    def test_no_frontmatter_returns_empty_dict(self):
        meta, body = parse_frontmatter("Just some text.")
        assert meta == {}
        assert body == "Just some text."

    def test_basic_frontmatter(self):
        raw = textwrap.dedent("""\
            ---
            title: My Note
            order: 2
            tags: [a, b]
            ---
            Body here.
        """)
        meta, body = parse_frontmatter(raw)
        assert meta["title"] == "My Note"
        assert meta["order"] == 2
        assert meta["tags"] == ["a", "b"]
        assert body == "Body here.\n"

    def test_frontmatter_not_at_start_is_ignored(self):
        raw = "Intro\n---\ntitle: Nope\n---\nMore text."
        meta, body = parse_frontmatter(raw)
        assert meta == {}
        assert body == raw

    def test_empty_frontmatter_block(self):
        meta, body = parse_frontmatter("---\n---\nBody.")
        assert meta == {}
        assert body == "Body."

    def test_invalid_yaml_does_not_raise(self):
        meta, body = parse_frontmatter("---\n: broken: yaml:\n---\nBody.")
        # Should not raise
        assert isinstance(meta, dict)

    def test_non_mapping_yaml_returns_empty_dict(self):
        meta, _ = parse_frontmatter("---\n- a\n- b\n---\nBody.")
        assert meta == {}

    def test_crlf_line_endings(self):
        meta, body = parse_frontmatter("---\r\ntitle: Win\r\n---\r\nBody.")
        assert meta == {"title": "Win"}
        assert body == "Body."


# ---------------------------------------------------------------------------
# parse_note / load_notes
# ---------------------------------------------------------------------------


class TestParseNote:
    def test_full_note(self, tmp_path: Path):
        (tmp_path / "Projects").mkdir()
        md = tmp_path / "Projects" / "My Note.md"
        md.write_text(
            textwrap.dedent("""\
                ---
                title: My Note
                order: 3
                tags: [Setup, rust]
                publish: false
                status: draft
                ---
                See [[getting-started]].
            """),
            encoding="utf-8",
        )
        note = parse_note(md, tmp_path)
        assert note.id == "Projects/My Note.md"
        assert note.slug == "projects/my-note"
        assert note.data.title == "My Note"
        assert note.data.order == 3
        assert note.data.tags == ("Setup", "rust")
        assert note.data.publish is False
        assert note.data.extra == {"status": "draft"}
        assert "[[getting-started]]" in note.body

    def test_note_without_frontmatter(self, tmp_path: Path):
        md = tmp_path / "simple.md"
        md.write_text("# Simple\nJust text.\n", encoding="utf-8")
        note = parse_note(md, tmp_path)
        assert note.data.title is None
        assert note.data.order is None
        assert note.data.tags == ()
        assert note.data.publish is True

    def test_fractional_order_kept(self, tmp_path: Path):
        md = tmp_path / "f.md"
        md.write_text("---\norder: 1.5\n---\n", encoding="utf-8")
        assert parse_note(md, tmp_path).data.order == 1.5

    def test_non_numeric_order_ignored(self, tmp_path: Path):
        md = tmp_path / "f.md"
        md.write_text("---\norder: first\n---\n", encoding="utf-8")
        assert parse_note(md, tmp_path).data.order is None

    def test_boolean_and_nan_order_ignored(self):
        assert NoteData.from_frontmatter({"order": True}).order is None
        assert NoteData.from_frontmatter({"order": float("nan")}).order is None

    def test_comma_separated_tags(self, tmp_path: Path):
        md = tmp_path / "t.md"
        md.write_text("---\ntags: a, b\n---\n", encoding="utf-8")
        assert parse_note(md, tmp_path).data.tags == ("a", "b")


class TestLoadNotes:
    def test_loads_md_and_mdx_sorted(self, tmp_path: Path):
        (tmp_path / "b.md").write_text("b", encoding="utf-8")
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "index.mdx").write_text("a", encoding="utf-8")
        (tmp_path / "image.png").write_bytes(b"png")
        ids = [n.id for n in load_notes(tmp_path)]
        assert ids == ["a/index.mdx", "b.md"]

    def test_skips_dot_directories(self, tmp_path: Path):
        (tmp_path / ".trash").mkdir()
        (tmp_path / ".trash" / "old.md").write_text("x", encoding="utf-8")
        (tmp_path / "keep.md").write_text("x", encoding="utf-8")
        assert [n.id for n in load_notes(tmp_path)] == ["keep.md"]

    def test_missing_directory(self, tmp_path: Path):
        assert load_notes(tmp_path / "missing") == []
