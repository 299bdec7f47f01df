"""Unit tests for vaultsite.names (Original-Name Index)."""

import logging
from pathlib import Path

import pytest

from vaultsite.names import OriginalNameIndex, build_original_name_index


@pytest.fixture()
def vault_dir(tmp_path: Path) -> Path:
    (tmp_path / "iPad Notes").mkdir()
    (tmp_path / "iPad Notes" / "Setup Guide.md").write_text("# setup\n", encoding="utf-8")
    (tmp_path / "iPad Notes" / "README.md").write_text("about\n", encoding="utf-8")
    (tmp_path / "Projects (Old)").mkdir()
    (tmp_path / "Projects (Old)" / "Deep Dive.mdx").write_text("x\n", encoding="utf-8")
    (tmp_path / "Projects (Old)" / "diagram.PNG").write_bytes(b"\x89PNG")
    (tmp_path / ".obsidian").mkdir()
    (tmp_path / ".obsidian" / "workspace.md").write_text("hidden\n", encoding="utf-8")
    (tmp_path / ".hidden.md").write_text("hidden\n", encoding="utf-8")
    (tmp_path / "Top Level.md").write_text("top\n", encoding="utf-8")
    return tmp_path


class TestBuildOriginalNameIndex:
    def test_directories_keep_raw_name(self, vault_dir: Path):
        names = build_original_name_index(vault_dir)
        assert names["ipad-notes"] == "iPad Notes"
        assert names["projects-old"] == "Projects (Old)"

    def test_files_stored_without_extension(self, vault_dir: Path):
        names = build_original_name_index(vault_dir)
        assert names["ipad-notes/setup-guide"] == "Setup Guide"
        assert names["projects-old/deep-dive"] == "Deep Dive"
        assert names["ipad-notes/readme"] == "README"
        assert names["top-level"] == "Top Level"

    def test_non_markdown_files_ignored(self, vault_dir: Path):
        names = build_original_name_index(vault_dir)
        assert not any("diagram" in key for key in names)

    def test_dot_entries_skipped(self, vault_dir: Path):
        names = build_original_name_index(vault_dir)
        assert not any("obsidian" in key or "hidden" in key for key in names)

    def test_missing_root_is_empty_and_warns(self, tmp_path: Path, caplog):
        with caplog.at_level(logging.WARNING, logger="vaultsite.names"):
            names = build_original_name_index(tmp_path / "nope")
        assert len(names) == 0
        assert "does not exist" in caplog.text

    def test_unreadable_directory_warns_and_keeps_the_rest(self, vault_dir: Path, monkeypatch, caplog):
        real_iterdir = Path.iterdir
        blocked = vault_dir / "Projects (Old)"

        def iterdir(self):
            if self == blocked:
                raise PermissionError(13, "Permission denied", str(self))
            return real_iterdir(self)

        monkeypatch.setattr(Path, "iterdir", iterdir)
        with caplog.at_level(logging.WARNING, logger="vaultsite.names"):
            names = build_original_name_index(vault_dir)
        assert "Could not read vault directory" in caplog.text
        assert names["projects-old"] == "Projects (Old)"
        assert "projects-old/deep-dive" not in names
        assert names["ipad-notes/setup-guide"] == "Setup Guide"
        assert names["top-level"] == "Top Level"

    def test_symlinked_directory_not_followed(self, vault_dir: Path):
        loop = vault_dir / "iPad Notes" / "again"
        try:
            loop.symlink_to(vault_dir, target_is_directory=True)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported here")
        names = build_original_name_index(vault_dir)
        assert "ipad-notes/again" not in names
        assert names["ipad-notes/setup-guide"] == "Setup Guide"


class TestOriginalNameIndex:
    def test_is_read_only(self):
        names = OriginalNameIndex({"a": "A"})
        with pytest.raises(TypeError):
            names["b"] = "B"  # type: ignore[index]

    def test_source_dict_is_copied(self):
        source = {"a": "A"}
        names = OriginalNameIndex(source)
        source["b"] = "B"
        assert "b" not in names

    def test_get_default(self):
        assert OriginalNameIndex.empty().get("missing") is None
