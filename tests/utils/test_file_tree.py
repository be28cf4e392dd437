"""Tests for template tree traversal and the inclusion policy."""

import os

import pytest

from kitstarter.errors import TraversalError
from kitstarter.utils.file_tree import (
    EntryKind,
    is_binary_file,
    is_excluded,
    list_files,
    walk,
)


@pytest.fixture
def tree(tmp_path):
    """Create a mixed tree of text, binary, hidden and excluded entries."""
    (tmp_path / "b").mkdir()
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "z.ts").write_text("z")
    (tmp_path / "a" / "y.ts").write_text("y")
    (tmp_path / "b" / "logo.PNG").write_bytes(b"\x89PNG")
    (tmp_path / "root.md").write_text("root")
    (tmp_path / ".gitignore").write_text("dist")
    (tmp_path / ".DS_Store").write_text("junk")
    (tmp_path / "node_modules" / "dep").mkdir(parents=True)
    (tmp_path / "node_modules" / "dep" / "index.js").write_text("x")
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "HEAD").write_text("ref")
    return tmp_path


class TestInclusionPolicy:
    """Test the name-based predicates."""

    @pytest.mark.parametrize("name", ["logo.png", "FONT.WOFF2", "archive.tar", "a/b/c.svg"])
    def test_binary_extensions(self, name):
        assert is_binary_file(name)

    @pytest.mark.parametrize("name", ["index.ts", "README.md", "png", "pngfile.txt"])
    def test_text_files(self, name):
        assert not is_binary_file(name)

    @pytest.mark.parametrize("name", ["node_modules", ".git", ".DS_Store", ".env"])
    def test_excluded_names(self, name):
        assert is_excluded(name)

    @pytest.mark.parametrize("name", [".gitignore", ".npmrc", ".env.example", ".eslintrc", "src"])
    def test_included_names(self, name):
        assert not is_excluded(name)


class TestWalk:
    """Test traversal order and classification."""

    def test_classifies_entries(self, tree):
        """Every visited entry gets a kind."""
        kinds = {entry.path.relative_to(tree).as_posix(): entry.kind for entry in walk(tree)}

        assert kinds["a"] is EntryKind.DIRECTORY
        assert kinds["a/y.ts"] is EntryKind.TEXT
        assert kinds["b/logo.PNG"] is EntryKind.BINARY
        assert kinds[".gitignore"] is EntryKind.TEXT
        assert kinds[".DS_Store"] is EntryKind.EXCLUDED
        assert kinds["node_modules"] is EntryKind.EXCLUDED

    def test_excluded_directories_are_not_descended(self, tree):
        """Nothing inside node_modules or .git is visited."""
        paths = [entry.path.relative_to(tree).as_posix() for entry in walk(tree)]

        assert not any(path.startswith("node_modules/") for path in paths)
        assert not any(path.startswith(".git/") for path in paths)

    def test_visit_order_is_sorted_and_stable(self, tree):
        """Siblings are visited by name, subdirectories depth-first."""
        files = [path.relative_to(tree).as_posix() for path in list_files(tree)]

        assert files == [".gitignore", "root.md", "a/y.ts", "a/z.ts"]
        assert list_files(tree) == list_files(tree)

    def test_list_files_can_include_binary(self, tree):
        files = [path.relative_to(tree).as_posix() for path in list_files(tree, include_binary=True)]
        assert "b/logo.PNG" in files

    def test_empty_directory(self, tmp_path):
        assert walk(tmp_path) == []

    def test_missing_root_raises_traversal_error(self, tmp_path):
        """Unreadable roots fail instead of returning a partial result."""
        missing = tmp_path / "missing"
        with pytest.raises(TraversalError, match="Failed to read directory") as exc_info:
            walk(missing)
        assert exc_info.value.path == missing

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_symlinked_directories_are_excluded(self, tmp_path):
        """A symlink cycle cannot make traversal loop."""
        (tmp_path / "real").mkdir()
        (tmp_path / "real" / "file.txt").write_text("x")
        try:
            (tmp_path / "real" / "loop").symlink_to(tmp_path, target_is_directory=True)
        except OSError:
            pytest.skip("cannot create symlinks here")

        kinds = {entry.path.name: entry.kind for entry in walk(tmp_path)}
        assert kinds["loop"] is EntryKind.EXCLUDED
        assert kinds["file.txt"] is EntryKind.TEXT

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_file_symlinks_are_excluded(self, tmp_path):
        """A link to a file is never offered for rewriting."""
        outside = tmp_path / "outside.txt"
        outside.write_text("x")
        root = tmp_path / "root"
        root.mkdir()
        (root / "real.txt").write_text("x")
        try:
            (root / "link.txt").symlink_to(outside)
        except OSError:
            pytest.skip("cannot create symlinks here")

        kinds = {entry.path.name: entry.kind for entry in walk(root)}
        assert kinds["link.txt"] is EntryKind.EXCLUDED
        assert list_files(root, include_binary=True) == [root / "real.txt"]
