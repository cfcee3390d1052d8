"""Tests for local directory scanning."""

import os
from pathlib import Path

import pytest

from sitesync.exceptions import DirectoryNotFoundError
from sitesync.sync.scanner import DirectoryScanner, is_hidden_path


class TestIsHiddenPath:
    """Tests for the hidden path predicate."""

    @pytest.mark.parametrize(
        "path",
        [
            ".htaccess",
            ".git/config",
            ".well-known/security.txt",
            "assets/.cache/img.png",
            "a/b/c/.DS_Store",
            "a/.b/c/d.txt",
        ],
    )
    def test_hidden(self, path):
        assert is_hidden_path(path) is True

    @pytest.mark.parametrize(
        "path",
        [
            "index.html",
            "css/site.css",
            "a/b/c/d.txt",
            "file.with.dots.js",
            "dir.name/file",
        ],
    )
    def test_not_hidden(self, path):
        assert is_hidden_path(path) is False

    def test_empty_path_is_not_hidden(self):
        assert is_hidden_path("") is False


class TestDirectoryScanner:
    """Tests for DirectoryScanner.scan_local."""

    def _relative_paths(self, root):
        return [f.relative_path for f in DirectoryScanner().scan_local(root)]

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(DirectoryNotFoundError, match="does not exist"):
            DirectoryScanner().scan_local(tmp_path / "nonexistent")

    def test_file_instead_of_directory_raises(self, tmp_path):
        test_file = tmp_path / "test.txt"
        test_file.write_text("test")

        with pytest.raises(DirectoryNotFoundError, match="not a directory"):
            DirectoryScanner().scan_local(test_file)

    def test_empty_directory(self, tmp_path):
        assert self._relative_paths(tmp_path) == []

    def test_relative_forward_slash_paths(self, tmp_path, make_tree):
        make_tree(tmp_path, {"index.html": "x", "css/site.css": "y"})

        files = list(DirectoryScanner().scan_local(tmp_path))

        assert [f.relative_path for f in files] == ["css/site.css", "index.html"]
        assert files[0].path == tmp_path / "css" / "site.css"
        assert all(not f.relative_path.startswith("/") for f in files)

    def test_trailing_separator_on_root(self, tmp_path, make_tree):
        make_tree(tmp_path, {"index.html": "x"})
        root = type(tmp_path)(str(tmp_path) + os.sep)

        assert self._relative_paths(root) == ["index.html"]

    def test_output_is_sorted(self, tmp_path, make_tree):
        make_tree(tmp_path, {"b.html": "", "a.html": "", "c/a.html": ""})

        assert self._relative_paths(tmp_path) == ["a.html", "b.html", "c/a.html"]

    def test_directories_are_not_listed(self, tmp_path, make_tree):
        (tmp_path / "empty" / "nested").mkdir(parents=True)
        make_tree(tmp_path, {"docs/readme.txt": ""})

        assert self._relative_paths(tmp_path) == ["docs/readme.txt"]

    @pytest.mark.parametrize(
        "tree",
        [
            {"index.html": "", ".hidden": ""},
            {"index.html": "", ".hidden/skip.txt": "", "css/site.css": ""},
            {"a/b/c/d.txt": "", "a/b/.c/d.txt": "", "a/.b/c/d.txt": ""},
            {".a/b.txt": "", "a/.b.txt": "", "a/b.txt": "", "a/b/.c": ""},
            {"x.y/z": "", "x/.y/z/w.html": "", "deep/er/still/file.js": ""},
        ],
    )
    def test_equals_all_non_hidden_files(self, tmp_path, make_tree, tree):
        """Scanning yields exactly the files with no hidden path segment."""
        make_tree(tmp_path, tree)

        expected = {path for path in tree if not is_hidden_path(path)}

        assert set(self._relative_paths(tmp_path)) == expected

    def test_hidden_directory_is_not_descended(self, tmp_path, make_tree):
        make_tree(tmp_path, {".git/objects/ab/cdef": "", "index.html": ""})

        assert self._relative_paths(tmp_path) == ["index.html"]

    def _deny_iterdir(self, monkeypatch, denied):
        original_iterdir = Path.iterdir

        def iterdir(path):
            if path == denied:
                raise PermissionError(13, "Permission denied", str(path))
            return original_iterdir(path)

        monkeypatch.setattr(Path, "iterdir", iterdir)

    def test_unreadable_root_raises(self, tmp_path, make_tree, monkeypatch):
        make_tree(tmp_path, {"index.html": ""})
        self._deny_iterdir(monkeypatch, tmp_path)

        with pytest.raises(DirectoryNotFoundError, match="cannot be read"):
            DirectoryScanner().scan_local(tmp_path)

    def test_unreadable_subdirectory_raises(self, tmp_path, make_tree, monkeypatch):
        make_tree(tmp_path, {"index.html": "", "docs/guide.html": ""})
        self._deny_iterdir(monkeypatch, tmp_path / "docs")

        with pytest.raises(DirectoryNotFoundError) as exc_info:
            list(DirectoryScanner().scan_local(tmp_path))

        assert exc_info.value.directory == str(tmp_path / "docs")
        assert "cannot be read: Permission denied" in str(exc_info.value)

    def test_unreadable_hidden_directory_is_ignored(
        self, tmp_path, make_tree, monkeypatch
    ):
        make_tree(tmp_path, {"index.html": "", ".cache/x": ""})
        self._deny_iterdir(monkeypatch, tmp_path / ".cache")

        assert self._relative_paths(tmp_path) == ["index.html"]
