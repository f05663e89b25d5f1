"""Tests for SQL source discovery."""

import tempfile
from pathlib import Path

from plpgsql_dbt.utils.file_discovery import find_files


class TestSqlFileDiscovery:
    """Test source file discovery."""

    def test_discover_empty_dir(self):
        """Test discovering sources in an empty directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            files = find_files([Path(tmpdir)], "*.sql")
            assert files == []

    def test_discover_nested_files(self):
        """Test that directories are searched recursively and sorted."""
        with tempfile.TemporaryDirectory() as tmpdir:
            tmppath = Path(tmpdir)
            (tmppath / "sales").mkdir()
            (tmppath / "sales" / "load_orders.sql").write_text("")
            (tmppath / "archive.sql").write_text("")
            (tmppath / "notes.txt").write_text("")

            files = find_files([tmppath], "*.sql")
            assert files == [
                tmppath / "archive.sql",
                tmppath / "sales" / "load_orders.sql",
            ]

    def test_ignored_directories(self):
        """Test that generated output and hidden directories are skipped."""
        with tempfile.TemporaryDirectory() as tmpdir:
            tmppath = Path(tmpdir)
            for name in ("macros", "tree", ".git"):
                (tmppath / name).mkdir()
                (tmppath / name / "skipped.sql").write_text("")
            (tmppath / "kept.sql").write_text("")

            files = find_files([tmppath], "*.sql")
            assert [f.name for f in files] == ["kept.sql"]

    def test_ignored_names_above_search_root(self):
        """Test that only parts below the search root are filtered."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir) / "tree" / "plpgsql"
            root.mkdir(parents=True)
            (root / "f.sql").write_text("")

            assert find_files([root], "*.sql") == [root / "f.sql"]

    def test_explicit_files_and_duplicates(self):
        """Test that files are accepted directly and deduplicated."""
        with tempfile.TemporaryDirectory() as tmpdir:
            tmppath = Path(tmpdir)
            source = tmppath / "f.sql"
            source.write_text("")
            (tmppath / "readme.md").write_text("")

            files = find_files([source, tmppath, tmppath / "readme.md"], "*.sql")
            assert files == [source]

    def test_missing_path(self):
        """Test that missing paths are skipped."""
        with tempfile.TemporaryDirectory() as tmpdir:
            assert find_files([Path(tmpdir) / "missing"], "*.sql") == []
