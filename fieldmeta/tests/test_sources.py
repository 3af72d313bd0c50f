"""
Unit tests for sources.py

Tests source discovery, compilation database loading and input expansion.
"""

import json
import os
import tempfile
import unittest
from pathlib import Path

from fieldmeta.sources import (
    AnalysisError,
    discover_source_files,
    load_compdb_sources,
    resolve_compdb_path,
    resolve_inputs,
)


def _touch(path: str, text: str = "struct S { int a; };\n") -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


class TestDiscoverSourceFiles(unittest.TestCase):
    """Test recursive discovery."""

    def test_discover_sorted_absolute(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            _touch(os.path.join(tmpdir, "src", "b.cpp"))
            _touch(os.path.join(tmpdir, "include", "a.hpp"))
            _touch(os.path.join(tmpdir, "README.md"), "not code")

            files = discover_source_files(tmpdir)

            self.assertEqual(len(files), 2)
            self.assertEqual(files, sorted(files))
            self.assertTrue(all(os.path.isabs(f) for f in files))

    def test_discover_excludes_hidden_and_build_dirs(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            _touch(os.path.join(tmpdir, "src", "keep.h"))
            _touch(os.path.join(tmpdir, ".hidden", "skip.h"))
            _touch(os.path.join(tmpdir, "build", "skip.h"))

            files = discover_source_files(tmpdir)

            self.assertEqual([os.path.basename(f) for f in files], ["keep.h"])


class TestCompilationDatabase(unittest.TestCase):
    """Test compile_commands.json handling."""

    def setUp(self):
        self.fixtures_dir = Path(__file__).parent / "fixtures"

    def test_resolve_directory(self):
        path = resolve_compdb_path(str(self.fixtures_dir))
        self.assertEqual(path, os.path.join(str(self.fixtures_dir), "compile_commands.json"))

    def test_resolve_explicit_file(self):
        explicit = str(self.fixtures_dir / "compile_commands.json")
        self.assertEqual(resolve_compdb_path(explicit), explicit)

    def test_load_fixture_deduplicates_in_order(self):
        sources = load_compdb_sources(str(self.fixtures_dir / "compile_commands.json"))
        self.assertEqual(
            sources,
            [
                os.path.abspath(self.fixtures_dir / "point.h"),
                os.path.abspath(self.fixtures_dir / "records.hpp"),
            ],
        )

    def test_missing_compdb(self):
        with self.assertRaises(FileNotFoundError):
            load_compdb_sources("/nonexistent/compile_commands.json")

    def test_malformed_compdb(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "compile_commands.json")
            _touch(path, "{not json")
            with self.assertRaises(AnalysisError):
                load_compdb_sources(path)

    def test_non_list_compdb(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "compile_commands.json")
            _touch(path, json.dumps({"file": "a.cpp"}))
            with self.assertRaises(AnalysisError):
                load_compdb_sources(path)

    def test_absolute_entries(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            source = os.path.join(tmpdir, "src", "a.cpp")
            path = os.path.join(tmpdir, "build", "compile_commands.json")
            _touch(path, json.dumps([
                {"directory": os.path.join(tmpdir, "src"), "file": "a.cpp", "command": "c++ a.cpp"},
                {"directory": "/elsewhere", "file": source, "command": "c++ a.cpp"},
            ]))
            self.assertEqual(load_compdb_sources(path), [source])


class TestResolveInputs(unittest.TestCase):
    """Test input expansion."""

    def setUp(self):
        self.fixtures_dir = Path(__file__).parent / "fixtures"

    def test_files_kept_in_given_order(self):
        inputs = [str(self.fixtures_dir / "records.hpp"), str(self.fixtures_dir / "point.h")]
        self.assertEqual(resolve_inputs(inputs), [os.path.abspath(p) for p in inputs])

    def test_duplicates_removed(self):
        point = str(self.fixtures_dir / "point.h")
        self.assertEqual(resolve_inputs([point, point]), [os.path.abspath(point)])

    def test_directory_expanded(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            _touch(os.path.join(tmpdir, "a.h"))
            _touch(os.path.join(tmpdir, "b.h"))
            resolved = resolve_inputs([tmpdir])
            self.assertEqual([os.path.basename(p) for p in resolved], ["a.h", "b.h"])

    def test_compdb_used_without_sources(self):
        resolved = resolve_inputs([], build_path=str(self.fixtures_dir))
        self.assertEqual([os.path.basename(p) for p in resolved], ["point.h", "records.hpp"])

    def test_sources_take_precedence_over_compdb(self):
        point = str(self.fixtures_dir / "point.h")
        resolved = resolve_inputs([point], build_path=str(self.fixtures_dir))
        self.assertEqual(resolved, [os.path.abspath(point)])

    def test_no_inputs(self):
        with self.assertRaises(AnalysisError):
            resolve_inputs([])


if __name__ == "__main__":
    unittest.main()
