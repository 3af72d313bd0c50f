"""Tests for run configuration loading and validation."""

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from core.run_config import (
    ConfigValidationError,
    RunConfig,
    config_from_env,
    load_run_config,
    resolve_env_log_level,
    validate_indent,
)


class TestRunConfig(unittest.TestCase):
    def _write_config(self, content: str, suffix: str = ".yml") -> str:
        handle = tempfile.NamedTemporaryFile(mode="w", suffix=suffix, delete=False)
        handle.write(content)
        handle.flush()
        handle.close()
        self.addCleanup(Path(handle.name).unlink, missing_ok=True)
        return handle.name

    def test_defaults(self) -> None:
        config = RunConfig()
        self.assertEqual(config.output, "-")
        self.assertEqual(config.match, [])
        self.assertEqual(config.indent, 4)
        self.assertFalse(config.allow_parse_errors)

    def test_load_yaml(self) -> None:
        path = self._write_config(
            """
sources:
  - src/
  - include/model.h
build_path: build
match: [Packet, Header]
output: out/fields.json
allow_parse_errors: true
indent: 2
report_dir: reports
"""
        )
        config = load_run_config(path)
        self.assertEqual(config.sources, ["src/", "include/model.h"])
        self.assertEqual(config.build_path, "build")
        self.assertEqual(config.match, ["Packet", "Header"])
        self.assertEqual(config.output, "out/fields.json")
        self.assertTrue(config.allow_parse_errors)
        self.assertEqual(config.indent, 2)
        self.assertEqual(config.report_dir, "reports")

    def test_load_json(self) -> None:
        path = self._write_config('{"match": "Packet"}', suffix=".json")
        config = load_run_config(path)
        self.assertEqual(config.match, ["Packet"])

    def test_load_keeps_base_values(self) -> None:
        path = self._write_config("match: [A]\n")
        base = RunConfig(sources=["x.h"], allow_parse_errors=True)
        config = load_run_config(path, base=base)
        self.assertEqual(config.sources, ["x.h"])
        self.assertTrue(config.allow_parse_errors)
        self.assertEqual(config.match, ["A"])

    def test_empty_file_uses_defaults(self) -> None:
        path = self._write_config("")
        self.assertEqual(load_run_config(path), RunConfig())

    def test_missing_file(self) -> None:
        with self.assertRaises(ConfigValidationError):
            load_run_config("/definitely/missing.yml")

    def test_malformed_yaml(self) -> None:
        path = self._write_config("match: [unclosed\n")
        with self.assertRaises(ConfigValidationError):
            load_run_config(path)

    def test_non_mapping(self) -> None:
        path = self._write_config("- a\n- b\n")
        with self.assertRaises(ConfigValidationError):
            load_run_config(path)

    def test_unknown_key(self) -> None:
        path = self._write_config("patterns: [A]\n")
        with self.assertRaises(ConfigValidationError):
            load_run_config(path)

    def test_bad_match_type(self) -> None:
        path = self._write_config("match: [1, 2]\n")
        with self.assertRaises(ConfigValidationError):
            load_run_config(path)

    def test_bad_flag_type(self) -> None:
        path = self._write_config("allow_parse_errors: maybe\n")
        with self.assertRaises(ConfigValidationError):
            load_run_config(path)

    def test_validate_indent(self) -> None:
        self.assertEqual(validate_indent(8), 8)
        for bad in (0, -1, True, "4", 2.5):
            with self.assertRaises(ConfigValidationError):
                validate_indent(bad)


class TestEnvironment(unittest.TestCase):
    def test_allow_parse_errors_flag(self) -> None:
        with mock.patch.dict(os.environ, {"FIELDMETA_ALLOW_PARSE_ERRORS": "on"}):
            self.assertTrue(config_from_env().allow_parse_errors)
        with mock.patch.dict(os.environ, {"FIELDMETA_ALLOW_PARSE_ERRORS": "0"}):
            self.assertFalse(config_from_env().allow_parse_errors)

    def test_unset_flag_keeps_base(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            base = RunConfig(allow_parse_errors=True)
            self.assertTrue(config_from_env(base).allow_parse_errors)

    def test_log_level(self) -> None:
        with mock.patch.dict(os.environ, {"FIELDMETA_LOG_LEVEL": "debug"}):
            self.assertEqual(resolve_env_log_level(), "debug")
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(resolve_env_log_level(), "WARNING")


if __name__ == "__main__":
    unittest.main()
