"""Run configuration for the field metadata dump.

Settings come from (highest precedence first) command-line flags, an
optional YAML/JSON config file, environment variables and defaults.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

ENV_ALLOW_PARSE_ERRORS = "FIELDMETA_ALLOW_PARSE_ERRORS"
ENV_LOG_LEVEL = "FIELDMETA_LOG_LEVEL"

_KNOWN_KEYS = {
    "sources",
    "build_path",
    "match",
    "output",
    "allow_parse_errors",
    "indent",
    "report_dir",
}


class ConfigValidationError(RuntimeError):
    """Raised when a config file or option value is invalid."""


@dataclass(frozen=True)
class RunConfig:
    """Resolved settings for one run."""

    sources: list[str] = field(default_factory=list)
    build_path: str | None = None
    match: list[str] = field(default_factory=list)
    output: str = "-"
    allow_parse_errors: bool = False
    indent: int = 4
    report_dir: str | None = None


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_env_log_level(default: str = "WARNING") -> str:
    """Resolve the log level name from ``FIELDMETA_LOG_LEVEL``."""
    raw = os.getenv(ENV_LOG_LEVEL, "").strip()
    return raw or default


def config_from_env(base: RunConfig | None = None) -> RunConfig:
    """Apply environment overrides on top of ``base`` (or the defaults)."""
    config = base or RunConfig()
    return replace(
        config,
        allow_parse_errors=_env_flag(ENV_ALLOW_PARSE_ERRORS, default=config.allow_parse_errors),
    )


def _expect_str_list(payload: dict[str, Any], key: str) -> list[str]:
    value = payload.get(key, [])
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigValidationError(f"'{key}' must be a string or a list of strings")
    return list(value)


def _optional_str(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigValidationError(f"'{key}' must be a non-empty string")
    return value


def validate_indent(value: Any) -> int:
    """Validate an indent step (positive integer)."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigValidationError(f"'indent' must be a positive integer, got {value!r}")
    return value


def _load_payload(path: str) -> dict[str, Any]:
    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigValidationError(f"Config file not found: {config_path}")

    text = config_path.read_text(encoding="utf-8")
    try:
        if config_path.suffix.lower() == ".json":
            payload = json.loads(text)
        else:
            payload = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigValidationError(f"Failed to parse config file {config_path}: {exc}") from exc

    if payload is None:
        logger.warning("Config file %s is empty; using defaults", config_path)
        return {}
    if not isinstance(payload, dict):
        raise ConfigValidationError(
            f"Config file {config_path} must contain a mapping, "
            f"got {type(payload).__name__}"
        )
    return payload


def load_run_config(path: str, base: RunConfig | None = None) -> RunConfig:
    """Load a YAML/JSON config file on top of ``base``.

    Example file::

        sources: [src/, include/model.h]
        build_path: build
        match: [Packet, Header]
        output: out/fields.json
        allow_parse_errors: false
        indent: 4

    Raises:
        ConfigValidationError: On unreadable files, unknown keys or bad values.
    """
    payload = _load_payload(path)
    unknown = sorted(set(payload) - _KNOWN_KEYS)
    if unknown:
        raise ConfigValidationError(f"Unknown config keys: {', '.join(unknown)}")

    config = base or RunConfig()
    updates: dict[str, Any] = {}
    if "sources" in payload:
        updates["sources"] = _expect_str_list(payload, "sources")
    if "match" in payload:
        updates["match"] = _expect_str_list(payload, "match")
    if "build_path" in payload:
        updates["build_path"] = _optional_str(payload, "build_path")
    if "report_dir" in payload:
        updates["report_dir"] = _optional_str(payload, "report_dir")
    if "output" in payload:
        updates["output"] = _optional_str(payload, "output") or "-"
    if "allow_parse_errors" in payload:
        flag = payload["allow_parse_errors"]
        if not isinstance(flag, bool):
            raise ConfigValidationError("'allow_parse_errors' must be a boolean")
        updates["allow_parse_errors"] = flag
    if "indent" in payload:
        updates["indent"] = validate_indent(payload["indent"])

    logger.debug("Loaded config %s with keys: %s", path, ", ".join(sorted(updates)))
    return replace(config, **updates)
