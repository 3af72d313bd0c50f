"""Core shared helpers: naming, logging, configuration, run reports."""

from core.naming import (
    SCOPE_SEPARATOR,
    normalize_cpp_entity_name,
    normalize_type_description,
    qualify,
)
from core.structured_logging import (
    configure_structured_logging,
    get_run_id,
    phase_scope,
    resolve_log_level,
    set_run_id,
)
from core.run_config import (
    ConfigValidationError,
    RunConfig,
    config_from_env,
    load_run_config,
    resolve_env_log_level,
    validate_indent,
)
from core.run_artifacts import write_run_report

__all__ = [
    "SCOPE_SEPARATOR",
    "normalize_cpp_entity_name",
    "normalize_type_description",
    "qualify",
    "configure_structured_logging",
    "get_run_id",
    "phase_scope",
    "resolve_log_level",
    "set_run_id",
    "ConfigValidationError",
    "RunConfig",
    "config_from_env",
    "load_run_config",
    "resolve_env_log_level",
    "validate_indent",
    "write_run_report",
]
