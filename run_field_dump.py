#!/usr/bin/env python3
"""
Dump record/field metadata of a C++ code base as an indented JSON document.

Every class, struct and union definition found in the inputs is listed with
its non-static data members (declared type and qualified name), in source
order. Logs go to stderr; the document goes to stdout unless -o is given.

Usage:
    python run_field_dump.py src/model.h
    python run_field_dump.py src/ -m Packet -m Header -o out/fields.json
    python run_field_dump.py -p build/ -o fields.json
    python run_field_dump.py --config field_dump.yml
"""

import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from core.run_artifacts import write_run_report
from core.run_config import (
    ConfigValidationError,
    RunConfig,
    config_from_env,
    load_run_config,
    resolve_env_log_level,
    validate_indent,
)
from core.structured_logging import configure_structured_logging, phase_scope, set_run_id
from fieldmeta.collector import AnalysisStats, analyze_sources
from fieldmeta.config import STDOUT_SENTINEL
from fieldmeta.output import OutputDestinationError, emit_document
from fieldmeta.sources import AnalysisError, resolve_inputs

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        description="Extract record names and typed fields from C++ sources",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_field_dump.py src/ -m Packet -o fields.json\n"
            "  python run_field_dump.py -p build/\n"
        ),
    )

    parser.add_argument(
        "sources",
        nargs="*",
        help="C/C++ files or directories to analyze.",
    )
    parser.add_argument(
        "-p", "--build-path",
        default=None,
        help="Build directory containing compile_commands.json (or the file itself). "
             "Its translation units are used when no sources are given.",
    )
    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output filename, or '-' for standard output. Default: -",
    )
    parser.add_argument(
        "-m", "--match",
        action="append",
        default=None,
        help="Only record types whose qualified name contains this substring. "
             "Repeatable; default records every type.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML or JSON config file with the same settings.",
    )
    parser.add_argument(
        "--allow-parse-errors",
        action="store_true",
        default=None,
        help="Report syntax errors as warnings instead of failing the run.",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Spaces per nesting level in the document. Default: 4",
    )
    parser.add_argument(
        "--report-dir",
        default=None,
        help="Write a JSON run report (<run_id>.json) into this directory.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR). "
             "Default: $FIELDMETA_LOG_LEVEL or WARNING",
    )
    return parser


def resolve_run_config(args: argparse.Namespace) -> RunConfig:
    """Merge defaults, environment, config file and command-line flags."""
    config = config_from_env(RunConfig())
    if args.config:
        config = load_run_config(args.config, base=config)

    updates = {}
    if args.sources:
        updates["sources"] = list(args.sources)
    if args.build_path is not None:
        updates["build_path"] = args.build_path
    if args.match is not None:
        updates["match"] = list(args.match)
    if args.output is not None:
        updates["output"] = args.output
    if args.allow_parse_errors:
        updates["allow_parse_errors"] = True
    if args.indent is not None:
        updates["indent"] = validate_indent(args.indent)
    if args.report_dir is not None:
        updates["report_dir"] = args.report_dir
    return replace(config, **updates)


def run(config: RunConfig) -> AnalysisStats:
    """Analyze the configured inputs and write the document.

    Raises:
        AnalysisError: If source analysis fails; nothing is written.
        OutputDestinationError: If the destination cannot be written.
    """
    with phase_scope("analysis"):
        paths = resolve_inputs(config.sources, config.build_path)
        database, stats = analyze_sources(
            paths,
            patterns=config.match,
            allow_parse_errors=config.allow_parse_errors,
        )

    with phase_scope("render"):
        try:
            emit_document(database, config.output, indent_step=config.indent)
        except OutputDestinationError as e:
            e.stats = stats
            raise

    return stats


def _report(config: RunConfig, run_id: str, status: str, stats, error: Optional[str]) -> None:
    if not config.report_dir:
        return
    report = {
        "status": status,
        "output": config.output if config.output != STDOUT_SENTINEL else "<stdout>",
        "match": list(config.match),
        "stats": stats.to_dict() if stats is not None else None,
    }
    if error:
        report["error"] = error
    try:
        path = write_run_report(report, run_id=run_id, output_dir=config.report_dir)
    except OSError as e:
        logger.error("Failed to write run report: %s", e)
        return
    logger.info("Run report written to %s", path)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit code."""
    args = build_arg_parser().parse_args(argv)

    try:
        configure_structured_logging(args.log_level or resolve_env_log_level())
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    run_id = set_run_id()

    try:
        config = resolve_run_config(args)
    except ConfigValidationError as e:
        logger.error("Configuration error: %s", e)
        return 1

    try:
        stats = run(config)
    except AnalysisError as e:
        logger.error("Analysis error: %s", e)
        _report(config, run_id, "analysis_failed", e.stats, str(e))
        return 1
    except FileNotFoundError as e:
        logger.error("File error: %s", e)
        _report(config, run_id, "analysis_failed", None, str(e))
        return 1
    except OutputDestinationError as e:
        logger.error("%s", e)
        _report(config, run_id, "output_failed", e.stats, str(e))
        return 1
    except Exception as e:
        logger.error("Run failed: %s", e, exc_info=True)
        _report(config, run_id, "failed", None, str(e))
        return 1

    _report(config, run_id, "success", stats, None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
