"""
High-level orchestrator for building a metadata database.

Drives the analyzer over every input, consults the name filter and
populates an explicit ``MetadataDatabase`` aggregator.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from fieldmeta.config import DEFAULT_ALLOW_PARSE_ERRORS
from fieldmeta.filters import should_include
from fieldmeta.models import MetadataDatabase
from fieldmeta.parser import parse_file, count_error_nodes
from fieldmeta.sources import AnalysisError, is_cpp_source
from fieldmeta.traversal import DeclaredType, iter_declared_types

logger = logging.getLogger(__name__)


@dataclass
class FileAnalysis:
    """Per-file analysis result: a database shard plus diagnostics."""

    database: MetadataDatabase
    declarations_seen: int
    parse_error_count: int


class AnalysisStats:
    """Statistics for an analysis run."""

    def __init__(self):
        self.files_processed = 0
        self.files_failed = 0
        self.types_recorded = 0
        self.fields_recorded = 0
        self.parse_errors = 0

    def to_dict(self) -> Dict[str, int]:
        """Convert stats to dictionary."""
        return {
            "files_processed": self.files_processed,
            "files_failed": self.files_failed,
            "types_recorded": self.types_recorded,
            "fields_recorded": self.fields_recorded,
            "parse_errors": self.parse_errors,
        }

    def __str__(self) -> str:
        return (
            f"AnalysisStats(processed={self.files_processed}, "
            f"failed={self.files_failed}, types={self.types_recorded}, "
            f"fields={self.fields_recorded}, parse_errors={self.parse_errors})"
        )


def collect_types(
    declarations: Iterable[DeclaredType],
    patterns: Sequence[str] = (),
    database: Optional[MetadataDatabase] = None,
) -> MetadataDatabase:
    """Populate a database from a sequence of declarations.

    Args:
        declarations: Declarations in traversal order (consumed once).
        patterns: Name substrings; empty means record every declaration.
        database: Aggregator to append to. A new one is created if None.

    Returns:
        The populated database (the same object when one was passed in).

    Example:
        >>> tree = parse_bytes(b"struct P { int x; };")
        >>> db = collect_types(iter_declared_types(tree, b"struct P { int x; };"))
        >>> [t.name for t in db]
        ['P']
    """
    if database is None:
        database = MetadataDatabase()

    for declared in declarations:
        if not should_include(declared.qualified_name, patterns):
            logger.debug("Filtered out %s", declared.qualified_name)
            continue
        type_record = database.add_type(declared.qualified_name)
        for member in declared.members:
            type_record.add_field(member.type_description, member.qualified_name)

    return database


def analyze_file(
    file_path: str,
    patterns: Sequence[str] = (),
) -> FileAnalysis:
    """Analyze a single C/C++ file into its own database shard.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a C/C++ source file.
        OSError: If the file cannot be read.
    """
    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")
    if not is_cpp_source(file_path):
        raise ValueError(f"File {file_path} is not a C/C++ source file")

    tree, source_bytes = parse_file(file_path)
    parse_error_count = count_error_nodes(tree)
    if parse_error_count:
        logger.warning(
            "File %s contains syntax errors (%d error nodes)",
            file_path,
            parse_error_count,
        )

    seen = 0

    def _counted(declarations: Iterable[DeclaredType]) -> Iterable[DeclaredType]:
        nonlocal seen
        for declared in declarations:
            seen += 1
            yield declared

    shard = collect_types(_counted(iter_declared_types(tree, source_bytes)), patterns)
    logger.info(
        "Recorded %d of %d types from %s", len(shard), seen, file_path
    )
    return FileAnalysis(
        database=shard,
        declarations_seen=seen,
        parse_error_count=parse_error_count,
    )


def analyze_sources(
    paths: Sequence[str],
    patterns: Sequence[str] = (),
    allow_parse_errors: bool = DEFAULT_ALLOW_PARSE_ERRORS,
) -> Tuple[MetadataDatabase, AnalysisStats]:
    """Analyze every input and merge the per-file shards in input order.

    Every input is attempted so that all failures are reported together.

    Args:
        paths: Source files in the order their types should appear.
        patterns: Name substrings for the inclusion filter.
        allow_parse_errors: Treat syntax errors as warnings instead of
            analysis failures.

    Returns:
        A tuple of (database, stats).

    Raises:
        AnalysisError: If any input failed to analyze.
    """
    stats = AnalysisStats()
    database = MetadataDatabase()
    failures: List[str] = []

    logger.info("Analyzing %d source files", len(paths))

    for file_path in paths:
        try:
            result = analyze_file(file_path, patterns)
        except (OSError, ValueError) as e:
            logger.error("Failed to analyze %s: %s", file_path, e)
            stats.files_failed += 1
            failures.append(file_path)
            continue

        stats.files_processed += 1
        stats.parse_errors += result.parse_error_count
        if result.parse_error_count and not allow_parse_errors:
            failures.append(file_path)
            continue

        database.merge(result.database)
        stats.types_recorded += len(result.database)
        stats.fields_recorded += result.database.field_count()

    logger.info("Analysis complete: %s", stats)

    if failures:
        raise AnalysisError(
            f"Source analysis failed for {len(failures)} file(s): {', '.join(failures)}",
            stats=stats,
        )
    return database, stats
