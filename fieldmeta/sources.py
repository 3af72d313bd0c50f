"""
Input discovery: source directories and compilation databases.

Resolves the caller's inputs (files, directories, ``compile_commands.json``)
into an ordered, de-duplicated list of C/C++ source files.
"""

import json
import logging
import os
from typing import Iterable, List, Optional

from fieldmeta.config import CPP_EXTENSIONS, SKIPPED_DIRECTORIES, COMPDB_FILENAME

logger = logging.getLogger(__name__)


class AnalysisError(RuntimeError):
    """Raised when source analysis cannot produce a complete database."""

    def __init__(self, message: str, stats=None):
        super().__init__(message)
        self.stats = stats


def is_cpp_source(file_path: str) -> bool:
    return os.path.splitext(file_path)[1].lower() in CPP_EXTENSIONS


def discover_source_files(directory: str) -> List[str]:
    """Recursively discover all C/C++ source files in a directory.

    Args:
        directory: Root directory to search.

    Returns:
        Sorted list of absolute paths to C/C++ files.

    Example:
        >>> files = discover_source_files("/path/to/repo")
    """
    cpp_files = []
    directory = os.path.abspath(directory)

    logger.info("Discovering C/C++ files in %s", directory)

    for root, dirs, files in os.walk(directory):
        # Skip hidden directories and common build/cache directories
        dirs[:] = [d for d in dirs if not d.startswith(".") and d not in SKIPPED_DIRECTORIES]

        for file in files:
            if is_cpp_source(file):
                cpp_files.append(os.path.join(root, file))

    logger.info("Found %d C/C++ files", len(cpp_files))
    return sorted(cpp_files)


def resolve_compdb_path(build_path: str) -> str:
    """Resolve a build directory or explicit file to a compilation database path."""
    if os.path.isdir(build_path):
        return os.path.join(build_path, COMPDB_FILENAME)
    return build_path


def load_compdb_sources(compdb_path: str) -> List[str]:
    """Read the translation units listed in a ``compile_commands.json``.

    Relative ``file`` entries are resolved against the entry's ``directory``.
    The first occurrence of each file wins; order is otherwise preserved.

    Raises:
        FileNotFoundError: If the compilation database does not exist.
        AnalysisError: If the payload is not a JSON list of entries.
    """
    if not os.path.isfile(compdb_path):
        raise FileNotFoundError(f"Compilation database not found: {compdb_path}")

    try:
        with open(compdb_path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as exc:
        raise AnalysisError(f"Malformed compilation database {compdb_path}: {exc}") from exc

    if not isinstance(payload, list):
        raise AnalysisError(
            f"Compilation database {compdb_path} must be a list, "
            f"got {type(payload).__name__}"
        )

    base_dir = os.path.dirname(os.path.abspath(compdb_path))
    sources: List[str] = []
    seen = set()
    for entry in payload:
        if not isinstance(entry, dict) or not entry.get("file"):
            logger.warning("Ignoring compilation database entry without 'file': %r", entry)
            continue
        # Relative directories are taken relative to the database itself
        directory = os.path.join(base_dir, str(entry.get("directory") or ""))
        file_path = os.path.normpath(os.path.join(directory, str(entry["file"])))
        if file_path in seen:
            continue
        seen.add(file_path)
        sources.append(file_path)

    logger.info("Loaded %d translation units from %s", len(sources), compdb_path)
    return sources


def resolve_inputs(
    sources: Iterable[str],
    build_path: Optional[str] = None,
) -> List[str]:
    """Expand caller inputs into the ordered list of files to analyze.

    Directories expand to their discovered sources. When no sources are
    given, the compilation database under ``build_path`` supplies them.

    Raises:
        AnalysisError: If nothing is left to analyze.
        FileNotFoundError: If a compilation database was requested but is missing.
    """
    expanded: List[str] = []
    for source in sources:
        if os.path.isdir(source):
            expanded.extend(discover_source_files(source))
        else:
            expanded.append(os.path.abspath(source))

    if not expanded and build_path:
        expanded = load_compdb_sources(resolve_compdb_path(build_path))

    if not expanded:
        raise AnalysisError("No input sources given (pass files, directories or a build path)")

    ordered: List[str] = []
    seen = set()
    for path in expanded:
        if path not in seen:
            seen.add(path)
            ordered.append(path)
    return ordered
