"""
Output destination handling for rendered documents.
"""

import logging
import os
import sys
from typing import Optional, TextIO

from fieldmeta.config import DEFAULT_INDENT_STEP, STDOUT_SENTINEL
from fieldmeta.models import MetadataDatabase
from fieldmeta.renderer import render_document

logger = logging.getLogger(__name__)


class OutputDestinationError(OSError):
    """Raised when the output destination cannot be opened or written.

    ``stats`` carries the analysis statistics when the caller has them.
    """

    stats = None


def _discard(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove partial output %s: %s", path, e)


def emit_document(
    database: MetadataDatabase,
    destination: str = STDOUT_SENTINEL,
    indent_step: int = DEFAULT_INDENT_STEP,
    stdout: Optional[TextIO] = None,
) -> int:
    """Render the database and write it to a file or standard output.

    The document is rendered completely before the destination is opened.
    A destination that cannot be opened never falls back to stdout, and
    parent directories are not created. A file destination either receives
    the whole document or keeps its previous content.

    Args:
        database: The populated database.
        destination: A file path, or ``"-"`` for standard output.
        indent_step: Spaces added per nesting level.
        stdout: Stream used for ``"-"``; defaults to ``sys.stdout``.

    Returns:
        Number of characters written.

    Raises:
        OutputDestinationError: If the file cannot be opened or written.
    """
    document = render_document(database, indent_step)

    if destination == STDOUT_SENTINEL:
        stream = stdout if stdout is not None else sys.stdout
        stream.write(document)
        stream.flush()
        logger.info("Wrote %d types to standard output", len(database))
        return len(document)

    # Written beside the destination and renamed over it, so a failed write
    # never leaves a truncated document behind.
    staging_path = f"{destination}.{os.getpid()}.tmp"
    try:
        with open(staging_path, "w", encoding="utf-8") as f:
            f.write(document)
        os.replace(staging_path, destination)
    except OSError as e:
        _discard(staging_path)
        raise OutputDestinationError(
            f"Failed to open output file {destination} for writing: {e}"
        ) from e

    logger.info("Wrote %d types to %s", len(database), destination)
    return len(document)
