"""
Indented document rendering for a metadata database.

A single recursive routine renders arrays, objects and strings at every
nesting level. The result is valid JSON laid out one structural marker per
line:

    [
        {
            "name": "ns::Point",
            "fields":
            [
                {
                    "type": "int",
                    "variable": "ns::Point::x"
                }
            ]
        }
    ]
"""

import json
import logging
from typing import Any, List, Mapping, Sequence, TextIO

from fieldmeta.config import DEFAULT_INDENT_STEP
from fieldmeta.models import MetadataDatabase

logger = logging.getLogger(__name__)


def encode_string(value: str) -> str:
    """Quote a string value, escaping quotes, backslashes and control chars."""
    return json.dumps(value, ensure_ascii=False)


def _render(node: Any, indent: int, step: int, out: List[str]) -> None:
    """Append the lines of ``node`` to ``out``, starting at ``indent`` spaces.

    The first line is not indented by this call when the caller has already
    written a key prefix; block markers always are.
    """
    pad = " " * indent

    if isinstance(node, str):
        out.append(encode_string(node))
        return

    if isinstance(node, Mapping):
        out.append(pad + "{\n")
        member_pad = " " * (indent + step)
        for i, (key, value) in enumerate(node.items()):
            if i > 0:
                out.append(",\n")
            out.append(f"{member_pad}{encode_string(key)}:")
            if isinstance(value, str):
                out.append(" ")
                _render(value, indent + step, step, out)
            elif isinstance(value, Sequence) and not value:
                out.append(" []")
            else:
                out.append("\n")
                _render(value, indent + step, step, out)
        out.append("\n" + pad + "}")
        return

    if isinstance(node, Sequence):
        out.append(pad + "[\n")
        for i, item in enumerate(node):
            if i > 0:
                out.append(",\n")
            _render(item, indent + step, step, out)
        if node:
            out.append("\n")
        out.append(pad + "]")
        return

    raise TypeError(f"Cannot render value of type {type(node).__name__}")


def render_document(database: MetadataDatabase, indent_step: int = DEFAULT_INDENT_STEP) -> str:
    """Render the whole database as an indented JSON document.

    Args:
        database: The populated database (read only).
        indent_step: Spaces added per nesting level.

    Returns:
        The document text, terminated by a newline. An empty database
        renders as ``[`` and ``]`` on separate lines.

    Raises:
        ValueError: If indent_step is less than 1.
    """
    if indent_step < 1:
        raise ValueError(f"indent_step must be >= 1, got {indent_step}")

    out: List[str] = []
    _render(database.to_list(), 0, indent_step, out)
    out.append("\n")
    document = "".join(out)
    logger.debug("Rendered %d types into %d characters", len(database), len(document))
    return document


def write_document(
    database: MetadataDatabase,
    stream: TextIO,
    indent_step: int = DEFAULT_INDENT_STEP,
) -> None:
    """Render the database and write it to an open text stream."""
    stream.write(render_document(database, indent_step))
