"""Canonical spelling of C++ names and type descriptions."""

from __future__ import annotations

import re

SCOPE_SEPARATOR = "::"

_WHITESPACE_RE = re.compile(r"\s+")
_SCOPE_SEPARATOR_RE = re.compile(r"\s*::\s*")
_DESTRUCTOR_SPACING_RE = re.compile(r"::\s*~")
_TEMPLATE_OPEN_RE = re.compile(r"<\s+")
_TEMPLATE_CLOSE_RE = re.compile(r"\s+>")
_COMMA_RE = re.compile(r"\s*,\s*")
_BRACKET_OPEN_RE = re.compile(r"([\[(])\s+")
_BRACKET_CLOSE_RE = re.compile(r"\s+([\])])")


def normalize_cpp_entity_name(entity_name: str) -> str:
    """Normalize C++ entity names into a canonical form.

    The goal is deterministic names across inputs when trivial whitespace
    variations occur (``outer :: inner`` and ``outer::inner`` are the same).

    Args:
        entity_name: Raw entity name from parser output.

    Returns:
        Canonicalized entity name.
    """
    normalized = entity_name.strip()
    normalized = _SCOPE_SEPARATOR_RE.sub(SCOPE_SEPARATOR, normalized)
    normalized = _DESTRUCTOR_SPACING_RE.sub("::~", normalized)
    normalized = _WHITESPACE_RE.sub(" ", normalized)
    return normalized.strip()


def normalize_type_description(type_text: str) -> str:
    """Normalize a written type into a single-line, canonically spaced form.

    ``std::map< int,int >`` becomes ``std::map<int, int>``; pointer and
    reference markers keep a single space before them.
    """
    normalized = _WHITESPACE_RE.sub(" ", type_text).strip()
    normalized = _SCOPE_SEPARATOR_RE.sub(SCOPE_SEPARATOR, normalized)
    normalized = _TEMPLATE_OPEN_RE.sub("<", normalized)
    normalized = _TEMPLATE_CLOSE_RE.sub(">", normalized)
    normalized = _COMMA_RE.sub(", ", normalized)
    normalized = _BRACKET_OPEN_RE.sub(r"\1", normalized)
    normalized = _BRACKET_CLOSE_RE.sub(r"\1", normalized)
    return normalized


def qualify(scope: list[str] | tuple[str, ...], name: str) -> str:
    """Join an enclosing scope chain and a name with ``::``."""
    if not scope:
        return normalize_cpp_entity_name(name)
    return normalize_cpp_entity_name(SCOPE_SEPARATOR.join([*scope, name]))
